"""
Artifact: syllabus_ingest/db/base.py
Purpose: Creates the SQLAlchemy engine, session factory and declarative base.
Created: 2026-10-13
Revised:
- 2026-10-15: Added engine factory so tests can bind an in-memory database.
Preconditions:
- DATABASE_URL is a SQLAlchemy URL (defaults to a local SQLite file).
Inputs:
- Acceptable: Any SQLAlchemy-supported database URL.
- Unacceptable: Malformed URLs (SQLAlchemy raises at engine creation).
Postconditions:
- `SessionLocal` yields sessions bound to the configured engine.
Returns:
- Engine, session factory and `init_db` helper.
Errors/Exceptions:
- SQLAlchemy errors propagate from `init_db` when the database is unreachable.
"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from ..core.config import settings
from ..core.logging import get_logger

logger = get_logger("syllabus.db")

Base = declarative_base()


def build_engine(url: str) -> Engine:
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url or url in {"sqlite://", "sqlite:///"}:
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)
    return create_engine(url, pool_pre_ping=True)


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


engine = build_engine(settings.database_url())
SessionLocal = build_session_factory(engine)


def init_db(bind: Engine = None) -> None:
    # Entities must be imported so their tables are registered on Base.metadata.
    from . import entities  # noqa: F401

    target = bind or engine
    Base.metadata.create_all(bind=target)
    logger.info("Database schema ready | url=%s", target.url.render_as_string(hide_password=True))
