"""
Artifact: syllabus_ingest/db/repository.py
Purpose: Persists ingestion results and performs explicit cascade deletes.
Created: 2026-10-13
Revised:
- 2026-10-15: Moved commit/rollback into a shared transaction context.
- 2026-10-16: Added ownership check for target schedules.
Preconditions:
- Tables exist (see db.base.init_db).
Inputs:
- Acceptable: Completed course plus already-validated assignment and event drafts.
- Unacceptable: Drafts with missing names or timestamps (filtered by the orchestrator).
Postconditions:
- Each public write commits everything or nothing.
Returns:
- SavedIngestion counts and identifiers; booleans for deletes.
Errors/Exceptions:
- PersistenceFault when SQLAlchemy fails; ScheduleNotFound for missing or foreign schedules.
"""

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.errors import PersistenceFault, ScheduleNotFound
from ..core.logging import get_logger
from ..schemas.drafts import AssignmentDraft, CompletedCourse, EventDraft
from .entities import Assignment, Course, Event, Schedule

logger = get_logger("syllabus.db")


@dataclass
class SavedIngestion:
    course_id: int
    assignments_created: int
    events_created: int


@contextmanager
def transaction(session_factory: Callable[[], Session]) -> Iterator[Session]:
    """Yield a session that commits on success and rolls back on any failure."""
    session = session_factory()
    try:
        yield session
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error("Database transaction failed: %s", repr(e))
        raise PersistenceFault(
            "Could not save the course. No changes were made.",
            detail=repr(e),
        ) from e
    except BaseException:
        session.rollback()
        raise
    finally:
        session.close()


def get_schedule_for_user(session: Session, schedule_id: int, user_id: str) -> Optional[Schedule]:
    return (
        session.query(Schedule)
        .filter(Schedule.id == schedule_id, Schedule.user_id == user_id)
        .one_or_none()
    )


def require_schedule(session: Session, schedule_id: int, user_id: str) -> Schedule:
    schedule = get_schedule_for_user(session, schedule_id, user_id)
    if schedule is None:
        raise ScheduleNotFound(
            "Schedule not found.",
            detail=f"schedule_id={schedule_id} user_id={user_id!r}",
        )
    return schedule


def save_ingestion(
    session: Session,
    *,
    user_id: str,
    schedule_id: int,
    course: CompletedCourse,
    is_active: bool,
    assignments: List[AssignmentDraft],
    events: List[EventDraft],
) -> SavedIngestion:
    """
    Insert a course with its assignments and events into the caller's transaction.

    The course is flushed first so children can reference its id; nothing is
    committed here.
    """
    require_schedule(session, schedule_id, user_id)

    row = Course(
        name=course.name,
        description=course.description,
        start_date=course.start_date,
        end_date=course.end_date,
        meeting_days=course.meeting_days,
        class_start_time=course.start_time,
        class_end_time=course.end_time,
        location=course.location,
        color=course.color,
        difficulty=course.difficulty,
        is_active=is_active,
        user_id=user_id,
        schedule_id=schedule_id,
    )
    session.add(row)
    session.flush()

    session.add_all(
        Assignment(name=a.name, due_date=a.due, is_completed=False, course_id=row.id)
        for a in assignments
    )
    session.add_all(
        Event(
            name=e.title,
            description=e.description,
            start=e.start,
            end=e.end,
            location=e.location,
            color=e.color,
            event_type=e.event_type or "other",
            is_all_day=False,
            is_cancelled=False,
            attached_to_course=e.attached_to_course,
            user_id=user_id,
            schedule_id=schedule_id,
            course_id=row.id if e.attached_to_course else None,
        )
        for e in events
    )
    session.flush()

    logger.info(
        "Staged course id=%s | assignments=%d events=%d",
        row.id,
        len(assignments),
        len(events),
    )
    return SavedIngestion(
        course_id=row.id,
        assignments_created=len(assignments),
        events_created=len(events),
    )


def _delete_course_rows(session: Session, course_id: int) -> None:
    session.query(Assignment).filter(Assignment.course_id == course_id).delete(synchronize_session=False)
    session.query(Event).filter(Event.course_id == course_id).delete(synchronize_session=False)
    session.query(Course).filter(Course.id == course_id).delete(synchronize_session=False)


def delete_course(session_factory: Callable[[], Session], course_id: int, user_id: str) -> bool:
    """Delete a course with its assignments and attached events."""
    with transaction(session_factory) as session:
        exists = (
            session.query(Course.id)
            .filter(Course.id == course_id, Course.user_id == user_id)
            .one_or_none()
        )
        if exists is None:
            return False
        _delete_course_rows(session, course_id)
    logger.info("Deleted course id=%s", course_id)
    return True


def delete_schedule(session_factory: Callable[[], Session], schedule_id: int, user_id: str) -> bool:
    """Delete a schedule, its courses (with their children) and its standalone events."""
    with transaction(session_factory) as session:
        if get_schedule_for_user(session, schedule_id, user_id) is None:
            return False
        course_ids = [
            cid for (cid,) in session.query(Course.id).filter(Course.schedule_id == schedule_id)
        ]
        for course_id in course_ids:
            _delete_course_rows(session, course_id)
        session.query(Event).filter(Event.schedule_id == schedule_id).delete(synchronize_session=False)
        session.query(Schedule).filter(Schedule.id == schedule_id).delete(synchronize_session=False)
    logger.info("Deleted schedule id=%s | courses=%d", schedule_id, len(course_ids))
    return True
