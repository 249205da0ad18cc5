"""
Artifact: syllabus_ingest/db/entities.py
Purpose: Declares the persisted calendar entities created by syllabus ingestion.
Created: 2026-10-13
Revised:
- 2026-10-15: Bounded text columns to the lengths enforced by the ingestion pipeline.
Preconditions:
- `Base` from db.base is the shared declarative base.
Inputs:
- Acceptable: Values already truncated to the column bounds below.
- Unacceptable: Over-length strings on databases that enforce VARCHAR limits.
Postconditions:
- Tables are registered on `Base.metadata`.
Returns:
- ORM entity classes.
Errors/Exceptions:
- None at import time.
"""

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, String, Time
from sqlalchemy.orm import relationship

from .base import Base

SCHEDULE_TITLE_MAX = 30
COURSE_NAME_MAX = 50
ASSIGNMENT_NAME_MAX = 50
EVENT_NAME_MAX = 30
DESCRIPTION_MAX = 200
LOCATION_MAX = 50


class User(Base):
    __tablename__ = "users"

    id = Column(String(64), primary_key=True)
    user_name = Column(String(100), nullable=False, default="")

    schedules = relationship("Schedule", back_populates="user")


class Schedule(Base):
    __tablename__ = "schedules"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(SCHEDULE_TITLE_MAX), nullable=False)
    description = Column(String(DESCRIPTION_MAX), nullable=True)
    user_id = Column(String(64), ForeignKey("users.id"), nullable=False, index=True)

    user = relationship("User", back_populates="schedules")
    courses = relationship("Course", back_populates="schedule")
    events = relationship("Event", back_populates="schedule")


class Course(Base):
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(COURSE_NAME_MAX), nullable=False)
    description = Column(String(DESCRIPTION_MAX), nullable=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    meeting_days = Column(String(100), nullable=False)
    class_start_time = Column(Time, nullable=False)
    class_end_time = Column(Time, nullable=False)
    location = Column(String(LOCATION_MAX), nullable=False, default="TBD")
    color = Column(String(9), nullable=False, default="#007bff")
    difficulty = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=False)
    user_id = Column(String(64), ForeignKey("users.id"), nullable=False, index=True)
    schedule_id = Column(Integer, ForeignKey("schedules.id"), nullable=False, index=True)

    schedule = relationship("Schedule", back_populates="courses")
    assignments = relationship("Assignment", back_populates="course")
    events = relationship("Event", back_populates="course")


class Assignment(Base):
    __tablename__ = "assignments"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(ASSIGNMENT_NAME_MAX), nullable=False)
    due_date = Column(DateTime, nullable=False)
    is_completed = Column(Boolean, nullable=False, default=False)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False, index=True)

    course = relationship("Course", back_populates="assignments")


class Event(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(EVENT_NAME_MAX), nullable=False)
    description = Column(String(DESCRIPTION_MAX), nullable=True)
    start = Column(DateTime, nullable=False)
    end = Column(DateTime, nullable=False)
    location = Column(String(LOCATION_MAX), nullable=True)
    color = Column(String(9), nullable=False, default="#007bff")
    event_type = Column(String(20), nullable=False, default="other")
    is_all_day = Column(Boolean, nullable=False, default=False)
    is_cancelled = Column(Boolean, nullable=False, default=False)
    attached_to_course = Column(Boolean, nullable=False, default=True)
    user_id = Column(String(64), ForeignKey("users.id"), nullable=False, index=True)
    schedule_id = Column(Integer, ForeignKey("schedules.id"), nullable=False, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=True, index=True)

    schedule = relationship("Schedule", back_populates="events")
    course = relationship("Course", back_populates="events")
