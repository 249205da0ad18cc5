import unittest
from dataclasses import replace
from datetime import date, datetime, time, timedelta

from syllabus_ingest.core.errors import PersistenceFault, ScheduleNotFound
from syllabus_ingest.db import repository
from syllabus_ingest.db.base import build_engine, build_session_factory, init_db
from syllabus_ingest.db.entities import Assignment, Course, Event, Schedule, User
from syllabus_ingest.schemas.drafts import AssignmentDraft, CompletedCourse, EventDraft

COURSE = CompletedCourse(
    name="CS 201",
    description="Data Structures",
    start_date=date(2025, 1, 13),
    end_date=date(2025, 5, 2),
    meeting_days="Monday, Wednesday",
    start_time=time(10, 0),
    end_time=time(11, 15),
    location="Room 210",
    color="#007bff",
    difficulty=2,
)


def _event(day: int, title="CS 201 Class") -> EventDraft:
    start = datetime(2025, 1, day, 10, 0)
    return EventDraft(
        title=title,
        start=start,
        end=start + timedelta(hours=1),
        event_type="class",
        description="Class meeting for CS 201",
        location="Room 210",
        color="#007bff",
    )


class TestRepository(unittest.TestCase):
    def setUp(self):
        engine = build_engine("sqlite://")
        init_db(bind=engine)
        self.session_factory = build_session_factory(engine)
        with repository.transaction(self.session_factory) as session:
            session.add_all([User(id="user-1", user_name="ada"), User(id="user-2", user_name="bob")])
            session.add(Schedule(id=1, title="Spring 2025", user_id="user-1"))
            session.add(Schedule(id=2, title="Other", user_id="user-2"))

    def _save(self, schedule_id=1, user_id="user-1", course=COURSE):
        with repository.transaction(self.session_factory) as session:
            return repository.save_ingestion(
                session,
                user_id=user_id,
                schedule_id=schedule_id,
                course=course,
                is_active=False,
                assignments=[AssignmentDraft(name="Essay 1", due=datetime(2025, 2, 10, 23, 59))],
                events=[_event(13), _event(15)],
            )

    def _count(self, entity):
        with self.session_factory() as session:
            return session.query(entity).count()

    def test_save_ingestion_commits_course_and_children(self):
        saved = self._save()

        self.assertEqual(saved.assignments_created, 1)
        self.assertEqual(saved.events_created, 2)
        with self.session_factory() as session:
            course = session.get(Course, saved.course_id)
            self.assertEqual(course.name, "CS 201")
            self.assertEqual(course.schedule_id, 1)
            events = session.query(Event).all()
            self.assertTrue(all(e.course_id == saved.course_id for e in events))
            self.assertTrue(all(e.user_id == "user-1" for e in events))
            assignment = session.query(Assignment).one()
            self.assertFalse(assignment.is_completed)

    def test_save_ingestion_rejects_foreign_schedule(self):
        with self.assertRaises(ScheduleNotFound):
            self._save(schedule_id=2)
        self.assertEqual(self._count(Course), 0)

    def test_database_failure_rolls_back_everything(self):
        broken = replace(COURSE, name=None)
        with self.assertRaises(PersistenceFault):
            self._save(course=broken)
        self.assertEqual(self._count(Course), 0)
        self.assertEqual(self._count(Assignment), 0)
        self.assertEqual(self._count(Event), 0)

    def test_delete_course_removes_assignments_and_attached_events(self):
        saved = self._save()
        with repository.transaction(self.session_factory) as session:
            session.add(
                Event(
                    name="Office hours",
                    start=datetime(2025, 1, 20, 9, 0),
                    end=datetime(2025, 1, 20, 10, 0),
                    attached_to_course=False,
                    user_id="user-1",
                    schedule_id=1,
                )
            )

        self.assertTrue(repository.delete_course(self.session_factory, saved.course_id, "user-1"))

        self.assertEqual(self._count(Course), 0)
        self.assertEqual(self._count(Assignment), 0)
        self.assertEqual(self._count(Event), 1)

    def test_delete_course_of_other_user_is_refused(self):
        saved = self._save()
        self.assertFalse(repository.delete_course(self.session_factory, saved.course_id, "user-2"))
        self.assertEqual(self._count(Course), 1)

    def test_delete_schedule_cascades_to_courses_and_events(self):
        self._save()
        self._save()

        self.assertTrue(repository.delete_schedule(self.session_factory, 1, "user-1"))

        self.assertEqual(self._count(Course), 0)
        self.assertEqual(self._count(Assignment), 0)
        self.assertEqual(self._count(Event), 0)
        with self.session_factory() as session:
            self.assertEqual([s.id for s in session.query(Schedule).all()], [2])

    def test_get_schedule_for_user(self):
        with self.session_factory() as session:
            self.assertIsNotNone(repository.get_schedule_for_user(session, 1, "user-1"))
            self.assertIsNone(repository.get_schedule_for_user(session, 1, "user-2"))
            self.assertIsNone(repository.get_schedule_for_user(session, 99, "user-1"))


if __name__ == "__main__":
    unittest.main()
