import unittest
from datetime import date, time

from syllabus_ingest.schemas.drafts import CompletedCourse
from syllabus_ingest.services.recurring_events import generate_class_meetings, parse_meeting_days


def _course(**overrides):
    values = dict(
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
    values.update(overrides)
    return CompletedCourse(**values)


class TestRecurringEvents(unittest.TestCase):
    def test_one_event_per_meeting_day_in_range(self):
        events = generate_class_meetings(_course())
        # 16 Mondays (Jan 13 - Apr 28) and 16 Wednesdays (Jan 15 - Apr 30).
        self.assertEqual(len(events), 32)
        self.assertEqual({e.start.weekday() for e in events}, {0, 2})
        self.assertEqual(events[0].start.date(), date(2025, 1, 13))
        self.assertEqual(events[-1].start.date(), date(2025, 4, 30))

    def test_events_are_ordered_and_carry_course_details(self):
        events = generate_class_meetings(_course())
        self.assertEqual(events, sorted(events, key=lambda e: e.start))
        first = events[0]
        self.assertEqual(first.title, "CS 201 Class")
        self.assertEqual(first.description, "Class meeting for CS 201")
        self.assertEqual(first.start.time(), time(10, 0))
        self.assertEqual(first.end.time(), time(11, 15))
        self.assertEqual(first.location, "Room 210")
        self.assertEqual(first.event_type, "class")
        self.assertTrue(first.attached_to_course)

    def test_generation_is_deterministic(self):
        self.assertEqual(generate_class_meetings(_course()), generate_class_meetings(_course()))

    def test_range_is_inclusive(self):
        events = generate_class_meetings(
            _course(start_date=date(2025, 1, 13), end_date=date(2025, 1, 13), meeting_days="Monday")
        )
        self.assertEqual(len(events), 1)

    def test_long_course_names_are_truncated(self):
        events = generate_class_meetings(_course(name="Advanced Topics in Distributed Systems Design"))
        self.assertEqual(len(events[0].title), 30)

    def test_unrecognized_days_yield_no_events(self):
        self.assertEqual(generate_class_meetings(_course(meeting_days="TBA")), [])

    def test_parse_meeting_days_accepts_abbreviations_and_separators(self):
        self.assertEqual(parse_meeting_days("Mon/Wed"), frozenset({0, 2}))
        self.assertEqual(parse_meeting_days("Tues. and Thurs."), frozenset({1, 3}))
        self.assertEqual(parse_meeting_days("monday; FRIDAY & sun"), frozenset({0, 4, 6}))
        self.assertEqual(parse_meeting_days(""), frozenset())


if __name__ == "__main__":
    unittest.main()
