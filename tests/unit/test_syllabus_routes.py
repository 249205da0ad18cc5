import unittest
from unittest.mock import patch

from fastapi.testclient import TestClient

from syllabus_ingest.main import app
from syllabus_ingest.schemas.responses import IngestionReport, IngestionState
from syllabus_ingest.schemas.shared import CoursePayload

UPLOAD = "/api/v1/syllabus/upload"
HEADERS = {"X-User-Id": "user-1"}


def _failed(kind: str) -> IngestionReport:
    return IngestionReport(
        success=False,
        message="failed",
        state=IngestionState.FAILED,
        errorKind=kind,
        errors=["failed"],
    )


class TestSyllabusRoutes(unittest.TestCase):
    def setUp(self):
        self.client = TestClient(app)

    def _upload(self, path=UPLOAD, schedule_id="1", headers=HEADERS, filename="syllabus.txt"):
        return self.client.post(
            path,
            data={"scheduleId": schedule_id},
            files={"file": (filename, b"CS 201 syllabus", "text/plain")},
            headers=headers,
        )

    def test_upload_success_returns_report(self):
        report = IngestionReport(
            success=True,
            message="Created",
            state=IngestionState.DONE,
            coursesCreated=1,
            assignmentsCreated=2,
            eventsCreated=30,
            courseId=5,
        )
        with patch("syllabus_ingest.api.v1.routes.syllabus.ingest_workflow", return_value=report) as mock_workflow:
            response = self._upload()

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["courseId"], 5)
        self.assertEqual(body["eventsCreated"], 30)
        document, user_id, schedule_id = mock_workflow.call_args.args
        self.assertEqual(document.filename, "syllabus.txt")
        self.assertEqual(document.content, b"CS 201 syllabus")
        self.assertEqual((user_id, schedule_id), ("user-1", 1))
        self.assertEqual(mock_workflow.call_args.kwargs, {"route_path": UPLOAD})

    def test_gating_pause_is_a_200_with_partial_course(self):
        report = IngestionReport(
            success=False,
            message="Some course details are missing.",
            state=IngestionState.AWAITING_USER_INPUT,
            requiresUserInput=True,
            missingFields=["endDate"],
            course=CoursePayload(courseName="CS 201", startDate="2025-01-13"),
        )
        with patch("syllabus_ingest.api.v1.routes.syllabus.ingest_workflow", return_value=report):
            response = self._upload()

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()["requiresUserInput"])
        self.assertEqual(response.json()["course"]["courseName"], "CS 201")

    def test_failure_kinds_map_to_http_status(self):
        expected = {
            "UnsupportedFormat": 422,
            "DocumentTooLarge": 422,
            "EmptyContent": 422,
            "Timeout": 502,
            "CredentialError": 502,
            "NoJsonFound": 502,
            "ParseError": 502,
            "ScheduleNotFound": 404,
            "PersistenceFault": 500,
        }
        for kind, status in expected.items():
            with patch("syllabus_ingest.api.v1.routes.syllabus.ingest_workflow", return_value=_failed(kind)):
                response = self._upload()
            self.assertEqual(response.status_code, status, kind)
            self.assertEqual(response.json()["errorKind"], kind)

    def test_non_positive_schedule_id_is_rejected(self):
        with patch("syllabus_ingest.api.v1.routes.syllabus.ingest_workflow") as mock_workflow:
            response = self._upload(schedule_id="0")
        self.assertEqual(response.status_code, 400)
        mock_workflow.assert_not_called()

    def test_missing_user_header_is_rejected(self):
        with patch("syllabus_ingest.api.v1.routes.syllabus.ingest_workflow") as mock_workflow:
            response = self._upload(headers={})
        self.assertEqual(response.status_code, 401)
        mock_workflow.assert_not_called()

    def test_missing_file_is_rejected(self):
        response = self.client.post(UPLOAD, data={"scheduleId": "1"}, headers=HEADERS)
        self.assertEqual(response.status_code, 400)

    def test_unexpected_exception_maps_to_500(self):
        with patch("syllabus_ingest.api.v1.routes.syllabus.ingest_workflow", side_effect=RuntimeError("boom")):
            response = self._upload()
        self.assertEqual(response.status_code, 500)
        self.assertNotIn("boom", response.text)

    def test_stream_upload_emits_sse_events(self):
        events = [
            {"event": "ingest.started", "data": {"stage": "Received", "progress_percent": 5}},
            {"event": "ingest.completed", "data": {"stage": "Done", "progress_percent": 100, "courseId": 5}},
        ]
        with patch(
            "syllabus_ingest.api.v1.routes.syllabus.stream_ingest_workflow",
            return_value=iter(events),
        ):
            response = self._upload(path=UPLOAD + "/stream")

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.headers["content-type"].startswith("text/event-stream"))
        self.assertIn("id: 1\nevent: ingest.started\n", response.text)
        self.assertIn("id: 2\nevent: ingest.completed\n", response.text)
        self.assertIn('"courseId": 5', response.text)

    def test_stream_upload_reports_unexpected_failure_as_error_event(self):
        def broken_stream(*args, **kwargs):
            yield {"event": "ingest.started", "data": {"stage": "Received"}}
            raise RuntimeError("boom")

        with patch("syllabus_ingest.api.v1.routes.syllabus.stream_ingest_workflow", side_effect=broken_stream):
            response = self._upload(path=UPLOAD + "/stream")

        self.assertIn("event: ingest.error", response.text)
        self.assertNotIn("boom", response.text)

    def test_complete_route_forwards_request(self):
        report = IngestionReport(success=True, message="Created", state=IngestionState.DONE, courseId=9)
        payload = {
            "courseName": "CS 201",
            "courseDescription": "Data Structures",
            "startDate": "2025-01-13",
            "endDate": "2025-05-02",
            "classMeetingDays": "Monday, Wednesday",
            "classStartTime": "10:00",
            "classEndTime": "11:15",
            "location": "Room 210",
            "courseColor": "#007bff",
            "scheduleId": 3,
            "parsedAssignments": [{"assignmentName": "Essay 1", "dueDate": "2025-02-10"}],
            "parsedEvents": [],
        }
        with patch("syllabus_ingest.api.v1.routes.syllabus.complete_workflow", return_value=report) as mock_workflow:
            response = self.client.post("/api/v1/syllabus/complete", json=payload, headers=HEADERS)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["courseId"], 9)
        req, user_id = mock_workflow.call_args.args
        self.assertEqual(req.scheduleId, 3)
        self.assertEqual(req.parsedAssignments[0].assignmentName, "Essay 1")
        self.assertEqual(user_id, "user-1")

    def test_complete_route_rejects_invalid_schedule(self):
        response = self.client.post(
            "/api/v1/syllabus/complete",
            json={"courseName": "CS 201", "scheduleId": -1},
            headers=HEADERS,
        )
        self.assertEqual(response.status_code, 400)


if __name__ == "__main__":
    unittest.main()
