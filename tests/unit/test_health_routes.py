import unittest
from unittest.mock import patch

from syllabus_ingest.main import app, health_legacy


class TestHealthRoutes(unittest.TestCase):
    def test_health_legacy_reports_database_and_model(self):
        with patch("syllabus_ingest.api.v1.routes.health._database_status", return_value="ok"), patch(
            "syllabus_ingest.api.v1.routes.health.settings.gemini_api_key", return_value=""
        ):
            self.assertEqual(health_legacy(), {"ok": True, "database": "ok", "modelConfigured": False})

    def test_health_is_not_ok_when_database_is_unavailable(self):
        with patch("syllabus_ingest.api.v1.routes.health._database_status", return_value="unavailable"):
            self.assertFalse(health_legacy()["ok"])

    def test_health_routes_are_registered(self):
        route_paths = {route.path for route in app.routes if hasattr(route, "path")}
        self.assertIn("/health", route_paths)
        self.assertIn("/api/v1/health", route_paths)
        self.assertIn("/api/v1/syllabus/upload", route_paths)
        self.assertIn("/api/v1/syllabus/upload/stream", route_paths)
        self.assertIn("/api/v1/syllabus/complete", route_paths)


if __name__ == "__main__":
    unittest.main()
