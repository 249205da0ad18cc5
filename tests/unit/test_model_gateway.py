import unittest
from unittest.mock import Mock, patch

import requests

from syllabus_ingest.clients.model_gateway import ModelGateway, build_request_body, extract_candidate_text
from syllabus_ingest.core.config import GatewayConfig
from syllabus_ingest.core.errors import (
    ConfigurationError,
    CredentialError,
    GatewayTimeout,
    MalformedEnvelope,
    ServiceError,
)

ENVELOPE = {"candidates": [{"content": {"parts": [{"text": '{"course": {}}'}]}}]}


def _response(status_code=200, payload=None, text=""):
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.text = text
    response.json.return_value = payload
    return response


class TestModelGateway(unittest.TestCase):
    def setUp(self):
        self.config = GatewayConfig(
            api_key="test-key",
            model="gemini-test",
            api_base="https://example.test/v1beta/models/",
            timeout_seconds=30.0,
            connect_timeout_seconds=5.0,
            temperature=0.1,
            max_output_tokens=1024,
        )
        self.session = Mock()

    def test_send_posts_prompt_and_returns_candidate_text(self):
        self.session.post.return_value = _response(payload=ENVELOPE)

        text = ModelGateway(self.config, session=self.session).send("hello")

        self.assertEqual(text, '{"course": {}}')
        self.session.post.assert_called_once_with(
            "https://example.test/v1beta/models/gemini-test:generateContent",
            json=build_request_body("hello", self.config),
            headers={"Content-Type": "application/json", "x-goog-api-key": "test-key"},
            timeout=(5.0, 30.0),
        )

    @patch("syllabus_ingest.clients.model_gateway.requests.Session")
    def test_gateway_without_shared_session_closes_its_own(self, session_cls):
        session = session_cls.return_value.__enter__.return_value
        session.post.return_value = _response(payload=ENVELOPE)

        text = ModelGateway(self.config).send("hello")

        self.assertEqual(text, '{"course": {}}')
        session.post.assert_called_once()
        session_cls.return_value.__exit__.assert_called_once()

    @patch("syllabus_ingest.clients.model_gateway.requests.Session")
    def test_own_session_is_closed_when_the_call_times_out(self, session_cls):
        session_cls.return_value.__enter__.return_value.post.side_effect = requests.Timeout("slow")

        with self.assertRaises(GatewayTimeout):
            ModelGateway(self.config).send("hello")

        session_cls.return_value.__exit__.assert_called_once()

    def test_request_body_carries_generation_config(self):
        body = build_request_body("hello", self.config)
        self.assertEqual(body["contents"][0]["parts"][0]["text"], "hello")
        self.assertEqual(body["generationConfig"], {"temperature": 0.1, "maxOutputTokens": 1024})

    def test_missing_api_key_fails_before_network(self):
        config = GatewayConfig(api_key="")
        with self.assertRaises(ConfigurationError):
            ModelGateway(config, session=self.session).send("hello")
        self.session.post.assert_not_called()

    def test_timeout_maps_to_gateway_timeout(self):
        self.session.post.side_effect = requests.Timeout("read timed out")
        with self.assertRaises(GatewayTimeout):
            ModelGateway(self.config, session=self.session).send("hello")

    def test_connection_error_maps_to_service_error(self):
        self.session.post.side_effect = requests.ConnectionError("refused")
        with self.assertRaises(ServiceError):
            ModelGateway(self.config, session=self.session).send("hello")

    def test_rejected_key_maps_to_credential_error(self):
        self.session.post.return_value = _response(status_code=403, text="API key not valid")
        with self.assertRaises(CredentialError) as exc:
            ModelGateway(self.config, session=self.session).send("hello")
        self.assertEqual(exc.exception.status_code, 403)
        self.assertEqual(exc.exception.detail, "API key not valid")

    def test_server_error_maps_to_service_error_with_status(self):
        self.session.post.return_value = _response(status_code=503, text="overloaded")
        with self.assertRaises(ServiceError) as exc:
            ModelGateway(self.config, session=self.session).send("hello")
        self.assertEqual(exc.exception.status_code, 503)

    def test_non_json_body_is_malformed(self):
        response = _response(text="<html>")
        response.json.side_effect = ValueError("no json")
        self.session.post.return_value = response
        with self.assertRaises(MalformedEnvelope):
            ModelGateway(self.config, session=self.session).send("hello")

    def test_envelope_without_candidates_is_malformed(self):
        with self.assertRaises(MalformedEnvelope):
            extract_candidate_text({"candidates": []})
        with self.assertRaises(MalformedEnvelope):
            extract_candidate_text({"candidates": [{"content": {"parts": [{"text": None}]}}]})


if __name__ == "__main__":
    unittest.main()
