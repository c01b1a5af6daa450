from __future__ import annotations

import json

import pytest
import requests

from checkvision.errors import ConfigurationError, EmptyResponseError, ServiceError
from checkvision.services.gemini import GeminiClient


def make_response(status_code: int, payload=None, raw: bytes | None = None) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response._content = raw if raw is not None else json.dumps(payload).encode("utf-8")
    return response


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def post(self, url, json=None, headers=None):
        self.calls.append({"url": url, "json": json, "headers": headers})
        if self.error is not None:
            raise self.error
        return self.response


def test_request_shape_and_key_header():
    session = FakeSession(make_response(200, {"candidates": []}))
    client = GeminiClient(api_key="secret", model="gemini-1.5-flash", session=session)

    client.generate_content("PROMPT", "aGVsbG8=", "image/png")

    assert len(session.calls) == 1
    call = session.calls[0]
    assert call["url"].endswith("/models/gemini-1.5-flash:generateContent")
    assert "secret" not in call["url"]
    assert call["headers"]["x-goog-api-key"] == "secret"
    assert call["json"] == {
        "contents": [{
            "parts": [
                {"text": "PROMPT"},
                {"inline_data": {"mime_type": "image/png", "data": "aGVsbG8="}},
            ]
        }]
    }


def test_missing_key_makes_no_call():
    session = FakeSession(make_response(200, {}))
    client = GeminiClient(api_key=None, session=session)

    with pytest.raises(ConfigurationError):
        client.generate_content("p", "d", "image/png")
    assert session.calls == []


def test_error_status_carries_upstream_message():
    payload = {"error": {"code": 400, "message": "API key not valid."}}
    client = GeminiClient(api_key="k", session=FakeSession(make_response(400, payload)))

    with pytest.raises(ServiceError) as info:
        client.generate_content("p", "d", "image/png")
    assert str(info.value) == "Gemini API Error: API key not valid."


def test_error_status_without_message_is_generic():
    client = GeminiClient(api_key="k", session=FakeSession(make_response(503, raw=b"<html>down</html>")))

    with pytest.raises(ServiceError) as info:
        client.generate_content("p", "d", "image/png")
    assert str(info.value) == "Gemini API Error: Analysis failed"


def test_transport_failure_is_a_service_error():
    session = FakeSession(error=requests.ConnectionError("connection refused"))
    client = GeminiClient(api_key="k", session=session)

    with pytest.raises(ServiceError):
        client.generate_content("p", "d", "image/png")
    assert len(session.calls) == 1


def test_extract_text_returns_first_part():
    envelope = {"candidates": [{"content": {"parts": [{"text": "first"}, {"text": "second"}]}}]}
    assert GeminiClient.extract_text(envelope) == "first"


@pytest.mark.parametrize("envelope", [
    {},
    {"candidates": []},
    {"candidates": [{}]},
    {"candidates": [{"content": {"parts": []}}]},
    {"candidates": [{"content": {"parts": [{"text": ""}]}}]},
    {"candidates": None},
])
def test_extract_text_missing_path_is_empty_response(envelope):
    with pytest.raises(EmptyResponseError):
        GeminiClient.extract_text(envelope)
