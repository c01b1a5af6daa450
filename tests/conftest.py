from __future__ import annotations

import json

import pytest

from checkvision.services.gemini import GeminiClient


def gemini_envelope(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


class FakeGeminiClient(GeminiClient):
    """Records calls instead of talking to Gemini."""

    def __init__(self, text: str | None = None, envelope: dict | None = None, error: Exception | None = None):
        super().__init__(api_key="test-key")
        self._envelope = envelope if envelope is not None else gemini_envelope(text or "")
        self._error = error
        self.calls = []

    def generate_content(self, prompt, image_base64, mime_type):
        self.calls.append({"prompt": prompt, "image_base64": image_base64, "mime_type": mime_type})
        if self._error is not None:
            raise self._error
        return self._envelope


@pytest.fixture
def full_check_json() -> str:
    return json.dumps({
        "accountHolder": "Asha Verma",
        "accountNumber": "000123456789",
        "routingNumber": None,
        "bankName": "State Bank of India",
        "ifscCode": "SBIN0001234",
        "micrCode": "400002005",
        "checkNumber": "100245",
        "date": "12/05/2025",
        "amountNumbers": "1,500.00",
        "amountWords": "One thousand five hundred only",
        "signatureStatus": "Present",
        "memo": None,
        "address": "12 MG Road, Pune",
    })


@pytest.fixture
def fake_gemini():
    """The FakeGeminiClient class, for tests to build with their own answer."""
    return FakeGeminiClient


@pytest.fixture
def envelope():
    return gemini_envelope
