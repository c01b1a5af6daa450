from __future__ import annotations

import base64

import pytest

from checkvision.errors import EmptyResponseError, ServiceError, UnparseableResponseError
from checkvision.services.analyzer import CHECK_PROMPT, CheckAnalyzerService
from checkvision.schemas.check import CHECK_FIELDS


def test_analyze_round_trip(fake_gemini, full_check_json):
    client = fake_gemini(text=full_check_json)
    service = CheckAnalyzerService(client=client, clock=lambda: 1760000000000)

    result = service.analyze(b"\x89PNG fake", "image/png")

    assert len(client.calls) == 1
    call = client.calls[0]
    assert call["prompt"] == CHECK_PROMPT
    assert call["mime_type"] == "image/png"
    assert base64.b64decode(call["image_base64"]) == b"\x89PNG fake"

    assert result.account_holder == "Asha Verma"
    assert result.routing_number == "Not found"
    assert result.extraction_confidence == 95
    assert result.processing_time == 1760000000000


def test_result_serializes_flat_with_camel_case(fake_gemini):
    service = CheckAnalyzerService(client=fake_gemini(text='{"bankName": "SBI"}'), clock=lambda: 1)
    data = service.analyze(b"x", "image/jpeg").model_dump(by_alias=True)

    assert set(data) == set(CHECK_FIELDS) | {"extractionConfidence", "processingTime"}
    assert data["bankName"] == "SBI"


def test_prompt_names_every_field():
    for name in CHECK_FIELDS:
        assert f'"{name}"' in CHECK_PROMPT


def test_service_error_propagates(fake_gemini):
    client = fake_gemini(error=ServiceError("Gemini API Error: quota exceeded"))
    with pytest.raises(ServiceError):
        CheckAnalyzerService(client=client).analyze(b"x", "image/png")
    assert len(client.calls) == 1


def test_missing_candidates_is_empty_response(fake_gemini):
    client = fake_gemini(envelope={"promptFeedback": {"blockReason": "SAFETY"}})
    with pytest.raises(EmptyResponseError):
        CheckAnalyzerService(client=client).analyze(b"x", "image/png")


def test_unparseable_text_propagates(fake_gemini):
    client = fake_gemini(text="I cannot read this check.")
    with pytest.raises(UnparseableResponseError):
        CheckAnalyzerService(client=client).analyze(b"x", "image/png")
