from __future__ import annotations

import json

import pytest

from checkvision.errors import UnparseableResponseError
from checkvision.schemas.check import CHECK_FIELDS, FIELD_DEFAULTS
from checkvision.services import normalizer


def test_whole_text_json_is_used_directly():
    record = normalizer.normalize_response('{"accountHolder": "Asha Verma", "bankName": "SBI"}')
    assert record.account_holder == "Asha Verma"
    assert record.bank_name == "SBI"


def test_fenced_block_fills_one_field_and_defaults_the_rest():
    record = normalizer.normalize_response('```json\n{"bankName":"X"}\n```')
    fields = record.to_fields()

    assert fields["bankName"] == "X"
    others = {k: v for k, v in fields.items() if k != "bankName"}
    assert len(others) == 12
    for name, value in others.items():
        assert value == FIELD_DEFAULTS[name]
    assert fields["signatureStatus"] == "Not detected"


def test_fenced_block_with_prose_around_it():
    text = 'Here is the result:\n```JSON\n{"memo": "Rent"}\n```\nLet me know if you need more.'
    assert normalizer.normalize_response(text).memo == "Rent"


def test_last_brace_object_wins_over_earlier_ones():
    text = 'some prose {"accountHolder":"A"} more prose {"accountHolder":"B"}'
    assert normalizer.normalize_response(text).account_holder == "B"


def test_last_object_keeps_nested_objects_whole():
    text = 'Result: {"accountHolder": "A", "extra": {"x": 1}} done.'
    outcome = normalizer.parse_last_object(text)
    assert outcome.ok
    assert outcome.data == {"accountHolder": "A", "extra": {"x": 1}}


def test_strategies_are_tried_in_order():
    assert normalizer.parse_whole_text("not json").ok is False
    assert normalizer.parse_fenced_block("no fence here").ok is False
    assert normalizer.parse_last_object("no braces").ok is False
    assert normalizer.PARSE_STRATEGIES == [
        normalizer.parse_whole_text,
        normalizer.parse_fenced_block,
        normalizer.parse_last_object,
    ]


def test_broken_fence_falls_through_to_brace_scan():
    text = '```json\n{"bankName": oops}\n```\nfinal answer {"bankName": "HDFC"}'
    assert normalizer.normalize_response(text).bank_name == "HDFC"


def test_non_object_json_is_a_failure():
    outcome = normalizer.parse_whole_text('["a", "b"]')
    assert outcome.ok is False
    assert "list" in outcome.reason


def test_unparseable_text_raises():
    with pytest.raises(UnparseableResponseError):
        normalizer.normalize_response("I cannot read this check.")


def test_every_field_is_present_for_partial_input():
    record = normalizer.normalize_fields({"checkNumber": "100245", "date": "12/05/2025"})
    fields = record.to_fields()

    assert set(fields) == set(CHECK_FIELDS)
    assert all(isinstance(v, str) and v for v in fields.values())
    assert fields["checkNumber"] == "100245"
    assert fields["accountNumber"] == "Not found"


@pytest.mark.parametrize("value", [None, "", 0, False, [], {}])
def test_falsy_values_become_sentinels(value):
    record = normalizer.normalize_fields({"memo": value, "signatureStatus": value})
    assert record.memo == "Not found"
    assert record.signature_status == "Not detected"


def test_values_are_not_reformatted():
    record = normalizer.normalize_fields({"amountNumbers": "001,500.50", "checkNumber": 100245})
    assert record.amount_numbers == "001,500.50"
    assert record.check_number == "100245"


def test_unknown_keys_are_dropped():
    record = normalizer.normalize_fields({"bankName": "SBI", "confidence": "high"})
    assert "confidence" not in record.model_dump(by_alias=True)


def test_normalizing_twice_gives_the_same_record(full_check_json):
    first = normalizer.normalize_response(full_check_json)
    second = normalizer.normalize_response(json.dumps(first.to_fields()))
    assert first == second
    assert second.routing_number == "Not found"
    assert second.memo == "Not found"
