"""
normalizer.py

Turns the free-form text generated by Gemini into a CheckRecord.

Gemini is asked for bare JSON but sometimes wraps it in a ```json fence
or surrounds it with explanation text. Three parsing strategies are
tried in order and the first one that yields a JSON object wins:

1. The whole text is a JSON object
2. The inside of a ```json fenced block is a JSON object
3. The last {...} object found in the text

After parsing, every one of the thirteen check fields is filled in.
Missing or empty values become "Not found" ("Not detected" for
signatureStatus). Unknown keys are dropped.

This file:
- Has no network access
- Has no state; every function is pure
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional
import json
import logging
import re

from checkvision.errors import UnparseableResponseError
from checkvision.schemas.check import CheckRecord, FIELD_DEFAULTS

logger = logging.getLogger(__name__)

FENCED_JSON_RE = re.compile(r"```json\s*([\s\S]*?)\s*```", re.IGNORECASE)
OPEN_BRACE_RE = re.compile(r"\{")

_decoder = json.JSONDecoder()


@dataclass(frozen=True)
class ParseOutcome:
    """
    Result of one parsing strategy.

    Exactly one of `data` or `reason` is set.
    """

    strategy: str
    data: Optional[Dict[str, Any]] = None
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.data is not None


def _as_object(strategy: str, candidate: str) -> ParseOutcome:
    try:
        value = json.loads(candidate)
    except json.JSONDecodeError as error:
        return ParseOutcome(strategy, reason=f"invalid JSON: {error.msg}")

    if not isinstance(value, dict):
        return ParseOutcome(strategy, reason=f"JSON is a {type(value).__name__}, not an object")

    return ParseOutcome(strategy, data=value)


def parse_whole_text(text: str) -> ParseOutcome:
    """Strategy 1: the entire text is one JSON object."""
    return _as_object("whole_text", text.strip())


def parse_fenced_block(text: str) -> ParseOutcome:
    """Strategy 2: the first ```json ... ``` block holds a JSON object."""
    match = FENCED_JSON_RE.search(text)
    if not match:
        return ParseOutcome("fenced_block", reason="no ```json block found")

    return _as_object("fenced_block", match.group(1))


def parse_last_object(text: str) -> ParseOutcome:
    """
    Strategy 3: the last {...} object in the text.

    The text is scanned left to right. At every "{" a JSON object is
    decoded if possible; a decoded object is skipped over as a whole so
    nested braces are never reported on their own. The last object
    decoded this way is returned, so explanation text and earlier
    draft objects before the final answer are ignored.
    """
    found: Optional[Dict[str, Any]] = None
    position = 0

    while True:
        match = OPEN_BRACE_RE.search(text, position)
        if not match:
            break

        try:
            value, end = _decoder.raw_decode(text, match.start())
        except json.JSONDecodeError:
            position = match.start() + 1
            continue

        if isinstance(value, dict):
            found = value
        position = end

    if found is None:
        return ParseOutcome("last_object", reason="no JSON object found in text")

    return ParseOutcome("last_object", data=found)


# Tried in this order; first success wins
PARSE_STRATEGIES: List[Callable[[str], ParseOutcome]] = [
    parse_whole_text,
    parse_fenced_block,
    parse_last_object,
]


def extract_raw_fields(text: str) -> Dict[str, Any]:
    """
    Run the parsing strategies over the AI text.

    Returns:
    - the first JSON object any strategy recovers (RawExtraction)

    Raises:
    - UnparseableResponseError if every strategy fails
    """
    failures = []

    for strategy in PARSE_STRATEGIES:
        outcome = strategy(text)
        if outcome.ok:
            logger.debug(f"Parsed AI response with strategy '{outcome.strategy}'")
            return outcome.data
        failures.append(f"{outcome.strategy}: {outcome.reason}")

    logger.error(f"Could not parse AI response ({'; '.join(failures)})")
    logger.error(f"Response was: {text[:500]}")
    raise UnparseableResponseError("Failed to parse Gemini AI response")


def _coerce(value: Any, default: str) -> str:
    # Falsy values (None, "", 0, False, empty containers) become the sentinel
    if not value:
        return default
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def normalize_fields(raw: Dict[str, Any]) -> CheckRecord:
    """
    Fill every check field from a RawExtraction mapping.

    Each field is handled on its own: present and truthy values are
    kept as strings, everything else gets its sentinel.
    """
    fields = {
        name: _coerce(raw.get(name), default)
        for name, default in FIELD_DEFAULTS.items()
    }
    return CheckRecord(**fields)


def normalize_response(text: str) -> CheckRecord:
    """
    Main entry point: AI text in, complete CheckRecord out.

    Called by:
    - CheckAnalyzerService.analyze() in services/analyzer.py
    """
    return normalize_fields(extract_raw_fields(text))
