"""
analyzer.py

Check analysis service.

Drives exactly one extraction attempt end to end:

1. Encode the image as base64
2. Build the check extraction prompt
3. Call Gemini once (GeminiClient)
4. Pull the generated text out of the response
5. Normalize the text into a CheckRecord (normalizer.py)
6. Wrap it in an AnalysisResult with confidence and timestamp

There are no retries. Any failure is raised to the caller,
who decides how to report it.

This file:
- Does NOT store the image or the result
- Does NOT contain FastAPI routes
"""

from typing import Callable
import base64
import logging
import time

from checkvision.config import EXTRACTION_CONFIDENCE
from checkvision.schemas.check import AnalysisResult, CheckRecord
from checkvision.services.gemini import GeminiClient
from checkvision.services.normalizer import normalize_response

logger = logging.getLogger(__name__)


CHECK_PROMPT = """Analyze this check image and extract information. Return ONLY a valid JSON object:

{
  "accountHolder": "account holder name or null",
  "accountNumber": "account number or null",
  "routingNumber": "routing number or null",
  "bankName": "bank name or null",
  "ifscCode": "IFSC code or null",
  "micrCode": "MICR code or null",
  "checkNumber": "check number or null",
  "date": "date or null",
  "amountNumbers": "numerical amount or null",
  "amountWords": "written amount or null",
  "signatureStatus": "Present or Absent",
  "memo": "memo/purpose or null",
  "address": "address or null"
}

Return ONLY the JSON object, no additional text."""


def _now_millis() -> int:
    return int(time.time() * 1000)


class CheckAnalyzerService:
    """
    CheckAnalyzerService extracts check fields from one image.

    The Gemini client is passed in, so tests can hand over a fake.
    """

    def __init__(
        self,
        client: GeminiClient,
        clock: Callable[[], int] = _now_millis
    ):
        """
        Parameters:
        - client: GeminiClient used for the single outbound call
        - clock: returns the current time in epoch milliseconds
        """
        self.client = client
        self.clock = clock

    def analyze(self, image_bytes: bytes, mime_type: str) -> AnalysisResult:
        """
        Analyze raw image bytes.

        Parameters:
        - image_bytes: the check image (not kept after return)
        - mime_type: declared media type, already validated by the caller

        Returns:
        - AnalysisResult

        Raises:
        - ConfigurationError, ServiceError, EmptyResponseError,
          UnparseableResponseError
        """
        image_base64 = base64.b64encode(image_bytes).decode("utf-8")
        return self.analyze_base64(image_base64, mime_type)

    def analyze_base64(self, image_base64: str, mime_type: str) -> AnalysisResult:
        """Analyze an image that is already base64-encoded."""

        logger.info(f"Processing check analysis request ({mime_type}, {len(image_base64)} base64 chars)")

        envelope = self.client.generate_content(
            prompt=CHECK_PROMPT,
            image_base64=image_base64,
            mime_type=mime_type
        )
        generated_text = self.client.extract_text(envelope)

        record = normalize_response(generated_text)
        result = self._to_result(record)

        logger.info("Check analysis completed successfully")
        return result

    def _to_result(self, record: CheckRecord) -> AnalysisResult:
        return AnalysisResult(
            **record.model_dump(),
            extraction_confidence=EXTRACTION_CONFIDENCE,
            processing_time=self.clock()
        )
