"""
gemini.py

This module is responsible for talking to the Google Gemini
generateContent API.

Responsibilities:
- Attach the API key header
- Send one prompt + one inline image
- Turn HTTP failures into ServiceError
- Pull the generated text out of the response envelope

What this file does NOT do:
- Retry (every call is made exactly once)
- Override the requests timeout
- Parse the generated text (see services/normalizer.py)
"""

from typing import Any, Dict, Optional
import logging

import requests

from checkvision.config import DEFAULT_GEMINI_API_BASE, DEFAULT_GEMINI_MODEL
from checkvision.errors import ConfigurationError, EmptyResponseError, ServiceError

logger = logging.getLogger(__name__)


class GeminiClient:
    """
    GeminiClient is a thin wrapper over the generateContent REST endpoint.

    The key is sent in the x-goog-api-key header so it never
    appears in a URL or a log line.
    """

    def __init__(
        self,
        api_key: Optional[str],
        model: str = DEFAULT_GEMINI_MODEL,
        api_base: str = DEFAULT_GEMINI_API_BASE,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize Gemini client.

        Parameters:
        - api_key: Gemini API key (may be None; calls will then fail)
        - model: Gemini model name (e.g. gemini-1.5-flash)
        - api_base: API base URL
        - session: optional requests.Session, mainly for tests
        """

        self.api_key = api_key
        self.model = model
        self.url = f"{api_base.rstrip('/')}/models/{model}:generateContent"
        self.session = session or requests.Session()

    @staticmethod
    def build_request_body(prompt: str, image_base64: str, mime_type: str) -> Dict[str, Any]:
        """Request body with the prompt first and the image second."""
        return {
            "contents": [
                {
                    "parts": [
                        {"text": prompt},
                        {
                            "inline_data": {
                                "mime_type": mime_type,
                                "data": image_base64
                            }
                        }
                    ]
                }
            ]
        }

    def generate_content(self, prompt: str, image_base64: str, mime_type: str) -> Dict[str, Any]:
        """
        Send one generateContent request.

        Returns:
        - Parsed JSON response envelope

        Raises:
        - ConfigurationError if no API key is set
        - ServiceError on transport failure or non-2xx status
        """

        if not self.api_key:
            raise ConfigurationError("Server configuration error. API key not found.")

        body = self.build_request_body(prompt, image_base64, mime_type)

        try:
            response = self.session.post(
                self.url,
                json=body,
                headers={
                    "Content-Type": "application/json",
                    "x-goog-api-key": self.api_key
                }
            )
        except requests.RequestException as error:
            logger.error(f"Gemini request failed: {error.__class__.__name__}")
            raise ServiceError(f"Gemini API Error: {error}") from error

        if not response.ok:
            message = self._error_message(response)
            logger.error(f"Gemini API error ({response.status_code}): {message}")
            raise ServiceError(f"Gemini API Error: {message}")

        try:
            return response.json()
        except ValueError as error:
            raise EmptyResponseError("No response generated from Gemini AI") from error

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        # Gemini errors look like {"error": {"code": 400, "message": "..."}}
        try:
            payload = response.json()
        except ValueError:
            return "Analysis failed"

        error = payload.get("error") if isinstance(payload, dict) else None
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        return "Analysis failed"

    @staticmethod
    def extract_text(envelope: Dict[str, Any]) -> str:
        """
        Return candidates[0].content.parts[0].text.

        Raises:
        - EmptyResponseError if any level of that path is missing or empty
        """

        try:
            text = envelope["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            text = None

        if not isinstance(text, str) or not text:
            raise EmptyResponseError("No response generated from Gemini AI")

        return text
