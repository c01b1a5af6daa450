"""
api.py (client)

Client side of the CheckVision service.

Two ways to analyze a local check image:
- CheckVisionClient: posts the image to a running server (/analyze)
- analyze_locally(): runs CheckAnalyzerService in this process,
  using GEMINI_API_KEY from the local environment

Both validate the file first (type and size), so nothing is sent
for a file that would be rejected anyway.
"""

from pathlib import Path
from typing import Any, Dict, Optional, Tuple
import base64

import requests

from checkvision.config import Settings
from checkvision.errors import ConfigurationError, ServiceError, ValidationError
from checkvision.schemas.check import AnalysisResult
from checkvision.services.analyzer import CheckAnalyzerService
from checkvision.services.gemini import GeminiClient
from checkvision.services.validation import guess_mime_type, validate_mime_type, validate_size


def read_check_image(path: Path) -> Tuple[bytes, str]:
    """
    Read and validate a check image from disk.

    Returns:
    - (file bytes, media type)

    Raises:
    - ValidationError for a missing, unsupported or oversized file
    """
    if not path.is_file():
        raise ValidationError(f"File not found: {path}")

    # Type and size are checked before the file is read
    mime_type = validate_mime_type(guess_mime_type(path.name))
    validate_size(path.stat().st_size)

    return path.read_bytes(), mime_type


class CheckVisionClient:
    """
    CheckVisionClient is a thin wrapper over the CheckVision HTTP API.
    """

    def __init__(self, base_url: str, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()

    def _post_json(self, endpoint: str, body: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = self.session.post(f"{self.base_url}{endpoint}", json=body)
        except requests.RequestException as error:
            raise ServiceError(f"Could not reach CheckVision server: {error}") from error
        return self._unwrap(response)

    @staticmethod
    def _unwrap(response: requests.Response) -> Dict[str, Any]:
        try:
            payload = response.json()
        except ValueError:
            raise ServiceError(f"Unexpected response from server ({response.status_code})")

        if not isinstance(payload, dict):
            raise ServiceError(f"Unexpected response from server ({response.status_code})")

        if not response.ok or payload.get("success") is False:
            raise ServiceError(payload.get("error") or f"Server error ({response.status_code})")

        return payload

    def analyze_file(self, path: Path) -> AnalysisResult:
        """Validate a local file and send it to POST /analyze."""
        content, mime_type = read_check_image(path)
        body = {
            "imageData": base64.b64encode(content).decode("utf-8"),
            "mimeType": mime_type,
        }
        payload = self._post_json("/analyze", body)
        return AnalysisResult.model_validate(payload.get("data") or {})

    def health(self) -> Dict[str, Any]:
        """Call GET /health."""
        try:
            response = self.session.get(f"{self.base_url}/health")
        except requests.RequestException as error:
            raise ServiceError(f"Could not reach CheckVision server: {error}") from error
        return self._unwrap(response)


def analyze_locally(path: Path, settings: Settings, client: Optional[GeminiClient] = None) -> AnalysisResult:
    """
    Analyze a local file without a server.

    Raises:
    - ValidationError, ConfigurationError, or any analyzer error
    """
    content, mime_type = read_check_image(path)

    if not settings.api_key_configured and client is None:
        raise ConfigurationError("GEMINI_API_KEY is not set")

    client = client or GeminiClient(
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        api_base=settings.gemini_api_base
    )
    return CheckAnalyzerService(client=client).analyze(content, mime_type)
