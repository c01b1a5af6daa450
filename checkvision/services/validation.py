"""
validation.py

Checks an uploaded check image before anything is sent to Gemini.

Rules:
- Media type must be JPEG, PNG, WebP or PDF
- Size must be at most 10 MB
- Base64 payloads must decode cleanly

Every failure raises ValidationError, so no network call is made.
"""

from typing import Optional
import base64
import binascii
import mimetypes

from checkvision.config import MAX_FILE_SIZE, SUPPORTED_MIME_TYPES
from checkvision.errors import ValidationError

UNSUPPORTED_FORMAT_MESSAGE = "Unsupported file format. Please upload JPG, PNG, WebP, or PDF files."
FILE_TOO_LARGE_MESSAGE = "File size too large. Please upload files smaller than 10MB."
MISSING_FIELDS_MESSAGE = "Missing required fields: imageData and mimeType"


def validate_mime_type(mime_type: Optional[str]) -> str:
    """Return the normalized media type or raise ValidationError."""
    normalized = (mime_type or "").split(";")[0].strip().lower()
    if normalized not in SUPPORTED_MIME_TYPES:
        raise ValidationError(UNSUPPORTED_FORMAT_MESSAGE)
    return normalized


def validate_size(size: int) -> None:
    if size <= 0:
        raise ValidationError("Uploaded file is empty")
    if size > MAX_FILE_SIZE:
        raise ValidationError(FILE_TOO_LARGE_MESSAGE)


def validate_upload(content: bytes, mime_type: Optional[str]) -> str:
    """
    Validate raw file bytes and their declared media type.

    Returns:
    - the normalized media type
    """
    normalized = validate_mime_type(mime_type)
    validate_size(len(content))
    return normalized


def decode_image_data(image_data: str) -> bytes:
    """
    Decode a base64 image payload.

    A leading "data:<type>;base64," prefix is tolerated.
    """
    if image_data.startswith("data:") and "," in image_data:
        image_data = image_data.split(",", 1)[1]

    # MIME-style base64 wraps lines every 76 characters
    image_data = "".join(image_data.split())

    try:
        return base64.b64decode(image_data, validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError("imageData must be a valid base64-encoded string")


def guess_mime_type(filename: str) -> Optional[str]:
    """Guess the media type of a local file from its name."""
    mime_type, _ = mimetypes.guess_type(filename)
    if mime_type is None and filename.lower().endswith(".webp"):
        # Older mimetypes tables do not know .webp
        return "image/webp"
    return mime_type
