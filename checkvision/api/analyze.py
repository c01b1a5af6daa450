"""
analyze.py (API Route)

This file defines the check analysis endpoints.

Endpoints:
- POST /analyze         JSON body {imageData, mimeType}
- POST /analyze/upload  multipart/form-data with a "file" field

What this file does:
- Validates the request before anything else
- Checks that the Gemini API key is configured
- Calls CheckAnalyzerService
- Wraps the result in {success: true, data: ...}

What this file does NOT do:
- Save the image anywhere (everything stays in memory)
- Talk to Gemini directly (delegates to CheckAnalyzerService)

Errors are raised as HTTPException; the handlers in main.py
turn them into {success: false, error: ...}.

Flow:
Client → This API → CheckAnalyzerService → Gemini → Normalizer → JSON
"""

import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from fastapi.concurrency import run_in_threadpool

from checkvision.api.dependencies import get_gemini_client, get_settings
from checkvision.config import Settings
from checkvision.schemas.check import AnalyzeRequest, AnalyzeResponse, ErrorResponse
from checkvision.services.analyzer import CheckAnalyzerService
from checkvision.services.gemini import GeminiClient
from checkvision.services.validation import (
    MISSING_FIELDS_MESSAGE,
    decode_image_data,
    guess_mime_type,
    validate_mime_type,
    validate_size,
    validate_upload,
)

logger = logging.getLogger(__name__)

CONFIGURATION_ERROR_MESSAGE = "Server configuration error. API key not found."
GENERIC_FAILURE_MESSAGE = "Failed to analyze check. Please try again."

# Create a router for analysis endpoints
# This router will be registered in main.py under /analyze
router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Missing or invalid input"},
    405: {"model": ErrorResponse, "description": "Method not allowed"},
    500: {"model": ErrorResponse, "description": "Configuration, Gemini or parse failure"},
}


def _require_api_key(settings: Settings) -> None:
    if not settings.api_key_configured:
        logger.error("GEMINI_API_KEY environment variable not configured")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=CONFIGURATION_ERROR_MESSAGE
        )


async def _run_analysis(client: GeminiClient, image_bytes: bytes, mime_type: str) -> AnalyzeResponse:
    """
    Run one analysis in a worker thread and map failures to HTTP 500.

    The Gemini call blocks, so it must not run on the event loop.
    """
    analyzer = CheckAnalyzerService(client=client)

    try:
        result = await run_in_threadpool(analyzer.analyze, image_bytes, mime_type)

    except RuntimeError as error:
        # ServiceError, EmptyResponseError, UnparseableResponseError, ConfigurationError
        logger.error(f"Analysis failed: {error}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(error) or GENERIC_FAILURE_MESSAGE
        )

    except Exception:
        logger.exception("Unexpected error during check analysis")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=GENERIC_FAILURE_MESSAGE
        )

    return AnalyzeResponse(success=True, data=result)


@router.post(
    "",
    response_model=AnalyzeResponse,
    status_code=status.HTTP_200_OK,
    responses=ERROR_RESPONSES,
    summary="Extract fields from a check image",
    description=(
        "Send a base64-encoded check image (JPG, PNG, WebP or PDF, max 10MB) "
        "and receive the thirteen extracted check fields. "
        "Fields that could not be read are returned as 'Not found'."
    )
)
async def analyze_check(
    payload: AnalyzeRequest,
    settings: Settings = Depends(get_settings),
    client: GeminiClient = Depends(get_gemini_client)
):
    """
    Check analysis endpoint.

    Step-by-step process:
    1. Require both imageData and mimeType
    2. Validate media type, base64 and size
    3. Require the Gemini API key
    4. Run the analysis
    5. Return {success: true, data: AnalysisResult}

    Errors:
    - 400: missing or invalid input
    - 500: missing API key, Gemini failure or unparseable answer
    """

    # Step 1: Both fields are required
    if not payload.image_data or not payload.mime_type:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=MISSING_FIELDS_MESSAGE
        )

    # Step 2: Validate before any network call
    try:
        mime_type = validate_mime_type(payload.mime_type)
        image_bytes = decode_image_data(payload.image_data)
        validate_size(len(image_bytes))
    except ValueError as error:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(error)
        )

    # Step 3: API key must be configured on the server
    _require_api_key(settings)

    # Step 4 and 5
    return await _run_analysis(client, image_bytes, mime_type)


@router.post(
    "/upload",
    response_model=AnalyzeResponse,
    status_code=status.HTTP_200_OK,
    responses=ERROR_RESPONSES,
    summary="Extract fields from an uploaded check file",
    description="Upload a check image as multipart/form-data (field name 'file')."
)
async def analyze_uploaded_check(
    file: UploadFile = File(...),
    settings: Settings = Depends(get_settings),
    client: GeminiClient = Depends(get_gemini_client)
):
    """
    Same flow as POST /analyze, for a raw file upload.

    The media type comes from the upload itself; when the client
    sends a generic type it is guessed from the file name.
    """

    if not file.filename:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Check image file is required"
        )

    file_bytes = await file.read()

    mime_type = file.content_type
    if not mime_type or mime_type == "application/octet-stream":
        mime_type = guess_mime_type(file.filename)

    try:
        mime_type = validate_upload(file_bytes, mime_type)
    except ValueError as error:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(error)
        )

    _require_api_key(settings)

    return await _run_analysis(client, file_bytes, mime_type)
