"""
main.py

This is the main entry point of the FastAPI application.
Here we create the FastAPI app and register all API routes.

This file does NOT contain business logic.
It only wires everything together:
- settings and logging
- routers
- CORS headers
- error handlers that turn every error into {success: false, error: ...}
"""

from typing import Optional
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# Import API routers
from checkvision.api.analyze import router as analyze_router
from checkvision.api.health import router as health_router
from checkvision.api.cors import is_analyze_path, register_cors
from checkvision.config import SERVICE_VERSION, Settings, load_settings

logger = logging.getLogger(__name__)


def _error_body(message: str) -> dict:
    return {"success": False, "error": message}


def _method_not_allowed_message(path: str) -> str:
    if is_analyze_path(path):
        return "Method not allowed. Only POST requests are supported."
    return "Method not allowed"


def _validation_message(error: RequestValidationError) -> str:
    errors = error.errors()
    if not errors:
        return "Invalid request body"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    if location:
        return f"Invalid request body: {location}: {first.get('msg')}"
    return f"Invalid request body: {first.get('msg')}"


def register_error_handlers(app: FastAPI) -> None:
    """Render every error with the same envelope."""

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
            message = _method_not_allowed_message(request.url.path)
        else:
            message = str(exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(message),
            headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_error_body(_validation_message(exc))
        )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Creates and returns the FastAPI application instance.
    This function helps keep the app creation clean and testable.

    Parameters:
    - settings: use these instead of reading the environment (tests)
    """
    settings = settings or load_settings()

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    app = FastAPI(
        title="CheckVision Service",
        description="Extracts bank check fields from an image using Google Gemini",
        version=SERVICE_VERSION
    )
    app.state.settings = settings

    # Register API routes
    app.include_router(health_router, prefix="/health", tags=["Health"])
    app.include_router(analyze_router, prefix="/analyze", tags=["Analyze"])

    register_cors(app)
    register_error_handlers(app)

    if not settings.api_key_configured:
        logger.warning("GEMINI_API_KEY is not set; /analyze will answer with a configuration error")

    return app


# Create the FastAPI app instance
app = create_app()
