"""
cors.py

Cross-origin headers for browser callers.

Every response gets:
- Access-Control-Allow-Origin: *
- Access-Control-Allow-Methods: depends on the path
- Access-Control-Allow-Headers: Content-Type

OPTIONS requests are answered here with 200 and an empty body,
before they reach any route.
"""

from fastapi import FastAPI, Request, Response

ANALYZE_METHODS = "POST, OPTIONS"
DEFAULT_METHODS = "GET, POST, OPTIONS"


def is_analyze_path(path: str) -> bool:
    return path.rstrip("/") == "/analyze" or path.startswith("/analyze/")


def allowed_methods(path: str) -> str:
    if is_analyze_path(path):
        return ANALYZE_METHODS
    return DEFAULT_METHODS


def cors_headers(path: str) -> dict:
    return {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Methods": allowed_methods(path),
        "Access-Control-Allow-Headers": "Content-Type",
    }


def register_cors(app: FastAPI) -> None:
    """Attach the CORS middleware to the app."""

    @app.middleware("http")
    async def add_cors_headers(request: Request, call_next):
        headers = cors_headers(request.url.path)

        # Preflight
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=headers)

        response = await call_next(request)
        response.headers.update(headers)
        return response
