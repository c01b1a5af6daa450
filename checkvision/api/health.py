from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from checkvision.api.dependencies import get_settings
from checkvision.config import SERVICE_VERSION, Settings
from checkvision.schemas.check import HealthResponse

router = APIRouter()


@router.api_route(
    "",
    methods=["GET", "POST"],
    response_model=HealthResponse,
    status_code=200,
    summary="Health check",
    description="Reports that the service is up and whether the Gemini API key is configured"
)
def health_check(settings: Settings = Depends(get_settings)):
    return HealthResponse(
        success=True,
        message="CheckVision API is running successfully",
        timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        environment=settings.environment,
        api_key_configured=settings.api_key_configured,
        version=SERVICE_VERSION
    )
