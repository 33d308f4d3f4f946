from datetime import datetime, timezone

from fastapi import APIRouter

from apex_api.models.schemas import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    return HealthResponse(
        status="ok",
        message="APEX AI Backend is running",
        timestamp=datetime.now(timezone.utc),
    )
