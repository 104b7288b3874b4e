from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel

router = APIRouter(tags=["utils"])


class HealthStatus(BaseModel):
    status: str
    message: str
    timestamp: datetime


@router.get("/health", response_model=HealthStatus)
async def health_check() -> HealthStatus:
    return HealthStatus(
        status="OK",
        message="Buildsy API is running",
        timestamp=datetime.now(timezone.utc),
    )
