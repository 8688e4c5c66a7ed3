from fastapi import APIRouter
from pydantic import BaseModel

API_VERSION = "0.2.0"

router = APIRouter()


class HealthCheckResponse(BaseModel):
    status: str
    version: str = API_VERSION


@router.get("/", response_model=HealthCheckResponse)
async def health_check() -> HealthCheckResponse:
    """Liveness probe; does not touch the database."""
    return HealthCheckResponse(status="healthy")
