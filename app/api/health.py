"""Liveness endpoint for load balancers: reports database reachability and the configured factory."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import check_db_connected, get_db
from app.schemas.health import HealthResponse

router = APIRouter()

SERVICE_VERSION = "0.1.0"


@router.get("", response_model=HealthResponse)
def get_health(db: Annotated[Session, Depends(get_db)]) -> HealthResponse:
    connected = check_db_connected(db)
    return HealthResponse(
        status="ok" if connected else "degraded",
        version=SERVICE_VERSION,
        environment=settings.APP_ENV,
        database="connected" if connected else "disconnected",
        factory_url=settings.FACTORY_URL,
    )
