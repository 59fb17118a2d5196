"""Health check response."""

from typing import Literal

from pydantic import Field

from app.schemas.base import CamelModel


class HealthResponse(CamelModel):
    status: Literal["ok", "degraded"] = Field(
        default="ok", description="'degraded' when the database cannot be reached"
    )
    version: str
    environment: str = Field(description="APP_ENV, e.g. dev or prod")
    database: Literal["connected", "disconnected"]
    factory_url: str
