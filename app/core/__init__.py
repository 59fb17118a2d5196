"""Settings, database sessions and the service error taxonomy."""

from app.core.config import get_settings, settings
from app.core.database import get_db
from app.core.errors import (
    AuthError,
    ForbiddenError,
    FulfillmentError,
    NotFoundError,
    ServiceError,
    ValidationError,
)

__all__ = [
    "get_settings",
    "settings",
    "get_db",
    "ServiceError",
    "ValidationError",
    "AuthError",
    "ForbiddenError",
    "NotFoundError",
    "FulfillmentError",
]
