"""Session cleanup: delete registry rows whose tokens are past JWT expiry."""

import logging
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from app.services.sessions import SessionRegistry

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)


def run_session_cleanup(
    session: Session,
    settings: "Settings",
    max_age_minutes: int | None = None,
    dry_run: bool = False,
) -> int:
    """
    Delete session records issued more than max_age_minutes ago.

    max_age_minutes defaults to JWT_EXPIRE_MINUTES; tokens that old fail the
    expiry check anyway, so no live session is touched. It may not be set below
    that. With dry_run, only counts. Returns the number of stale records.
    Idempotent.
    """
    if not settings.SESSION_CLEANUP_ENABLED:
        logger.info("Session cleanup is disabled (SESSION_CLEANUP_ENABLED=false); skipping.")
        return 0

    age = settings.JWT_EXPIRE_MINUTES if max_age_minutes is None else max_age_minutes
    if age < settings.JWT_EXPIRE_MINUTES:
        raise ValueError(
            f"max_age_minutes ({age}) must be at least JWT_EXPIRE_MINUTES "
            f"({settings.JWT_EXPIRE_MINUTES})"
        )
    cutoff = datetime.now(UTC) - timedelta(minutes=age)
    registry = SessionRegistry(session)

    if dry_run:
        stale = registry.count_issued_before(cutoff)
        logger.info("Session cleanup dry run: cutoff=%s, stale_sessions=%s", cutoff.isoformat(), stale)
        return stale

    deleted_count = registry.purge_issued_before(cutoff)
    if deleted_count > 0:
        logger.info(
            "Session cleanup run: cutoff=%s, sessions_deleted=%s",
            cutoff.isoformat(),
            deleted_count,
        )
    return deleted_count
