"""Session registry: the store-backed set of tokens that are currently valid."""

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from app.models import AuthSession

logger = logging.getLogger(__name__)


class SessionRegistry:
    """
    Tracks issued, unrevoked tokens by jti in the sessions table.

    Every check reads the database, so a revocation committed by one request
    is seen by the next request on any worker.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def register(self, jti: str, user_id: int) -> None:
        """Record a newly issued token. Commits."""
        self.db.add(AuthSession(jti=jti, user_id=user_id))
        self.db.commit()

    def is_active(self, jti: str) -> bool:
        return self.db.get(AuthSession, jti) is not None

    def revoke(self, jti: str) -> bool:
        """Delete the token's record. Returns False if it was already gone."""
        deleted = (
            self.db.query(AuthSession)
            .filter(AuthSession.jti == jti)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return deleted > 0

    def purge_issued_before(self, cutoff: datetime) -> int:
        """Delete records created before cutoff; returns the number deleted."""
        deleted = (
            self.db.query(AuthSession)
            .filter(AuthSession.created_at < cutoff)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return deleted

    def count_issued_before(self, cutoff: datetime) -> int:
        return (
            self.db.query(AuthSession)
            .filter(AuthSession.created_at < cutoff)
            .count()
        )
