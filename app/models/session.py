"""ORM model for the session registry: one row per issued, unrevoked token."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, func

from app.models.base import Base, utcnow


class AuthSession(Base):
    """Valid token record keyed by the token's jti. Logout deletes the row."""

    __tablename__ = "sessions"

    jti = Column(String(64), primary_key=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
        index=True,
    )
