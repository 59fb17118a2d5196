"""ORM models for application users and their role grants (auth and RBAC)."""

from sqlalchemy import Column, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from app.models.base import Base


class User(Base):
    """
    User account for JWT authentication and role-based access control.

    Roles are held in user_roles; a new user gets a single 'diner' grant.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)

    roles = relationship(
        "UserRole",
        back_populates="user",
        order_by="UserRole.id",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class UserRole(Base):
    """
    One role grant: (role, object_id). object_id is the franchise or store id
    the grant is scoped to, or 0 for an unscoped grant.
    """

    __tablename__ = "user_roles"
    __table_args__ = (Index("ix_user_roles_role_object_id", "role", "object_id"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role = Column(String(32), nullable=False)
    object_id = Column(Integer, nullable=False, default=0, server_default="0")

    user = relationship("User", back_populates="roles")
