"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.franchise import Franchise, Store
from app.models.menu import MenuItem
from app.models.order import DinerOrder, OrderItem
from app.models.session import AuthSession
from app.models.user import User, UserRole

__all__ = [
    "AuthSession",
    "Base",
    "DinerOrder",
    "Franchise",
    "MenuItem",
    "OrderItem",
    "Store",
    "User",
    "UserRole",
]
