"""Pydantic request/response schemas."""

from app.schemas.auth import (
    AuthResponse,
    CurrentUser,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    Role,
    RoleAssignment,
    UserView,
)
from app.schemas.franchise import (
    CreateFranchiseRequest,
    CreateStoreRequest,
    FranchiseListResponse,
    FranchiseView,
    StoreResponse,
)
from app.schemas.health import HealthResponse
from app.schemas.order import (
    CreateOrderRequest,
    CreateOrderResponse,
    FactoryFulfillment,
    MenuItemRequest,
    MenuItemView,
    OrdersResponse,
    OrderView,
)

__all__ = [
    "AuthResponse",
    "CreateFranchiseRequest",
    "CreateOrderRequest",
    "CreateOrderResponse",
    "CreateStoreRequest",
    "CurrentUser",
    "FactoryFulfillment",
    "FranchiseListResponse",
    "FranchiseView",
    "HealthResponse",
    "LoginRequest",
    "MenuItemRequest",
    "MenuItemView",
    "MessageResponse",
    "OrderView",
    "OrdersResponse",
    "RegisterRequest",
    "Role",
    "RoleAssignment",
    "StoreResponse",
    "UserView",
]
