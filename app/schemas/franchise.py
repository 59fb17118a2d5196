"""Request/response schemas for franchise and store endpoints."""

from pydantic import Field

from app.schemas.base import CamelModel


class StoreView(CamelModel):
    id: int
    name: str


class StoreResponse(CamelModel):
    """Store returned after creation."""

    id: int
    franchise_id: int
    name: str


class FranchiseAdmin(CamelModel):
    """Franchise admin as shown on a franchise (id, name, email)."""

    id: int
    name: str
    email: str


class FranchiseView(CamelModel):
    """Franchise with its stores; admins are included for admin-scoped views only."""

    id: int
    name: str
    admins: list[FranchiseAdmin] | None = None
    stores: list[StoreView] = Field(default_factory=list)


class FranchiseListResponse(CamelModel):
    """One page of franchises; more is True when a further page exists."""

    franchises: list[FranchiseView]
    more: bool


class AdminEmail(CamelModel):
    email: str | None = None


class CreateFranchiseRequest(CamelModel):
    name: str | None = None
    admins: list[AdminEmail] = Field(default_factory=list)


class CreateStoreRequest(CamelModel):
    name: str | None = None
