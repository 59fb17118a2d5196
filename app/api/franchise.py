"""Franchise and store routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.auth import get_current_user, get_optional_user
from app.core.config import get_settings
from app.core.database import get_db
from app.schemas.auth import CurrentUser, MessageResponse
from app.schemas.franchise import (
    CreateFranchiseRequest,
    CreateStoreRequest,
    FranchiseListResponse,
    FranchiseView,
    StoreResponse,
)
from app.services import franchise as franchise_service

router = APIRouter()


@router.get("", response_model=FranchiseListResponse, response_model_exclude_none=True)
def list_franchises(
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser | None, Depends(get_optional_user)],
    page: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int | None, Query(ge=1, le=100)] = None,
    name: str | None = None,
) -> FranchiseListResponse:
    """
    List franchises with their stores, one page at a time (no auth required).

    `name` accepts `*` as a wildcard, e.g. `pizza*`. A global admin token adds
    each franchise's admins.
    """
    return franchise_service.list_franchises(
        db,
        page=page,
        limit=limit or get_settings().FRANCHISE_PAGE_LIMIT,
        name_filter=name,
        include_admins=current_user is not None and current_user.is_admin,
    )


@router.get("/{user_id}", response_model=list[FranchiseView])
def list_user_franchises(
    user_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> list[FranchiseView]:
    """Franchises administered by user_id (own franchises, or any user's for a global admin)."""
    return franchise_service.list_user_franchises(db, current_user, user_id)


@router.post("", response_model=FranchiseView)
def create_franchise(
    body: CreateFranchiseRequest,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> FranchiseView:
    """Create a franchise and make the listed users its admins (global admin only)."""
    return franchise_service.create_franchise(
        db, current_user, body.name, [a.email for a in body.admins]
    )


@router.delete("/{franchise_id}", response_model=MessageResponse)
def delete_franchise(
    franchise_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> MessageResponse:
    franchise_service.delete_franchise(db, current_user, franchise_id)
    return MessageResponse(message="franchise deleted")


@router.post("/{franchise_id}/store", response_model=StoreResponse)
def create_store(
    franchise_id: int,
    body: CreateStoreRequest,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> StoreResponse:
    """Create a store (global admin or admin of this franchise)."""
    return franchise_service.create_store(db, current_user, franchise_id, body.name)


@router.delete("/{franchise_id}/store/{store_id}", response_model=MessageResponse)
def delete_store(
    franchise_id: int,
    store_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> MessageResponse:
    franchise_service.delete_store(db, current_user, franchise_id, store_id)
    return MessageResponse(message="store deleted")
