"""Menu and order routes. Order creation calls the pizza factory."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.auth import get_current_user
from app.core.config import get_settings
from app.core.database import get_db
from app.schemas.auth import CurrentUser
from app.schemas.order import (
    CreateOrderRequest,
    CreateOrderResponse,
    MenuItemRequest,
    MenuItemView,
    OrdersResponse,
)
from app.services import menu as menu_service
from app.services import order as order_service

router = APIRouter()


@router.get("/menu", response_model=list[MenuItemView])
def get_menu(
    db: Annotated[Session, Depends(get_db)],
) -> list[MenuItemView]:
    """Return the pizza menu (no auth required)."""
    return menu_service.get_menu(db)


@router.put("/menu", response_model=list[MenuItemView])
def add_menu_item(
    body: MenuItemRequest,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> list[MenuItemView]:
    """Add a menu item (global admin only); returns the full menu."""
    return menu_service.add_menu_item(db, current_user, body)


@router.get("", response_model=OrdersResponse)
def list_orders(
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    page: Annotated[int, Query(ge=1)] = 1,
) -> OrdersResponse:
    """The caller's own orders, newest first."""
    return order_service.list_orders(
        db, current_user, page, get_settings().ORDERS_PER_PAGE
    )


@router.post("", response_model=CreateOrderResponse)
async def create_order(
    body: CreateOrderRequest,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CreateOrderResponse:
    """
    Place an order and have the pizza factory fulfill it.

    The order is stored before the factory is called. If fulfillment fails the
    order stays stored and the response is 500 with the factory's report link
    in followLinkToEndChaos.
    """
    return await order_service.create_order(db, current_user, body, get_settings())
