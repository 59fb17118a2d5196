"""Order service: list a diner's orders and place orders fulfilled by the pizza factory."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from app.core.errors import FulfillmentError, NotFoundError, ValidationError
from app.models import DinerOrder, MenuItem, OrderItem, Store
from app.models.order import (
    ITEM_DESCRIPTION_MAX_LEN,
    ORDER_STATUS_CREATED,
    ORDER_STATUS_FAILED,
    ORDER_STATUS_FULFILLED,
    ORDER_STATUS_REQUESTED,
)
from app.schemas.auth import CurrentUser
from app.schemas.order import (
    CreateOrderRequest,
    CreateOrderResponse,
    OrderItemView,
    OrdersResponse,
    OrderView,
)
from app.services.factory import FactoryError, request_fulfillment
from app.services.menu import parse_price

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)

FULFILLMENT_FAILED_MESSAGE = "Failed to fulfill order at factory"


def order_view(order: DinerOrder) -> OrderView:
    return OrderView(
        id=order.id,
        franchise_id=order.franchise_id,
        store_id=order.store_id,
        date=order.date,
        status=order.status,
        items=[
            OrderItemView(
                id=i.id,
                menu_id=i.menu_id,
                description=i.description,
                price=i.price,
            )
            for i in order.items
        ],
    )


def list_orders(
    db: Session,
    requester: CurrentUser,
    page: int,
    per_page: int,
) -> OrdersResponse:
    """The requester's own orders, newest first; page is 1-based."""
    orders = (
        db.query(DinerOrder)
        .filter(DinerOrder.diner_id == requester.id)
        .order_by(DinerOrder.id.desc())
        .offset((page - 1) * per_page)
        .limit(per_page)
        .all()
    )
    return OrdersResponse(
        diner_id=requester.id,
        orders=[order_view(o) for o in orders],
        page=page,
    )


def _build_order(
    db: Session,
    requester: CurrentUser,
    body: CreateOrderRequest,
) -> DinerOrder:
    """Validate the request against the store and menu; return an unsaved order."""
    items = body.items or []
    if not items:
        raise ValidationError("order must contain at least one item")
    if body.franchise_id is None or body.store_id is None:
        raise ValidationError("franchiseId and storeId are required")
    if any(item.menu_id is None for item in items):
        raise ValidationError("each order item requires a menuId")

    store = (
        db.query(Store)
        .filter(Store.id == body.store_id, Store.franchise_id == body.franchise_id)
        .first()
    )
    if store is None:
        raise NotFoundError("store not found")

    menu_ids = {item.menu_id for item in items}
    menu = {
        m.id: m for m in db.query(MenuItem).filter(MenuItem.id.in_(menu_ids)).all()
    }
    unknown = sorted(menu_ids - menu.keys())
    if unknown:
        raise ValidationError(f"unknown menu item: {unknown[0]}")

    order = DinerOrder(
        diner_id=requester.id,
        franchise_id=store.franchise_id,
        store_id=store.id,
        status=ORDER_STATUS_CREATED,
    )
    for item in items:
        menu_item = menu[item.menu_id]
        description = (item.description or "").strip() or menu_item.title
        if len(description) > ITEM_DESCRIPTION_MAX_LEN:
            raise ValidationError(
                f"item description must be at most {ITEM_DESCRIPTION_MAX_LEN} characters"
            )
        order.items.append(
            OrderItem(
                menu_id=menu_item.id,
                description=description,
                price=parse_price(item.price) if item.price is not None else menu_item.price,
            )
        )
    return order


async def create_order(
    db: Session,
    requester: CurrentUser,
    body: CreateOrderRequest,
    settings: Settings,
) -> CreateOrderResponse:
    """
    Persist the order, then ask the factory to fulfill it.

    The order is committed before the factory call and is never rolled back:
    a factory failure leaves it in fulfillment_failed and raises
    FulfillmentError carrying the factory's report URL.
    """
    order = _build_order(db, requester, body)
    db.add(order)
    db.commit()

    order.status = ORDER_STATUS_REQUESTED
    db.commit()
    db.refresh(order)

    diner = {"id": requester.id, "name": requester.name, "email": requester.email}
    payload = order_view(order).model_dump(mode="json", by_alias=True)
    try:
        result = await request_fulfillment(diner, payload, requester.token, settings)
    except FactoryError as e:
        order.status = ORDER_STATUS_FAILED
        order.report_url = e.report_url
        db.commit()
        logger.warning(
            "Order fulfillment failed",
            extra={
                "order_id": order.id,
                "factory_status": e.status_code,
                "reason": (e.message or str(e))[:500],
            },
        )
        raise FulfillmentError(FULFILLMENT_FAILED_MESSAGE, report_url=e.report_url) from e

    order.status = ORDER_STATUS_FULFILLED
    order.fulfillment_jwt = result.jwt
    order.report_url = result.report_url
    db.commit()
    db.refresh(order)
    logger.info("Order fulfilled", extra={"order_id": order.id})
    return CreateOrderResponse(
        order=order_view(order),
        jwt=result.jwt,
        follow_link_to_end_chaos=result.report_url,
    )
