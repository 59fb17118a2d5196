"""Request/response schemas for the menu and order endpoints."""

from datetime import datetime

from pydantic import Field

from app.schemas.base import CamelModel


class MenuItemView(CamelModel):
    id: int
    title: str
    description: str
    image: str
    price: float


class MenuItemRequest(CamelModel):
    """New menu item. Presence of every field is checked by the menu service."""

    title: str | None = None
    description: str | None = None
    image: str | None = None
    price: float | None = None


class OrderItemRequest(CamelModel):
    """One line of an order; description and price default to the menu item's."""

    menu_id: int | None = None
    description: str | None = None
    price: float | None = None


class CreateOrderRequest(CamelModel):
    franchise_id: int | None = None
    store_id: int | None = None
    items: list[OrderItemRequest] | None = None


class OrderItemView(CamelModel):
    id: int
    menu_id: int
    description: str
    price: float


class OrderView(CamelModel):
    id: int
    franchise_id: int
    store_id: int
    date: datetime
    status: str
    items: list[OrderItemView]


class OrdersResponse(CamelModel):
    """A diner's orders, one page at a time."""

    diner_id: int
    orders: list[OrderView]
    page: int


class CreateOrderResponse(CamelModel):
    """Fulfilled order plus the factory's fulfillment token and report link."""

    order: OrderView
    jwt: str = Field(..., description="Fulfillment token issued by the factory")
    follow_link_to_end_chaos: str | None = Field(
        default=None, description="Factory report URL"
    )


class FactoryFulfillment(CamelModel):
    """Successful factory reply: fulfillment token plus report URL."""

    jwt: str
    report_url: str | None = None
