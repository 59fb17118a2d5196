"""ORM models for diner orders and their line items."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import relationship

from app.models.base import Base, utcnow
from app.models.menu import PRICE_TYPE

# Fulfillment lifecycle: created -> fulfillment_requested -> fulfilled | fulfillment_failed
ORDER_STATUS_CREATED = "created"
ORDER_STATUS_REQUESTED = "fulfillment_requested"
ORDER_STATUS_FULFILLED = "fulfilled"
ORDER_STATUS_FAILED = "fulfillment_failed"

ITEM_DESCRIPTION_MAX_LEN = 255


class DinerOrder(Base):
    """
    Order placed by a diner at one store.

    franchise_id and store_id are kept as plain columns so order history
    survives the deletion of a franchise or store.
    """

    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    diner_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    franchise_id = Column(Integer, nullable=False, index=True)
    store_id = Column(Integer, nullable=False, index=True)
    date = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )
    status = Column(
        String(32),
        nullable=False,
        default=ORDER_STATUS_CREATED,
        server_default=ORDER_STATUS_CREATED,
    )
    fulfillment_jwt = Column(Text, nullable=True)
    report_url = Column(String(2048), nullable=True)

    items = relationship(
        "OrderItem",
        back_populates="order",
        order_by="OrderItem.id",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(
        Integer,
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    menu_id = Column(Integer, nullable=False)
    description = Column(String(ITEM_DESCRIPTION_MAX_LEN), nullable=False)
    price = Column(PRICE_TYPE, nullable=False)

    order = relationship("DinerOrder", back_populates="items")
