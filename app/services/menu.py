"""Menu service: public menu listing and admin-only additions."""

import logging
from decimal import Decimal

from sqlalchemy.orm import Session

from app.core.errors import ForbiddenError, ValidationError
from app.models import MenuItem
from app.models.menu import IMAGE_MAX_LEN, PRICE_PRECISION, PRICE_SCALE, TITLE_MAX_LEN
from app.schemas.auth import CurrentUser
from app.schemas.order import MenuItemRequest, MenuItemView

logger = logging.getLogger(__name__)

# Smallest price the NUMERIC(10, 4) column cannot hold.
PRICE_LIMIT = Decimal(10) ** (PRICE_PRECISION - PRICE_SCALE)


def parse_price(value: float) -> Decimal:
    """
    Convert a client price to the stored fixed-point value, unchanged.

    str() keeps the decimal digits the client sent (0.005, not
    0.00500000000000000010). Raises ValidationError for a price the column
    would round or overflow.
    """
    price = Decimal(str(value))
    if not price.is_finite() or price < 0:
        raise ValidationError("price must be a non-negative number")
    if price.as_tuple().exponent < -PRICE_SCALE:
        raise ValidationError(f"price may have at most {PRICE_SCALE} decimal places")
    if price >= PRICE_LIMIT:
        raise ValidationError(f"price must be less than {PRICE_LIMIT}")
    return price


def menu_item_view(item: MenuItem) -> MenuItemView:
    return MenuItemView(
        id=item.id,
        title=item.title,
        description=item.description,
        image=item.image,
        price=item.price,
    )


def get_menu(db: Session) -> list[MenuItemView]:
    return [menu_item_view(m) for m in db.query(MenuItem).order_by(MenuItem.id).all()]


def add_menu_item(
    db: Session,
    requester: CurrentUser,
    item: MenuItemRequest,
) -> list[MenuItemView]:
    """Append an item to the menu and return the full menu. Global admin only."""
    if not requester.is_admin:
        raise ForbiddenError("unable to add menu item")
    title = (item.title or "").strip()
    description = (item.description or "").strip()
    image = (item.image or "").strip()
    if not title or not description or not image or item.price is None:
        raise ValidationError("title, description, image, and price are required")
    if len(title) > TITLE_MAX_LEN:
        raise ValidationError(f"title must be at most {TITLE_MAX_LEN} characters")
    if len(image) > IMAGE_MAX_LEN:
        raise ValidationError(f"image must be at most {IMAGE_MAX_LEN} characters")

    row = MenuItem(
        title=title,
        description=description,
        image=image,
        price=parse_price(item.price),
    )
    db.add(row)
    db.commit()
    logger.info("Menu item added", extra={"menu_id": row.id})
    return get_menu(db)
