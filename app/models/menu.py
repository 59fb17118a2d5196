"""ORM model for pizza menu items."""

from sqlalchemy import Column, Integer, Numeric, String, Text

from app.models.base import Base

# Fixed-point currency: prices such as 0.005 round-trip exactly.
PRICE_PRECISION = 10
PRICE_SCALE = 4
PRICE_TYPE = Numeric(PRICE_PRECISION, PRICE_SCALE)

TITLE_MAX_LEN = 255
IMAGE_MAX_LEN = 1024


class MenuItem(Base):
    __tablename__ = "menu"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(TITLE_MAX_LEN), nullable=False)
    description = Column(Text, nullable=False)
    image = Column(String(IMAGE_MAX_LEN), nullable=False)
    price = Column(PRICE_TYPE, nullable=False)
