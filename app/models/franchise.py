"""ORM models for franchises and their stores."""

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from app.models.base import Base

FRANCHISE_NAME_MAX_LEN = 255
STORE_NAME_MAX_LEN = 255


class Franchise(Base):
    """
    Pizza franchise. Its admins are the users holding a 'franchise_admin'
    grant whose object_id is this franchise's id.
    """

    __tablename__ = "franchises"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(FRANCHISE_NAME_MAX_LEN), nullable=False, unique=True, index=True)

    stores = relationship(
        "Store",
        back_populates="franchise",
        order_by="Store.id",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class Store(Base):
    """A store belonging to exactly one franchise."""

    __tablename__ = "stores"

    id = Column(Integer, primary_key=True, autoincrement=True)
    franchise_id = Column(
        Integer,
        ForeignKey("franchises.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(String(STORE_NAME_MAX_LEN), nullable=False)

    franchise = relationship("Franchise", back_populates="stores")
