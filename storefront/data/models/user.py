from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship

from storefront.data.database import Base
from storefront.domain.enums import Role


def _now():
    return datetime.now(timezone.utc)


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False, unique=True, index=True)
    password = Column(String, nullable=False)
    role = Column(String(10), nullable=False, default=Role.USER.value)

    # plain ints, the address may be deleted independently of the user
    default_shipping_address_id = Column(Integer, nullable=True)
    default_billing_address_id = Column(Integer, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)

    addresses = relationship("AddressModel", back_populates="user", cascade="all, delete-orphan")
    cart_items = relationship("CartItemModel", back_populates="user", cascade="all, delete-orphan")
    orders = relationship("OrderModel", back_populates="user")
