from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, Numeric
from sqlalchemy.orm import relationship
from datetime import datetime, timezone

from storefront.data.database import Base
from storefront.domain.enums import OrderStatus


def _now():
    return datetime.now(timezone.utc)


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    net_amount = Column(Numeric(12, 2), nullable=False)
    address = Column(String, nullable=False, default="")  # snapshot, never re-resolved
    status = Column(String(20), nullable=False, default=OrderStatus.PENDING.value)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)

    user = relationship("UserModel", back_populates="orders")
    products = relationship(
        "OrderProductModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderProductModel.id",
    )
    events = relationship(
        "OrderEventModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderEventModel.id",
    )
