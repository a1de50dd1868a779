# storefront/domain/enums.py
import enum


class Role(str, enum.Enum):
    ADMIN = "ADMIN"
    USER = "USER"


class OrderStatus(str, enum.Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    OUT_FOR_DELIVERY = "OUT_FOR_DELIVERY"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


# statuses from which the customer may still cancel
CANCELLABLE_STATUSES = {OrderStatus.PENDING, OrderStatus.ACCEPTED}
