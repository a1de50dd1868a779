# storefront/domain/schemas.py
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from storefront.domain.enums import OrderStatus, Role


class CamelModel(BaseModel):
    """Base schema: camelCase on the wire, snake_case accepted on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageOut(CamelModel):
    message: str


# =====================================================
# AUTH / USERS
# =====================================================
class SignupIn(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6)


class LoginIn(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserOut(CamelModel):
    id: int
    name: str
    email: str
    role: Role
    default_shipping_address_id: Optional[int] = None
    default_billing_address_id: Optional[int] = None
    created_at: datetime


class LoginOut(CamelModel):
    user: UserOut
    token: str


class AddressIn(CamelModel):
    line_one: str = Field(..., min_length=1)
    line_two: Optional[str] = None
    pincode: str = Field(..., min_length=6, max_length=6)
    country: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)


class AddressOut(CamelModel):
    id: int
    user_id: int
    line_one: str
    line_two: Optional[str] = None
    city: str
    country: str
    pincode: str
    formatted_address: str


class UserDetailOut(UserOut):
    addresses: List[AddressOut] = []


class UserUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    default_shipping_address_id: Optional[int] = Field(None, gt=0)
    default_billing_address_id: Optional[int] = Field(None, gt=0)


class RoleUpdate(CamelModel):
    role: Role


# =====================================================
# PRODUCTS
# =====================================================
class ProductCreate(CamelModel):
    name: str = Field(..., min_length=1)
    description: str
    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    tags: List[str] = []


class ProductUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
    tags: Optional[List[str]] = None


class ProductOut(CamelModel):
    id: int
    name: str
    description: str
    price: Decimal
    tags: List[str]
    created_at: datetime

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, value):
        if isinstance(value, str):
            return [tag for tag in value.split(",") if tag]
        return value


class ProductPageData(CamelModel):
    products: List[ProductOut]


class ProductPage(CamelModel):
    count: int
    data: ProductPageData


# =====================================================
# CART
# =====================================================
class CartItemIn(CamelModel):
    product_id: int = Field(..., gt=0)
    quantity: int = Field(..., gt=0)


class CartQuantityIn(CamelModel):
    quantity: int = Field(..., gt=0)


class CartItemOut(CamelModel):
    id: int
    user_id: int
    product_id: int
    quantity: int
    product: Optional[ProductOut] = None


# =====================================================
# ORDERS
# =====================================================
class OrderProductOut(CamelModel):
    id: int
    product_id: int
    quantity: int
    status: OrderStatus


class OrderEventOut(CamelModel):
    id: int
    status: OrderStatus
    created_at: datetime


class OrderOut(CamelModel):
    id: int
    user_id: int
    net_amount: Decimal
    address: str
    status: OrderStatus
    created_at: datetime
    products: List[OrderProductOut]


class OrderDetailOut(OrderOut):
    events: List[OrderEventOut]


class OrderStatusUpdate(CamelModel):
    status: OrderStatus
