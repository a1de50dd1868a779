# import all models so SQLAlchemy registers them in Base.metadata

from storefront.data.models.user import UserModel
from storefront.data.models.address import AddressModel
from storefront.data.models.product import ProductModel
from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.order import OrderModel
from storefront.data.models.order_product import OrderProductModel
from storefront.data.models.order_event import OrderEventModel

__all__ = [
    "UserModel",
    "AddressModel",
    "ProductModel",
    "CartItemModel",
    "OrderModel",
    "OrderProductModel",
    "OrderEventModel",
]
