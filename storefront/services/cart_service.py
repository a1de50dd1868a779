from typing import List, Tuple

from sqlalchemy.orm import Session

from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.user import UserModel
from storefront.domain.errors import ErrorCode, NotFoundError
from storefront.domain.schemas import CartItemIn, CartItemOut, CartQuantityIn
from storefront.repos.cart_repo import CartRepo
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Use cases of the cart domain.
    commands (add, change quantity, remove) modify state
    query (get) is read only
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)
        self.products = ProductRepo(db)

    # query
    def get_cart(self, user: UserModel) -> List[CartItemOut]:
        items = self.repo.get_items_with_products(user.id)
        return [CartItemOut.model_validate(i) for i in items]

    # commands
    def add_item(self, user: UserModel, payload: CartItemIn) -> Tuple[CartItemOut, bool]:
        """Returns the cart row and whether it was newly created."""
        product = self.products.get_product(payload.product_id)
        if not product:
            raise NotFoundError("Product not found", ErrorCode.PRODUCT_NOT_FOUND)

        existing = self.repo.get_item_by_product(user.id, payload.product_id)

        if existing:
            logger.info(
                f"Product {payload.product_id} already in cart of user {user.id}, "
                f"adding {payload.quantity}"
            )
            self.repo.increment_quantity(existing.id, payload.quantity)
            self.repo.commit()
            self.repo.refresh(existing)
            return CartItemOut.model_validate(existing), False

        item = self.repo.add_item(
            CartItemModel(
                user_id=user.id,
                product_id=payload.product_id,
                quantity=payload.quantity,
            )
        )
        self.repo.commit()
        self.repo.refresh(item)
        return CartItemOut.model_validate(item), True

    def _get_owned_item(self, user: UserModel, item_id: int) -> CartItemModel:
        item = self.repo.get_user_item(item_id, user.id)
        if not item:
            raise NotFoundError("Cart item not found", ErrorCode.CART_ITEM_NOT_FOUND)
        return item

    def change_quantity(self, user: UserModel, item_id: int, payload: CartQuantityIn) -> CartItemOut:
        item = self._get_owned_item(user, item_id)
        item.quantity = payload.quantity
        self.repo.commit()
        self.repo.refresh(item)
        return CartItemOut.model_validate(item)

    def remove_item(self, user: UserModel, item_id: int) -> CartItemOut:
        item = self._get_owned_item(user, item_id)
        removed = CartItemOut.model_validate(item)
        self.repo.delete_item(item)
        self.repo.commit()
        return removed
