# storefront/repos/cart_repo.py
from typing import List

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session, joinedload

from storefront.data.models.cart_item import CartItemModel


class CartRepo:
    """
    Cart items are one row per (user, product); the pair is kept unique by the
    upsert in ``CartService.add_item`` rather than by a table constraint.

    Writes only flush, callers decide when the transaction ends.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_items_with_products(self, user_id: int, for_update: bool = False) -> List[CartItemModel]:
        stmt = (
            select(CartItemModel)
            .options(joinedload(CartItemModel.product, innerjoin=True))
            .where(CartItemModel.user_id == user_id)
            .order_by(CartItemModel.id)
        )
        if for_update:
            # lock the user's cart rows until the checkout transaction ends
            stmt = stmt.with_for_update(of=CartItemModel)
        return list(self.db.execute(stmt).unique().scalars())

    def get_user_item(self, item_id: int, user_id: int) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.id == item_id,
                CartItemModel.user_id == user_id,
            )
        ).scalar_one_or_none()

    def get_item_by_product(self, user_id: int, product_id: int) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.user_id == user_id,
                CartItemModel.product_id == product_id,
            )
        ).scalars().first()

    def add_item(self, item: CartItemModel) -> CartItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    def increment_quantity(self, item_id: int, quantity: int) -> int:
        # done in SQL so concurrent adds cannot lose an increment
        result = self.db.execute(
            update(CartItemModel)
            .where(CartItemModel.id == item_id)
            .values(quantity=CartItemModel.quantity + quantity)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def delete_item(self, item: CartItemModel) -> None:
        self.db.delete(item)
        self.db.flush()

    def clear(self, user_id: int) -> int:
        result = self.db.execute(
            delete(CartItemModel)
            .where(CartItemModel.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()

    def refresh(self, item: CartItemModel):
        self.db.refresh(item)
