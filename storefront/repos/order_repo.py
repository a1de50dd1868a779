# storefront/repos/order_repo.py
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from storefront.data.models.order import OrderModel
from storefront.data.models.order_event import OrderEventModel
from storefront.domain.enums import OrderStatus


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.flush()
        return order

    def add_event(self, event: OrderEventModel) -> OrderEventModel:
        self.db.add(event)
        self.db.flush()
        return event

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.execute(
            select(OrderModel)
            .options(selectinload(OrderModel.products), selectinload(OrderModel.events))
            .where(OrderModel.id == order_id)
        ).scalar_one_or_none()

    def get_user_order(self, order_id: int, user_id: int) -> OrderModel | None:
        order = self.get_order(order_id)
        if order is None or order.user_id != user_id:
            return None
        return order

    def list_orders(
        self,
        user_id: Optional[int] = None,
        status: Optional[OrderStatus] = None,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[OrderModel]:
        stmt = select(OrderModel).options(selectinload(OrderModel.products))
        if user_id is not None:
            stmt = stmt.where(OrderModel.user_id == user_id)
        if status is not None:
            stmt = stmt.where(OrderModel.status == status.value)
        stmt = stmt.order_by(OrderModel.id).offset(skip)
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self.db.execute(stmt).scalars())

    def commit(self):
        self.db.commit()

    def refresh(self, order: OrderModel):
        self.db.refresh(order)
