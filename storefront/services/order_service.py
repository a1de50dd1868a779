# storefront/services/order_service.py
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from storefront.data.database import SessionScope, session_scope
from storefront.data.models.address import AddressModel
from storefront.data.models.order import OrderModel
from storefront.data.models.order_event import OrderEventModel
from storefront.data.models.order_product import OrderProductModel
from storefront.data.models.user import UserModel
from storefront.domain.enums import CANCELLABLE_STATUSES, OrderStatus, Role
from storefront.domain.errors import BadRequestError, ErrorCode, NotFoundError
from storefront.domain.schemas import MessageOut, OrderDetailOut, OrderOut, OrderStatusUpdate
from storefront.repos.address_repo import AddressRepo
from storefront.repos.cart_repo import CartRepo
from storefront.repos.order_repo import OrderRepo
from storefront.repos.user_repo import UserRepo
from storefront.services.lock_service import LockService
from storefront.services.notification_service import NotificationService
from storefront.utils.logging import get_logger
from storefront.utils.settings import PAGE_SIZE

logger = get_logger(__name__)

CART_EMPTY_MESSAGE = "cart is empty"

TERMINAL_STATUSES = {OrderStatus.DELIVERED, OrderStatus.CANCELLED}


class OrderService:
    """
    Order domain use cases.

    Checkout runs in its own transactional scope taken from ``scope`` so that
    the order, its line items, the first event and the emptied cart land
    together or not at all. Everything else works on the request session.
    """

    def __init__(
        self,
        db: Session,
        scope: SessionScope = session_scope,
        lock_service: Optional[LockService] = None,
        notification_service: Optional[NotificationService] = None,
    ):
        self.db = db
        self.repo = OrderRepo(db)
        self.scope = scope
        self.lock_service = lock_service or LockService()
        self.notification_service = notification_service or NotificationService()

    # =====================================================
    # CHECKOUT
    # =====================================================
    def create_order(self, user_id: int) -> OrderOut | MessageOut:
        """
        Use Case: turn the user's cart into an order.

        1. loads cart items with their products
        2. empty cart -> "cart is empty", nothing written
        3. total = sum(quantity * price)
        4. snapshots the default shipping address
        5. creates the order with its line items
        6. appends the first order event
        7. empties the cart
        """
        # the request session may still hold a read transaction (auth lookup);
        # release its connection so checkout needs only one from the pool
        self.db.rollback()

        with self.lock_service.checkout_lock(user_id):
            with self.scope() as session:
                result = self._place_order(session, user_id)

        if isinstance(result, OrderOut):
            self.notification_service.send_order_notification(user_id, result.id, result.status.value)

        return result

    def _place_order(self, session: Session, user_id: int) -> OrderOut | MessageOut:
        carts = CartRepo(session)
        orders = OrderRepo(session)

        items = carts.get_items_with_products(user_id, for_update=True)

        if not items:
            session.rollback()
            logger.info(f"Cart of user {user_id} is empty, no order created", extra={"user_id": user_id})
            return MessageOut(message=CART_EMPTY_MESSAGE)

        total = sum(
            (Decimal(item.quantity) * item.product.price for item in items),
            Decimal("0.00"),
        )

        address = self._default_shipping_address(session, user_id)
        if address is None:
            # the order is still placed, without a deliverable address
            logger.warning(
                f"User {user_id} has no default shipping address, order stored without one",
                extra={"user_id": user_id},
            )
            address_snapshot = ""
        else:
            address_snapshot = address.formatted_address

        order = orders.add_order(
            OrderModel(
                user_id=user_id,
                net_amount=total,
                address=address_snapshot,
                status=OrderStatus.PENDING.value,
                products=[
                    OrderProductModel(
                        product_id=item.product_id,
                        quantity=item.quantity,
                        status=OrderStatus.PENDING.value,
                    )
                    for item in items
                ],
            )
        )

        orders.add_event(OrderEventModel(order_id=order.id))

        cleared = carts.clear(user_id)

        logger.info(
            f"Order {order.id} created for user {user_id}: {len(items)} items, total {total}, "
            f"{cleared} cart rows removed",
            extra={"user_id": user_id, "order_id": order.id},
        )

        return OrderOut.model_validate(order)

    @staticmethod
    def _default_shipping_address(session: Session, user_id: int) -> Optional[AddressModel]:
        user = UserRepo(session).get_user(user_id)
        if user is None or user.default_shipping_address_id is None:
            return None
        return AddressRepo(session).get_address(user.default_shipping_address_id)

    # =====================================================
    # QUERIES
    # =====================================================
    def list_user_orders(self, user: UserModel) -> List[OrderOut]:
        return [OrderOut.model_validate(o) for o in self.repo.list_orders(user_id=user.id)]

    def get_order(self, user: UserModel, order_id: int) -> OrderDetailOut:
        order = self.repo.get_order(order_id)

        # admins may look at any order, users only at their own
        if not order or (order.user_id != user.id and user.role != Role.ADMIN.value):
            raise NotFoundError("Order not found", ErrorCode.ORDER_NOT_FOUND)

        return OrderDetailOut.model_validate(order)

    def list_all_orders(self, status: Optional[OrderStatus] = None, skip: int = 0) -> List[OrderOut]:
        orders = self.repo.list_orders(status=status, skip=skip, limit=PAGE_SIZE)
        return [OrderOut.model_validate(o) for o in orders]

    def list_orders_of_user(self, user_id: int, status: Optional[OrderStatus] = None, skip: int = 0) -> List[OrderOut]:
        orders = self.repo.list_orders(user_id=user_id, status=status, skip=skip, limit=PAGE_SIZE)
        return [OrderOut.model_validate(o) for o in orders]

    # =====================================================
    # STATUS CHANGES
    # =====================================================
    def _set_status(self, order: OrderModel, status: OrderStatus) -> OrderDetailOut:
        # status and its event are committed together
        order.status = status.value
        order.events.append(OrderEventModel(status=status.value))
        self.repo.commit()
        self.repo.refresh(order)

        logger.info(f"Order {order.id} moved to {status.value}", extra={"order_id": order.id})
        self.notification_service.send_order_notification(order.user_id, order.id, status.value)

        return OrderDetailOut.model_validate(order)

    def cancel_order(self, user: UserModel, order_id: int) -> OrderDetailOut:
        order = self.repo.get_user_order(order_id, user.id)
        if not order:
            raise NotFoundError("Order not found", ErrorCode.ORDER_NOT_FOUND)

        if OrderStatus(order.status) not in CANCELLABLE_STATUSES:
            raise BadRequestError(
                f"Order in status {order.status} cannot be cancelled",
                ErrorCode.INVALID_ORDER_STATUS,
            )

        return self._set_status(order, OrderStatus.CANCELLED)

    def change_status(self, order_id: int, payload: OrderStatusUpdate) -> OrderDetailOut:
        order = self.repo.get_order(order_id)
        if not order:
            raise NotFoundError("Order not found", ErrorCode.ORDER_NOT_FOUND)

        if OrderStatus(order.status) in TERMINAL_STATUSES:
            raise BadRequestError(
                f"Order in status {order.status} can no longer change",
                ErrorCode.INVALID_ORDER_STATUS,
            )

        if OrderStatus(order.status) == payload.status:
            raise BadRequestError(
                f"Order is already {order.status}",
                ErrorCode.INVALID_ORDER_STATUS,
            )

        return self._set_status(order, payload.status)
