# storefront/api/routers/orders.py
from typing import List, Optional, Union

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.api.deps import (
    get_current_user,
    get_lock_service,
    get_notification_service,
    get_session_scope,
    require_admin,
)
from storefront.data.database import SessionScope, get_db
from storefront.data.models.user import UserModel
from storefront.domain.enums import OrderStatus
from storefront.domain.schemas import MessageOut, OrderDetailOut, OrderOut, OrderStatusUpdate
from storefront.services.lock_service import LockService
from storefront.services.notification_service import NotificationService
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(
    db: Session = Depends(get_db),
    scope: SessionScope = Depends(get_session_scope),
    lock_service: LockService = Depends(get_lock_service),
    notification_service: NotificationService = Depends(get_notification_service),
) -> OrderService:
    return OrderService(
        db,
        scope=scope,
        lock_service=lock_service,
        notification_service=notification_service,
    )


@router.post("/", response_model=Union[OrderOut, MessageOut])
def create_order(
    user: UserModel = Depends(get_current_user),
    svc: OrderService = Depends(get_service),
):
    """
    Creates an order from the whole cart of the current user.
    Returns {"message": "cart is empty"} when there is nothing to order.
    """
    return svc.create_order(user.id)


@router.get("/", response_model=List[OrderOut])
def list_orders(
    user: UserModel = Depends(get_current_user),
    svc: OrderService = Depends(get_service),
):
    return svc.list_user_orders(user)


# admin routes are declared before /{order_id}
@router.get("/index", response_model=List[OrderOut], dependencies=[Depends(require_admin)])
def list_all_orders(
    status: Optional[OrderStatus] = Query(None),
    skip: int = Query(0, ge=0),
    svc: OrderService = Depends(get_service),
):
    return svc.list_all_orders(status, skip)


@router.get("/users/{user_id}", response_model=List[OrderOut], dependencies=[Depends(require_admin)])
def list_user_orders(
    user_id: int,
    status: Optional[OrderStatus] = Query(None),
    skip: int = Query(0, ge=0),
    svc: OrderService = Depends(get_service),
):
    return svc.list_orders_of_user(user_id, status, skip)


@router.put("/{order_id}/status", response_model=OrderDetailOut, dependencies=[Depends(require_admin)])
def change_status(
    order_id: int,
    payload: OrderStatusUpdate,
    svc: OrderService = Depends(get_service),
):
    return svc.change_status(order_id, payload)


@router.put("/{order_id}/cancel", response_model=OrderDetailOut)
def cancel_order(
    order_id: int,
    user: UserModel = Depends(get_current_user),
    svc: OrderService = Depends(get_service),
):
    return svc.cancel_order(user, order_id)


@router.get("/{order_id}", response_model=OrderDetailOut)
def get_order(
    order_id: int,
    user: UserModel = Depends(get_current_user),
    svc: OrderService = Depends(get_service),
):
    return svc.get_order(user, order_id)
