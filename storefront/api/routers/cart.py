from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.schemas import CartItemIn, CartItemOut, CartQuantityIn
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


@router.post("/", response_model=CartItemOut)
def add_item(
    payload: CartItemIn,
    response: Response,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    item, created = CartService(db).add_item(user, payload)
    if created:
        response.status_code = status.HTTP_201_CREATED
    return item


@router.get("/", response_model=List[CartItemOut])
def get_cart(user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    return CartService(db).get_cart(user)


@router.put("/{item_id}", response_model=CartItemOut)
def change_quantity(
    item_id: int,
    payload: CartQuantityIn,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return CartService(db).change_quantity(user, item_id, payload)


@router.delete("/{item_id}", response_model=CartItemOut)
def remove_item(
    item_id: int,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return CartService(db).remove_item(user, item_id)
