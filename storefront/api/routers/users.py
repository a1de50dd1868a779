from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user, require_admin
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.schemas import AddressIn, AddressOut, RoleUpdate, UserDetailOut, UserOut, UserUpdate
from storefront.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/address", response_model=AddressOut)
def add_address(
    payload: AddressIn,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return UserService(db).add_address(user, payload)


@router.get("/address", response_model=List[AddressOut])
def list_addresses(user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    return UserService(db).list_addresses(user)


@router.delete("/address/{address_id}", response_model=AddressOut)
def delete_address(
    address_id: int,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return UserService(db).delete_address(user, address_id)


@router.put("/", response_model=UserOut)
def update_user(
    payload: UserUpdate,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return UserService(db).update_user(user, payload)


# admin
@router.get("/", response_model=List[UserOut], dependencies=[Depends(require_admin)])
def list_users(skip: int = Query(0, ge=0), db: Session = Depends(get_db)):
    return UserService(db).list_users(skip)


@router.get("/{user_id}", response_model=UserDetailOut, dependencies=[Depends(require_admin)])
def get_user(user_id: int, db: Session = Depends(get_db)):
    return UserService(db).get_user(user_id)


@router.put("/{user_id}/role", response_model=UserOut, dependencies=[Depends(require_admin)])
def change_role(user_id: int, payload: RoleUpdate, db: Session = Depends(get_db)):
    return UserService(db).change_role(user_id, payload)
