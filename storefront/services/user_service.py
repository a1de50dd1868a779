from typing import List

from sqlalchemy.orm import Session

from storefront.data.models.address import AddressModel
from storefront.data.models.user import UserModel
from storefront.domain.errors import BadRequestError, ErrorCode, NotFoundError
from storefront.domain.schemas import AddressIn, AddressOut, RoleUpdate, UserDetailOut, UserOut, UserUpdate
from storefront.repos.address_repo import AddressRepo
from storefront.repos.user_repo import UserRepo
from storefront.utils.logging import get_logger
from storefront.utils.settings import PAGE_SIZE

logger = get_logger(__name__)


class UserService:
    def __init__(self, db: Session):
        self.repo = UserRepo(db)
        self.addresses = AddressRepo(db)

    # addresses
    def add_address(self, user: UserModel, payload: AddressIn) -> AddressOut:
        address = self.addresses.create_address(
            AddressModel(user_id=user.id, **payload.model_dump())
        )
        return AddressOut.model_validate(address)

    def list_addresses(self, user: UserModel) -> List[AddressOut]:
        return [AddressOut.model_validate(a) for a in self.addresses.list_by_user(user.id)]

    def delete_address(self, user: UserModel, address_id: int) -> AddressOut:
        address = self.addresses.get_user_address(address_id, user.id)
        if not address:
            raise NotFoundError("Address not found", ErrorCode.ADDRESS_NOT_FOUND)

        deleted = AddressOut.model_validate(address)
        self.addresses.delete_address(address)
        return deleted

    def _owned_address_id(self, user: UserModel, address_id: int) -> int:
        address = self.addresses.get_address(address_id)
        if not address:
            raise NotFoundError("Address not found", ErrorCode.ADDRESS_NOT_FOUND)
        if address.user_id != user.id:
            raise BadRequestError("Address does not belong to user", ErrorCode.ADDRESS_DOES_NOT_BELONG)
        return address.id

    # profile
    def update_user(self, user: UserModel, payload: UserUpdate) -> UserOut:
        data = payload.model_dump(exclude_unset=True)

        if data.get("default_shipping_address_id") is not None:
            user.default_shipping_address_id = self._owned_address_id(user, data["default_shipping_address_id"])

        if data.get("default_billing_address_id") is not None:
            user.default_billing_address_id = self._owned_address_id(user, data["default_billing_address_id"])

        if data.get("name"):
            user.name = data["name"]

        return UserOut.model_validate(self.repo.save(user))

    # admin
    def list_users(self, skip: int = 0) -> List[UserOut]:
        return [UserOut.model_validate(u) for u in self.repo.list_users(skip, PAGE_SIZE)]

    def get_user(self, user_id: int) -> UserDetailOut:
        user = self.repo.get_user_with_addresses(user_id)
        if not user:
            raise NotFoundError("User not found", ErrorCode.USER_NOT_FOUND)
        return UserDetailOut.model_validate(user)

    def change_role(self, user_id: int, payload: RoleUpdate) -> UserOut:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFoundError("User not found", ErrorCode.USER_NOT_FOUND)

        user.role = payload.role.value
        saved = self.repo.save(user)
        logger.info(f"User {user_id} role changed to {payload.role.value}")
        return UserOut.model_validate(saved)
