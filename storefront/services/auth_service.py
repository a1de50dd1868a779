# storefront/services/auth_service.py
from sqlalchemy.orm import Session

from storefront.data.models.user import UserModel
from storefront.domain.enums import Role
from storefront.domain.errors import BadRequestError, ErrorCode, UnauthorizedError
from storefront.domain.schemas import LoginIn, LoginOut, SignupIn, UserOut
from storefront.repos.user_repo import UserRepo
from storefront.utils.logging import get_logger
from storefront.utils.security import create_access_token, decode_access_token, hash_password, verify_password

logger = get_logger(__name__)


class AuthService:
    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def sign_up(self, payload: SignupIn, role: Role = Role.USER) -> UserOut:
        if self.repo.get_by_email(payload.email):
            raise BadRequestError("User already exists", ErrorCode.USER_ALREADY_EXISTS)

        user = self.repo.create_user(
            UserModel(
                name=payload.name,
                email=payload.email,
                password=hash_password(payload.password),
                role=role.value,
            )
        )
        logger.info(f"User {user.id} signed up", extra={"user_id": user.id})
        return UserOut.model_validate(user)

    def login(self, payload: LoginIn) -> LoginOut:
        user = self.repo.get_by_email(payload.email)
        if not user:
            raise BadRequestError("User not found", ErrorCode.USER_NOT_FOUND)

        if not verify_password(payload.password, user.password):
            raise BadRequestError("Incorrect password", ErrorCode.INCORRECT_PASSWORD)

        return LoginOut(user=UserOut.model_validate(user), token=create_access_token(user.id))

    def authenticate(self, token: str | None) -> UserModel:
        """Resolves a bearer token to its user or raises ``UnauthorizedError``."""
        if not token:
            raise UnauthorizedError()

        user_id = decode_access_token(token)
        if user_id is None:
            raise UnauthorizedError()

        user = self.repo.get_user(user_id)
        if not user:
            raise UnauthorizedError()
        return user
