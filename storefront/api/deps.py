# storefront/api/deps.py
from functools import lru_cache

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from storefront.data.database import SessionScope, get_db, session_scope
from storefront.data.models.user import UserModel
from storefront.domain.enums import Role
from storefront.domain.errors import UnauthorizedError
from storefront.services.auth_service import AuthService
from storefront.services.lock_service import LockService
from storefront.services.notification_service import NotificationService

bearer_scheme = HTTPBearer(auto_error=False)


def get_session_scope() -> SessionScope:
    return session_scope


@lru_cache
def get_lock_service() -> LockService:
    return LockService()


def get_notification_service() -> NotificationService:
    return NotificationService()


def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> UserModel:
    token = credentials.credentials if credentials else None
    user = AuthService(db).authenticate(token)
    request.state.user_id = user.id
    return user


def require_admin(user: UserModel = Depends(get_current_user)) -> UserModel:
    if user.role != Role.ADMIN.value:
        raise UnauthorizedError()
    return user
