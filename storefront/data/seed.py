# storefront/data/seed.py
from sqlalchemy.orm import sessionmaker

from storefront.data.models.user import UserModel
from storefront.domain.enums import Role
from storefront.repos.user_repo import UserRepo
from storefront.utils.logging import get_logger
from storefront.utils.security import hash_password
from storefront.utils.settings import ADMIN_EMAIL, ADMIN_NAME, ADMIN_PASSWORD

logger = get_logger(__name__)


def seed_admin(session_factory: sessionmaker, email=ADMIN_EMAIL, password=ADMIN_PASSWORD, name=ADMIN_NAME):
    """Creates the bootstrap admin account once; a no-op when it is not configured."""
    if not email or not password:
        return None

    db = session_factory()
    try:
        repo = UserRepo(db)
        existing = repo.get_by_email(email)
        if existing:
            return existing

        admin = repo.create_user(
            UserModel(
                name=name,
                email=email,
                password=hash_password(password),
                role=Role.ADMIN.value,
            )
        )
        logger.info(f"Seeded admin user {admin.id}")
        return admin
    finally:
        db.close()
