import os

# point the module level engine at sqlite before the package is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")

from contextlib import contextmanager
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from storefront.api.deps import get_lock_service, get_notification_service, get_session_scope
from storefront.data import models  # noqa: F401
from storefront.data.database import Base, enable_sqlite_foreign_keys, get_db, make_session_scope
from storefront.data.models import AddressModel, CartItemModel, ProductModel, UserModel
from storefront.domain.enums import Role
from storefront.domain.errors import ConflictError, ErrorCode
from storefront.main import create_app
from storefront.utils.security import create_access_token, hash_password


class FakeLockService:
    """In-process stand-in for the Redis checkout lock."""

    def __init__(self):
        self.held = set()
        self.acquired = []

    @contextmanager
    def checkout_lock(self, user_id, ttl=30):
        if user_id in self.held:
            raise ConflictError("Checkout already in progress", ErrorCode.CHECKOUT_IN_PROGRESS)
        self.held.add(user_id)
        self.acquired.append(user_id)
        try:
            yield
        finally:
            self.held.discard(user_id)


class FakeNotificationService:
    def __init__(self):
        self.sent = []

    def send_order_notification(self, user_id, order_id, status):
        self.sent.append((user_id, order_id, status))
        return True


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'storefront.db'}",
        connect_args={"check_same_thread": False},
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def scope(session_factory):
    return make_session_scope(session_factory)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def lock_service():
    return FakeLockService()


@pytest.fixture
def notifier():
    return FakeNotificationService()


def build_app(session_factory, lock_service, notifier):
    """App wired to ``session_factory`` for requests and checkout alike."""
    app = create_app(init_db=False)
    scope = make_session_scope(session_factory)

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_scope] = lambda: scope
    app.dependency_overrides[get_lock_service] = lambda: lock_service
    app.dependency_overrides[get_notification_service] = lambda: notifier
    return app


@pytest.fixture
def app(session_factory, lock_service, notifier):
    return build_app(session_factory, lock_service, notifier)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


# =====================================================
# data helpers
# =====================================================
def make_user(db, email="user@example.com", role=Role.USER, password="secret123", name="Test User"):
    user = UserModel(name=name, email=email, password=hash_password(password), role=role.value)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_product(db, name="Tea", price="10.00", tags="tea,india", description="Assam tea"):
    product = ProductModel(name=name, description=description, price=Decimal(price), tags=tags)
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


def add_to_cart(db, user, product, quantity):
    item = CartItemModel(user_id=user.id, product_id=product.id, quantity=quantity)
    db.add(item)
    db.commit()
    db.refresh(item)
    return item


def make_address(db, user, line_one="12 Tea Street", line_two=None, city="Kolkata", country="India", pincode="700001"):
    address = AddressModel(
        user_id=user.id,
        line_one=line_one,
        line_two=line_two,
        city=city,
        country=country,
        pincode=pincode,
    )
    db.add(address)
    db.commit()
    db.refresh(address)
    return address


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def user(db):
    return make_user(db)


@pytest.fixture
def admin(db):
    return make_user(db, email="admin@example.com", role=Role.ADMIN, name="Admin")


@pytest.fixture
def user_headers(user):
    return auth_headers(user)


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)
