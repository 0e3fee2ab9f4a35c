"""Pytest fixtures for storefront tests."""

import os

# Settings are read at import time; point them at an in-memory database
# before anything from storefront is imported.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from storefront.core.auth import create_access_token, hash_password
from storefront.database import get_session
from storefront.main import app
from storefront.models.product import Product
from storefront.models.user import User


@pytest.fixture
def engine():
    """Fresh in-memory database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(engine):
    """Test client whose requests use the per-test database."""

    def override_get_session():
        with Session(engine) as s:
            yield s

    app.dependency_overrides[get_session] = override_get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session):
    """Create a user row. Password is always 'secret123'."""
    counter = {"n": 0}

    def _make(role: str = "customer", is_active: bool = True, email: str | None = None) -> User:
        counter["n"] += 1
        user = User(
            first_name="Dana",
            last_name="Levi",
            email=email or f"user{counter['n']}@mail.com",
            password_hash=hash_password("secret123"),
            phone="0501234567",
            role=role,
            is_active=is_active,
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return _make


@pytest.fixture
def make_product(session):
    """Create a product row with in_stock derived from stock_quantity."""

    def _make(
        name: str = "Linen Throw",
        price: float = 50.0,
        stock_quantity: int = 10,
        category: str = "textiles",
        featured: bool = False,
    ) -> Product:
        product = Product(
            name=name,
            description="A description long enough for validation.",
            price=price,
            category=category,
            stock_quantity=stock_quantity,
            in_stock=stock_quantity > 0,
            featured=featured,
            image_url=f"https://cdn.example.com/{name.replace(' ', '-').lower()}.png",
        )
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    return _make


@pytest.fixture
def customer(make_user):
    return make_user()


@pytest.fixture
def admin(make_user):
    return make_user(role="admin")


def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
def customer_headers(customer):
    return auth_headers(customer)


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


SHIPPING = {
    "first_name": "Dana",
    "last_name": "Levi",
    "street": "1 Herzl St",
    "city": "Tel Aviv",
    "zip_code": "6100000",
    "phone": "0501234567",
}
