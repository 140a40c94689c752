"""Pytest fixtures for farmdirect tests."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from farmdirect.auth.security import create_access_token, get_password_hash
from farmdirect.db.init import init_db
from farmdirect.db.session import Base, get_db
from farmdirect.main import app
from farmdirect.models.product import Product, ProductCategory, ProductStatus, ProductUnit
from farmdirect.models.user import FarmerProfile, User, UserRole

PASSWORD = "secret123"
# bcrypt is slow on purpose, hash once for every fixture user
PASSWORD_HASH = get_password_hash(PASSWORD)


@pytest.fixture
def engine():
    """In-memory SQLite shared by every session of a test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make_user(role=UserRole.CONSUMER, name=None, city="Campinas", email=None):
        counter["n"] += 1
        n = counter["n"]
        user = User(
            role=role,
            name=name or f"{role.value.title()} {n}",
            email=email or f"{role.value.lower()}{n}@mail.com",
            password_hash=PASSWORD_HASH,
            phone="19999990000",
            city=city,
        )
        if role == UserRole.FARMER:
            user.farmer_profile = FarmerProfile(
                property_name=f"Farm {n}",
                address=f"Rural Road {n}",
            )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_product(db):
    def _make_product(
        farmer,
        name="Tomato",
        price_cents=1000,
        stock_qty=5,
        category=ProductCategory.VEGETABLES,
        unit=ProductUnit.KG,
        status=ProductStatus.ACTIVE,
    ):
        product = Product(
            farmer_id=farmer.id,
            name=name,
            description=f"Fresh {name.lower()}",
            category=category,
            unit=unit,
            price_cents=price_cents,
            stock_qty=stock_qty,
            status=status,
        )
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    return _make_product


@pytest.fixture
def farmer(make_user):
    return make_user(UserRole.FARMER)


@pytest.fixture
def consumer(make_user):
    return make_user(UserRole.CONSUMER)


@pytest.fixture
def auth_headers():
    def _auth_headers(user):
        return {"Authorization": f"Bearer {create_access_token(user)}"}

    return _auth_headers


@pytest.fixture
def password():
    """Plain-text password of every user built by make_user."""
    return PASSWORD
