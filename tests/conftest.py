import os

# Settings are read at import time
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("INTERNAL_ADMIN_SECRET", "test-internal-secret")
os.environ["RATE_LIMIT_ENABLED"] = "false"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from charnoks.core.hashing import hash_password
from charnoks.core.jwt import create_access_token
from charnoks.database import Base, get_db
from charnoks.main import app
from charnoks.models.products import Product
from charnoks.models.users import User, ROLE_OWNER, ROLE_WORKER


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def add_user(session_factory, email, role=ROLE_WORKER, password="s3cret-pass"):
    with session_factory() as db:
        user = User(
            email=email,
            password_hash=hash_password(password),
            display_name=email.split("@")[0],
            role=role,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user.id


def add_product(session_factory, product_id, name, price, stock, category="general"):
    with session_factory() as db:
        db.add(
            Product(
                id=product_id,
                name=name,
                price=Decimal(price),
                stock=stock,
                category=category,
            )
        )
        db.commit()
    return product_id


def stock_levels(session_factory):
    with session_factory() as db:
        return {p.id: p.stock for p in db.query(Product).all()}


def auth_header(user_id, role):
    token = create_access_token(user_id, role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def worker(session_factory):
    user_id = add_user(session_factory, "worker@charnoks.com", ROLE_WORKER)
    return {"id": user_id, "headers": auth_header(user_id, ROLE_WORKER)}


@pytest.fixture
def owner(session_factory):
    user_id = add_user(session_factory, "owner@charnoks.com", ROLE_OWNER)
    return {"id": user_id, "headers": auth_header(user_id, ROLE_OWNER)}
