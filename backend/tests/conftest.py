from __future__ import annotations

import itertools
from datetime import datetime, timedelta, timezone

import bcrypt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from flowershop.core.db import Base, get_db
from flowershop.core.security import create_access_token
from flowershop.main import app
from flowershop.models import Category, Order, OrderStatus, Product, User, UserType
from flowershop.routes.deps import get_clock

NOW = datetime(2026, 10, 17, 12, 0, 0, tzinfo=timezone.utc)
PASSWORD = "secret123"
# low cost factor keeps the suite fast
PASSWORD_HASH = bcrypt.hashpw(PASSWORD.encode(), bcrypt.gensalt(rounds=4)).decode()


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


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
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def clock():
    return FakeClock(NOW)


@pytest.fixture
def client(session_factory, clock):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    counter = itertools.count(1)

    def _make(user_type: UserType = UserType.USER, **fields) -> User:
        n = next(counter)
        values = {
            "name": f"Name{n}",
            "surname": f"Surname{n}",
            "username": f"user{n}",
            "email": f"user{n}@example.com",
            "password": PASSWORD_HASH,
            "user_type": user_type,
        }
        values.update(fields)
        user = User(**values)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def make_category(db):
    counter = itertools.count(1)

    def _make(name: str | None = None) -> Category:
        category = Category(name=name or f"Category{next(counter)}")
        db.add(category)
        db.commit()
        db.refresh(category)
        return category

    return _make


@pytest.fixture
def make_product(db, make_category):
    counter = itertools.count(1)

    def _make(price: float = 100, name: str | None = None, category: Category | None = None) -> Product:
        product = Product(
            name=name or f"Flower{next(counter)}",
            description="fresh",
            price=price,
            image=None,
            category=category or make_category(),
        )
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    return _make


@pytest.fixture
def make_order(db):
    def _make(
        user: User,
        product: Product,
        quantity: int = 1,
        age: timedelta = timedelta(minutes=5),
        status: OrderStatus = OrderStatus.NEW,
        address: str = "Main street 1",
    ) -> Order:
        order = Order(
            user_id=user.id,
            product_id=product.id,
            price=product.price * quantity,
            status=status,
            order_date=NOW - age,
            address=address,
            quantity=quantity,
        )
        db.add(order)
        db.commit()
        db.refresh(order)
        return order

    return _make


def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.email)}"}


@pytest.fixture
def auth():
    return auth_headers
