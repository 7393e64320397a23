from decimal import Decimal

import fakeredis
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import shop_checkout.data.models  # noqa: F401
from shop_checkout.data.database import Base
from shop_checkout.domain.errors import NotFound
from shop_checkout.domain.schemas import Cart, CartItem
from shop_checkout.repos.cart_repo import CartRepo
from shop_checkout.repos.order_repo import OrderRepo
from shop_checkout.services.observer import OrderObserver


PRODUCTS = {
    "p-a": {"id": "p-a", "title": "Item A", "price": 10, "images": ["a.png"]},
    "p-b": {"id": "p-b", "title": "Item B", "price": 5, "images": []},
    "p-c": {"id": "p-c", "title": "Item C", "price": "19.99", "images": ["c1.png", "c2.png"]},
}


class StubCatalog:
    """Stands in for ProductClient; serves PRODUCTS and records lookups."""

    def __init__(self, products=None):
        self.products = PRODUCTS if products is None else products
        self.calls = []

    def fetch_product(self, product_id):
        self.calls.append(product_id)
        if product_id not in self.products:
            raise NotFound(f"Product {product_id} not found")
        return self.products[product_id]


class RecordingObserver(OrderObserver):
    def __init__(self):
        self.completed = []
        self.rejected = []
        self.clear_failures = []
        self.status_changes = []

    def checkout_completed(self, order):
        self.completed.append(order)

    def checkout_rejected(self, owner_key, reason):
        self.rejected.append((owner_key, reason))

    def cart_clear_failed(self, owner_key, error):
        self.clear_failures.append((owner_key, error))

    def status_changed(self, order):
        self.status_changes.append(order)


def make_item(product_id="p-a", price="10", quantity=1, size=None, name=None):
    return CartItem(
        product_id=product_id,
        name=name or f"Product {product_id}",
        price=Decimal(price),
        quantity=quantity,
        size=size,
    )


def put_cart(cart_repo, owner_key, items):
    cart = Cart(owner_key=owner_key, items=list(items))
    cart_repo.set(owner_key, cart)
    return cart


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)()
    yield session
    session.close()


@pytest.fixture
def redis_client():
    return fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture
def cart_repo(redis_client):
    return CartRepo(client=redis_client, ttl=0)


@pytest.fixture
def order_repo(db):
    return OrderRepo(db)


@pytest.fixture
def observer():
    return RecordingObserver()


@pytest.fixture
def catalog():
    return StubCatalog()
