import pytest
from fastapi.testclient import TestClient

from microservices.persistence_microservice import MemoryPersistence
from schemas.cart_schemas import ProductRef
from services.cart_service import CartStore


def make_product(product_id="p1", price=100, count_in_stock=10, name=None):
    return ProductRef(
        product_id=product_id,
        name=name or f"Product {product_id}",
        image=f"/uploads/{product_id}.png",
        price=price,
        count_in_stock=count_in_stock,
    )


@pytest.fixture()
def persistence():
    return MemoryPersistence()


@pytest.fixture()
def cart(persistence):
    return CartStore(persistence)


@pytest.fixture()
def strict_cart(persistence):
    return CartStore(persistence, strict=True)


@pytest.fixture()
def slots():
    # cart id -> memory slot, shared by every request of a test
    return {}


@pytest.fixture()
def client(slots):
    from routes.cart_route import get_cart_store
    from server import app

    def memory_cart_store(cart_id: str):
        slot = slots.setdefault(cart_id, MemoryPersistence())
        return CartStore(slot)

    app.dependency_overrides[get_cart_store] = memory_cart_store
    yield TestClient(app)
    app.dependency_overrides.clear()
