import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from ordering.api.routes import cart_router, order_router, payment_router
from ordering.catalog import ProductSnapshot
from ordering.profiles import DeliveryInfo
from shared.exception_handlers import register_exception_handlers

BUYER = {"X-User-Id": "buyer-001"}


@pytest.fixture()
def client():
    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(cart_router)
    app.include_router(order_router)
    app.include_router(payment_router)
    return TestClient(app)


@pytest.fixture()
def marketplace(catalog, profiles, gateway):
    catalog.add_product(ProductSnapshot(product_id="tomato", seller_id="farm-a", price=60.0))
    catalog.add_product(ProductSnapshot(product_id="honey", seller_id="farm-b", price=450.0))
    profiles.set_delivery_info("buyer-001", DeliveryInfo(address="House 7, Road 3, Dhaka", phone="01711111111"))
    return catalog


@pytest.fixture()
def checked_out(client, marketplace):
    """Check out one tomato order and one honey order; returns ``{seller_id: order_id}``."""
    client.post("/cart/items", json={"product_id": "tomato", "quantity": 2}, headers=BUYER)
    client.post("/cart/items", json={"product_id": "honey", "quantity": 1}, headers=BUYER)
    response = client.post("/cart/checkout", headers=BUYER)
    assert response.status_code == 201

    orders = client.get("/orders", headers=BUYER).json()["orders"]
    return {o["seller_id"]: o["order_id"] for o in orders}
