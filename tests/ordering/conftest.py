import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def ordering_bed():
    from ordering.domain import ordering

    bed = DomainFixture(ordering)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(ordering_bed):
    with ordering_bed.domain_context():
        yield

        from protean import current_domain

        for _, provider in current_domain.providers.items():
            provider._data_reset()

        for _, broker in current_domain.brokers.items():
            broker._data_reset()

        current_domain.event_store.store._data_reset()


@pytest.fixture()
def catalog():
    from ordering.catalog import InMemoryCatalog, set_catalog

    catalog = InMemoryCatalog()
    set_catalog(catalog)
    return catalog


@pytest.fixture()
def profiles():
    from ordering.profiles import InMemoryProfileStore, set_profiles

    profiles = InMemoryProfileStore()
    set_profiles(profiles)
    return profiles


@pytest.fixture()
def gateway():
    from payments.gateway import set_gateway
    from payments.gateway.fake_adapter import FakeGateway

    gateway = FakeGateway()
    set_gateway(gateway)
    return gateway


@pytest.fixture()
def place_order():
    """Factory placing a seller order directly; returns the order id."""
    import json
    from uuid import uuid4

    from ordering.order.creation import PlaceOrder
    from protean import current_domain

    def _place(buyer_id="buyer-001", seller_id="farm-a", items=None, order_id=None):
        items = items or [{"product_id": "tomato", "quantity": 2, "unit_price": 60.0}]
        return current_domain.process(
            PlaceOrder(
                order_id=order_id or str(uuid4()),
                checkout_id=str(uuid4()),
                buyer_id=buyer_id,
                seller_id=seller_id,
                items=json.dumps(items),
                delivery_address="House 7, Road 3, Dhaka",
                delivery_phone="01711111111",
            ),
            asynchronous=False,
        )

    return _place
