"""Application tests for cart item commands."""

import pytest
from ordering.cart.cart import ShoppingCart
from ordering.cart.items import AddToCart, RemoveFromCart, UpdateCartQuantity
from ordering.catalog import ProductSnapshot
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError


@pytest.fixture(autouse=True)
def products(catalog):
    catalog.add_product(ProductSnapshot(product_id="carrot", seller_id="farm-a", price=40.0))
    catalog.add_product(ProductSnapshot(product_id="milk", seller_id="farm-b", price=90.0))


def _process(command):
    return current_domain.process(command, asynchronous=False)


def _cart(buyer_id="buyer-001"):
    return current_domain.repository_for(ShoppingCart).find_for_buyer(buyer_id)


class TestAddToCart:
    def test_first_item_creates_the_cart(self):
        assert _cart() is None
        cart_id = _process(AddToCart(buyer_id="buyer-001", product_id="carrot", quantity=2))

        cart = _cart()
        assert str(cart.id) == cart_id
        assert cart.items[0].quantity == 2

    def test_one_cart_per_buyer(self):
        first = _process(AddToCart(buyer_id="buyer-001", product_id="carrot", quantity=1))
        second = _process(AddToCart(buyer_id="buyer-001", product_id="milk", quantity=1))
        assert first == second
        assert len(_cart().items) == 2

    def test_carts_are_per_buyer(self):
        _process(AddToCart(buyer_id="buyer-001", product_id="carrot", quantity=1))
        _process(AddToCart(buyer_id="buyer-002", product_id="milk", quantity=1))
        assert [i.product_id for i in _cart("buyer-002").items] == ["milk"]

    def test_unknown_product_rejected(self):
        with pytest.raises(ValidationError):
            _process(AddToCart(buyer_id="buyer-001", product_id="unicorn", quantity=1))


class TestUpdateAndRemove:
    def test_update_quantity(self):
        _process(AddToCart(buyer_id="buyer-001", product_id="carrot", quantity=1))
        _process(UpdateCartQuantity(buyer_id="buyer-001", product_id="carrot", new_quantity=6))
        assert _cart().items[0].quantity == 6

    def test_remove(self):
        _process(AddToCart(buyer_id="buyer-001", product_id="carrot", quantity=1))
        _process(RemoveFromCart(buyer_id="buyer-001", product_id="carrot"))
        assert _cart().items == []

    def test_buyer_without_cart(self):
        with pytest.raises(ObjectNotFoundError):
            _process(RemoveFromCart(buyer_id="buyer-404", product_id="carrot"))
