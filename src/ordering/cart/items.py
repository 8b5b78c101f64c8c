"""Cart item management — commands and handler.

Carts are addressed by buyer: the first item a buyer adds creates their cart.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from ordering.cart.cart import ShoppingCart
from ordering.catalog import get_catalog
from ordering.domain import ordering


@ordering.command(part_of="ShoppingCart")
class AddToCart:
    buyer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@ordering.command(part_of="ShoppingCart")
class UpdateCartQuantity:
    buyer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    new_quantity = Integer(required=True, min_value=1)


@ordering.command(part_of="ShoppingCart")
class RemoveFromCart:
    buyer_id = Identifier(required=True)
    product_id = Identifier(required=True)


def _existing_cart(buyer_id) -> ShoppingCart:
    cart = current_domain.repository_for(ShoppingCart).find_for_buyer(buyer_id)
    if cart is None:
        raise ObjectNotFoundError(f"Buyer {buyer_id} has no cart")
    return cart


@ordering.command_handler(part_of=ShoppingCart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        product = get_catalog().get_product(command.product_id)
        if product is None:
            raise ValidationError({"product_id": ["Product is not available"]})

        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.find_for_buyer(command.buyer_id) or ShoppingCart.create(buyer_id=command.buyer_id)
        cart.add_item(
            product_id=command.product_id,
            quantity=command.quantity,
        )
        repo.add(cart)
        return str(cart.id)

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = _existing_cart(command.buyer_id)
        cart.update_item_quantity(
            product_id=command.product_id,
            new_quantity=command.new_quantity,
        )
        repo.add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = _existing_cart(command.buyer_id)
        cart.remove_item(product_id=command.product_id)
        repo.add(cart)
