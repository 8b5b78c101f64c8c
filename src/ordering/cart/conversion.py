"""Checkout tagging — commands that bracket order creation on the cart side."""

import json

from protean import handle
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from ordering.cart.cart import ShoppingCart
from ordering.domain import ordering


@ordering.command(part_of="ShoppingCart")
class BeginCheckout:
    cart_id = Identifier(required=True)
    item_ids = Text(required=True)  # JSON list of cart item ids


@ordering.command(part_of="ShoppingCart")
class CompleteCheckout:
    cart_id = Identifier(required=True)
    ordered_quantities = Text(required=True)  # JSON object of cart item id -> quantity ordered


@ordering.command_handler(part_of=ShoppingCart)
class CheckoutTaggingHandler:
    @handle(BeginCheckout)
    def begin_checkout(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)
        tags = cart.begin_checkout(json.loads(command.item_ids))
        repo.add(cart)
        return tags

    @handle(CompleteCheckout)
    def complete_checkout(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)
        cart.complete_checkout(json.loads(command.ordered_quantities))
        repo.add(cart)
