"""Domain events for the ShoppingCart aggregate."""

from protean.fields import Identifier, Integer, Text

from ordering.domain import ordering


@ordering.event(part_of="ShoppingCart")
class CartItemAdded:
    """A product was added to the cart, or its quantity increased."""

    __version__ = 1

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)


@ordering.event(part_of="ShoppingCart")
class CartQuantityUpdated:
    """The quantity of a cart item was changed."""

    __version__ = 1

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@ordering.event(part_of="ShoppingCart")
class CartItemRemoved:
    """An item was removed from the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    product_id = Identifier(required=True)


@ordering.event(part_of="ShoppingCart")
class CheckoutStarted:
    """Cart items were tagged for a new checkout attempt."""

    __version__ = 1

    cart_id = Identifier(required=True)
    checkout_id = Identifier(required=True)
    item_ids = Text(required=True)  # JSON list of cart item ids


@ordering.event(part_of="ShoppingCart")
class CartCheckedOut:
    """Ordered quantities were taken out of the cart after all seller orders were created."""

    __version__ = 1

    cart_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    item_ids = Text(required=True)  # JSON list of removed cart item ids
    reduced_item_ids = Text(default="[]")  # JSON list of items that kept a remainder
    released_count = Integer(default=0)
