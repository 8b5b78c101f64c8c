"""Shopping Cart aggregate (CQRS) — the buyer's long-lived, multi-seller cart.

One cart per buyer. Items are unique per product; adding a product that is
already in the cart increases its quantity.

Checkout tagging: before orders are created, each item handed to a checkout
attempt is tagged with a ``checkout_id``. Tags survive a failed attempt so a
retry regroups the same items under the same checkout and derives the same
order ids. Items are removed only once every order of the attempt exists.
"""

import json
from datetime import UTC, datetime
from uuid import uuid4

from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer

from ordering.cart.events import (
    CartCheckedOut,
    CartItemAdded,
    CartItemRemoved,
    CartQuantityUpdated,
    CheckoutStarted,
)
from ordering.domain import ordering


@ordering.entity(part_of="ShoppingCart")
class CartItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    checkout_id = Identifier()  # Set while the item belongs to a checkout attempt
    added_at = DateTime()


@ordering.aggregate
class ShoppingCart:
    buyer_id = Identifier(required=True)
    items = HasMany(CartItem)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, buyer_id):
        now = datetime.now(UTC)
        return cls(
            buyer_id=buyer_id,
            created_at=now,
            updated_at=now,
        )

    def _find_item(self, product_id):
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, product_id, quantity):
        """Add a product to the cart (or increase quantity if already present)."""
        existing = self._find_item(product_id)
        now = datetime.now(UTC)

        if existing:
            existing.quantity += quantity
            item_id = str(existing.id)
            new_quantity = existing.quantity
        else:
            item = CartItem(
                product_id=product_id,
                quantity=quantity,
                added_at=now,
            )
            self.add_items(item)
            item_id = str(item.id)
            new_quantity = quantity

        self.updated_at = now

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                item_id=item_id,
                product_id=str(product_id),
                quantity=new_quantity,
            )
        )

    def update_item_quantity(self, product_id, new_quantity):
        """Set the quantity of a product already in the cart."""
        item = self._find_item(product_id)
        if item is None:
            raise ValidationError({"product_id": ["Product is not in the cart"]})

        previous_quantity = item.quantity
        item.quantity = new_quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartQuantityUpdated(
                cart_id=str(self.id),
                item_id=str(item.id),
                previous_quantity=previous_quantity,
                new_quantity=new_quantity,
            )
        )

    def remove_item(self, product_id):
        """Remove a product from the cart."""
        item = self._find_item(product_id)
        if item is None:
            raise ValidationError({"product_id": ["Product is not in the cart"]})

        self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemRemoved(
                cart_id=str(self.id),
                item_id=str(item.id),
                product_id=str(product_id),
            )
        )

    # -------------------------------------------------------------------
    # Checkout tagging
    # -------------------------------------------------------------------
    def begin_checkout(self, item_ids):
        """Tag the given items with a checkout id and return ``{item_id: checkout_id}``.

        Items still carrying a tag from an earlier, unfinished attempt keep it.
        All untagged items share one fresh checkout id.
        """
        wanted = {str(item_id) for item_id in item_ids}
        selected = [i for i in self.items if str(i.id) in wanted]
        if not selected:
            raise ValidationError({"items": ["No cart items selected for checkout"]})

        untagged = [i for i in selected if not i.checkout_id]
        if untagged:
            checkout_id = str(uuid4())
            for item in untagged:
                item.checkout_id = checkout_id
            self.updated_at = datetime.now(UTC)

            self.raise_(
                CheckoutStarted(
                    cart_id=str(self.id),
                    checkout_id=checkout_id,
                    item_ids=json.dumps([str(i.id) for i in untagged]),
                )
            )

        return {str(i.id): str(i.checkout_id) for i in selected}

    def complete_checkout(self, ordered_quantities):
        """Take ordered quantities out of the cart and release every tag.

        An item is removed once its order holds the whole quantity. If the
        buyer added more while a checkout was unfinished, only the ordered
        part is taken and the rest stays in the cart.
        """
        ordered = {str(item_id): quantity for item_id, quantity in ordered_quantities.items()}
        removed, reduced = [], []
        for item in list(self.items):
            quantity = ordered.get(str(item.id), 0)
            if quantity <= 0:
                continue
            if quantity >= item.quantity:
                removed.append(item)
                self.remove_items(item)
            else:
                item.quantity -= quantity
                reduced.append(item)

        released = 0
        for item in self.items:
            if item.checkout_id:
                item.checkout_id = None
                released += 1

        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartCheckedOut(
                cart_id=str(self.id),
                buyer_id=str(self.buyer_id),
                item_ids=json.dumps([str(i.id) for i in removed]),
                reduced_item_ids=json.dumps([str(i.id) for i in reduced]),
                released_count=released,
            )
        )


@ordering.repository(part_of=ShoppingCart)
class ShoppingCartRepository:
    def find_for_buyer(self, buyer_id) -> ShoppingCart | None:
        """Return the buyer's cart with its items loaded, or None."""
        cart = self._dao.query.filter(buyer_id=str(buyer_id)).all().first
        if cart is None:
            return None
        return self.get(cart.id)
