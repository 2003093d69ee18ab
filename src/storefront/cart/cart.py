"""Shopping cart aggregate: the per-session collection of line items.

The session key is the cart's identity, so there is at most one cart per
session. ``total`` is derived: every mutating method finishes by re-summing
all lines, and nothing else writes it.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from storefront.cart.events import CartCheckedOut, CartItemAdded, CartItemRemoved, CartQuantityUpdated
from storefront.domain import storefront
from storefront.shared import money


@storefront.entity(part_of="ShoppingCart")
class CartItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)  # Captured when first added
    name = String(max_length=255)
    category = String(max_length=100)
    image = String(max_length=500)
    position = Integer(default=0)
    added_at = DateTime()

    @property
    def subtotal(self) -> float:
        return float(money.line_total(self.unit_price, self.quantity))


def _require_quantity(quantity, field_name="quantity"):
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise ValidationError({field_name: ["Quantity must be a whole number of at least 1"]})


@storefront.aggregate
class ShoppingCart:
    session_id = Identifier(identifier=True)
    items = HasMany(CartItem)
    total = Float(default=0.0)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def lines_must_be_unique_by_product(self):
        product_ids = [str(item.product_id) for item in self.items]
        if len(product_ids) != len(set(product_ids)):
            raise ValidationError({"items": ["A product may appear on only one cart line"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, session_id):
        now = datetime.now(UTC)
        return cls(session_id=session_id, total=0.0, created_at=now, updated_at=now)

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def ordered_items(self) -> list[CartItem]:
        """Lines in the order they were first added."""
        return sorted(self.items, key=lambda item: item.position or 0)

    def find_item(self, item_id) -> CartItem:
        item = next((i for i in self.items if str(i.id) == str(item_id)), None)
        if item is None:
            raise ObjectNotFoundError({"_entity": f"Cart item {item_id} not found"})
        return item

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    def is_empty(self) -> bool:
        return not self.items

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def add_item(self, product, quantity):
        """Add ``quantity`` of ``product``, growing its existing line if there is one.

        Repeating the same call keeps accumulating; it is not idempotent.
        """
        _require_quantity(quantity)

        now = datetime.now(UTC)
        existing = next((i for i in self.items if str(i.product_id) == str(product.id)), None)

        if existing:
            existing.quantity += quantity
            item = existing
        else:
            item = CartItem(
                product_id=product.id,
                quantity=quantity,
                unit_price=float(money.to_money(product.price)),
                name=product.name,
                category=product.category,
                image=product.image,
                position=max((i.position or 0 for i in self.items), default=0) + 1,
                added_at=now,
            )
            self.add_items(item)

        self._recompute_total()
        self.updated_at = now

        self.raise_(
            CartItemAdded(
                session_id=str(self.session_id),
                item_id=str(item.id),
                product_id=str(product.id),
                quantity=quantity,
                unit_price=item.unit_price,
                cart_total=self.total,
            )
        )
        return item

    def update_item_quantity(self, item_id, new_quantity):
        """Set a line's quantity to exactly ``new_quantity``.

        Zero is rejected rather than treated as a removal; use ``remove_item``.
        """
        _require_quantity(new_quantity, "new_quantity")
        item = self.find_item(item_id)

        previous_quantity = item.quantity
        item.quantity = new_quantity
        self._recompute_total()
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartQuantityUpdated(
                session_id=str(self.session_id),
                item_id=str(item.id),
                previous_quantity=previous_quantity,
                new_quantity=new_quantity,
                cart_total=self.total,
            )
        )

    def remove_item(self, item_id):
        item = self.find_item(item_id)

        self.remove_items(item)
        self._recompute_total()
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemRemoved(
                session_id=str(self.session_id),
                item_id=str(item_id),
                cart_total=self.total,
            )
        )

    def clear(self, order_id):
        """Empty the cart after its contents were captured on receipt ``order_id``."""
        item_count = len(self.items)
        subtotal = self.total

        for item in list(self.items):
            self.remove_items(item)
        self._recompute_total()
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartCheckedOut(
                session_id=str(self.session_id),
                order_id=order_id,
                item_count=item_count,
                subtotal=subtotal,
            )
        )

    def _recompute_total(self):
        # Always a full re-sum over the lines, never an incremental adjustment
        self.total = float(money.sum_lines((item.unit_price, item.quantity) for item in self.items))
