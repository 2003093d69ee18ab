"""Receipt aggregate: the immutable record of one completed checkout.

A receipt is issued exactly once, from a cart, by ``Receipt.issue``. It keeps
copies of the cart's lines (with the product detail captured on them), never a
reference to the cart itself, and has no methods that change it afterwards.
"""

from datetime import UTC, datetime

from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text, ValueObject

from storefront.domain import storefront
from storefront.shared import money


@storefront.value_object(part_of="Receipt")
class CustomerInfo:
    """Contact details supplied at checkout."""

    name: String(required=True, max_length=255)
    email: String(required=True, max_length=254)
    address: Text(required=True)


@storefront.entity(part_of="Receipt")
class ReceiptLine:
    product_id = Identifier(required=True)
    name = String(max_length=255)
    category = String(max_length=100)
    image = String(max_length=500)
    unit_price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    line_total = Float(required=True, min_value=0.0)
    position = Integer(default=0)


@storefront.event(part_of="Receipt")
class ReceiptIssued:
    """A checkout completed and its receipt was recorded."""

    __version__ = 1

    order_id = String(required=True)
    session_id = Identifier(required=True)
    item_count = Integer(required=True)
    subtotal = Float(required=True)
    tax = Float(required=True)
    grand_total = Float(required=True)
    placed_at = DateTime(required=True)


@storefront.aggregate
class Receipt:
    order_id = Identifier(identifier=True)
    session_id = Identifier(required=True)
    placed_at = DateTime(required=True)
    items = HasMany(ReceiptLine)
    subtotal = Float(required=True, min_value=0.0)
    tax_rate = Float(required=True, min_value=0.0)
    tax = Float(required=True, min_value=0.0)
    grand_total = Float(required=True, min_value=0.0)
    customer = ValueObject(CustomerInfo, required=True)

    @classmethod
    def issue(cls, order_id, cart, customer, placed_at=None):
        """Snapshot ``cart`` into a new receipt. The cart itself is not touched."""
        placed_at = placed_at or datetime.now(UTC)
        subtotal = money.to_money(cart.total)

        receipt = cls(
            order_id=order_id,
            session_id=cart.session_id,
            placed_at=placed_at,
            subtotal=float(subtotal),
            tax_rate=float(money.TAX_RATE),
            tax=float(money.tax_on(subtotal)),
            grand_total=float(money.gross(subtotal)),
            customer=customer,
        )

        for position, item in enumerate(cart.ordered_items(), start=1):
            receipt.add_items(
                ReceiptLine(
                    product_id=item.product_id,
                    name=item.name,
                    category=item.category,
                    image=item.image,
                    unit_price=item.unit_price,
                    quantity=item.quantity,
                    line_total=float(money.line_total(item.unit_price, item.quantity)),
                    position=position,
                )
            )

        receipt.raise_(
            ReceiptIssued(
                order_id=order_id,
                session_id=str(cart.session_id),
                item_count=len(receipt.items),
                subtotal=receipt.subtotal,
                tax=receipt.tax,
                grand_total=receipt.grand_total,
                placed_at=placed_at,
            )
        )
        return receipt

    def ordered_items(self) -> list[ReceiptLine]:
        return sorted(self.items, key=lambda line: line.position or 0)
