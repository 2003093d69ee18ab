"""Checkout: turn a session's cart into a receipt and empty the cart.

The handler runs in two explicit phases: snapshot the cart into a Receipt,
then clear the cart. Both aggregates are persisted in the handler's unit of
work, and the command is dispatched under the session's mutation lock, so no
other change to the cart can land between the snapshot and the clear.
"""

from uuid import uuid4

import structlog
from protean import handle
from protean.exceptions import InvalidOperationError, ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.checkout.receipt import CustomerInfo, Receipt
from storefront.domain import storefront

logger = structlog.get_logger(__name__)

ORDER_ID_LENGTH = 12
MAX_ORDER_ID_ATTEMPTS = 5

_CUSTOMER_FIELDS = ("customer_name", "customer_email", "customer_address")


@storefront.command(part_of="Receipt")
class Checkout:
    session_id = Identifier(required=True)
    customer_name = String(required=True, max_length=255)
    customer_email = String(required=True, max_length=254)
    customer_address = Text(required=True)


def generate_order_id() -> str:
    """A short, shareable order reference: 12 upper-case hex characters."""
    return uuid4().hex[:ORDER_ID_LENGTH].upper()


def _unused_order_id(repo) -> str:
    for _ in range(MAX_ORDER_ID_ATTEMPTS):
        order_id = generate_order_id()
        try:
            repo.get(order_id)
        except ObjectNotFoundError:
            return order_id
        logger.warning("Generated order id already in use, retrying", order_id=order_id)
    raise InvalidOperationError(
        {"_entity": f"Could not allocate a unique order id after {MAX_ORDER_ID_ATTEMPTS} attempts"}
    )


def _customer_from(command) -> CustomerInfo:
    missing = {
        field_name: ["This field is required"]
        for field_name in _CUSTOMER_FIELDS
        if not (getattr(command, field_name) or "").strip()
    }
    if missing:
        raise ValidationError(missing)

    return CustomerInfo(
        name=command.customer_name.strip(),
        email=command.customer_email.strip(),
        address=command.customer_address.strip(),
    )


@storefront.command_handler(part_of=Receipt)
class CheckoutHandler:
    @handle(Checkout)
    def checkout(self, command):
        customer = _customer_from(command)

        carts = current_domain.repository_for(ShoppingCart)
        try:
            cart = carts.get(command.session_id)
        except ObjectNotFoundError:
            cart = None
        if cart is None or cart.is_empty():
            raise InvalidOperationError({"_entity": "Cart is empty"})

        receipts = current_domain.repository_for(Receipt)

        # Phase 1: snapshot
        receipt = Receipt.issue(_unused_order_id(receipts), cart, customer)

        # Phase 2: clear
        cart.clear(receipt.order_id)

        receipts.add(receipt)
        carts.add(cart)

        logger.info(
            "Checkout completed",
            session_id=str(command.session_id),
            order_id=receipt.order_id,
            item_count=len(receipt.items),
            grand_total=receipt.grand_total,
        )
        return receipt


def get_receipt(order_id: str) -> Receipt:
    """Load an issued receipt; raises ``ObjectNotFoundError`` when there is none."""
    return current_domain.repository_for(Receipt).get(order_id)
