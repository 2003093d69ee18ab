"""BDD tests for checkout."""

from helpers import BDD_SESSION_ID, CUSTOMER
from protean.exceptions import InvalidOperationError
from pytest_bdd import parsers, scenarios, then, when

from storefront.cart.session import process_for_session, resolve
from storefront.checkout.checkout import Checkout

scenarios("features/checkout.feature")


@when("the shopper checks out", target_fixture="outcome")
def shopper_checks_out():
    try:
        receipt = process_for_session(
            Checkout(
                session_id=BDD_SESSION_ID,
                customer_name=CUSTOMER["name"],
                customer_email=CUSTOMER["email"],
                customer_address=CUSTOMER["address"],
            )
        )
    except InvalidOperationError as exc:
        return {"receipt": None, "exc": exc}
    return {"receipt": receipt, "exc": None}


@then(parsers.cfparse("a receipt is issued with subtotal {subtotal:f}, tax {tax:f} and grand total {grand_total:f}"))
def receipt_issued(outcome, subtotal, tax, grand_total):
    receipt = outcome["receipt"]
    assert receipt is not None
    assert receipt.subtotal == subtotal
    assert receipt.tax == tax
    assert receipt.grand_total == grand_total


@then("the cart is empty")
def cart_is_empty():
    cart = resolve(BDD_SESSION_ID)
    assert cart.items == []
    assert cart.total == 0.0


@then("checkout is refused because the cart is empty")
def checkout_refused(outcome):
    assert outcome["exc"].args[0] == {"_entity": "Cart is empty"}
