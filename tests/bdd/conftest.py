"""Shared BDD fixtures and step definitions for the storefront."""

import pytest
from helpers import BDD_SESSION_ID, cart_line, store_product
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then, when

from storefront.cart.items import AddToCart, UpdateCartQuantity
from storefront.cart.session import process_for_session, resolve


@pytest.fixture()
def products():
    """Products stored by Given steps, by name."""
    return {}


@pytest.fixture()
def error():
    """Container for a captured domain error."""
    return {"exc": None}


@given(parsers.cfparse('a product "{name}" priced at {price:f}'))
def a_product(products, name, price):
    products[name] = store_product(name=name, price=price)


@given(parsers.cfparse('{quantity:d} of "{name}" are in the cart'))
@when(parsers.cfparse('{quantity:d} of "{name}" are added to the cart'))
def add_to_cart(products, quantity, name):
    process_for_session(AddToCart(session_id=BDD_SESSION_ID, product_id=products[name].id, quantity=quantity))


@given(parsers.cfparse('the "{name}" line quantity is changed to {quantity:d}'))
@when(parsers.cfparse('the "{name}" line quantity is set to {quantity:d}'))
def set_quantity(name, quantity, error):
    try:
        item = cart_line(BDD_SESSION_ID, name)
        process_for_session(UpdateCartQuantity(session_id=BDD_SESSION_ID, item_id=item.id, quantity=quantity))
    except ValidationError as exc:
        error["exc"] = exc


@then(parsers.cfparse('the "{name}" line has quantity {quantity:d}'))
def line_has_quantity(name, quantity):
    assert cart_line(BDD_SESSION_ID, name).quantity == quantity


@then(parsers.cfparse("the cart total is {total:f}"))
def cart_total_is(total):
    assert resolve(BDD_SESSION_ID).total == pytest.approx(total)
