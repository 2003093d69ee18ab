"""Shared builders for storefront tests."""

import threading
from decimal import Decimal

from protean import current_domain

from storefront.catalogue.feed.static import SEED_PRODUCTS, StaticSeedFeed
from storefront.catalogue.product import Product


def make_product(name="Widget", price=10.0, description="", category="Gadgets", **kwargs):
    return Product.create(name=name, price=price, description=description, category=category, **kwargs)


def store_product(name="Widget", price=10.0, **kwargs):
    product = make_product(name=name, price=price, **kwargs)
    current_domain.repository_for(Product).add(product)
    return product


def expected_total(items) -> float:
    """Independent cent-exact re-sum of cart lines."""
    total = sum((Decimal(str(item.unit_price)) * item.quantity for item in items), Decimal("0"))
    return float(total.quantize(Decimal("0.01")))


CUSTOMER = {"name": "X", "email": "x@y.com", "address": "1 St"}

BDD_SESSION_ID = "sess-bdd"


def cart_line(session_id, name):
    """The line of ``session_id``'s cart holding the product called ``name``."""
    from storefront.cart.session import resolve

    return next(item for item in resolve(session_id).items if item.name == name)


class RecordingFeed(StaticSeedFeed):
    """Static feed that remembers which threads read it."""

    def __init__(self, products=SEED_PRODUCTS) -> None:
        super().__init__(products)
        self.threads = []

    def fetch(self):
        self.threads.append(threading.get_ident())
        return super().fetch()

    @property
    def calls(self) -> int:
        return len(self.threads)
