"""Application tests for the session resolver and per-session serialisation."""

import threading

import pytest
from helpers import CUSTOMER, expected_total, store_product
from protean import current_domain
from protean.exceptions import ObjectNotFoundError

from storefront.cart import session
from storefront.cart.cart import ShoppingCart
from storefront.cart.items import AddToCart
from storefront.cart.session import active_sessions, find_cart, process_for_session, resolve, session_key, session_lock
from storefront.checkout.checkout import Checkout
from storefront.checkout.receipt import Receipt
from storefront.domain import storefront
from storefront.settings import DEFAULT_SESSION_ID


class TestSessionKey:
    def test_missing_or_blank_uses_default(self):
        assert session_key(None) == DEFAULT_SESSION_ID
        assert session_key("") == DEFAULT_SESSION_ID
        assert session_key("   ") == DEFAULT_SESSION_ID

    def test_key_is_trimmed(self):
        assert session_key(" sess-9 ") == "sess-9"


class TestResolve:
    def test_unknown_session_gets_an_empty_cart(self):
        cart = resolve("sess-new")
        assert cart.session_id == "sess-new"
        assert cart.items == []
        assert cart.total == 0.0

    def test_reading_does_not_persist(self):
        resolve("sess-new")
        assert find_cart("sess-new") is None
        with pytest.raises(ObjectNotFoundError):
            current_domain.repository_for(ShoppingCart).get("sess-new")

    def test_returns_stored_cart(self):
        product = store_product(price=2.5)
        process_for_session(AddToCart(session_id="sess-1", product_id=product.id, quantity=2))
        assert resolve("sess-1").total == 5.0

    def test_default_session(self):
        product = store_product(price=1.0)
        process_for_session(AddToCart(session_id=DEFAULT_SESSION_ID, product_id=product.id, quantity=1))
        assert resolve(None).total == 1.0
        assert resolve("").total == 1.0


def _run_threads(*targets):
    """Run each target in its own thread inside a domain context; returns raised errors."""
    errors = []
    start = threading.Barrier(len(targets))

    def run(target):
        try:
            with storefront.domain_context():
                start.wait()
                target()
        except Exception as exc:  # noqa: BLE001
            errors.append(exc)

    threads = [threading.Thread(target=run, args=(target,)) for target in targets]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    return errors


class TestSessionLocks:
    def test_session_lock_is_reentrant_and_yields_key(self):
        with session_lock(None) as key:
            assert key == DEFAULT_SESSION_ID
            with session_lock(key):
                assert active_sessions() == 1

    def test_distinct_sessions_get_distinct_locks(self):
        with session_lock("sess-a"), session_lock("sess-b"):
            assert active_sessions() == 2
            assert session._session_locks["sess-a"].lock is not session._session_locks["sess-b"].lock

    def test_released_locks_are_dropped(self):
        for n in range(1000):
            with session_lock(f"sess-{n}"):
                pass
        assert active_sessions() == 0

    def test_lock_is_dropped_when_the_body_raises(self):
        with pytest.raises(RuntimeError):
            with session_lock("sess-boom"):
                raise RuntimeError("boom")
        assert active_sessions() == 0

    def test_commands_leave_no_locks_behind(self):
        product = store_product()
        for n in range(20):
            process_for_session(AddToCart(session_id=f"sess-{n}", product_id=product.id, quantity=1))
        assert active_sessions() == 0


class TestConcurrentMutations:
    def test_concurrent_adds_to_one_session_are_not_lost(self):
        product = store_product(price=1.25)
        workers = 8
        adds_per_worker = 5

        def shopper():
            for _ in range(adds_per_worker):
                process_for_session(AddToCart(session_id="sess-busy", product_id=product.id, quantity=1))

        assert _run_threads(*[shopper] * workers) == []

        cart = find_cart("sess-busy")
        assert len(cart.items) == 1
        assert cart.items[0].quantity == workers * adds_per_worker
        assert cart.total == expected_total(cart.items) == 50.0
        assert active_sessions() == 0

    def test_checkout_racing_adds_loses_nothing(self):
        product = store_product(price=1.25)
        process_for_session(AddToCart(session_id="sess-race", product_id=product.id, quantity=1))
        workers = 4
        adds_per_worker = 10

        def shopper():
            for _ in range(adds_per_worker):
                process_for_session(AddToCart(session_id="sess-race", product_id=product.id, quantity=1))

        def checkout():
            process_for_session(
                Checkout(
                    session_id="sess-race",
                    customer_name=CUSTOMER["name"],
                    customer_email=CUSTOMER["email"],
                    customer_address=CUSTOMER["address"],
                )
            )

        assert _run_threads(checkout, *[shopper] * workers) == []

        added = 1 + workers * adds_per_worker
        receipts = current_domain.repository_for(Receipt)._dao.query.all().items
        assert len(receipts) == 1
        receipt = receipts[0]
        cart = resolve("sess-race")

        on_receipt = sum(line.quantity for line in receipt.items)
        in_cart = sum(item.quantity for item in cart.items)
        assert on_receipt >= 1
        assert on_receipt + in_cart == added
        assert receipt.subtotal + cart.total == pytest.approx(1.25 * added)
        assert receipt.subtotal == expected_total(receipt.items)
        assert cart.total == expected_total(cart.items)
