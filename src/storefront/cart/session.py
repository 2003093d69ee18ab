"""Session resolver: maps a session key to its cart and serialises its mutations.

Reads never persist anything: a session without a stored cart resolves to an
unsaved empty cart. Every command that mutates a session's cart (checkout
included) is dispatched through ``process_for_session``, which holds that
session's lock from the first read until the unit of work has committed.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from threading import Lock, RLock

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.settings import DEFAULT_SESSION_ID

_registry_guard = Lock()


@dataclass
class _SessionLock:
    lock: RLock = field(default_factory=RLock)
    holders: int = 0


# Only sessions with a holder or a waiter have an entry
_session_locks: dict[str, _SessionLock] = {}


def session_key(session_id: str | None) -> str:
    """Normalise an inbound session id, substituting the default for blanks."""
    if session_id is None:
        return DEFAULT_SESSION_ID
    session_id = str(session_id).strip()
    return session_id or DEFAULT_SESSION_ID


def _claim(key: str) -> _SessionLock:
    with _registry_guard:
        entry = _session_locks.get(key)
        if entry is None:
            entry = _session_locks[key] = _SessionLock()
        entry.holders += 1
        return entry


def _release(key: str, entry: _SessionLock) -> None:
    with _registry_guard:
        entry.holders -= 1
        if entry.holders == 0:
            del _session_locks[key]


def active_sessions() -> int:
    """Number of sessions whose lock is currently held or awaited."""
    with _registry_guard:
        return len(_session_locks)


@contextmanager
def session_lock(session_id: str | None) -> Iterator[str]:
    """Hold the mutation lock of one session; yields the normalised key."""
    key = session_key(session_id)
    entry = _claim(key)
    try:
        with entry.lock:
            yield key
    finally:
        _release(key, entry)


def process_for_session(command):
    """Process a session-scoped command while holding that session's lock."""
    with session_lock(command.session_id):
        return current_domain.process(command, asynchronous=False)


def find_cart(session_id: str | None) -> ShoppingCart | None:
    try:
        return current_domain.repository_for(ShoppingCart).get(session_key(session_id))
    except ObjectNotFoundError:
        return None


def resolve(session_id: str | None) -> ShoppingCart:
    """Return the session's cart, or an unsaved empty cart when it has none."""
    key = session_key(session_id)
    return find_cart(key) or ShoppingCart.create(key)
