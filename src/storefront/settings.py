"""Runtime settings read from the environment.

Session identity is an explicit parameter everywhere in the domain; the default
below is only ever supplied by the HTTP boundary when a request carries none.
"""

import os

DEFAULT_SESSION_ID = "default-session"
DEFAULT_PAGE_SIZE = 12

LOG_DIR = os.getenv("LOG_DIR", "logs")

CATALOG_FEED = os.getenv("CATALOG_FEED", "fakestore").lower()
CATALOG_FEED_URL = os.getenv("CATALOG_FEED_URL", "https://fakestoreapi.com/products")
CATALOG_FEED_TIMEOUT = float(os.getenv("CATALOG_FEED_TIMEOUT", "10"))


def init_catalog_on_startup() -> bool:
    """Whether the app should populate an empty catalog when it starts."""
    return os.getenv("STOREFRONT_INIT_CATALOG", "true").lower() not in ("0", "false", "no")
