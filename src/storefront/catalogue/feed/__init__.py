"""Catalog feed factory.

Provides get_feed() / set_feed() to swap implementations:
- FakeStoreFeed reading the upstream HTTP API (default)
- StaticSeedFeed with the built-in seed products
"""

from storefront import settings
from storefront.catalogue.feed.fake_store import FakeStoreFeed
from storefront.catalogue.feed.port import CatalogFeed, CatalogFeedUnavailable, FeedProduct
from storefront.catalogue.feed.static import StaticSeedFeed

__all__ = [
    "CatalogFeed",
    "CatalogFeedUnavailable",
    "FeedProduct",
    "get_feed",
    "reset_feed",
    "set_feed",
]

_current_feed: CatalogFeed | None = None


def _configured_feed() -> CatalogFeed:
    if settings.CATALOG_FEED == StaticSeedFeed.name:
        return StaticSeedFeed()
    return FakeStoreFeed(url=settings.CATALOG_FEED_URL, timeout=settings.CATALOG_FEED_TIMEOUT)


def get_feed() -> CatalogFeed:
    """Return the current catalog feed, building the configured one on first use."""
    global _current_feed
    if _current_feed is None:
        _current_feed = _configured_feed()
    return _current_feed


def set_feed(feed: CatalogFeed) -> None:
    """Override the active catalog feed (useful for tests)."""
    global _current_feed
    _current_feed = feed


def reset_feed() -> None:
    """Reset to the configured feed."""
    global _current_feed
    _current_feed = None
