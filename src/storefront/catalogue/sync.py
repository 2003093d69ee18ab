"""Catalog population from the upstream feed.

``initialize_catalog`` runs at startup and must never take the process down:
an unreachable feed falls back to the static seed set. ``sync_catalog`` is an
explicit operator action, so a feed failure is surfaced to the caller and the
existing catalog is left as it was.

Reading the feed is blocking network I/O. ``fetch_feed_records`` touches no
domain state, so async callers can run it in a worker thread and then hand the
records to ``sync_catalog``.
"""

import structlog

from storefront.catalogue.catalog import count_products, replace_catalog
from storefront.catalogue.feed import CatalogFeedUnavailable, get_feed
from storefront.catalogue.feed.static import StaticSeedFeed

logger = structlog.get_logger(__name__)


def fetch_feed_records(feed=None) -> list[dict]:
    """Fetch and map the feed's products without storing them."""
    feed = feed or get_feed()
    return [product.to_dict() for product in feed.fetch()]


def preview_feed() -> list[dict]:
    return fetch_feed_records()


def sync_catalog(records: list[dict] | None = None) -> int:
    """Replace the whole catalog with the feed's current products.

    ``records`` are used as-is when already fetched; otherwise the feed is read.
    """
    if records is None:
        records = fetch_feed_records()
    count = replace_catalog(records)
    logger.info("Catalog synced from feed", feed=get_feed().name, product_count=count)
    return count


def initialize_catalog() -> int:
    """Populate an empty catalog; returns how many products were inserted."""
    existing = count_products()
    if existing:
        logger.info("Catalog already populated", product_count=existing)
        return 0

    feed = get_feed()
    try:
        count = replace_catalog(fetch_feed_records(feed))
        logger.info("Catalog initialized from feed", feed=feed.name, product_count=count)
        return count
    except CatalogFeedUnavailable as exc:
        logger.warning("Catalog feed unavailable, falling back to seed products", feed=feed.name, error=str(exc))

    try:
        count = replace_catalog(fetch_feed_records(StaticSeedFeed()))
    except Exception:
        logger.exception("Could not initialize fallback seed products")
        return 0

    logger.info("Catalog initialized from seed products", product_count=count)
    return count
