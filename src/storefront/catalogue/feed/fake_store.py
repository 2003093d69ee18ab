"""Fake Store API feed adapter.

Reads ``GET /products`` from https://fakestoreapi.com (or any service with the
same shape) and maps each record onto catalog field names.
"""

import requests
import structlog

from storefront.catalogue.feed.port import CatalogFeed, CatalogFeedUnavailable, FeedProduct

logger = structlog.get_logger(__name__)


class FakeStoreFeed(CatalogFeed):
    """Catalog feed backed by the Fake Store REST API."""

    name = "fakestore"

    def __init__(self, url: str, timeout: float = 10.0, session: requests.Session | None = None) -> None:
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch(self) -> list[FeedProduct]:
        try:
            response = self.session.get(self.url, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as exc:
            logger.warning("Catalog feed request failed", url=self.url, error=str(exc))
            raise CatalogFeedUnavailable(f"Could not read catalog feed at {self.url}: {exc}") from exc

        if not isinstance(payload, list):
            raise CatalogFeedUnavailable(f"Catalog feed at {self.url} did not return a list of products")

        try:
            return [self._to_feed_product(record) for record in payload]
        except (KeyError, TypeError, ValueError) as exc:
            raise CatalogFeedUnavailable(f"Malformed product record in catalog feed: {exc}") from exc

    @staticmethod
    def _to_feed_product(record: dict) -> FeedProduct:
        rating = record.get("rating")
        return FeedProduct(
            name=record["title"],
            price=float(record["price"]),
            description=record.get("description") or "",
            category=record.get("category") or "",
            image=record.get("image") or "",
            rating=(
                {"rate": float(rating.get("rate", 0)), "count": int(rating.get("count", 0))}
                if isinstance(rating, dict)
                else None
            ),
        )
