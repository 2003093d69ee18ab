"""Catalog feed port (abstract interface).

The upstream feed supplies the product records the catalog is populated and
re-synced from. Adapters translate the upstream shape into ``FeedProduct``.
"""

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass


class CatalogFeedUnavailable(Exception):
    """The upstream feed could not be reached or returned unusable data."""


@dataclass(frozen=True)
class FeedProduct:
    """A product record as delivered by a feed, already mapped to catalog field names."""

    name: str
    price: float
    description: str = ""
    category: str = ""
    image: str = ""
    rating: dict | None = None

    def to_dict(self) -> dict:
        return asdict(self)


class CatalogFeed(ABC):
    """Abstract catalog feed interface."""

    name: str = "abstract"

    @abstractmethod
    def fetch(self) -> list[FeedProduct]:
        """Return every product the feed currently offers.

        Raises ``CatalogFeedUnavailable`` when the feed cannot be read.
        """
        ...
