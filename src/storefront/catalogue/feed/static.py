"""Static seed feed: the fixed product set used when the upstream feed is down."""

from storefront.catalogue.feed.port import CatalogFeed, FeedProduct

SEED_PRODUCTS = (
    FeedProduct(
        name="Wireless Headphones",
        price=99.99,
        description="Premium wireless headphones with noise cancellation",
        category="Electronics",
        image="https://images.unsplash.com/photo-1505740420928-5e560c06d30e?w=400&h=300&fit=crop",
    ),
    FeedProduct(
        name="Smart Watch",
        price=199.99,
        description="Feature-rich smartwatch with health monitoring",
        category="Electronics",
        image="https://images.unsplash.com/photo-1523275335684-37898b6baf30?w=400&h=300&fit=crop",
    ),
)


class StaticSeedFeed(CatalogFeed):
    """Feed that always returns a fixed product list. Useful for tests and offline runs."""

    name = "static"

    def __init__(self, products=SEED_PRODUCTS) -> None:
        self.products = list(products)

    def fetch(self) -> list[FeedProduct]:
        return list(self.products)
