"""Storefront management CLI.

Usage:
    storefront-manage seed                 # Replace the catalog from the feed and list it
    storefront-manage seed --feed static   # ... from the built-in seed products
    storefront-manage setup-db             # Create tables on SQL providers
    storefront-manage drop-db              # Drop tables on SQL providers
"""

import argparse
import sys


def seed_catalog(feed_name=None):
    """Replace the catalog with the feed's products and print what was inserted."""
    from storefront import settings
    from storefront.catalogue.catalog import query_products
    from storefront.catalogue.feed import CatalogFeedUnavailable, set_feed
    from storefront.catalogue.feed.fake_store import FakeStoreFeed
    from storefront.catalogue.feed.static import StaticSeedFeed
    from storefront.catalogue.sync import sync_catalog
    from storefront.domain import storefront

    storefront.init()
    if feed_name == StaticSeedFeed.name:
        set_feed(StaticSeedFeed())
    elif feed_name == FakeStoreFeed.name:
        set_feed(FakeStoreFeed(url=settings.CATALOG_FEED_URL, timeout=settings.CATALOG_FEED_TIMEOUT))

    with storefront.domain_context():
        print("Replacing catalog from feed...")
        try:
            count = sync_catalog()
        except CatalogFeedUnavailable as exc:
            print(f"Error seeding catalog: {exc}")
            return 1

        print(f"Seeded catalog with {count} products")

        page = query_products(page_size=max(count, 1))
        print("\nInserted products:")
        for index, product in enumerate(page.products, start=1):
            print(f"{index}. {product.name} - ${product.price:.2f} ({product.category})")
    return 0


def setup_database():
    from storefront.domain import storefront
    from storefront.utils.db import setup_db

    print("Initializing storefront domain...")
    storefront.init()
    created = setup_db(storefront)
    print(f"Schema ready on providers: {', '.join(created) or 'none (no SQL providers configured)'}")
    return 0


def drop_database():
    from storefront.domain import storefront
    from storefront.utils.db import drop_db

    print("Initializing storefront domain...")
    storefront.init()
    dropped = drop_db(storefront)
    print(f"Schema dropped on providers: {', '.join(dropped) or 'none (no SQL providers configured)'}")
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(description="Storefront management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    seed_parser = subparsers.add_parser("seed", help="Replace the catalog from the product feed")
    seed_parser.add_argument(
        "--feed",
        choices=["fakestore", "static"],
        help="Feed to read from (default: the configured CATALOG_FEED)",
    )

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    args = parser.parse_args(argv)

    if args.command == "seed":
        return seed_catalog(args.feed)
    if args.command == "setup-db":
        return setup_database()
    if args.command == "drop-db":
        return drop_database()

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
