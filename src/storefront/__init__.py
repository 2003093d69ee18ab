"""Storefront: session carts, checkout receipts and a searchable product catalog."""

__version__ = "1.0.0"
