"""Storefront HTTP API package."""

from storefront.api.routes import cart_router, product_router, receipt_router

__all__ = ["product_router", "cart_router", "receipt_router"]
