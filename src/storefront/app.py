"""Storefront FastAPI application.

Usage:
    uvicorn storefront.app:create_app --factory --host 0.0.0.0 --port 8000 --reload

The app is built by a factory rather than at import time: Protean imports
every module under the domain package while initialising, this one included.
"""

from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from storefront import __version__, settings
from storefront.api import cart_router, product_router, receipt_router
from storefront.api.errors import register_error_handlers
from storefront.api.schemas import HealthResponse
from storefront.catalogue.sync import initialize_catalog
from storefront.domain import storefront
from storefront.utils.logging import add_context, clear_context, get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):  # noqa: ARG001
    if settings.init_catalog_on_startup():
        with storefront.domain_context():
            initialize_catalog()
    yield


def create_app(init_domain: bool = True) -> FastAPI:
    if init_domain:
        storefront.init()

    app = FastAPI(
        title="Storefront API",
        description="Product catalog, session carts and checkout",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        """Push the Protean domain context and per-request log context."""
        clear_context()
        add_context(request_path=request.url.path, method=request.method)
        with storefront.domain_context():
            response = await call_next(request)
        return response

    register_error_handlers(app)

    app.include_router(product_router)
    app.include_router(cart_router)
    app.include_router(receipt_router)

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(timestamp=datetime.now(UTC))

    @app.get("/")
    async def root():
        return {
            "message": "Storefront API",
            "version": __version__,
            "endpoints": {
                "products": product_router.prefix,
                "cart": cart_router.prefix,
                "receipts": receipt_router.prefix,
                "health": "/health",
            },
        }

    logger.info("Storefront app created", version=__version__)
    return app
