"""FastAPI routes for the storefront: catalog, cart, checkout and receipts."""

from fastapi import APIRouter
from fastapi.concurrency import run_in_threadpool

from storefront.api.schemas import (
    AddToCartRequest,
    CartResponse,
    CheckoutRequest,
    CountResponse,
    ProductPageResponse,
    ReceiptResponse,
    ReplaceCatalogRequest,
    SyncResponse,
    UpdateCartQuantityRequest,
)
from storefront.cart.items import AddToCart, RemoveFromCart, UpdateCartQuantity
from storefront.cart.session import process_for_session, resolve, session_key
from storefront.catalogue.catalog import query_products, replace_catalog
from storefront.catalogue.sync import fetch_feed_records, preview_feed, sync_catalog
from storefront.checkout.checkout import Checkout, get_receipt
from storefront.settings import DEFAULT_PAGE_SIZE
from storefront.utils.logging import add_context

# ---------------------------------------------------------------------------
# Product Router
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/api/products", tags=["products"])


@product_router.get("", response_model=ProductPageResponse)
async def list_products(
    search: str = "",
    category: str = "",
    sort_by: str = "name",
    sort_order: str = "asc",
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
) -> ProductPageResponse:
    result = query_products(
        search=search,
        category=category,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        page_size=limit,
    )
    return ProductPageResponse.from_page(result)


@product_router.put("", response_model=CountResponse)
async def replace_products(body: ReplaceCatalogRequest) -> CountResponse:
    count = replace_catalog([product.model_dump() for product in body.products])
    return CountResponse(count=count)


@product_router.post("/sync", response_model=SyncResponse)
async def sync_products() -> SyncResponse:
    records = await run_in_threadpool(fetch_feed_records)
    return SyncResponse(count=sync_catalog(records))


@product_router.get("/feed")
async def feed_products() -> list[dict]:
    """Products currently offered by the upstream feed, without storing them."""
    return await run_in_threadpool(preview_feed)


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/api/cart", tags=["cart"])


@cart_router.get("", response_model=CartResponse)
async def view_cart(session_id: str | None = None) -> CartResponse:
    return CartResponse.from_cart(resolve(session_id))


@cart_router.post("", response_model=CartResponse)
async def add_to_cart(body: AddToCartRequest) -> CartResponse:
    session_id = session_key(body.session_id)
    add_context(session_id=session_id)
    command = AddToCart(
        session_id=session_id,
        product_id=body.product_id,
        quantity=body.quantity,
    )
    return CartResponse.from_cart(process_for_session(command))


@cart_router.post("/checkout", response_model=ReceiptResponse)
async def checkout(body: CheckoutRequest) -> ReceiptResponse:
    session_id = session_key(body.session_id)
    add_context(session_id=session_id)
    command = Checkout(
        session_id=session_id,
        customer_name=body.customer_info.name,
        customer_email=body.customer_info.email,
        customer_address=body.customer_info.address,
    )
    return ReceiptResponse.from_receipt(process_for_session(command))


@cart_router.patch("/{item_id}", response_model=CartResponse)
async def update_cart_quantity(item_id: str, body: UpdateCartQuantityRequest) -> CartResponse:
    session_id = session_key(body.session_id)
    add_context(session_id=session_id)
    command = UpdateCartQuantity(
        session_id=session_id,
        item_id=item_id,
        quantity=body.quantity,
    )
    return CartResponse.from_cart(process_for_session(command))


@cart_router.delete("/{item_id}", response_model=CartResponse)
async def remove_from_cart(item_id: str, session_id: str | None = None) -> CartResponse:
    session_id = session_key(session_id)
    add_context(session_id=session_id)
    command = RemoveFromCart(session_id=session_id, item_id=item_id)
    return CartResponse.from_cart(process_for_session(command))


# ---------------------------------------------------------------------------
# Receipt Router
# ---------------------------------------------------------------------------
receipt_router = APIRouter(prefix="/api/receipts", tags=["receipts"])


@receipt_router.get("/{order_id}", response_model=ReceiptResponse)
async def read_receipt(order_id: str) -> ReceiptResponse:
    return ReceiptResponse.from_receipt(get_receipt(order_id))
