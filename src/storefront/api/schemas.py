"""Pydantic request/response schemas for the storefront API.

These are external contracts (anti-corruption layer), separate from
internal Protean commands and aggregates.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from storefront.settings import DEFAULT_SESSION_ID


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------
class RatingSchema(BaseModel):
    rate: float | None = None
    count: int = 0


class ProductInput(BaseModel):
    name: str
    price: float = Field(ge=0)
    description: str = ""
    category: str = ""
    image: str = ""
    rating: RatingSchema | None = None


class ProductSchema(ProductInput):
    id: str

    @classmethod
    def from_product(cls, product) -> "ProductSchema":
        rating = None
        if product.rating is not None:
            rating = RatingSchema(rate=product.rating.rate, count=product.rating.count or 0)
        return cls(
            id=str(product.id),
            name=product.name,
            price=product.price,
            description=product.description or "",
            category=product.category or "",
            image=product.image or "",
            rating=rating,
        )


class PaginationSchema(BaseModel):
    current_page: int
    total_pages: int
    total_items: int
    has_next: bool
    has_prev: bool


class FiltersSchema(BaseModel):
    search: str
    category: str
    sort_by: str
    sort_order: str


class ProductPageResponse(BaseModel):
    products: list[ProductSchema]
    pagination: PaginationSchema
    filters: FiltersSchema

    @classmethod
    def from_page(cls, page) -> "ProductPageResponse":
        return cls(
            products=[ProductSchema.from_product(product) for product in page.products],
            pagination=PaginationSchema(
                current_page=page.pagination.current_page,
                total_pages=page.pagination.total_pages,
                total_items=page.pagination.total_items,
                has_next=page.pagination.has_next,
                has_prev=page.pagination.has_prev,
            ),
            filters=FiltersSchema(**page.filters),
        )


class ReplaceCatalogRequest(BaseModel):
    products: list[ProductInput]


class CountResponse(BaseModel):
    count: int


class SyncResponse(BaseModel):
    message: str = "Products synced successfully"
    count: int


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
# Quantities are left unconstrained here: the cart aggregate owns that rule
# and reports it as an invalid-argument error.
class AddToCartRequest(BaseModel):
    session_id: str = DEFAULT_SESSION_ID
    product_id: str
    quantity: int = 1

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "session_id": "sess-001",
                    "product_id": "5f2b8c9e4d3a1b0c7e6f5a4d",
                    "quantity": 2,
                }
            ]
        }
    }


class UpdateCartQuantityRequest(BaseModel):
    session_id: str = DEFAULT_SESSION_ID
    quantity: int


class CartItemSchema(BaseModel):
    id: str
    product_id: str
    name: str | None = None
    category: str | None = None
    image: str | None = None
    unit_price: float
    quantity: int
    subtotal: float


class CartResponse(BaseModel):
    session_id: str
    items: list[CartItemSchema]
    item_count: int
    total: float

    @classmethod
    def from_cart(cls, cart) -> "CartResponse":
        return cls(
            session_id=str(cart.session_id),
            items=[
                CartItemSchema(
                    id=str(item.id),
                    product_id=str(item.product_id),
                    name=item.name,
                    category=item.category,
                    image=item.image,
                    unit_price=item.unit_price,
                    quantity=item.quantity,
                    subtotal=item.subtotal,
                )
                for item in cart.ordered_items()
            ],
            item_count=cart.item_count,
            total=cart.total,
        )


# ---------------------------------------------------------------------------
# Checkout
# ---------------------------------------------------------------------------
# Presence of the customer fields is checked by the checkout command, so they
# are optional at this layer.
class CustomerInfoSchema(BaseModel):
    name: str | None = None
    email: str | None = None
    address: str | None = None


class CheckoutRequest(BaseModel):
    session_id: str = DEFAULT_SESSION_ID
    customer_info: CustomerInfoSchema = Field(default_factory=CustomerInfoSchema)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "session_id": "sess-001",
                    "customer_info": {
                        "name": "Jane Doe",
                        "email": "jane@example.com",
                        "address": "123 Main St, Springfield",
                    },
                }
            ]
        }
    }


class ReceiptLineSchema(BaseModel):
    product_id: str
    name: str | None = None
    category: str | None = None
    image: str | None = None
    unit_price: float
    quantity: int
    line_total: float


class ReceiptResponse(BaseModel):
    order_id: str
    session_id: str
    placed_at: datetime
    items: list[ReceiptLineSchema]
    subtotal: float
    tax_rate: float
    tax: float
    grand_total: float
    customer_info: CustomerInfoSchema

    @classmethod
    def from_receipt(cls, receipt) -> "ReceiptResponse":
        return cls(
            order_id=str(receipt.order_id),
            session_id=str(receipt.session_id),
            placed_at=receipt.placed_at,
            items=[
                ReceiptLineSchema(
                    product_id=str(line.product_id),
                    name=line.name,
                    category=line.category,
                    image=line.image,
                    unit_price=line.unit_price,
                    quantity=line.quantity,
                    line_total=line.line_total,
                )
                for line in receipt.ordered_items()
            ],
            subtotal=receipt.subtotal,
            tax_rate=receipt.tax_rate,
            tax=receipt.tax,
            grand_total=receipt.grand_total,
            customer_info=CustomerInfoSchema(
                name=receipt.customer.name,
                email=receipt.customer.email,
                address=receipt.customer.address,
            ),
        )


# ---------------------------------------------------------------------------
# Misc
# ---------------------------------------------------------------------------
class HealthResponse(BaseModel):
    status: str = "OK"
    timestamp: datetime
