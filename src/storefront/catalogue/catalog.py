"""Catalog store: filtered, sorted, paginated reads and the atomic bulk replace.

Every read and the replace run under one process-wide lock, so a reader sees
either the full catalog before a replace or the full catalog after it.
"""

import json
import math
from dataclasses import dataclass, field
from threading import RLock

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Text
from protean.utils.globals import current_domain
from protean.utils.query import Q

from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.settings import DEFAULT_PAGE_SIZE

logger = structlog.get_logger(__name__)

SORTABLE_FIELDS = ("name", "price", "category", "description")
SORT_ORDERS = ("asc", "desc")

_PRODUCT_FIELDS = ("name", "price", "description", "category", "image", "rating")

catalog_lock = RLock()


@dataclass(frozen=True)
class Pagination:
    current_page: int
    total_pages: int
    total_items: int
    has_next: bool
    has_prev: bool

    @classmethod
    def for_page(cls, page: int, page_size: int, total_items: int) -> "Pagination":
        total_pages = math.ceil(total_items / page_size)
        return cls(
            current_page=page,
            total_pages=total_pages,
            total_items=total_items,
            has_next=page < total_pages,
            has_prev=page > 1,
        )


@dataclass(frozen=True)
class CatalogPage:
    """One page of products plus the pagination info and the filters that produced it."""

    products: list
    pagination: Pagination
    filters: dict = field(default_factory=dict)


def _validate_query(sort_by, sort_order, page, page_size):
    errors = {}
    if sort_by not in SORTABLE_FIELDS:
        errors["sort_by"] = [f"Cannot sort by '{sort_by}'; expected one of {', '.join(SORTABLE_FIELDS)}"]
    if sort_order not in SORT_ORDERS:
        errors["sort_order"] = ["Sort order must be 'asc' or 'desc'"]
    if page < 1:
        errors["page"] = ["Page numbers start at 1"]
    if page_size < 1:
        errors["page_size"] = ["Page size must be at least 1"]
    if errors:
        raise ValidationError(errors)


def query_products(
    search: str | None = None,
    category: str | None = None,
    sort_by: str = "name",
    sort_order: str = "asc",
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> CatalogPage:
    """Return one page of products matching the search text and category.

    ``search`` matches name or description and ``category`` matches the
    category, both as case-insensitive substrings. An empty result is a
    valid page with ``total_pages == 0``.
    """
    sort_order = (sort_order or "asc").lower()
    _validate_query(sort_by, sort_order, page, page_size)

    criteria = []
    if search:
        criteria.append(Q(name__icontains=search) | Q(description__icontains=search))
    if category:
        criteria.append(Q(category__icontains=category))

    ordering = sort_by if sort_order == "asc" else f"-{sort_by}"
    skip = (page - 1) * page_size

    with catalog_lock:
        query = current_domain.repository_for(Product)._dao.query
        if criteria:
            query = query.filter(*criteria)
        result = query.order_by(ordering).offset(skip).limit(page_size).all()

    return CatalogPage(
        products=list(result.items),
        pagination=Pagination.for_page(page, page_size, result.total),
        filters={
            "search": search or "",
            "category": category or "",
            "sort_by": sort_by,
            "sort_order": sort_order,
        },
    )


def get_product(product_id) -> Product:
    """Load a single product; raises ``ObjectNotFoundError`` when it does not exist."""
    with catalog_lock:
        return current_domain.repository_for(Product).get(product_id)


def count_products() -> int:
    with catalog_lock:
        return current_domain.repository_for(Product)._dao.query.all().total


# ---------------------------------------------------------------------------
# Bulk replace
# ---------------------------------------------------------------------------
@storefront.command(part_of="Product")
class ReplaceCatalog:
    """Discard every product and store the given set instead."""

    products = Text(required=True)  # JSON: list of product records


def _build_products(records) -> list[Product]:
    if not isinstance(records, list):
        raise ValidationError({"products": ["Products must be a list of records"]})

    products = []
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            raise ValidationError({"products": [f"Record {index} is not an object"]})
        products.append(Product.create(**{key: record.get(key) for key in _PRODUCT_FIELDS}))
    return products


@storefront.command_handler(part_of=Product)
class ReplaceCatalogHandler:
    @handle(ReplaceCatalog)
    def replace_catalog(self, command):
        # Build and validate the whole new set before anything is deleted
        products = _build_products(json.loads(command.products))

        repo = current_domain.repository_for(Product)
        repo._dao.delete_all()
        for product in products:
            repo.add(product)

        logger.info("Catalog replaced", product_count=len(products))
        return len(products)


def replace_catalog(records: list[dict]) -> int:
    """Atomically replace the catalog with ``records``; returns the inserted count."""
    with catalog_lock:
        return current_domain.process(
            ReplaceCatalog(products=json.dumps(records)),
            asynchronous=False,
        )
