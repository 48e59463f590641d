"""
Catalog query service and product management.

The query path turns raw request parameters into a filter, runs one
paginated store query and attaches prev/next links that keep the caller's
parameters. Store failures on that path are reported as an ``ErrorResult``
(``status == "error"``) instead of an exception, so callers must check the
discriminant.

Mutations (add/update/delete) raise StoreError subclasses and notify the
registered change listeners (the live product feed) after commit.
"""

import logging
import math
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from shared.events import BaseEvent, ProductAddedEvent, ProductDeletedEvent, ProductUpdatedEvent

from .errors import ConflictError, NotFoundError
from .filters import CatalogFilter, build_filter
from .links import build_page_links
from .product_repository import ProductRepository
from .schemas import ErrorResult, PageResult, ProductCreate, ProductOut, ProductUpdate

logger = logging.getLogger(__name__)

API_PRODUCTS_PATH = "/api/products"
DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100

ChangeListener = Callable[[BaseEvent], Awaitable[None]]
QueryParams = Union[Mapping[str, str], Iterable[Tuple[str, str]]]


@dataclass(frozen=True)
class PageOptions:
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT
    sort: Optional[str] = None


def _positive_int(value, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number >= 1 else default


def parse_page_options(params: Mapping[str, str]) -> PageOptions:
    """Coerce page/limit from text; missing or invalid values fall back to defaults, limit is capped."""
    return PageOptions(
        page=_positive_int(params.get("page"), DEFAULT_PAGE),
        limit=min(_positive_int(params.get("limit"), DEFAULT_LIMIT), MAX_LIMIT),
        sort=params.get("sort") or None,
    )


def _as_pairs(params: QueryParams) -> List[Tuple[str, str]]:
    if isinstance(params, Mapping):
        return list(params.items())
    return list(params)


class CatalogService:
    """Catalog queries and product CRUD. One instance per process."""

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory
        self._listeners: List[ChangeListener] = []

    def add_listener(self, listener: ChangeListener) -> None:
        """Register a coroutine called with every catalog change event."""
        self._listeners.append(listener)

    async def _notify(self, event: BaseEvent) -> None:
        for listener in self._listeners:
            try:
                await listener(event)
            except Exception:
                logger.exception(
                    "Catalog change listener failed",
                    extra={"event_type": event.event_type, "correlation_id": event.correlation_id},
                )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def query_products(self, catalog_filter: CatalogFilter, options: PageOptions) -> PageResult:
        """Run one paginated catalog query. Store errors propagate."""
        with self._session_factory() as db:
            page_slice = ProductRepository(db).paginate(catalog_filter, options.page, options.limit, options.sort)
            payload = [ProductOut.model_validate(p) for p in page_slice.items]

        total_pages = max(1, math.ceil(page_slice.total_docs / options.limit))
        has_prev_page = options.page > 1
        has_next_page = options.page < total_pages

        return PageResult(
            payload=payload,
            total_docs=page_slice.total_docs,
            limit=options.limit,
            total_pages=total_pages,
            page=options.page,
            prev_page=options.page - 1 if has_prev_page else None,
            next_page=options.page + 1 if has_next_page else None,
            has_prev_page=has_prev_page,
            has_next_page=has_next_page,
        )

    async def get_products(
        self, params: QueryParams = (), base_path: str = API_PRODUCTS_PATH
    ) -> Union[PageResult, ErrorResult]:
        """Filtered, sorted, paginated product listing with navigation links."""
        pairs = _as_pairs(params)
        flat = dict(pairs)

        try:
            result = await self.query_products(build_filter(flat), parse_page_options(flat))
        except Exception:
            logger.exception("Error querying products")
            return ErrorResult(message="Could not retrieve products")

        result.prev_link, result.next_link = build_page_links(
            base_path,
            pairs,
            result.prev_page,
            result.next_page,
            result.has_prev_page,
            result.has_next_page,
        )
        return result

    async def list_products(self, limit: Optional[int] = None, newest_first: bool = False) -> List[ProductOut]:
        """Catalog snapshot, insertion order unless ``newest_first``."""
        with self._session_factory() as db:
            products = ProductRepository(db).list_products(limit, newest_first)
            return [ProductOut.model_validate(p) for p in products]

    async def get_products_by_ids(self, product_ids: Iterable[int]) -> Dict[int, ProductOut]:
        """Resolve several ids at once; ids that no longer exist are absent."""
        with self._session_factory() as db:
            found = ProductRepository(db).get_many(product_ids)
            return {pid: ProductOut.model_validate(p) for pid, p in found.items()}

    async def product_exists(self, product_id: int) -> bool:
        with self._session_factory() as db:
            return ProductRepository(db).get_product(product_id) is not None

    async def get_product(self, product_id: int) -> ProductOut:
        with self._session_factory() as db:
            product = ProductRepository(db).get_product(product_id)
            if not product:
                raise NotFoundError(f"Product {product_id} not found")
            return ProductOut.model_validate(product)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def add_product(self, data: ProductCreate) -> ProductOut:
        """Create a product. Duplicate codes raise ConflictError."""
        with self._session_factory() as db:
            repo = ProductRepository(db)
            if repo.get_by_code(data.code):
                raise ConflictError(f"Product code '{data.code}' already exists")
            try:
                product = repo.create_product(**data.model_dump())
                db.commit()
            except IntegrityError:
                db.rollback()
                raise ConflictError(f"Product code '{data.code}' already exists")
            created = ProductOut.model_validate(product)

        await self._notify(ProductAddedEvent(product_id=created.id, product=created.model_dump()))
        return created

    async def update_product(self, product_id: int, data: ProductUpdate) -> ProductOut:
        """Replace only the provided fields of a product."""
        changes = data.changes()
        with self._session_factory() as db:
            repo = ProductRepository(db)
            product = repo.get_product(product_id)
            if not product:
                raise NotFoundError(f"Product {product_id} not found")

            if "code" in changes:
                holder = repo.get_by_code(changes["code"])
                if holder is not None and holder.id != product_id:
                    raise ConflictError(f"Product code '{changes['code']}' already exists")

            if not changes:
                return ProductOut.model_validate(product)

            try:
                repo.update_product(product, changes)
                db.commit()
            except IntegrityError:
                db.rollback()
                raise ConflictError(f"Product code '{changes.get('code')}' already exists")
            updated = ProductOut.model_validate(product)

        await self._notify(ProductUpdatedEvent(product_id=updated.id, product=updated.model_dump()))
        return updated

    async def delete_product(self, product_id: int) -> None:
        """Hard delete. Carts keep their line and skip it when aggregating."""
        with self._session_factory() as db:
            if not ProductRepository(db).delete_product(product_id):
                raise NotFoundError(f"Product {product_id} not found")
            db.commit()

        await self._notify(ProductDeletedEvent(product_id=product_id))
