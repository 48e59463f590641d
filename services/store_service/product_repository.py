import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from sqlalchemy.orm import Query, Session

from .filters import STOCK_AVAILABLE, STOCK_UNAVAILABLE, CatalogFilter
from .models import Product

logger = logging.getLogger(__name__)

SORT_ASC = "asc"
SORT_DESC = "desc"


@dataclass
class ProductSlice:
    """Products of one page plus the number of matching rows."""

    items: List[Product]
    total_docs: int


class ProductRepository:
    """Repository for product persistence and paginated catalog queries."""

    def __init__(self, db: Session):
        """Initialize with database session."""
        self.db = db

    def _filtered(self, catalog_filter: CatalogFilter) -> Query:
        query = self.db.query(Product)
        if catalog_filter.category is not None:
            query = query.filter(Product.category.icontains(catalog_filter.category, autoescape=True))
        if catalog_filter.status is not None:
            query = query.filter(Product.status == catalog_filter.status)
        if catalog_filter.stock == STOCK_AVAILABLE:
            query = query.filter(Product.stock > 0)
        elif catalog_filter.stock == STOCK_UNAVAILABLE:
            query = query.filter(Product.stock == 0)
        return query

    def paginate(self, catalog_filter: CatalogFilter, page: int, limit: int, sort: Optional[str] = None) -> ProductSlice:
        """Fetch one page of products matching the filter."""
        query = self._filtered(catalog_filter)
        total_docs = query.count()

        if sort == SORT_ASC:
            query = query.order_by(Product.price.asc(), Product.id.asc())
        elif sort == SORT_DESC:
            query = query.order_by(Product.price.desc(), Product.id.asc())
        else:
            query = query.order_by(Product.id.asc())

        offset = (page - 1) * limit
        if offset >= total_docs:
            return ProductSlice(items=[], total_docs=total_docs)

        items = query.offset(offset).limit(limit).all()
        return ProductSlice(items=items, total_docs=total_docs)

    def get_product(self, product_id: int) -> Optional[Product]:
        """Get product by ID."""
        return self.db.get(Product, product_id)

    def get_by_code(self, code: str) -> Optional[Product]:
        return self.db.query(Product).filter(Product.code == code).first()

    def get_many(self, product_ids: Iterable[int]) -> Dict[int, Product]:
        ids = set(product_ids)
        if not ids:
            return {}
        return {p.id: p for p in self.db.query(Product).filter(Product.id.in_(ids)).all()}

    def list_products(self, limit: Optional[int] = None, newest_first: bool = False) -> List[Product]:
        order = Product.id.desc() if newest_first else Product.id.asc()
        query = self.db.query(Product).order_by(order)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def create_product(self, **fields) -> Product:
        """Create a new product."""
        product = Product(**fields)
        self.db.add(product)
        self.db.flush()
        logger.info(f"Created product {product.id}: {product.code}")
        return product

    def update_product(self, product: Product, changes: dict) -> Product:
        for field, value in changes.items():
            setattr(product, field, value)
        self.db.flush()
        logger.info(f"Updated product {product.id}: {sorted(changes)}")
        return product

    def delete_product(self, product_id: int) -> bool:
        """Delete product. Returns True if a row was removed."""
        product = self.get_product(product_id)
        if not product:
            return False
        self.db.delete(product)
        self.db.flush()
        logger.info(f"Deleted product {product_id}")
        return True
