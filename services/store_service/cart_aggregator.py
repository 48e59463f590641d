"""Cart totals: resolve line items against the live catalog and sum them."""

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Optional, Tuple

from .catalog_service import CatalogService
from .schemas import CartOut, ProductOut

CENTS = Decimal("0.01")


@dataclass
class ResolvedLine:
    product: ProductOut
    quantity: int
    subtotal: Decimal


@dataclass
class CartSummary:
    lines: List[ResolvedLine] = field(default_factory=list)
    total: Decimal = Decimal("0.00")
    item_count: int = 0
    has_products: bool = False


def _money(value: float) -> Decimal:
    return Decimal(str(value))


def summarize(lines: Iterable[Tuple[Optional[ProductOut], int]]) -> CartSummary:
    """
    Aggregate ``(product, quantity)`` pairs.

    A ``None`` product (deleted from the catalog) adds nothing to the total
    or the item count but still makes ``has_products`` true.
    """
    summary = CartSummary()
    total = Decimal("0")

    for product, quantity in lines:
        summary.has_products = True
        if product is None:
            continue
        subtotal = _money(product.price) * quantity
        total += subtotal
        summary.item_count += quantity
        summary.lines.append(
            ResolvedLine(product=product, quantity=quantity, subtotal=subtotal.quantize(CENTS, ROUND_HALF_UP))
        )

    summary.total = total.quantize(CENTS, ROUND_HALF_UP)
    return summary


class CartAggregator:
    """Read-only cart totals. One instance per process."""

    def __init__(self, catalog: CatalogService):
        self.catalog = catalog

    async def aggregate(self, cart: CartOut) -> CartSummary:
        products = await self.catalog.get_products_by_ids(line.product for line in cart.products)
        return summarize((products.get(line.product), line.quantity) for line in cart.products)
