"""Translate catalog query parameters into a filter descriptor.

Two call styles are accepted:

- separate ``category``, ``status`` and ``stock`` parameters, each applied
  independently and combined with AND;
- a single overloaded ``query`` parameter whose meaning is sniffed from its
  value (see :func:`classify_query`).

Unrecognised values never raise. An unknown ``query`` value becomes a
category substring filter.
"""

from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

STOCK_AVAILABLE = "available"
STOCK_UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class CatalogFilter:
    """Normalized catalog filter. ``None`` fields do not constrain the query."""

    category: Optional[str] = None
    status: Optional[bool] = None
    stock: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.category is None and self.status is None and self.stock is None


def classify_query(value: str) -> Tuple[str, object]:
    """
    Classify a single ``query`` value. First matching rule wins.

    Returns a ``(field, value)`` pair:
        "true" / "false"  -> ("status", bool)
        "available"       -> ("stock", "available")
        "unavailable"     -> ("stock", "unavailable")
        anything else     -> ("category", value)
    """
    if value == "true":
        return "status", True
    if value == "false":
        return "status", False
    if value == STOCK_AVAILABLE:
        return "stock", STOCK_AVAILABLE
    if value == STOCK_UNAVAILABLE:
        return "stock", STOCK_UNAVAILABLE
    return "category", value


def _param(params: Mapping[str, str], name: str) -> Optional[str]:
    value = params.get(name)
    if value is None or value == "":
        return None
    return value


def build_filter(params: Mapping[str, str]) -> CatalogFilter:
    """Build a CatalogFilter from raw request query parameters."""
    fields = {}

    category = _param(params, "category")
    if category is not None:
        fields["category"] = category

    status = _param(params, "status")
    if status is not None:
        fields["status"] = status == "true"

    stock = _param(params, "stock")
    if stock in (STOCK_AVAILABLE, STOCK_UNAVAILABLE):
        fields["stock"] = stock

    query = _param(params, "query")
    if query is not None:
        field, value = classify_query(query)
        # explicit parameters take precedence over the sniffed one
        fields.setdefault(field, value)

    return CatalogFilter(**fields)
