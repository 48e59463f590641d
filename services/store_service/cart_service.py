"""
Cart management.

Every read-modify-write of a cart runs under a per-cart lock, so two
concurrent "add product" calls on the same cart cannot overwrite each
other's line items. Different carts never wait on each other.

A cart holds at most one line per product; adding a product that is
already in the cart increments its quantity.
"""

import logging
from typing import Dict, Iterable, List, Optional

from .catalog_service import CatalogService
from .cart_repository import CartRepository
from .errors import InvalidInputError, NotFoundError
from .locks import KeyedLock
from .schemas import CartLineOut, CartOut, PopulatedCartLine, PopulatedCartOut

logger = logging.getLogger(__name__)


def _validate_quantity(quantity) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise InvalidInputError("Quantity must be a positive integer")
    return quantity


def merge_lines(lines: Iterable[Dict[str, int]]) -> List[Dict[str, int]]:
    """Collapse duplicate product ids, summing quantities and keeping first-seen order."""
    merged: Dict[int, int] = {}
    for line in lines:
        merged[line["product"]] = merged.get(line["product"], 0) + line["quantity"]
    return [{"product": product, "quantity": quantity} for product, quantity in merged.items()]


class CartService:
    """Cart operations backed by CartRepository, validated against the catalog."""

    def __init__(self, repository: CartRepository, catalog: CatalogService, locks: Optional[KeyedLock] = None):
        self.repository = repository
        self.catalog = catalog
        self.locks = locks or KeyedLock()

    def _load(self, cart_id: str) -> List[Dict[str, int]]:
        lines = self.repository.get_lines(cart_id)
        if lines is None:
            raise NotFoundError(f"Cart {cart_id} not found")
        return lines

    @staticmethod
    def _cart(cart_id: str, lines: List[Dict[str, int]]) -> CartOut:
        return CartOut(id=cart_id, products=[CartLineOut(**line) for line in lines])

    async def _require_product(self, product_id: int) -> None:
        if not await self.catalog.product_exists(product_id):
            raise NotFoundError(f"Product {product_id} not found")

    async def create_cart(self) -> CartOut:
        cart_id = self.repository.create_cart()
        return self._cart(cart_id, [])

    async def get_cart(self, cart_id: str) -> CartOut:
        return self._cart(cart_id, self._load(cart_id))

    async def get_populated_cart(self, cart_id: str) -> PopulatedCartOut:
        """Cart with product records inline; deleted products come back as None."""
        lines = self._load(cart_id)
        products = await self.catalog.get_products_by_ids(line["product"] for line in lines)
        return PopulatedCartOut(
            id=cart_id,
            products=[
                PopulatedCartLine(product=products.get(line["product"]), quantity=line["quantity"])
                for line in lines
            ],
        )

    async def add_product(self, cart_id: str, product_id: int, quantity: int = 1) -> CartOut:
        """Add a product or increment the quantity of its existing line."""
        quantity = _validate_quantity(quantity)
        await self._require_product(product_id)

        async with self.locks.hold(cart_id):
            lines = self._load(cart_id)
            for line in lines:
                if line["product"] == product_id:
                    line["quantity"] += quantity
                    break
            else:
                lines.append({"product": product_id, "quantity": quantity})
            self.repository.save_lines(cart_id, lines)

        logger.info(f"Added {quantity} x product {product_id} to cart {cart_id}")
        return self._cart(cart_id, lines)

    async def remove_product(self, cart_id: str, product_id: int) -> CartOut:
        """Drop a product's line. Removing a product that is not in the cart is a no-op."""
        async with self.locks.hold(cart_id):
            lines = self._load(cart_id)
            remaining = [line for line in lines if line["product"] != product_id]
            if len(remaining) != len(lines):
                self.repository.save_lines(cart_id, remaining)
                logger.info(f"Removed product {product_id} from cart {cart_id}")
        return self._cart(cart_id, remaining)

    async def replace_products(self, cart_id: str, lines: Iterable[Dict[str, int]]) -> CartOut:
        """Replace every line item. Duplicate products are merged."""
        lines = list(lines)
        for line in lines:
            if not isinstance(line, dict) or line.get("product") is None:
                raise InvalidInputError("Each line item needs a product and a quantity")
            _validate_quantity(line.get("quantity"))
        for line in lines:
            await self._require_product(line["product"])

        merged = merge_lines(lines)
        async with self.locks.hold(cart_id):
            self._load(cart_id)
            self.repository.save_lines(cart_id, merged)

        logger.info(f"Replaced cart {cart_id} with {len(merged)} line(s)")
        return self._cart(cart_id, merged)

    async def update_quantity(self, cart_id: str, product_id: int, quantity: int) -> CartOut:
        """Set the quantity of a product already in the cart."""
        quantity = _validate_quantity(quantity)
        async with self.locks.hold(cart_id):
            lines = self._load(cart_id)
            for line in lines:
                if line["product"] == product_id:
                    line["quantity"] = quantity
                    break
            else:
                raise NotFoundError(f"Product {product_id} is not in cart {cart_id}")
            self.repository.save_lines(cart_id, lines)

        logger.info(f"Set product {product_id} quantity to {quantity} in cart {cart_id}")
        return self._cart(cart_id, lines)

    async def clear_cart(self, cart_id: str) -> CartOut:
        async with self.locks.hold(cart_id):
            self._load(cart_id)
            self.repository.save_lines(cart_id, [])

        logger.info(f"Cleared cart {cart_id}")
        return self._cart(cart_id, [])
