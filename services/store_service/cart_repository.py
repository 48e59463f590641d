"""
Cart Repository Module

Redis-based persistence for shopping carts.

Data Format (Redis):
    Key: "cart:9f0c3b1e4d2a4c0e8f1b2a3c4d5e6f70"
    Value: '[{"product": 3, "quantity": 2}, {"product": 7, "quantity": 1}]'

Line items keep insertion order. Carts are stored without a TTL: they exist
from create_cart() until deleted explicitly and never expire. An empty cart
is stored as "[]" so it stays distinguishable from a missing one.

This class does no locking. Callers that read, modify and write a cart must
serialize those steps per cart (see CartService).
"""

import json
import logging
from typing import Dict, List, Optional
from uuid import uuid4

import redis

logger = logging.getLogger(__name__)


class CartRepository:
    """Repository for managing shopping carts in Redis."""

    CART_KEY_PREFIX = "cart:"

    def __init__(self, redis_client: redis.Redis):
        """Initialize cart repository."""
        self.redis = redis_client

    def _key(self, cart_id: str) -> str:
        return f"{self.CART_KEY_PREFIX}{cart_id}"

    def create_cart(self) -> str:
        """Store a new empty cart and return its id."""
        cart_id = uuid4().hex
        self.redis.set(self._key(cart_id), json.dumps([]))
        logger.info(f"Created cart {cart_id}")
        return cart_id

    def get_lines(self, cart_id: str) -> Optional[List[Dict[str, int]]]:
        """Line items of a cart, or None if the cart does not exist."""
        cart_json = self.redis.get(self._key(cart_id))
        if cart_json is None:
            return None
        return json.loads(cart_json)

    def save_lines(self, cart_id: str, lines: List[Dict[str, int]]) -> None:
        self.redis.set(self._key(cart_id), json.dumps(lines))
        logger.info(f"Saved cart {cart_id} with {len(lines)} line(s)")

