"""
events.py - Catalog Event Schema Definitions

PURPOSE:
    Defines the event schemas published by the store service whenever the
    catalog changes. Uses Pydantic for data validation and serialization.

EVENTS:
    - product.added: A product was created
    - product.updated: A product was partially updated
    - product.deleted: A product was removed (hard delete)

COMMON FIELDS (BaseEvent):
    - event_id: Unique identifier (UUID)
    - event_type: Event category and action
    - timestamp: Timezone-aware creation time
    - correlation_id: Links the event to the request that caused it

USAGE:
    event = ProductAddedEvent(correlation_id="req-123", product_id=7, product={...})
    json_data = event.model_dump_json()
    event = EVENT_TYPE_MAP[data["event_type"]].model_validate(data)
"""

from datetime import datetime
from typing import Any, Dict
from uuid import uuid4

from pydantic import BaseModel, Field

from shared.logging_config import LOG_TIMEZONE


class BaseEvent(BaseModel):
    """
    Base event model for all catalog events.

    All events inherit from this class and include:
    - Unique event ID
    - Event type identifier
    - Timezone-aware timestamp
    - Correlation ID for request tracing
    """

    event_id: str = Field(default_factory=lambda: str(uuid4()))
    event_type: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(LOG_TIMEZONE))
    correlation_id: str = Field(default_factory=lambda: str(uuid4()))


class ProductAddedEvent(BaseEvent):
    """
    Event published when a product is added to the catalog.
    Triggers: POST /api/products
    Consumers: Live product feed clients
    """

    event_type: str = "product.added"
    product_id: int
    product: Dict[str, Any]


class ProductUpdatedEvent(BaseEvent):
    """
    Event published when a product is updated.
    Triggers: PUT /api/products/{pid}
    """

    event_type: str = "product.updated"
    product_id: int
    product: Dict[str, Any]


class ProductDeletedEvent(BaseEvent):
    """
    Event published when a product is deleted.
    Triggers: DELETE /api/products/{pid}
    """

    event_type: str = "product.deleted"
    product_id: int


# Event mapping for deserialization
EVENT_TYPE_MAP = {
    "product.added": ProductAddedEvent,
    "product.updated": ProductUpdatedEvent,
    "product.deleted": ProductDeletedEvent,
}

ALL_TOPICS = list(EVENT_TYPE_MAP)
