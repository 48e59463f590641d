"""
Live product feed.

Browsers connect to ``/ws/products`` and receive the newest products as
``{"event": "products", "payload": [...]}``: once on connect, again whenever
they send ``requestProducts``, and after every catalog change. When a Kafka
producer is configured the change event itself is also published to the
topic named after its event type.

Delivery is best effort: sockets that fail on send are dropped.
"""

import asyncio
import json
import logging
from typing import Optional, Set

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from shared.events import BaseEvent
from shared.kafka_client import BaseKafkaProducer

from .catalog_service import CatalogService

logger = logging.getLogger(__name__)

REQUEST_PRODUCTS = "requestProducts"
FEED_SNAPSHOT_LIMIT = 50

router = APIRouter(tags=["feed"])


def _is_snapshot_request(message: str) -> bool:
    if message.strip() == REQUEST_PRODUCTS:
        return True
    try:
        data = json.loads(message)
    except ValueError:
        return False
    return isinstance(data, dict) and data.get("event") == REQUEST_PRODUCTS


class CatalogFeed:
    """Fan-out of catalog snapshots to WebSocket clients and Kafka."""

    def __init__(self, catalog: CatalogService, producer: Optional[BaseKafkaProducer] = None):
        self.catalog = catalog
        self.producer = producer
        self.connections: Set[WebSocket] = set()

    async def snapshot_message(self) -> dict:
        products = await self.catalog.list_products(limit=FEED_SNAPSHOT_LIMIT, newest_first=True)
        return {"event": "products", "payload": [p.model_dump(mode="json") for p in products]}

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self.connections.add(websocket)
        logger.info(f"Feed client connected ({len(self.connections)} active)")
        await self.send_snapshot(websocket)

    def disconnect(self, websocket: WebSocket) -> None:
        self.connections.discard(websocket)
        logger.info(f"Feed client disconnected ({len(self.connections)} active)")

    async def send_snapshot(self, websocket: WebSocket) -> None:
        await websocket.send_json(await self.snapshot_message())

    async def broadcast(self, message: dict) -> None:
        for websocket in list(self.connections):
            try:
                await websocket.send_json(message)
            except Exception as e:
                logger.warning(f"Dropping feed client after failed send: {e}")
                self.connections.discard(websocket)

    async def catalog_changed(self, event: BaseEvent) -> None:
        """Catalog change listener: publish the event and broadcast the new snapshot."""
        if self.connections:
            await self.broadcast(await self.snapshot_message())
        logger.info(
            f"Catalog change pushed to {len(self.connections)} client(s)",
            extra={"event_type": event.event_type, "correlation_id": event.correlation_id},
        )

        if self.producer is not None:
            # publish() flushes until the broker acks
            await asyncio.to_thread(self.producer.publish, event.event_type, event)


@router.websocket("/ws/products")
async def products_socket(websocket: WebSocket) -> None:
    feed: CatalogFeed = websocket.app.state.feed
    try:
        await feed.connect(websocket)
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
            # binary frames are ignored
            text = message.get("text")
            if text is not None and _is_snapshot_request(text):
                await feed.send_snapshot(websocket)
    except WebSocketDisconnect:
        pass
    finally:
        feed.disconnect(websocket)
