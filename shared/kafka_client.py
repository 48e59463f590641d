"""
kafka_client.py - Kafka Producer Client Wrapper

PURPOSE:
    Provides a reusable Kafka producer with JSON serialization and delivery
    reports. The store service uses it to publish catalog change events
    next to the WebSocket broadcast.

PRODUCER FEATURES:
    - JSON serialization of Pydantic events (or plain dicts)
    - Delivery callbacks for tracking
    - Compression (snappy)
    - All replicas acknowledgment (acks=all)

USAGE:
    producer = BaseKafkaProducer("localhost:9092", "store-producer")
    producer.publish("product.added", event)
    producer.close()
"""

import json
import logging
from typing import Optional, Union

from confluent_kafka import Producer
from confluent_kafka.error import KafkaError

from shared.events import BaseEvent

logger = logging.getLogger(__name__)


class BaseKafkaProducer:
    """
    Base Kafka producer with JSON serialization and delivery callbacks.

    Delivery is best effort from the caller's point of view: the message is
    flushed before publish() returns, failures are logged by the delivery
    report and errors raised by produce() propagate.
    """

    def __init__(self, bootstrap_servers: str, client_id: str = "producer"):
        """
        Initialize Kafka producer.

        Args:
            bootstrap_servers: Comma-separated Kafka broker addresses
            client_id: Unique identifier for this producer instance
        """
        self.config = {
            "bootstrap.servers": bootstrap_servers,
            "client.id": client_id,
            "acks": "all",
            "compression.type": "snappy",
        }
        self.producer = Producer(self.config)

    def _delivery_report(self, err: Optional[KafkaError], msg) -> None:
        """Delivery report handler called by producer on message delivery."""
        if err is not None:
            logger.error(f"Message delivery failed: {err}")
        else:
            logger.info(
                f"Message delivered to topic={msg.topic()}, "
                f"partition={msg.partition()}, offset={msg.offset()}"
            )

    def publish(self, topic: str, event: Union[BaseEvent, dict]) -> None:
        """Publish event to Kafka topic."""
        if isinstance(event, dict):
            message = json.dumps(event, default=str)
            event_type = event.get("event_type", "unknown")
            correlation_id = event.get("correlation_id", "unknown")
        else:
            message = event.model_dump_json()
            event_type = event.event_type
            correlation_id = event.correlation_id

        try:
            self.producer.produce(
                topic=topic,
                value=message.encode("utf-8"),
                callback=self._delivery_report,
            )
            self.producer.flush()
        except Exception as e:
            logger.error(f"Error publishing event to {topic}: {e}")
            raise

        logger.info(
            f"Published event to {topic}",
            extra={"event_type": event_type, "correlation_id": correlation_id},
        )

    def close(self) -> None:
        """Flush outstanding messages before shutdown."""
        self.producer.flush()
