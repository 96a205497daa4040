"""Commit notifications for registry writes.

After a property is created or transferred the registry hands an ``Event``
to a publisher. The ledger write is the commit; notifications are
best-effort and never roll it back.
"""

import json
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Protocol

from confluent_kafka import KafkaException, Producer

from property_ledger.config import KafkaConfig
from property_ledger.exceptions import EventPublishError
from property_ledger.models import Event, Property
from property_ledger.serialization import event_to_dict, property_to_dict

logger = logging.getLogger(__name__)

EVENT_SOURCE = "property-ledger"
PROPERTY_CREATED = "property.created"
PROPERTY_TRANSFERRED = "property.transferred"


class EventPublisher(Protocol):
    """Destination for commit notifications."""

    def publish(self, event: Event) -> None:
        ...


def make_event(event_type: str, prop: Property, metadata: dict | None = None) -> Event:
    """Build a notification for a property write."""
    return Event(
        event_id=uuid.uuid4().hex,
        event_type=event_type,
        event_time=datetime.now(timezone.utc),
        source=EVENT_SOURCE,
        subject=prop.id,
        data=property_to_dict(prop),
        metadata=metadata or {},
    )


class NullPublisher:
    """Discard all events."""

    def publish(self, event: Event) -> None:
        return None


@dataclass
class InMemoryPublisher:
    """Collect events in a list."""

    events: list[Event] = field(default_factory=list)

    def publish(self, event: Event) -> None:
        self.events.append(event)

    def of_type(self, event_type: str) -> list[Event]:
        """Return collected events of one type."""
        return [e for e in self.events if e.event_type == event_type]


@dataclass
class PublisherStats:
    """Track producer delivery statistics."""

    sent: int = 0
    delivered: int = 0
    failed: int = 0


class KafkaEventPublisher:
    """Publish events to a Kafka topic keyed by property ID."""

    def __init__(self, config: KafkaConfig | str) -> None:
        """Initialize Kafka publisher.

        Parameters
        ----------
        config : KafkaConfig | str
            Producer configuration or bootstrap servers string.
        """
        if isinstance(config, str):
            config = KafkaConfig(bootstrap_servers=config)

        self.config = config
        self.producer = Producer(config.to_dict())
        self.stats = PublisherStats()

    def _delivery_callback(self, err: Any, msg: Any) -> None:
        """Handle delivery reports."""
        if err:
            self.stats.failed += 1
            logger.error("Event delivery failed: %s", err)
        else:
            self.stats.delivered += 1
            logger.debug("Delivered to %s[%d]@%d", msg.topic(), msg.partition(), msg.offset())

    def publish(self, event: Event) -> None:
        """Queue one event for delivery."""
        value = json.dumps(event_to_dict(event), ensure_ascii=False).encode("utf-8")
        try:
            self.producer.produce(
                topic=self.config.topic,
                key=event.subject.encode("utf-8"),
                value=value,
                callback=self._delivery_callback,
            )
        except (BufferError, KafkaException) as e:
            raise EventPublishError(f"failed to publish {event.event_type} for {event.subject}: {e}") from e
        self.stats.sent += 1
        self.producer.poll(0)

    def flush(self, timeout: float = 10.0) -> int:
        """Wait for queued events; return how many are still undelivered."""
        remaining = self.producer.flush(timeout)
        if remaining:
            logger.warning("%d events still queued after flush", remaining)
        return remaining

    def close(self) -> None:
        """Flush and log delivery stats."""
        self.flush()
        logger.info(
            "Event publisher closed: sent=%d, delivered=%d, failed=%d",
            self.stats.sent, self.stats.delivered, self.stats.failed,
        )
