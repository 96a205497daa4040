"""Property registry: the rules for creating, reading and transferring parcels.

The registry is stateless between calls. Every operation re-reads the
ledger, which is the only source of truth.

Creation and transfer are read-then-write. When the ledger is a
``VersionedLedger`` and optimistic writes are enabled, the write is
conditioned on the version that was read, so a concurrent creator or
transferrer on the same key fails instead of silently overwriting.
Against a plain ``LedgerAccessor`` two racing calls can both pass the
existence check; that gap is left to the ledger to close.
"""

from __future__ import annotations

import logging
import math

from property_ledger.events import (
    PROPERTY_CREATED,
    PROPERTY_TRANSFERRED,
    EventPublisher,
    NullPublisher,
    make_event,
)
from property_ledger.exceptions import (
    ConcurrentModificationError,
    DuplicateIDError,
    EventPublishError,
    InvalidRateError,
    NotFoundError,
    ValidationError,
)
from property_ledger.ledger.base import LedgerAccessor, VersionedLedger
from property_ledger.models import Event, Property
from property_ledger.rates.client import RateSource
from property_ledger.serialization import decode_property, encode_property

logger = logging.getLogger(__name__)


class PropertyRegistry:
    """Create, query and transfer properties on a ledger."""

    def __init__(
        self,
        ledger: LedgerAccessor,
        rates: RateSource,
        publisher: EventPublisher | None = None,
        optimistic: bool = True,
    ) -> None:
        """Initialize the registry.

        Parameters
        ----------
        ledger : LedgerAccessor
            World state to read and write.
        rates : RateSource
            Source of the exchange rate used to value new properties.
        publisher : EventPublisher | None
            Receives a notification after each successful write.
        optimistic : bool
            Use version-checked writes when the ledger supports them.
        """
        self.ledger = ledger
        self.rates = rates
        self.publisher = publisher or NullPublisher()
        self.optimistic = optimistic

    @property
    def versioned(self) -> bool:
        """Whether writes are conditioned on the version read."""
        return self.optimistic and isinstance(self.ledger, VersionedLedger)

    def create_property(
        self,
        property_id: str,
        name: str,
        area: int,
        owner_name: str,
        value: int,
    ) -> Property:
        """Add a new property to the ledger.

        Raises
        ------
        ValidationError
            If an argument has the wrong type or ``property_id`` is empty.
        DuplicateIDError
            If a property with this ID already exists.
        RateUnavailableError
            If the exchange rate cannot be fetched.
        InvalidRateError
            If the rate is zero, negative or not finite.
        ReadError, WriteError
            If the ledger is unreachable.
        """
        _check_text("property id", property_id)
        if not property_id:
            raise ValidationError("property id must not be empty")
        _check_text("name", name)
        _check_text("owner name", owner_name)
        _check_int("area", area)
        _check_int("value", value)

        existing, version = self._read(property_id)
        if existing is not None:
            logger.warning("Rejected duplicate property %s", property_id, extra={"property_id": property_id})
            raise DuplicateIDError(f"the property {property_id} already exists")

        prop = Property(
            id=property_id,
            name=name,
            area=area,
            owner_name=owner_name,
            value=value,
            bitcoin_value=0.0,
        )
        prop.bitcoin_value = self._valuate(prop.value)

        data = encode_property(prop)
        if self.versioned:
            try:
                self.ledger.compare_and_put(property_id, data, version)
            except ConcurrentModificationError as e:
                logger.warning("Property %s was created concurrently", property_id)
                raise DuplicateIDError(f"the property {property_id} already exists") from e
        else:
            self.ledger.put(property_id, data)

        logger.info(
            "Created property %s owned by %s (value=%d, btc=%.8f)",
            prop.id, prop.owner_name, prop.value, prop.bitcoin_value,
            extra={"property_id": prop.id},
        )
        self._notify(make_event(PROPERTY_CREATED, prop))
        return prop

    def query_all_properties(self) -> list[Property]:
        """Return every property in ledger order.

        A single undecodable entry aborts the whole scan with ``DecodeError``.
        """
        return [decode_property(raw, key=key) for key, raw in self.ledger.scan("", "")]

    def query_property_by_id(self, property_id: str) -> Property:
        """Return the property stored under ``property_id``.

        Raises
        ------
        NotFoundError
            If no property has this ID.
        DecodeError
            If the stored record is corrupt.
        ReadError
            If the ledger is unreachable.
        """
        prop, _ = self._load(property_id)
        return prop

    def transfer_property(self, property_id: str, new_owner: str) -> Property:
        """Change the owner of an existing property.

        Transferring to the current owner is accepted and rewrites the
        record unchanged. Lookup failures propagate before any write.
        """
        _check_text("property id", property_id)
        _check_text("new owner", new_owner)
        prop, version = self._load(property_id)
        previous_owner = prop.owner_name
        prop.owner_name = new_owner

        data = encode_property(prop)
        if self.versioned:
            self.ledger.compare_and_put(property_id, data, version)
        else:
            self.ledger.put(property_id, data)

        logger.info(
            "Transferred property %s from %s to %s", property_id, previous_owner, new_owner,
            extra={"property_id": property_id},
        )
        self._notify(
            make_event(
                PROPERTY_TRANSFERRED,
                prop,
                metadata={"previous_owner": previous_owner, "new_owner": new_owner},
            )
        )
        return prop

    def _read(self, property_id: str) -> tuple[bytes | None, int]:
        if self.versioned:
            return self.ledger.get_versioned(property_id)
        return self.ledger.get(property_id), 0

    def _load(self, property_id: str) -> tuple[Property, int]:
        raw, version = self._read(property_id)
        if raw is None:
            raise NotFoundError(f"the property {property_id} does not exist")
        return decode_property(raw, key=property_id), version

    def _valuate(self, value: int) -> float:
        rate = self.rates.get_rate()
        if not math.isfinite(rate) or rate <= 0:
            logger.warning("Refusing to value property at rate %r", rate)
            raise InvalidRateError(f"exchange rate {rate!r} is not a positive finite number")
        try:
            bitcoin_value = value / rate
        except OverflowError as e:
            raise InvalidRateError(f"value {value} at rate {rate!r} overflows") from e
        if not math.isfinite(bitcoin_value):
            raise InvalidRateError(f"value {value} at rate {rate!r} is not finite")
        return bitcoin_value

    def _notify(self, event: Event) -> None:
        try:
            self.publisher.publish(event)
        except EventPublishError:
            logger.exception("Failed to publish %s for %s", event.event_type, event.subject)


def _check_text(field: str, value: object) -> None:
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string, got {value!r}")


def _check_int(field: str, value: object) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field} must be an integer, got {value!r}")
