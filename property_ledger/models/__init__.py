"""Domain models for the property registry."""

from property_ledger.models.base import Event
from property_ledger.models.property import Property

__all__ = ["Event", "Property"]
