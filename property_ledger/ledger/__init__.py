"""Ledger accessors the registry reads and writes through."""

from property_ledger.ledger.base import LedgerAccessor, VersionedLedger
from property_ledger.ledger.memory import InMemoryLedger
from property_ledger.ledger.postgres import PostgresLedger

__all__ = ["InMemoryLedger", "LedgerAccessor", "PostgresLedger", "VersionedLedger"]
