"""Pytest configuration and fixtures."""

import pytest

from property_ledger.contract import PropertyTransferContract
from property_ledger.events import InMemoryPublisher
from property_ledger.ledger import InMemoryLedger
from property_ledger.rates import FixedRateSource
from property_ledger.registry import PropertyRegistry


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def ledger() -> InMemoryLedger:
    """Fresh in-memory ledger."""
    return InMemoryLedger()


@pytest.fixture
def rates() -> FixedRateSource:
    """Oracle stand-in reporting 50 000 USD per BTC."""
    return FixedRateSource(50000.0)


@pytest.fixture
def publisher() -> InMemoryPublisher:
    """Publisher that records events."""
    return InMemoryPublisher()


@pytest.fixture
def registry(
    ledger: InMemoryLedger, rates: FixedRateSource, publisher: InMemoryPublisher
) -> PropertyRegistry:
    """Registry wired to in-memory collaborators."""
    return PropertyRegistry(ledger, rates, publisher=publisher)


@pytest.fixture
def contract(registry: PropertyRegistry) -> PropertyTransferContract:
    """Contract over the in-memory registry."""
    return PropertyTransferContract(registry)
