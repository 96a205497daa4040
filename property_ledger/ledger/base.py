"""Ledger accessor interfaces.

The registry only needs point reads, point writes and an ordered range
scan. Backends that can version each key additionally implement
``VersionedLedger`` so read-modify-write cycles can be made atomic per key.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterator


class LedgerAccessor(ABC):
    """Key-value surface over the world state."""

    @abstractmethod
    def get(self, key: str) -> bytes | None:
        """Return the value stored at ``key`` or ``None`` if absent.

        Raises
        ------
        ReadError
            If the store cannot be read.
        """

    @abstractmethod
    def put(self, key: str, value: bytes) -> None:
        """Store ``value`` at ``key``, replacing any previous value.

        Raises
        ------
        WriteError
            If the store cannot be written.
        """

    @abstractmethod
    def scan(self, start_key: str = "", end_key: str = "") -> Iterator[tuple[str, bytes]]:
        """Iterate ``(key, value)`` pairs with ``start_key <= key < end_key``.

        Empty bounds are unbounded, so ``scan()`` visits every key.
        Results are in key order.
        """


class VersionedLedger(LedgerAccessor):
    """Ledger with per-key versions and compare-and-set writes.

    Version ``0`` means the key does not exist. Every successful write
    increments the version by one.
    """

    @abstractmethod
    def get_versioned(self, key: str) -> tuple[bytes | None, int]:
        """Return the value and current version of ``key``."""

    @abstractmethod
    def compare_and_put(self, key: str, value: bytes, expected_version: int) -> int:
        """Write ``value`` only if ``key`` is still at ``expected_version``.

        Returns
        -------
        int
            The new version.

        Raises
        ------
        ConcurrentModificationError
            If the key's version differs from ``expected_version``.
        WriteError
            If the store cannot be written.
        """


def in_range(key: str, start_key: str, end_key: str) -> bool:
    """Check whether ``key`` falls in the half-open scan range."""
    if start_key and key < start_key:
        return False
    if end_key and key >= end_key:
        return False
    return True
