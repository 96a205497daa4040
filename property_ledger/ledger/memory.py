"""In-memory ledger for tests, demos and single-process use."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Iterator

from property_ledger.exceptions import ConcurrentModificationError
from property_ledger.ledger.base import VersionedLedger, in_range


@dataclass
class InMemoryLedger(VersionedLedger):
    """Dict-backed world state with per-key versions.

    A single lock serializes writes, which makes ``compare_and_put`` atomic.
    ``scan`` iterates over a snapshot taken when the scan starts.
    """

    _state: dict[str, tuple[bytes, int]] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    writes: int = 0

    def get(self, key: str) -> bytes | None:
        entry = self._state.get(key)
        return entry[0] if entry else None

    def get_versioned(self, key: str) -> tuple[bytes | None, int]:
        entry = self._state.get(key)
        if entry is None:
            return None, 0
        return entry

    def put(self, key: str, value: bytes) -> None:
        with self._lock:
            _, version = self._state.get(key, (b"", 0))
            self._state[key] = (bytes(value), version + 1)
            self.writes += 1

    def compare_and_put(self, key: str, value: bytes, expected_version: int) -> int:
        with self._lock:
            _, version = self._state.get(key, (b"", 0))
            if version != expected_version:
                raise ConcurrentModificationError(
                    f"key {key!r} is at version {version}, expected {expected_version}"
                )
            self._state[key] = (bytes(value), version + 1)
            self.writes += 1
            return version + 1

    def scan(self, start_key: str = "", end_key: str = "") -> Iterator[tuple[str, bytes]]:
        with self._lock:
            snapshot = sorted(
                (k, v) for k, (v, _) in self._state.items() if in_range(k, start_key, end_key)
            )
        yield from snapshot

    def __len__(self) -> int:
        return len(self._state)
