"""PostgreSQL-backed ledger.

World state lives in a single ``ledger_state`` table keyed by the ledger
key. Each row carries a version counter used for compare-and-set writes.
"""

from __future__ import annotations

import logging
from typing import Iterator

import psycopg

from property_ledger.exceptions import ConcurrentModificationError, ReadError, WriteError
from property_ledger.ledger.base import VersionedLedger

logger = logging.getLogger(__name__)

CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS ledger_state (
    key TEXT PRIMARY KEY,
    value BYTEA NOT NULL,
    version BIGINT NOT NULL DEFAULT 1
)
"""

UPSERT_SQL = """
INSERT INTO ledger_state (key, value, version) VALUES (%s, %s, 1)
ON CONFLICT (key) DO UPDATE
SET value = EXCLUDED.value, version = ledger_state.version + 1
"""

INSERT_NEW_SQL = """
INSERT INTO ledger_state (key, value, version) VALUES (%s, %s, 1)
ON CONFLICT (key) DO NOTHING
RETURNING version
"""

UPDATE_IF_VERSION_SQL = """
UPDATE ledger_state SET value = %s, version = version + 1
WHERE key = %s AND version = %s
RETURNING version
"""


class PostgresLedger(VersionedLedger):
    """Ledger accessor over a PostgreSQL table."""

    def __init__(self, conninfo: str) -> None:
        """Connect and ensure the state table exists.

        Parameters
        ----------
        conninfo : str
            PostgreSQL connection string.
        """
        self.conninfo = conninfo
        try:
            self.conn = psycopg.connect(conninfo, autocommit=True)
            with self.conn.cursor() as cur:
                cur.execute(CREATE_TABLE_SQL)
        except psycopg.Error as e:
            raise ReadError(f"failed to open ledger: {e}") from e
        logger.info("Connected to PostgreSQL ledger")

    def get(self, key: str) -> bytes | None:
        value, _ = self.get_versioned(key)
        return value

    def get_versioned(self, key: str) -> tuple[bytes | None, int]:
        try:
            with self.conn.cursor() as cur:
                cur.execute("SELECT value, version FROM ledger_state WHERE key = %s", (key,))
                row = cur.fetchone()
        except psycopg.Error as e:
            raise ReadError(f"failed to read key {key!r} from world state: {e}") from e
        if row is None:
            return None, 0
        return bytes(row[0]), int(row[1])

    def put(self, key: str, value: bytes) -> None:
        try:
            with self.conn.cursor() as cur:
                cur.execute(UPSERT_SQL, (key, value))
        except psycopg.Error as e:
            raise WriteError(f"failed to write key {key!r} to world state: {e}") from e

    def compare_and_put(self, key: str, value: bytes, expected_version: int) -> int:
        try:
            with self.conn.cursor() as cur:
                if expected_version == 0:
                    cur.execute(INSERT_NEW_SQL, (key, value))
                else:
                    cur.execute(UPDATE_IF_VERSION_SQL, (value, key, expected_version))
                row = cur.fetchone()
        except psycopg.Error as e:
            raise WriteError(f"failed to write key {key!r} to world state: {e}") from e
        if row is None:
            raise ConcurrentModificationError(
                f"key {key!r} changed since version {expected_version}"
            )
        return int(row[0])

    def scan(self, start_key: str = "", end_key: str = "") -> Iterator[tuple[str, bytes]]:
        clauses = []
        params: list[str] = []
        if start_key:
            clauses.append('key >= %s COLLATE "C"')
            params.append(start_key)
        if end_key:
            clauses.append('key < %s COLLATE "C"')
            params.append(end_key)
        where = f" WHERE {' AND '.join(clauses)}" if clauses else ""
        query = f'SELECT key, value FROM ledger_state{where} ORDER BY key COLLATE "C"'  # noqa: S608

        try:
            with self.conn.cursor() as cur:
                cur.execute(query, params)
                rows = cur.fetchall()
        except psycopg.Error as e:
            raise ReadError(f"failed to scan world state: {e}") from e
        for key, value in rows:
            yield key, bytes(value)

    def close(self) -> None:
        """Close the connection."""
        self.conn.close()
