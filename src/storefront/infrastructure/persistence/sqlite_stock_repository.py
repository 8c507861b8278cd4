"""SQLite-backed stock counters.

Every multi-counter write runs inside ``BEGIN IMMEDIATE`` so concurrent
processes sharing the database file serialize on the write lock, and each
decrement is a conditional ``UPDATE`` that only succeeds while the counter
stays non-negative.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import structlog
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from storefront.domain.exceptions import StockLedgerError
from storefront.domain.model.value_objects import StockKey
from storefront.domain.repository.stock_repository import StockRepository

logger = structlog.get_logger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS stock (
    key      TEXT PRIMARY KEY,
    quantity INTEGER NOT NULL CHECK (quantity >= 0)
)
"""


class _Busy(StockLedgerError):
    """The database stayed locked past the connection timeout."""


_retry_when_busy = retry(
    reraise=True,
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=0.05, min=0.05, max=1),
    retry=retry_if_exception_type(_Busy),
)


class SqliteStockRepository(StockRepository):

    def __init__(self, db_path: Path, timeout: float = 5.0) -> None:
        self._db_path = db_path
        self._timeout = timeout
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        with self._transaction() as conn:
            conn.execute(_SCHEMA)

    # --- StockRepository interface --------------------------------------------

    def get_levels(self, keys: list[StockKey]) -> dict[StockKey, int]:
        if not keys:
            return {}
        with self._transaction(immediate=False) as conn:
            return self._read(conn, keys)

    @_retry_when_busy
    def decrement_all(self, quantities: dict[StockKey, int]) -> dict[StockKey, int] | None:
        with self._transaction() as conn:
            for key, qty in sorted(quantities.items(), key=lambda kv: str(kv[0])):
                cursor = conn.execute(
                    "UPDATE stock SET quantity = quantity - ? WHERE key = ? AND quantity >= ?",
                    (qty, str(key), qty),
                )
                if cursor.rowcount != 1:
                    conn.rollback()
                    return self._read(conn, list(quantities))
        return None

    @_retry_when_busy
    def increment_all(self, quantities: dict[StockKey, int]) -> None:
        with self._transaction() as conn:
            for key, qty in sorted(quantities.items(), key=lambda kv: str(kv[0])):
                cursor = conn.execute(
                    "UPDATE stock SET quantity = quantity + ? WHERE key = ?",
                    (qty, str(key)),
                )
                if cursor.rowcount != 1:
                    conn.rollback()
                    raise StockLedgerError(f"Stock counter {key} does not exist")

    @_retry_when_busy
    def set_level(self, key: StockKey, quantity: int) -> None:
        with self._transaction() as conn:
            conn.execute(
                "INSERT INTO stock (key, quantity) VALUES (?, ?) "
                "ON CONFLICT(key) DO UPDATE SET quantity = excluded.quantity",
                (str(key), quantity),
            )

    def list_all(self) -> dict[StockKey, int]:
        with self._transaction(immediate=False) as conn:
            rows = conn.execute("SELECT key, quantity FROM stock").fetchall()
        return {StockKey.parse(key): qty for key, qty in rows}

    # --- Internal helpers -----------------------------------------------------

    @staticmethod
    def _read(conn: sqlite3.Connection, keys: list[StockKey]) -> dict[StockKey, int]:
        by_name = {str(k): k for k in keys}
        placeholders = ",".join("?" for _ in by_name)
        rows = conn.execute(
            f"SELECT key, quantity FROM stock WHERE key IN ({placeholders})",
            list(by_name),
        ).fetchall()
        return {by_name[key]: qty for key, qty in rows}

    @contextmanager
    def _transaction(self, immediate: bool = True) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(self._db_path, timeout=self._timeout, isolation_level=None)
        try:
            if immediate:
                conn.execute("BEGIN IMMEDIATE")
            yield conn
            if conn.in_transaction:
                conn.commit()
        except sqlite3.OperationalError as exc:
            if conn.in_transaction:
                conn.rollback()
            if "locked" in str(exc) or "busy" in str(exc):
                logger.warning("Stock database busy", db=str(self._db_path), error=str(exc))
                raise _Busy(str(exc)) from exc
            raise StockLedgerError(f"Stock database error: {exc}") from exc
        except sqlite3.Error as exc:
            if conn.in_transaction:
                conn.rollback()
            raise StockLedgerError(f"Stock database error: {exc}") from exc
        except BaseException:
            if conn.in_transaction:
                conn.rollback()
            raise
        finally:
            conn.close()
