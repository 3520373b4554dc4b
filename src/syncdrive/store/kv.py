"""Ordered key-value file backed by SQLite."""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, Optional, Union

from loguru import logger

from syncdrive.errors import StorageError

from .codec import StorageRecord

_SCHEMA = """
CREATE TABLE IF NOT EXISTS records (
    path TEXT PRIMARY KEY NOT NULL,
    is_folder INTEGER NOT NULL DEFAULT 0,
    payload BLOB NOT NULL
) WITHOUT ROWID;
"""


class KvSession:
    """
    Operations on one open connection.

    Only valid inside OrderedKvFile.session(); the connection is closed when
    the session block exits.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def get(self, key: str) -> Optional[StorageRecord]:
        row = self._conn.execute(
            "SELECT path, is_folder, payload FROM records WHERE path = ?",
            (key,),
        ).fetchone()
        return _row_to_record(row) if row is not None else None

    def put(self, record: StorageRecord) -> None:
        self._conn.execute(
            "INSERT OR REPLACE INTO records (path, is_folder, payload) VALUES (?, ?, ?)",
            _record_params(record),
        )

    def put_many(self, records: Iterable[StorageRecord]) -> int:
        params = [_record_params(r) for r in records]
        if not params:
            return 0
        self._conn.executemany(
            "INSERT OR REPLACE INTO records (path, is_folder, payload) VALUES (?, ?, ?)",
            params,
        )
        return len(params)

    def replace(self, record: StorageRecord) -> bool:
        """Overwrite an existing record. Returns False if the key is absent."""
        cur = self._conn.execute(
            "UPDATE records SET is_folder = ?, payload = ? WHERE path = ?",
            (int(record.is_folder), sqlite3.Binary(record.payload), record.path),
        )
        return cur.rowcount > 0

    def delete(self, key: str) -> bool:
        cur = self._conn.execute("DELETE FROM records WHERE path = ?", (key,))
        return cur.rowcount > 0

    def scan(self, lower: str, upper: str) -> list[StorageRecord]:
        """Return records with lower <= key < upper in key order."""
        rows = self._conn.execute(
            "SELECT path, is_folder, payload FROM records "
            "WHERE path >= ? AND path < ? ORDER BY path",
            (lower, upper),
        ).fetchall()
        return [_row_to_record(row) for row in rows]

    def count(self) -> int:
        row = self._conn.execute("SELECT COUNT(*) FROM records").fetchone()
        return int(row[0])


class OrderedKvFile:
    """
    An embedded ordered key-value file.

    Keys are TEXT compared with SQLite's BINARY collation (UTF-8 byte
    order), so range scans follow the natural path order. No connection is
    kept between sessions.
    """

    def __init__(self, db_path: Union[str, Path]) -> None:
        self.db_path = Path(db_path)

    @contextmanager
    def session(self) -> Iterator[KvSession]:
        """
        Open a connection, yield a session, commit and close.

        Any sqlite3.Error inside the block rolls back the whole session and is
        re-raised as StorageError.
        """
        conn = self._connect()
        try:
            yield KvSession(conn)
            conn.commit()
        except sqlite3.Error as exc:
            _rollback(conn)
            raise StorageError(
                "Metadata store operation failed",
                details={"db_path": str(self.db_path)},
                cause=exc,
            ) from exc
        except BaseException:
            _rollback(conn)
            raise
        finally:
            conn.close()

    def _connect(self) -> sqlite3.Connection:
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(str(self.db_path))
        except (OSError, sqlite3.Error) as exc:
            raise StorageError(
                "Failed to open metadata store",
                details={"db_path": str(self.db_path)},
                cause=exc,
            ) from exc

        try:
            conn.execute("PRAGMA synchronous = FULL")
            conn.executescript(_SCHEMA)
        except sqlite3.Error as exc:
            conn.close()
            raise StorageError(
                "Failed to initialize metadata store",
                details={"db_path": str(self.db_path)},
                cause=exc,
            ) from exc
        return conn


def _rollback(conn: sqlite3.Connection) -> None:
    try:
        conn.rollback()
    except sqlite3.Error as exc:
        logger.warning(f"Rollback failed: {exc}")


def _record_params(record: StorageRecord) -> tuple[str, int, sqlite3.Binary]:
    return (record.path, int(record.is_folder), sqlite3.Binary(record.payload))


def _row_to_record(row: tuple) -> StorageRecord:
    return StorageRecord(path=row[0], is_folder=bool(row[1]), payload=bytes(row[2]))
