"""SQLite repository backend.

Every collection shares one ``documents`` table holding JSON documents,
keyed by (collection, key) with an ``owner`` column indexed for the
character- and location-scoped lookups.

Storage location: ``StorageSettings.database_path`` (default
``data/questforge.db``).
"""

from __future__ import annotations

import json
import sqlite3
import threading
from collections.abc import Generator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any

from questforge.core.exceptions import StorageError
from questforge.core.logging import get_logger
from questforge.storage.repository import Collection, Repository

logger = get_logger(__name__)


class SQLiteRepository(Repository):
    """Repository persisting records to a SQLite database file.

    Outside a transaction each operation opens, commits and closes its own
    connection. Inside ``transaction()`` all operations on the calling thread
    share one connection that is committed or rolled back as a unit.
    """

    SCHEMA_VERSION = 1

    def __init__(self, db_path: str | Path) -> None:
        """Initialize database.

        Args:
            db_path: Path to the database file. ``:memory:`` is not supported
                because every connection would see a separate database.
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._local = threading.local()

        self._init_schema()

        logger.info("Database initialized", path=str(self.db_path))

    @contextmanager
    def _get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Yield the transaction connection, or a short-lived one with cleanup."""
        shared = getattr(self._local, "conn", None)
        if shared is not None:
            # Rollback is left to transaction(); the caller may recover
            try:
                yield shared
            except sqlite3.Error as exc:
                raise StorageError(f"SQLite operation failed: {exc}") from exc
            return

        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            raise StorageError(f"SQLite operation failed: {exc}") from exc
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_schema(self) -> None:
        """Initialize database schema."""
        with self._get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS schema_version (
                    version INTEGER PRIMARY KEY
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS documents (
                    collection TEXT NOT NULL,
                    key TEXT NOT NULL,
                    owner TEXT,
                    data TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    PRIMARY KEY (collection, key)
                )
            """)

            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_documents_owner
                ON documents(collection, owner)
            """)

            cursor.execute("""
                INSERT OR REPLACE INTO schema_version (version) VALUES (?)
            """, (self.SCHEMA_VERSION,))

    # =========================================================================
    # Document primitives
    # =========================================================================

    def _fetch(self, collection: Collection, key: str) -> dict[str, Any] | None:
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT data FROM documents WHERE collection = ? AND key = ?",
                (collection.value, key),
            ).fetchone()
        return json.loads(row["data"]) if row else None

    def _scan(self, collection: Collection, owner: str | None = None) -> list[dict[str, Any]]:
        with self._get_connection() as conn:
            if owner is None:
                rows = conn.execute(
                    "SELECT data FROM documents WHERE collection = ? ORDER BY rowid",
                    (collection.value,),
                ).fetchall()
            else:
                rows = conn.execute(
                    """
                    SELECT data FROM documents
                    WHERE collection = ? AND owner = ? ORDER BY rowid
                    """,
                    (collection.value, owner),
                ).fetchall()
        return [json.loads(row["data"]) for row in rows]

    def _put(
        self,
        collection: Collection,
        key: str,
        document: dict[str, Any],
        *,
        owner: str | None = None,
    ) -> None:
        with self._get_connection() as conn:
            # Upsert keeps the rowid, so scan order stays insertion order
            conn.execute(
                """
                INSERT INTO documents (collection, key, owner, data, updated_at)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(collection, key) DO UPDATE SET
                    owner = excluded.owner,
                    data = excluded.data,
                    updated_at = excluded.updated_at
                """,
                (
                    collection.value,
                    key,
                    owner,
                    json.dumps(document),
                    datetime.now().isoformat(),
                ),
            )

    def _remove(self, collection: Collection, key: str) -> bool:
        with self._get_connection() as conn:
            cursor = conn.execute(
                "DELETE FROM documents WHERE collection = ? AND key = ?",
                (collection.value, key),
            )
            return cursor.rowcount > 0

    @contextmanager
    def transaction(self) -> Generator[None, None, None]:
        if getattr(self._local, "conn", None) is not None:
            yield
            return

        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        self._local.conn = conn
        try:
            yield
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            logger.warning("Transaction rolled back", error=str(exc))
            raise StorageError(f"SQLite transaction failed: {exc}") from exc
        except BaseException:
            conn.rollback()
            logger.warning("Transaction rolled back")
            raise
        finally:
            self._local.conn = None
            conn.close()

    def count(self, collection: Collection) -> int:
        """Number of stored documents in a collection."""
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT COUNT(*) FROM documents WHERE collection = ?",
                (collection.value,),
            ).fetchone()
        return row[0]


__all__ = ["SQLiteRepository"]
