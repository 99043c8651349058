"""
SQLite Repository

Persists imported inventory bases. One row per base; the records are kept
as a JSON array keyed by CSV column name.
"""

import json
import logging
import os
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from inventario.models.inventory import Database, DatabaseSummary, InventoryRecord

logger = logging.getLogger(__name__)

# Default database path
DEFAULT_DB_PATH = "./data/db/inventario.db"


def get_connection(db_path: Optional[str] = None) -> sqlite3.Connection:
    """Get a database connection."""
    db_path = db_path or os.environ.get("DATABASE_PATH", DEFAULT_DB_PATH)

    # Ensure directory exists
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def init_database(db_path: Optional[str] = None):
    """Initialize database tables."""
    conn = get_connection(db_path)

    try:
        cursor = conn.cursor()

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS databases (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                created_at TEXT NOT NULL,
                items TEXT NOT NULL
            )
        """)

        conn.commit()
        logger.info("Database initialized successfully")

    finally:
        conn.close()


class DatabaseRepository:
    """Key-value store of imported bases, keyed by base id."""

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path
        init_database(db_path)

    def _row_to_database(self, row: sqlite3.Row) -> Database:
        items = [InventoryRecord.model_validate(item) for item in json.loads(row["items"])]
        return Database(
            id=row["id"],
            name=row["name"],
            created_at=datetime.fromisoformat(row["created_at"]),
            items=items,
        )

    def get_all(self) -> List[Database]:
        """All stored bases, newest first."""
        conn = get_connection(self.db_path)

        try:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM databases ORDER BY created_at DESC")
            return [self._row_to_database(row) for row in cursor.fetchall()]

        finally:
            conn.close()

    def list_summaries(self) -> List[DatabaseSummary]:
        return [
            DatabaseSummary(
                id=db.id,
                name=db.name,
                created_at=db.created_at,
                items_count=len(db.items),
                rooms_count=len({item.sala.strip() for item in db.items if item.sala.strip()}),
            )
            for db in self.get_all()
        ]

    def get(self, database_id: str) -> Optional[Database]:
        conn = get_connection(self.db_path)

        try:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM databases WHERE id = ?", (database_id,))
            row = cursor.fetchone()

            if not row:
                return None

            return self._row_to_database(row)

        finally:
            conn.close()

    def save(self, database: Database):
        """Insert or replace a base."""
        conn = get_connection(self.db_path)

        try:
            cursor = conn.cursor()
            cursor.execute("""
                INSERT OR REPLACE INTO databases (id, name, created_at, items)
                VALUES (?, ?, ?, ?)
            """, (
                database.id,
                database.name,
                database.created_at.isoformat(),
                json.dumps(
                    [item.model_dump(by_alias=True) for item in database.items],
                    ensure_ascii=False,
                ),
            ))

            conn.commit()
            logger.info(f"Saved base {database.id} ({len(database.items)} items)")

        finally:
            conn.close()

    def delete(self, database_id: str) -> bool:
        """Delete a base. Returns False if it did not exist."""
        conn = get_connection(self.db_path)

        try:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM databases WHERE id = ?", (database_id,))
            conn.commit()
            deleted = cursor.rowcount > 0
            if deleted:
                logger.info(f"Deleted base {database_id}")
            return deleted

        finally:
            conn.close()
