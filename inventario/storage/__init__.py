"""Data storage layer."""

from inventario.storage.sqlite_repo import (
    DatabaseRepository,
    get_connection,
    init_database,
)

__all__ = [
    "DatabaseRepository",
    "get_connection",
    "init_database",
]
