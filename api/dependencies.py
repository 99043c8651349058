"""
API Dependencies

Dependency injection for services.
"""

from functools import lru_cache

from api.config import get_settings
from inventario.services import InventoryService
from inventario.storage import DatabaseRepository


@lru_cache()
def get_repository() -> DatabaseRepository:
    """Get singleton base repository."""
    settings = get_settings()
    return DatabaseRepository(db_path=settings.database_path)


@lru_cache()
def get_inventory_service() -> InventoryService:
    """Get singleton inventory service."""
    settings = get_settings()
    return InventoryService(
        repository=get_repository(),
        sheet_timeout=settings.sheet_timeout_seconds,
    )
