"""Service status: liveness, base store readiness and import limits."""

import os
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Any, Dict

from fastapi import APIRouter, Depends

from api.config import Settings, get_settings
from api.dependencies import get_inventory_service
from inventario.models.common import REQUIRED_COLUMNS
from inventario.services.inventory_service import InventoryService

router = APIRouter(prefix="/health")


def _now() -> str:
    return datetime.utcnow().isoformat() + "Z"


def _base_store_check(service: InventoryService) -> Dict[str, Any]:
    try:
        bases = service.list_databases()
    except sqlite3.Error as e:
        return {"status": "error", "message": str(e)}
    return {"status": "ok", "bases": len(bases)}


def _save_dir_check(path: str) -> Dict[str, Any]:
    save_dir = Path(path)
    try:
        save_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        return {"status": "error", "message": str(e)}
    if not os.access(save_dir, os.W_OK):
        return {"status": "error", "message": f"{save_dir} is not writable"}
    return {"status": "ok", "path": str(save_dir)}


@router.get("")
async def health_check() -> Dict[str, Any]:
    """Liveness only; does not touch the base store."""
    return {"status": "ok", "timestamp": _now()}


@router.get("/ready")
async def readiness_check(
    settings: Settings = Depends(get_settings),
    service: InventoryService = Depends(get_inventory_service),
) -> Dict[str, Any]:
    """Ready when stored bases can be listed and /save-db can write."""
    checks = {
        "base_store": _base_store_check(service),
        "save_dir": _save_dir_check(settings.saved_db_dir),
    }
    ready = all(check["status"] == "ok" for check in checks.values())
    return {"status": "ready" if ready else "degraded", "timestamp": _now(), "checks": checks}


@router.get("/info")
async def service_info(settings: Settings = Depends(get_settings)) -> Dict[str, Any]:
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "required_columns": REQUIRED_COLUMNS,
        "max_upload_size_mb": settings.max_upload_size_mb,
    }
