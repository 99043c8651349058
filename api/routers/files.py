"""Endpoint for saving client-generated database files to disk."""

import base64
import binascii
import logging
from pathlib import Path

from fastapi import APIRouter, Depends

from api.config import Settings, get_settings
from api.middleware.errors import ValidationError
from inventario.models.inventory import SaveDbRequest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/save-db")
async def save_db(
    request: SaveDbRequest,
    settings: Settings = Depends(get_settings),
):
    """
    Write a base64-encoded file into the save directory.

    Only the base name of the requested file name is used, so the file
    always lands directly inside the save directory.
    """
    filename = Path(request.name).name
    if filename in ("", ".", ".."):
        raise ValidationError("Invalid file name", details={"name": request.name})

    try:
        content = base64.b64decode(request.b64, validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError("b64 is not valid base64")

    out_dir = Path(settings.saved_db_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / filename
    path.write_bytes(content)

    logger.info(f"Saved {path} ({len(content)} bytes)")
    return {"ok": True, "path": str(path), "size_bytes": len(content)}
