"""Inventory base API endpoints."""

import logging
import re
import unicodedata
from typing import List, Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Query, UploadFile
from fastapi.responses import Response

from api.config import get_settings
from api.dependencies import get_inventory_service
from api.middleware.errors import NotFoundError, ValidationError
from inventario.models.inventory import (
    CsvTextImportRequest,
    Database,
    DatabaseSummary,
    ImportReport,
    ImportResult,
    InventoryRecord,
    ItemUpdate,
    RoomSummary,
    SheetImportRequest,
)
from inventario.models.voice import VoiceApplyResponse, VoiceParseRequest
from inventario.services.inventory_service import InventoryService

logger = logging.getLogger(__name__)

router = APIRouter()


async def _read_csv_upload(file: UploadFile) -> str:
    """Read an uploaded CSV as text, enforcing the size limit."""
    settings = get_settings()

    if not file.filename:
        raise ValidationError("No filename provided")

    ext = file.filename.rsplit(".", 1)[-1].lower()
    if ext != "csv":
        raise ValidationError(f"Unsupported file type: {ext}. Use .csv")

    content = await file.read()
    if len(content) > settings.max_upload_size_bytes:
        raise ValidationError(
            f"File too large (max {settings.max_upload_size_mb} MB)",
            details={"size_bytes": len(content)},
        )

    try:
        return content.decode("utf-8")
    except UnicodeDecodeError:
        raise ValidationError("CSV must be UTF-8 encoded")


def _import_result(database: Database, report: ImportReport) -> ImportResult:
    return ImportResult(
        success=True,
        database_id=database.id,
        name=database.name,
        items_count=report.imported_count,
        total_lines=report.total_lines,
        skipped_lines=report.skipped_lines,
    )


def _get_or_404(service: InventoryService, database_id: str) -> Database:
    database = service.get_database(database_id)
    if not database:
        raise NotFoundError("Database", database_id)
    return database


def _attachment_header(name: str, extension: str = ".csv") -> str:
    """
    Content-Disposition for a download named after a base.

    Headers are latin-1 only, so the plain filename gets an ASCII rendering
    and the real name travels in filename* (RFC 5987).
    """
    ascii_name = unicodedata.normalize("NFKD", name).encode("ascii", "ignore").decode("ascii")
    ascii_name = " ".join(re.sub(r"[^\w .()-]", "_", ascii_name).split()) or "base"
    return (
        f"attachment; filename=\"{ascii_name}{extension}\"; "
        f"filename*=UTF-8''{quote(name + extension, safe='')}"
    )


# =============================================================================
# Import
# =============================================================================

@router.post("/preview", response_model=ImportReport)
async def preview_csv(
    file: UploadFile = File(...),
    service: InventoryService = Depends(get_inventory_service),
):
    """Parse a CSV and report accepted and skipped lines without storing it."""
    text = await _read_csv_upload(file)
    return service.preview_csv(text)


@router.post("", response_model=ImportResult, status_code=201)
async def import_csv(
    file: UploadFile = File(...),
    name: Optional[str] = Query(None, description="Base name"),
    allow_skipped: bool = Query(True, description="Store even if lines were skipped"),
    service: InventoryService = Depends(get_inventory_service),
):
    """Upload a CSV and store it as a new base."""
    text = await _read_csv_upload(file)
    database, report = service.import_csv(
        text,
        name=name or file.filename.rsplit(".", 1)[0],
        allow_skipped=allow_skipped,
    )

    return _import_result(database, report)


@router.post("/import-csv", response_model=ImportResult, status_code=201)
async def import_csv_text(
    request: CsvTextImportRequest,
    service: InventoryService = Depends(get_inventory_service),
):
    """Store a base from CSV text sent in the request body."""
    database, report = service.import_csv(
        request.csv_text,
        name=request.name,
        allow_skipped=request.allow_skipped,
    )

    return _import_result(database, report)


@router.post("/import-sheet", response_model=ImportResult, status_code=201)
def import_sheet(
    request: SheetImportRequest,
    service: InventoryService = Depends(get_inventory_service),
):
    """Download a spreadsheet published as CSV and store it as a new base."""
    database, report = service.import_sheet(
        request.sheet_url,
        name=request.name,
        allow_skipped=request.allow_skipped,
    )

    return _import_result(database, report)


# =============================================================================
# Bases
# =============================================================================

@router.get("", response_model=List[DatabaseSummary])
async def list_databases(
    service: InventoryService = Depends(get_inventory_service),
):
    """List stored bases, newest first."""
    return service.list_databases()


@router.get("/{database_id}", response_model=Database)
async def get_database(
    database_id: str,
    service: InventoryService = Depends(get_inventory_service),
):
    return _get_or_404(service, database_id)


@router.delete("/{database_id}")
async def delete_database(
    database_id: str,
    service: InventoryService = Depends(get_inventory_service),
):
    """Delete a base. This is permanent."""
    if not service.delete_database(database_id):
        raise NotFoundError("Database", database_id)
    return {"status": "deleted", "database_id": database_id}


@router.get("/{database_id}/export")
async def export_database(
    database_id: str,
    service: InventoryService = Depends(get_inventory_service),
):
    """Download the base as CSV, one line per item."""
    database = _get_or_404(service, database_id)
    csv_text = service.export_database(database_id)

    return Response(
        content=csv_text.encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": _attachment_header(database.name)},
    )


# =============================================================================
# Rooms and items
# =============================================================================

@router.get("/{database_id}/rooms", response_model=List[RoomSummary])
async def list_rooms(
    database_id: str,
    service: InventoryService = Depends(get_inventory_service),
):
    """Rooms of a base with item counts per status."""
    rooms = service.get_rooms(database_id)
    if rooms is None:
        raise NotFoundError("Database", database_id)
    return rooms


@router.get("/{database_id}/rooms/{room}/items", response_model=List[InventoryRecord])
async def list_room_items(
    database_id: str,
    room: str,
    service: InventoryService = Depends(get_inventory_service),
):
    items = service.get_room_items(database_id, room)
    if items is None:
        raise NotFoundError("Database", database_id)
    return items


@router.get("/{database_id}/items/{numero}", response_model=InventoryRecord)
async def get_item(
    database_id: str,
    numero: str,
    service: InventoryService = Depends(get_inventory_service),
):
    _get_or_404(service, database_id)
    item = service.find_item(database_id, numero)
    if not item:
        raise NotFoundError("Item", numero)
    return item


@router.patch("/{database_id}/items/{numero}", response_model=InventoryRecord)
async def update_item(
    database_id: str,
    numero: str,
    update: ItemUpdate,
    service: InventoryService = Depends(get_inventory_service),
):
    """Manual edit of an item. Fields left out are not changed."""
    _get_or_404(service, database_id)
    item = service.update_item(database_id, numero, update.model_dump(exclude_unset=True))
    if not item:
        raise NotFoundError("Item", numero)
    return item


@router.post("/{database_id}/voice", response_model=VoiceApplyResponse)
async def apply_voice_command(
    database_id: str,
    request: VoiceParseRequest,
    numero: Optional[str] = Query(None, description="Item on screen, used when the transcript names none"),
    service: InventoryService = Depends(get_inventory_service),
):
    """Interpret a transcript and update the item it refers to."""
    result = service.apply_voice_command(database_id, request.text, numero=numero)
    if result is None:
        raise NotFoundError("Database", database_id)
    return result
