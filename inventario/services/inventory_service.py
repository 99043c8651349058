"""
Inventory Service - import, storage and verification of inventory bases

Glues the CSV engine, the voice interpreter and the lookup helpers onto the
base repository.
"""

import logging
import uuid
from typing import Dict, List, Optional, Tuple

import requests

from inventario.models.inventory import (
    Database,
    DatabaseSummary,
    ImportReport,
    InventoryRecord,
    RoomSummary,
)
from inventario.models.voice import ParsedCommand, VoiceApplyResponse
from inventario.services.csv_service import export_csv, parse_csv
from inventario.services.lookup_service import (
    find_record_index,
    items_in_room,
    room_summaries,
)
from inventario.services.voice_service import parse_voice_command
from inventario.storage.sqlite_repo import DatabaseRepository

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = (
    "descricao", "sala", "estado", "status",
    "etiquetado", "observacao", "recomendacao",
)


class IncompleteImportError(ValueError):
    """Lines were skipped and the caller did not accept a partial import."""

    def __init__(self, report: ImportReport):
        self.report = report
        super().__init__(
            f"{report.skipped_count} linha(s) ignorada(s) durante a importação"
        )


class SheetFetchError(ValueError):
    """A published spreadsheet could not be downloaded."""


def apply_fields(record: InventoryRecord, updates: Dict[str, Optional[str]]) -> InventoryRecord:
    """Return a copy of the record with the non-None updates applied."""
    changes = {
        name: value
        for name, value in updates.items()
        if name in UPDATABLE_FIELDS and value is not None
    }
    return record.model_copy(update=changes)


def apply_command(record: InventoryRecord, command: ParsedCommand) -> InventoryRecord:
    """Fill a record with the fields mentioned in a voice command."""
    return apply_fields(record, command.model_dump(exclude={"numero", "raw_text"}))


class InventoryService:
    """Main service for inventory bases."""

    def __init__(
        self,
        repository: Optional[DatabaseRepository] = None,
        sheet_timeout: int = 30,
    ):
        self.repository = repository or DatabaseRepository()
        self.sheet_timeout = sheet_timeout

    # =========================================================================
    # Import / export
    # =========================================================================

    def preview_csv(self, text: str) -> ImportReport:
        """Parse without storing anything."""
        return parse_csv(text)

    def import_csv(
        self,
        text: str,
        name: str,
        allow_skipped: bool = True,
    ) -> Tuple[Database, ImportReport]:
        """
        Parse a CSV document and store it as a new base.

        Raises:
            CsvImportError: On document-level failures
            IncompleteImportError: If lines were skipped and allow_skipped is False
        """
        report = parse_csv(text)

        if report.has_skipped and not allow_skipped:
            raise IncompleteImportError(report)

        database = Database(
            id=f"db_{uuid.uuid4().hex[:12]}",
            name=name,
            items=report.items,
        )
        self.repository.save(database)

        logger.info(
            f"Imported base '{name}' ({database.id}): {report.imported_count} items, "
            f"{report.skipped_count} lines skipped"
        )
        return database, report

    def import_sheet(
        self,
        sheet_url: str,
        name: str,
        allow_skipped: bool = True,
    ) -> Tuple[Database, ImportReport]:
        """Download a published spreadsheet (CSV output) and import it."""
        try:
            response = requests.get(sheet_url, timeout=self.sheet_timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Failed to download sheet {sheet_url}: {e}")
            raise SheetFetchError(f"Falha ao baixar a planilha: {e}") from e

        response.encoding = response.encoding or "utf-8"
        return self.import_csv(response.text, name, allow_skipped=allow_skipped)

    def export_database(self, database_id: str) -> Optional[str]:
        database = self.repository.get(database_id)
        if not database:
            return None
        return export_csv(database.items)

    # =========================================================================
    # Base CRUD
    # =========================================================================

    def list_databases(self) -> List[DatabaseSummary]:
        return self.repository.list_summaries()

    def get_database(self, database_id: str) -> Optional[Database]:
        return self.repository.get(database_id)

    def delete_database(self, database_id: str) -> bool:
        return self.repository.delete(database_id)

    # =========================================================================
    # Rooms and items
    # =========================================================================

    def get_rooms(self, database_id: str) -> Optional[List[RoomSummary]]:
        database = self.repository.get(database_id)
        if not database:
            return None
        return room_summaries(database.items)

    def get_room_items(self, database_id: str, room: str) -> Optional[List[InventoryRecord]]:
        database = self.repository.get(database_id)
        if not database:
            return None
        return items_in_room(database.items, room)

    def _locate(self, database: Database, numero: str) -> Optional[int]:
        rows = [item.to_row() for item in database.items]
        return find_record_index(rows, numero)

    def find_item(self, database_id: str, numero: str) -> Optional[InventoryRecord]:
        database = self.repository.get(database_id)
        if not database:
            return None
        index = self._locate(database, numero)
        return database.items[index] if index is not None else None

    def update_item(
        self,
        database_id: str,
        numero: str,
        updates: Dict[str, Optional[str]],
    ) -> Optional[InventoryRecord]:
        """Apply updates to the first item with this number and store the base."""
        database = self.repository.get(database_id)
        if not database:
            return None

        index = self._locate(database, numero)
        if index is None:
            return None

        updated = apply_fields(database.items[index], updates)
        database.items[index] = updated
        self.repository.save(database)
        return updated

    # =========================================================================
    # Voice
    # =========================================================================

    def apply_voice_command(
        self,
        database_id: str,
        text: str,
        numero: Optional[str] = None,
    ) -> Optional[VoiceApplyResponse]:
        """
        Interpret a transcript and apply it to the item it names.

        An explicit numero (the item currently on screen) is used when the
        transcript does not mention one.
        """
        database = self.repository.get(database_id)
        if not database:
            return None

        command = parse_voice_command(text)
        target = command.numero or numero
        if not target:
            logger.info("Voice command without item number, nothing applied")
            return VoiceApplyResponse(command=command)

        index = self._locate(database, target)
        if index is None:
            logger.info(f"Voice command for unknown item {target}")
            return VoiceApplyResponse(command=command)

        updated = apply_command(database.items[index], command)
        database.items[index] = updated
        self.repository.save(database)

        return VoiceApplyResponse(command=command, item=updated, applied=True)
