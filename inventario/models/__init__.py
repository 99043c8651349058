"""Inventory verification data models"""

from inventario.models.common import (
    FIELD_COLUMNS,
    IDENTIFIER_COLUMN,
    REQUIRED_COLUMNS,
    ConservationState,
    ItemStatus,
    TaggedFlag,
)
from inventario.models.inventory import (
    CsvTextImportRequest,
    Database,
    DatabaseSummary,
    ImportReport,
    ImportResult,
    InventoryRecord,
    ItemUpdate,
    RoomSummary,
    SaveDbRequest,
    SheetImportRequest,
    SkippedLine,
)
from inventario.models.voice import (
    ParsedCommand,
    VoiceApplyResponse,
    VoiceParseRequest,
)

__all__ = [
    # Common
    "ConservationState", "ItemStatus", "TaggedFlag",
    "FIELD_COLUMNS", "REQUIRED_COLUMNS", "IDENTIFIER_COLUMN",
    # Inventory
    "InventoryRecord", "SkippedLine", "ImportReport", "ImportResult",
    "Database", "DatabaseSummary", "RoomSummary", "ItemUpdate",
    "CsvTextImportRequest", "SheetImportRequest", "SaveDbRequest",
    # Voice
    "ParsedCommand", "VoiceParseRequest", "VoiceApplyResponse",
]
