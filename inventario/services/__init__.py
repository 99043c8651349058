"""Inventory verification services"""

from inventario.services.csv_service import (
    CsvImportError,
    EmptyCsvError,
    MissingColumnsError,
    export_csv,
    parse_csv,
)
from inventario.services.inventory_service import (
    IncompleteImportError,
    InventoryService,
    SheetFetchError,
)
from inventario.services.lookup_service import (
    NoColumnsError,
    find_record,
    list_rooms,
    resolve_column,
)
from inventario.services.voice_service import parse_voice_command

__all__ = [
    "InventoryService",
    "parse_csv",
    "export_csv",
    "parse_voice_command",
    "find_record",
    "resolve_column",
    "list_rooms",
    "CsvImportError",
    "EmptyCsvError",
    "MissingColumnsError",
    "IncompleteImportError",
    "SheetFetchError",
    "NoColumnsError",
]
