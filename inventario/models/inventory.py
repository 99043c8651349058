"""
Inventory Data Models

Records imported from a CSV base, the import report, and stored bases.
"""

from datetime import datetime
from typing import Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from inventario.models.common import FIELD_COLUMNS


class InventoryRecord(BaseModel):
    """One physical item. Aliases are the CSV column names."""

    numero: str = Field(default="", alias="NUMERO", description="Item identifier (natural key)")
    descricao: str = Field(default="", alias="DESCRIÇÃO")
    sala: str = Field(default="", alias="SALA")
    estado: str = Field(default="", alias="ESTADO DE CONSERVAÇÃO")
    status: str = Field(default="", alias="STATUS")
    etiquetado: str = Field(default="", alias="ETIQUETADO")
    observacao: str = Field(default="", alias="OBSERVAÇÃO")
    recomendacao: str = Field(default="", alias="RECOMENDAÇÃO")

    # Header columns outside the required set
    extras: Dict[str, str] = Field(default_factory=dict)

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_row(cls, row: Mapping[str, str]) -> "InventoryRecord":
        """Build a record from a column-name -> value mapping."""
        known = set(FIELD_COLUMNS.values())
        values = {column: row.get(column, "") or "" for column in known}
        extras = {k: v for k, v in row.items() if k not in known}
        return cls.model_validate({**values, "extras": extras})

    def to_row(self) -> Dict[str, str]:
        """Column-name -> value mapping in export order (extras excluded)."""
        return {column: getattr(self, name) for name, column in FIELD_COLUMNS.items()}


class SkippedLine(BaseModel):
    """A data line rejected during import."""
    line_number: int = Field(..., ge=1, description="1-based, the header is line 1")
    content: str = Field(..., description="Raw line, truncated")
    reason: str


class ImportReport(BaseModel):
    """Result of ingesting one CSV document."""
    items: List[InventoryRecord] = Field(default_factory=list)
    total_lines: int = 0
    skipped_lines: List[SkippedLine] = Field(default_factory=list)
    blank_lines_ignored: int = 0

    @property
    def imported_count(self) -> int:
        return len(self.items)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped_lines)

    @property
    def has_skipped(self) -> bool:
        return bool(self.skipped_lines)


class Database(BaseModel):
    """An imported inventory base."""

    id: str
    name: str
    created_at: datetime = Field(default_factory=datetime.utcnow)
    items: List[InventoryRecord] = Field(default_factory=list)


class DatabaseSummary(BaseModel):
    """Summary for base listing."""
    id: str
    name: str
    created_at: datetime
    items_count: int
    rooms_count: int


class RoomSummary(BaseModel):
    """Item counts for one room."""
    room: str
    items_count: int
    status_counts: Dict[str, int] = Field(default_factory=dict)


class ItemUpdate(BaseModel):
    """Manual edit of an item. Unset fields are left untouched."""
    descricao: Optional[str] = None
    sala: Optional[str] = None
    estado: Optional[str] = None
    status: Optional[str] = None
    etiquetado: Optional[str] = None
    observacao: Optional[str] = None
    recomendacao: Optional[str] = None


class CsvTextImportRequest(BaseModel):
    """CSV document sent as text instead of a file upload."""
    name: str = Field(..., min_length=1)
    csv_text: str
    allow_skipped: bool = Field(default=True, description="Store the base even if lines were skipped")


class SheetImportRequest(BaseModel):
    """Import from a spreadsheet published as CSV."""
    name: str = Field(..., min_length=1)
    sheet_url: str = Field(..., description="Published CSV URL")
    allow_skipped: bool = True


class SaveDbRequest(BaseModel):
    """A client-generated database file to write to disk."""
    name: str = Field(..., min_length=1, description="File name; directories are discarded")
    b64: str = Field(..., min_length=1, description="Base64-encoded file content")


class ImportResult(BaseModel):
    """Result of importing a CSV into a stored base."""
    success: bool
    database_id: Optional[str] = None
    name: str
    items_count: int
    total_lines: int
    skipped_lines: List[SkippedLine] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.utcnow)
