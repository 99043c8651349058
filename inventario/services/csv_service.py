"""
CSV Ingestion

Tolerant CSV parser for inventory bases. Per-line problems never abort the
import: they are reported as skipped lines so the caller can decide whether
to keep the partial data.
"""

import logging
import re
from typing import Iterable, List, Optional, Tuple

from inventario.models.common import IDENTIFIER_COLUMN, REQUIRED_COLUMNS
from inventario.models.inventory import ImportReport, InventoryRecord, SkippedLine

logger = logging.getLogger(__name__)

BOM = "\ufeff"
MAX_CONTENT_LENGTH = 200

REASON_BLANK = "Linha vazia ou sem dados válidos"
REASON_MISSING_ID = (
    f"Campo {IDENTIFIER_COLUMN} vazio ou ausente. "
    "Este campo é obrigatório para identificar o item."
)

_NEWLINES = re.compile(r"\r\n|\n|\r")


class CsvImportError(ValueError):
    """Document-level failure: nothing is imported."""


class EmptyCsvError(CsvImportError):
    """The document has no content."""

    def __init__(self):
        super().__init__("Arquivo CSV vazio")


class MissingColumnsError(CsvImportError):
    """The header lacks one or more required columns."""

    def __init__(self, missing: List[str]):
        self.missing = missing
        super().__init__(f"Colunas obrigatórias ausentes: {', '.join(missing)}")


def split_lines(text: str) -> List[str]:
    """
    Split a normalized document into logical lines.

    A newline inside an open quote run belongs to the field, not the line.
    Quote characters are kept so the line can be tokenized afterwards.
    """
    lines = []
    current = []
    in_quotes = False
    i = 0

    while i < len(text):
        char = text[i]
        if char == '"':
            current.append(char)
            if in_quotes and i + 1 < len(text) and text[i + 1] == '"':
                current.append('"')
                i += 1
            else:
                in_quotes = not in_quotes
        elif char == "\n" and not in_quotes:
            lines.append("".join(current))
            current = []
        else:
            current.append(char)
        i += 1

    lines.append("".join(current))
    return lines


def tokenize_line(line: str) -> List[str]:
    """Split one logical line into trimmed fields."""
    fields = []
    current = []
    in_quotes = False
    i = 0

    while i < len(line):
        char = line[i]
        if char == '"':
            if in_quotes and i + 1 < len(line) and line[i + 1] == '"':
                # Escaped quote
                current.append('"')
                i += 1
            else:
                in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        i += 1

    fields.append("".join(current).strip())
    return fields


def _normalize(text: str) -> str:
    if text.startswith(BOM):
        text = text[1:]
    return text.replace("\r\n", "\n").replace("\r", "\n")


def _skip(line_number: int, content: str, reason: str) -> SkippedLine:
    return SkippedLine(
        line_number=line_number,
        content=content[:MAX_CONTENT_LENGTH],
        reason=reason,
    )


def _classify_line(
    line_number: int,
    line: str,
    headers: List[str],
) -> Tuple[Optional[InventoryRecord], Optional[SkippedLine]]:
    """Return (record, None) for an accepted line or (None, skipped) otherwise."""
    values = tokenize_line(line)

    if not values or not any(v.strip() for v in values):
        return None, _skip(line_number, line, REASON_BLANK)

    if len(values) != len(headers):
        return None, _skip(
            line_number,
            line,
            f"Número de colunas incorreto. Esperado: {len(headers)} colunas, "
            f"Encontrado: {len(values)} colunas. "
            "Verifique vírgulas extras ou campos mal formatados.",
        )

    row = dict(zip(headers, values))

    if not row.get(IDENTIFIER_COLUMN, "").strip():
        return None, _skip(line_number, line, REASON_MISSING_ID)

    return InventoryRecord.from_row(row), None


def parse_csv(text: str) -> ImportReport:
    """
    Parse a full CSV document into an import report.

    Args:
        text: Complete CSV document, optionally BOM-prefixed

    Returns:
        ImportReport with accepted items and skipped lines, in input order

    Raises:
        EmptyCsvError: If the document has no content
        MissingColumnsError: If the header lacks required columns
    """
    normalized = _normalize(text)
    if not normalized.strip():
        raise EmptyCsvError()

    lines = split_lines(normalized)
    headers = tokenize_line(lines[0])

    missing = [col for col in REQUIRED_COLUMNS if col not in headers]
    if missing:
        raise MissingColumnsError(missing)

    report = ImportReport(total_lines=len(lines))

    for index, line in enumerate(lines[1:], start=2):
        if line == "":
            report.blank_lines_ignored += 1
            continue

        try:
            record, skipped = _classify_line(index, line, headers)
        except Exception as e:
            logger.warning(f"Failed to process line {index}: {e}")
            skipped = _skip(index, line, f"Erro ao processar: {e}")
            record = None

        if record is not None:
            report.items.append(record)
        else:
            report.skipped_lines.append(skipped)

    logger.info(
        f"Parsed CSV: {report.imported_count} items, "
        f"{report.skipped_count} skipped of {report.total_lines} lines"
    )
    return report


def escape_field(value) -> str:
    """Escape one value so a record always fits on a single CSV line."""
    if value is None:
        return ""
    value = str(value)

    had_newline = bool(_NEWLINES.search(value))
    value = _NEWLINES.sub(" ", value)

    if had_newline or "," in value or '"' in value:
        return '"' + value.replace('"', '""') + '"'
    return value


def export_csv(items: Iterable[InventoryRecord]) -> str:
    """Render records as CSV text with the required header."""
    rows = [",".join(REQUIRED_COLUMNS)]
    for item in items:
        row = item.to_row()
        rows.append(",".join(escape_field(row[col]) for col in REQUIRED_COLUMNS))
    return "\n".join(rows)
