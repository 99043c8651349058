"""
Lookup Service - record lookup, column resolution and room listing

Works on plain tables (sequences of column -> value mappings) so it can be
used on imported records as well as on rows loaded from elsewhere.
"""

import logging
import unicodedata
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from inventario.models.common import FIELD_COLUMNS
from inventario.models.inventory import InventoryRecord, RoomSummary

logger = logging.getLogger(__name__)

STATUS_COLUMN = FIELD_COLUMNS["status"]
PENDING_STATUS = "Pendente"

IDENTIFIER_CANDIDATES = ("NUMERO", "Numero", "numero", "id", "ID")

ROOM_CANDIDATES = (
    "sala", "local", "room", "localizacao", "localização",
    "sala_nome", "ambiente", "setor",
)


class NoColumnsError(ValueError):
    """The table has no columns to choose from."""

    def __init__(self):
        super().__init__("A base não contém cabeçalhos (colunas)")


def find_record(
    rows: Iterable[Mapping[str, str]],
    query: str,
    key_candidates: Sequence[str] = IDENTIFIER_CANDIDATES,
) -> Optional[Mapping[str, str]]:
    """
    Find the first row whose identifier matches the query.

    The identifier of a row is the value of the first candidate key that is
    present and non-blank. Matching is case-sensitive against the trimmed query.
    """
    rows = list(rows)
    index = find_record_index(rows, query, key_candidates)
    return rows[index] if index is not None else None


def find_record_index(
    rows: Sequence[Mapping[str, str]],
    query: str,
    key_candidates: Sequence[str] = IDENTIFIER_CANDIDATES,
) -> Optional[int]:
    """Position of the row find_record would return, or None."""
    if query is None:
        return None
    target = str(query).strip()
    if not target:
        return None

    for index, row in enumerate(rows):
        for key in key_candidates:
            value = row.get(key)
            if value is None or not str(value).strip():
                continue
            if str(value).strip() == target:
                return index
            break

    logger.debug(f"Item {target} not found")
    return None


def resolve_column(headers: Sequence[str], candidates: Sequence[str] = ROOM_CANDIDATES) -> str:
    """
    Pick the column that best matches an ordered list of name synonyms.

    Exact (case-insensitive) matches are tried in candidate order, then
    substring matches, then the first column.

    Raises:
        NoColumnsError: If there are no headers at all
    """
    if not headers:
        raise NoColumnsError()

    lowered = [str(h).strip().lower() for h in headers]

    for candidate in candidates:
        candidate = candidate.lower()
        if candidate in lowered:
            return headers[lowered.index(candidate)]

    for candidate in candidates:
        candidate = candidate.lower()
        for index, header in enumerate(lowered):
            if candidate in header:
                return headers[index]

    return headers[0]


def _sort_key(value: str) -> Tuple[str, str]:
    """Case- and accent-insensitive ordering, like a pt-BR base collation."""
    decomposed = unicodedata.normalize("NFKD", value)
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    # Raw value breaks ties so the order is deterministic
    return stripped.casefold(), value


def list_rooms(rows: Iterable[Mapping[str, str]], room_column: str) -> List[str]:
    """Unique, non-blank room names in collation order."""
    rooms = set()
    for row in rows:
        value = row.get(room_column)
        if value is not None and str(value).strip():
            rooms.add(str(value).strip())
    return sorted(rooms, key=_sort_key)


def room_summaries(items: Sequence[InventoryRecord]) -> List[RoomSummary]:
    """Item and per-status counts for every room of a base."""
    rows = [item.to_row() for item in items]
    if not rows:
        return []

    room_column = resolve_column(list(rows[0].keys()))
    rooms = list_rooms(rows, room_column)

    df = pd.DataFrame(rows)
    df[room_column] = df[room_column].astype(str).str.strip()

    summaries = []
    for room in rooms:
        room_df = df[df[room_column] == room]
        # Items not yet verified have an empty status
        counts = room_df[STATUS_COLUMN].replace("", PENDING_STATUS).value_counts()
        summaries.append(RoomSummary(
            room=room,
            items_count=len(room_df),
            status_counts={str(k): int(v) for k, v in counts.items()},
        ))

    return summaries


def items_in_room(items: Sequence[InventoryRecord], room: str) -> List[InventoryRecord]:
    target = room.strip()
    return [item for item in items if item.sala.strip() == target]
