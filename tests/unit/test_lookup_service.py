"""Tests for record lookup, column resolution and room listing."""

import pytest

from inventario.models.inventory import InventoryRecord
from inventario.services.lookup_service import (
    NoColumnsError,
    find_record,
    items_in_room,
    list_rooms,
    resolve_column,
    room_summaries,
)


@pytest.fixture
def rows():
    return [
        {"NUMERO": "1457", "SALA": "Sala 1"},
        {"NUMERO": " 176 ", "SALA": "Sala 2"},
        {"NUMERO": "1457", "SALA": "Depósito"},
        {"id": "ABC", "SALA": "Almoxarifado"},
    ]


class TestFindRecord:

    def test_first_match_wins(self, rows):
        assert find_record(rows, "1457") is rows[0]

    def test_query_and_value_are_trimmed(self, rows):
        assert find_record(rows, "176 ") is rows[1]

    def test_match_is_case_sensitive(self, rows):
        assert find_record(rows, "ABC") is rows[3]
        assert find_record(rows, "abc") is None

    def test_blank_key_falls_through_to_next_candidate(self):
        table = [{"NUMERO": "", "id": "77"}, {"NUMERO": "  ", "Numero": "88"}]

        assert find_record(table, "77") is table[0]
        assert find_record(table, "88") is table[1]
        assert find_record(table, "") is None

    def test_blank_query(self, rows):
        assert find_record(rows, "  ") is None
        assert find_record(rows, None) is None

    def test_custom_key(self):
        table = [{"tag": "X1"}, {"tag": "X2"}]

        assert find_record(table, "X2", key_candidates=["tag"]) == {"tag": "X2"}
        assert find_record(table, "X2") is None


class TestResolveColumn:

    def test_exact_match_in_candidate_order(self):
        headers = ["NUMERO", "Local", "SALA"]

        assert resolve_column(headers) == "SALA"
        assert resolve_column(headers, ["local", "sala"]) == "Local"

    def test_substring_fallback(self):
        assert resolve_column(["NUMERO", "Nome da Sala"]) == "Nome da Sala"

    def test_defaults_to_first_column(self):
        assert resolve_column(["NUMERO", "DESCRIÇÃO"]) == "NUMERO"

    def test_no_columns(self):
        with pytest.raises(NoColumnsError):
            resolve_column([])


class TestRooms:

    def test_list_rooms_sorted_ignoring_case_and_accents(self, rows):
        rows.append({"NUMERO": "9", "SALA": "  "})
        rows.append({"NUMERO": "10", "SALA": "almoxarifado"})

        assert list_rooms(rows, "SALA") == [
            "Almoxarifado", "almoxarifado", "Depósito", "Sala 1", "Sala 2",
        ]

    def test_room_summaries_count_statuses(self):
        items = [
            InventoryRecord(numero="1", sala="Sala 1", status="Localizado"),
            InventoryRecord(numero="2", sala="Sala 1", status=""),
            InventoryRecord(numero="3", sala="Sala 1", status="Localizado"),
            InventoryRecord(numero="4", sala="Sala 2", status="Migrado"),
        ]
        summaries = room_summaries(items)

        assert [s.room for s in summaries] == ["Sala 1", "Sala 2"]
        assert summaries[0].items_count == 3
        assert summaries[0].status_counts == {"Localizado": 2, "Pendente": 1}
        assert summaries[1].status_counts == {"Migrado": 1}

    def test_room_summaries_empty(self):
        assert room_summaries([]) == []

    def test_items_in_room(self):
        items = [
            InventoryRecord(numero="1", sala="Sala 1"),
            InventoryRecord(numero="2", sala="Sala 2"),
        ]

        assert [i.numero for i in items_in_room(items, "Sala 2 ")] == ["2"]
