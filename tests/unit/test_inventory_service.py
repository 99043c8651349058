"""Tests for the inventory service and base repository."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from inventario.models.inventory import Database, InventoryRecord
from inventario.models.voice import ParsedCommand
from inventario.services.csv_service import MissingColumnsError, parse_csv
from inventario.services.inventory_service import (
    IncompleteImportError,
    SheetFetchError,
    apply_command,
    apply_fields,
)


class TestApplyCommand:

    def test_only_mentioned_fields_change(self):
        record = InventoryRecord(numero="1457", descricao="Armário", estado="Ocioso", observacao="antiga")
        command = ParsedCommand(numero="1457", estado="Bom", status="Localizado", raw_text="...")

        updated = apply_command(record, command)

        assert updated.estado == "Bom"
        assert updated.status == "Localizado"
        assert updated.observacao == "antiga"
        assert updated.descricao == "Armário"
        assert record.estado == "Ocioso"

    def test_numero_is_never_overwritten(self):
        record = InventoryRecord(numero="1")

        assert apply_fields(record, {"numero": "2", "sala": "Sala 9"}).numero == "1"


class TestRepository:

    def test_save_get_delete(self, repository):
        database = Database(id="db_1", name="Campus", items=[InventoryRecord(numero="1", sala="Sala 1")])
        repository.save(database)

        loaded = repository.get("db_1")
        assert loaded.name == "Campus"
        assert loaded.items == database.items

        assert repository.delete("db_1") is True
        assert repository.get("db_1") is None
        assert repository.delete("db_1") is False

    def test_save_replaces_existing(self, repository):
        repository.save(Database(id="db_1", name="Antigo"))
        repository.save(Database(id="db_1", name="Novo"))

        assert [db.name for db in repository.get_all()] == ["Novo"]

    def test_extras_survive_storage(self, repository):
        item = InventoryRecord(numero="1", extras={"PLACA": "X"})
        repository.save(Database(id="db_1", name="Campus", items=[item]))

        assert repository.get("db_1").items[0].extras == {"PLACA": "X"}


class TestInventoryService:

    def test_import_stores_accepted_items(self, inventory_service, sample_csv):
        database, report = inventory_service.import_csv(sample_csv, name="Campus")

        assert len(database.items) == 4
        assert report.skipped_count == 1
        assert inventory_service.get_database(database.id).items == database.items

    def test_import_refuses_partial_when_asked(self, inventory_service, sample_csv):
        with pytest.raises(IncompleteImportError) as exc_info:
            inventory_service.import_csv(sample_csv, name="Campus", allow_skipped=False)

        assert exc_info.value.report.skipped_count == 1
        assert inventory_service.list_databases() == []

    def test_import_propagates_document_errors(self, inventory_service):
        with pytest.raises(MissingColumnsError):
            inventory_service.import_csv("NUMERO,SALA\n1,Sala 1", name="Campus")

    def test_list_databases(self, inventory_service, sample_csv):
        inventory_service.import_csv(sample_csv, name="Campus")

        summaries = inventory_service.list_databases()
        assert len(summaries) == 1
        assert summaries[0].items_count == 4
        assert summaries[0].rooms_count == 3

    def test_export_round_trip(self, inventory_service, sample_csv):
        database, _ = inventory_service.import_csv(sample_csv, name="Campus")

        exported = inventory_service.export_database(database.id)
        items = parse_csv(exported).items

        assert [i.numero for i in items] == ["1457", "176", "200", "301"]
        assert items[3].observacao == "Linha um linha dois"

    def test_unknown_database(self, inventory_service):
        assert inventory_service.export_database("missing") is None
        assert inventory_service.get_rooms("missing") is None
        assert inventory_service.find_item("missing", "1") is None
        assert inventory_service.apply_voice_command("missing", "1457 localizado") is None

    def test_rooms(self, inventory_service, sample_csv):
        database, _ = inventory_service.import_csv(sample_csv, name="Campus")

        rooms = inventory_service.get_rooms(database.id)
        assert [r.room for r in rooms] == ["Sala 1", "Sala 2", "sala 3"]
        assert rooms[0].status_counts == {"Localizado": 1, "Pendente": 1}

        items = inventory_service.get_room_items(database.id, "Sala 1")
        assert [i.numero for i in items] == ["1457", "200"]

    def test_update_item(self, inventory_service, sample_csv):
        database, _ = inventory_service.import_csv(sample_csv, name="Campus")

        updated = inventory_service.update_item(database.id, "176", {"status": "Migrado", "estado": None})

        assert updated.status == "Migrado"
        assert inventory_service.find_item(database.id, "176").status == "Migrado"
        assert inventory_service.update_item(database.id, "999", {"status": "Migrado"}) is None

    def test_voice_command_updates_named_item(self, inventory_service, sample_csv):
        database, _ = inventory_service.import_csv(sample_csv, name="Campus")

        result = inventory_service.apply_voice_command(
            database.id, "176 recomendação gaveteiro precisa de reparo"
        )

        assert result.applied
        assert result.item.recomendacao == "Gaveteiro precisa de reparo"
        assert inventory_service.find_item(database.id, "176").recomendacao == "Gaveteiro precisa de reparo"

    def test_voice_command_uses_item_on_screen(self, inventory_service, sample_csv):
        database, _ = inventory_service.import_csv(sample_csv, name="Campus")

        result = inventory_service.apply_voice_command(database.id, "estado ocioso", numero="200")

        assert result.applied
        assert result.item.numero == "200"
        assert result.item.estado == "Ocioso"

    def test_voice_command_for_unknown_item(self, inventory_service, sample_csv):
        database, _ = inventory_service.import_csv(sample_csv, name="Campus")

        result = inventory_service.apply_voice_command(database.id, "9999 localizado")

        assert not result.applied
        assert result.item is None
        assert result.command.status == "Localizado"


class TestImportSheet:

    @patch("inventario.services.inventory_service.requests.get")
    def test_downloads_and_imports(self, mock_get, inventory_service, sample_csv):
        response = MagicMock()
        response.text = sample_csv
        response.encoding = "utf-8"
        mock_get.return_value = response

        database, report = inventory_service.import_sheet("https://example.com/pub?output=csv", name="Planilha")

        mock_get.assert_called_once_with("https://example.com/pub?output=csv", timeout=30)
        assert len(database.items) == 4

    @patch("inventario.services.inventory_service.requests.get")
    def test_download_failure(self, mock_get, inventory_service):
        mock_get.side_effect = requests.ConnectionError("offline")

        with pytest.raises(SheetFetchError):
            inventory_service.import_sheet("https://example.com/pub?output=csv", name="Planilha")
