"""Tests for record models and settings."""

from api.config import Settings
from inventario.models.inventory import InventoryRecord


class TestInventoryRecord:

    def test_accepts_field_names_and_column_names(self):
        by_name = InventoryRecord(numero="1457", observacao="Sem chave")
        by_column = InventoryRecord.model_validate({"NUMERO": "1457", "OBSERVAÇÃO": "Sem chave"})

        assert by_name == by_column
        assert InventoryRecord.model_config["populate_by_name"] is True

    def test_serializes_by_column_name(self):
        data = InventoryRecord(numero="1", sala="Sala 1").model_dump(by_alias=True)

        assert data["NUMERO"] == "1"
        assert data["SALA"] == "Sala 1"


class TestSettings:

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("SHEET_TIMEOUT_SECONDS", "5")
        monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test")

        settings = Settings()

        assert settings.sheet_timeout_seconds == 5
        assert settings.cors_origin_list == ["http://a.test", "http://b.test"]
        assert Settings.model_config["env_file"] == ".env"
