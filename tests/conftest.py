"""Pytest configuration and fixtures."""

import os
import tempfile
from pathlib import Path
from typing import Generator

import pytest
from fastapi.testclient import TestClient

# Set test environment before importing app
_TEST_DATA_DIR = tempfile.mkdtemp(prefix="inventario-tests-")
os.environ["DEBUG"] = "true"
os.environ["DATA_DIR"] = _TEST_DATA_DIR
os.environ["DATABASE_PATH"] = os.path.join(_TEST_DATA_DIR, "db", "inventario.db")
os.environ["SAVED_DB_DIR"] = _TEST_DATA_DIR

from inventario.models.common import REQUIRED_COLUMNS  # noqa: E402
from inventario.services.inventory_service import InventoryService  # noqa: E402
from inventario.storage.sqlite_repo import DatabaseRepository  # noqa: E402

HEADER = ",".join(REQUIRED_COLUMNS)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def repository(temp_dir: Path) -> DatabaseRepository:
    """Base repository on a fresh SQLite file."""
    return DatabaseRepository(db_path=str(temp_dir / "bases.db"))


@pytest.fixture
def inventory_service(repository: DatabaseRepository) -> InventoryService:
    return InventoryService(repository=repository)


@pytest.fixture
def api_client(temp_dir: Path) -> Generator[TestClient, None, None]:
    """FastAPI test client with an isolated base store and save directory."""
    from api.config import Settings, get_settings
    from api.dependencies import get_inventory_service
    from api.main import app

    settings = Settings(
        data_dir=str(temp_dir),
        database_path=str(temp_dir / "api.db"),
        saved_db_dir=str(temp_dir / "saved"),
    )
    service = InventoryService(repository=DatabaseRepository(db_path=settings.database_path))

    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_inventory_service] = lambda: service

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def sample_csv() -> str:
    """A small base: two rooms, one multi-line field, one bad line."""
    return "\n".join([
        HEADER,
        '"1457","Armário de aço","Sala 1","Bom","Localizado","Sim","",""',
        '"176","Gaveteiro","Sala 2","","","","",""',
        '"200","Cadeira, de madeira","Sala 1","Recuperável","","Não","Encosto solto",""',
        '"300","Mesa","Sala 2","Bom","Migrado"',
        '"301","Quadro branco","sala 3","Bom","","Sim","Linha um',
        'linha dois",""',
    ])
