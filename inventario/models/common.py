"""Common types and column contract used across the inventory core."""

from enum import Enum
from typing import Dict, List


class ConservationState(str, Enum):
    """Canonical conservation-state labels."""
    BOM = "Bom"
    IRREVERSIVEL = "Irreversível"
    RECUPERAVEL = "Recuperável"
    OCIOSO = "Ocioso"


class ItemStatus(str, Enum):
    """Verification status of an item."""
    LOCALIZADO = "Localizado"
    MIGRADO = "Migrado"
    NAO_LOCALIZADO = "Não Localizado"


class TaggedFlag(str, Enum):
    """Whether the item carries an inventory tag."""
    SIM = "Sim"
    NAO = "Não"


# Field name -> CSV column name. Order is the export order.
FIELD_COLUMNS: Dict[str, str] = {
    "numero": "NUMERO",
    "descricao": "DESCRIÇÃO",
    "sala": "SALA",
    "estado": "ESTADO DE CONSERVAÇÃO",
    "status": "STATUS",
    "etiquetado": "ETIQUETADO",
    "observacao": "OBSERVAÇÃO",
    "recomendacao": "RECOMENDAÇÃO",
}

REQUIRED_COLUMNS: List[str] = list(FIELD_COLUMNS.values())

IDENTIFIER_COLUMN = FIELD_COLUMNS["numero"]
