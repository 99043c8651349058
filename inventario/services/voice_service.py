"""
Voice Command Interpreter

Turns a finalized pt-BR transcript into structured item fields.

Each field has its own extraction rule, a pure function over the normalized
transcript. Every rule sees the same string, so one rule never consumes text
another rule needs. Expected phrasings:

- "176 recomendação gaveteiro precisa de reparo"
- "número 1457 estado bom observação armário sem chave"
- "item 88 localizado etiquetado"
"""

import logging
import re
from typing import Callable, List, Optional, Tuple

from inventario.models.common import ConservationState, ItemStatus, TaggedFlag
from inventario.models.voice import ParsedCommand

logger = logging.getLogger(__name__)

ExtractionRule = Callable[[str], Optional[str]]

OBSERVATION_KEYWORD = r"\b(?:observa[çc](?:[ãa]o|[õo]es)|obs)\b"
RECOMMENDATION_KEYWORD = r"\brecomend\w*"
STATE_KEYWORD = r"\bestado\b"

_ANCHORED_NUMBER = re.compile(r"^\s*(?:n[úu]mero|item)\s+(\d+)\b")
_DIGIT_RUN = re.compile(r"\b\d{3,}\b")
_STATE = re.compile(STATE_KEYWORD + r"\s+([\w\s]+)")
_STATE_END = re.compile(f"{OBSERVATION_KEYWORD}|{RECOMMENDATION_KEYWORD}")
_OBSERVATION = re.compile(OBSERVATION_KEYWORD + r"\s*(.*)$")
_OBSERVATION_END = re.compile(f"{STATE_KEYWORD}\\s|{RECOMMENDATION_KEYWORD}")
_RECOMMENDATION = re.compile(RECOMMENDATION_KEYWORD + r"\s*(.*)$")
_TAG = re.compile(r"\betiquet(?:ado|a)")
_NEGATION = re.compile(r"\bn[ãa]o\b")

STATE_SYNONYMS = {
    "bom": ConservationState.BOM.value,
    "irreversivel": ConservationState.IRREVERSIVEL.value,
    "irreversível": ConservationState.IRREVERSIVEL.value,
    "recuperavel": ConservationState.RECUPERAVEL.value,
    "recuperável": ConservationState.RECUPERAVEL.value,
    "ocioso": ConservationState.OCIOSO.value,
}

# Negative forms first: "localizado" is a substring of them.
STATUS_KEYWORDS: List[Tuple[str, str]] = [
    ("não localizado", ItemStatus.NAO_LOCALIZADO.value),
    ("nao localizado", ItemStatus.NAO_LOCALIZADO.value),
    ("localizado", ItemStatus.LOCALIZADO.value),
    ("migrado", ItemStatus.MIGRADO.value),
]


def normalize_transcript(text: str) -> str:
    """Lower-case and drop commas and periods."""
    return re.sub(r"[.,]", "", text.lower())


def capitalize_first(text: str) -> str:
    if not text:
        return text
    return text[0].upper() + text[1:]


def _clean(text: Optional[str]) -> Optional[str]:
    if text is None:
        return None
    text = " ".join(text.split())
    return capitalize_first(text) or None


def _state_phrase(text: str) -> Optional[str]:
    """Words after "estado", cut at the next section keyword."""
    match = _STATE.search(text)
    if not match:
        return None
    phrase = _STATE_END.split(match.group(1))[0]
    phrase = " ".join(phrase.split())
    return phrase or None


def _split_state(phrase: str) -> Tuple[str, Optional[str]]:
    """Return (state, trailing free text) for a captured state phrase."""
    if phrase in STATE_SYNONYMS:
        return STATE_SYNONYMS[phrase], None

    first, _, rest = phrase.partition(" ")
    if first in STATE_SYNONYMS:
        return STATE_SYNONYMS[first], rest or None

    return capitalize_first(phrase), None


# =============================================================================
# Extraction rules
# =============================================================================

def extract_numero(text: str) -> Optional[str]:
    """Item identifier: anchored "número N"/"item N", else first 3+ digit run."""
    match = _ANCHORED_NUMBER.match(text)
    if match:
        return match.group(1)
    match = _DIGIT_RUN.search(text)
    return match.group(0) if match else None


def extract_estado(text: str) -> Optional[str]:
    phrase = _state_phrase(text)
    if phrase is None:
        return None
    return _split_state(phrase)[0]


def extract_status(text: str) -> Optional[str]:
    for keyword, label in STATUS_KEYWORDS:
        if keyword in text:
            return label
    return None


def extract_etiquetado(text: str) -> Optional[str]:
    if not _TAG.search(text):
        return None
    if _NEGATION.search(text):
        return TaggedFlag.NAO.value
    return TaggedFlag.SIM.value


def extract_observacao(text: str) -> Optional[str]:
    """Text after the observation keyword, up to the next section keyword."""
    match = _OBSERVATION.search(text)
    if not match:
        return None
    return _clean(_OBSERVATION_END.split(match.group(1))[0])


def extract_trailing_observacao(text: str) -> Optional[str]:
    """
    Free text spoken right after a known state value.

    Speakers often describe the item right after naming its state without
    saying "observação", e.g. "estado bom armário sem chave".
    """
    phrase = _state_phrase(text)
    if phrase is None:
        return None
    return _clean(_split_state(phrase)[1])


def extract_recomendacao(text: str) -> Optional[str]:
    """Everything after the first "recomend..." word."""
    match = _RECOMMENDATION.search(text)
    if not match:
        return None
    return _clean(match.group(1))


EXTRACTION_RULES: List[Tuple[str, ExtractionRule]] = [
    ("numero", extract_numero),
    ("estado", extract_estado),
    ("status", extract_status),
    ("etiquetado", extract_etiquetado),
    ("observacao", extract_observacao),
    ("recomendacao", extract_recomendacao),
]

# Consulted only when the primary rule for the field found nothing.
FALLBACK_RULES: List[Tuple[str, ExtractionRule]] = [
    ("observacao", extract_trailing_observacao),
]


def parse_voice_command(text: str) -> ParsedCommand:
    """
    Interpret one transcript.

    Never raises: fields that were not mentioned are left as None.
    """
    normalized = normalize_transcript(text or "")
    fields = {}

    for name, rule in EXTRACTION_RULES:
        value = rule(normalized)
        if value is not None:
            fields[name] = value

    for name, rule in FALLBACK_RULES:
        if name in fields:
            continue
        value = rule(normalized)
        if value is not None:
            fields[name] = value

    command = ParsedCommand(raw_text=text or "", **fields)
    logger.debug(f"Parsed voice command {normalized!r}: {fields}")
    return command
