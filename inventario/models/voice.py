"""
Voice Command Models

Structured fields extracted from a spoken transcript.
"""

from typing import Optional

from pydantic import BaseModel, Field

from inventario.models.inventory import InventoryRecord


class ParsedCommand(BaseModel):
    """
    Fields extracted from one transcript.

    None means the field was not mentioned.
    """
    numero: Optional[str] = None
    estado: Optional[str] = None
    status: Optional[str] = None
    etiquetado: Optional[str] = None
    observacao: Optional[str] = None
    recomendacao: Optional[str] = None
    raw_text: str = Field(..., description="Transcript exactly as received")

    @property
    def is_empty(self) -> bool:
        return all(value is None for value in self.model_dump(exclude={"raw_text"}).values())


class VoiceParseRequest(BaseModel):
    """Request to interpret a finalized transcript."""
    text: str = Field(..., description="Finalized speech-recognition transcript")


class VoiceApplyResponse(BaseModel):
    """Result of applying a transcript to a stored base."""
    command: ParsedCommand
    item: Optional[InventoryRecord] = Field(default=None, description="Updated item, if one matched")
    applied: bool = False
