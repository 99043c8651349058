"""
Voice Command API Routes

Interpretation of finalized speech transcripts. Speech capture itself
happens in the browser.
"""

from fastapi import APIRouter

from inventario.models.voice import ParsedCommand, VoiceParseRequest
from inventario.services.voice_service import parse_voice_command

router = APIRouter()


@router.post("/parse", response_model=ParsedCommand)
async def parse_command(request: VoiceParseRequest):
    """
    Extract item fields from a transcript.

    Example: "número 1457 estado bom observação armário sem chave"
    """
    return parse_voice_command(request.text)
