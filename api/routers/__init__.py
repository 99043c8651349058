"""API Routers"""

from api.routers import databases, files, health, voice

__all__ = ["databases", "files", "health", "voice"]
