"""
Inventário API

Serves CSV base import/export, room and item lookup, and voice commands.
Run with: uvicorn api.main:app --reload  (or the inventario-api script)
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.config import Settings, get_settings
from api.dependencies import get_repository
from api.middleware.errors import setup_exception_handlers
from api.middleware.logging import RequestLoggingMiddleware
from api.routers import databases, files, health, voice

logger = logging.getLogger(__name__)

# (router, prefix, tag)
ROUTES = (
    (health.router, "", "Health"),
    (files.router, "", "Files"),
    (databases.router, "/api/v1/databases", "Databases"),
    (voice.router, "/api/v1/voice", "Voice"),
)


def configure_logging(settings: Settings):
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def prepare_storage(settings: Settings):
    """Create the data and save directories and the base store tables."""
    for directory in (settings.data_dir, settings.saved_db_dir):
        Path(directory).mkdir(parents=True, exist_ok=True)
    get_repository()
    logger.info(f"Base store at {settings.database_path}, saved files in {settings.saved_db_dir}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    prepare_storage(settings)
    yield
    logger.info("Shutting down...")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application: middleware, error handlers and routers."""
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Physical inventory verification: CSV bases and voice commands",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    setup_exception_handlers(app)

    for router, prefix, tag in ROUTES:
        app.include_router(router, prefix=prefix, tags=[tag])

    return app


configure_logging(get_settings())
app = create_app()


def run():
    """Console entry point."""
    import uvicorn

    settings = get_settings()
    uvicorn.run("api.main:app", host=settings.host, port=settings.port, reload=settings.debug)


if __name__ == "__main__":
    run()
