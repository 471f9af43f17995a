"""Entrada principal de la app FastAPI (configura middlewares, excepciones y routers)."""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from notes_api.api.router import api_router
from notes_api.core.config import Settings, get_settings
from notes_api.core.exceptions import register_exception_handlers
from notes_api.core.logging import setup_logging
from notes_api.core.middleware import add_middlewares
from notes_api.infrastructure.db.bootstrap import ensure_collections
from notes_api.infrastructure.db.mongo import close_mongo, db_ready, init_mongo
from notes_api.infrastructure.email.email_client import build_email_client

_log = logging.getLogger("notes.startup")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Construye la app con una configuración explícita (inyectada en app.state)."""
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        settings.check_required()
        app.state.email_client = build_email_client(settings)
        if not db_ready():
            init_mongo(settings)
        # Garantiza índices/validadores mínimos; no impide el arranque si fallan
        try:
            ensure_collections()
        except Exception as e:
            _log.warning("ensure_collections() falló: %s", e)
        yield
        close_mongo()

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.settings = settings

    add_middlewares(app, settings)
    register_exception_handlers(app)

    # Monta routers bajo el prefijo configurado
    app.include_router(api_router, prefix=settings.api_prefix_normalized)
    return app


app = create_app()
