"""Cliente MongoDB (pymongo) compartido por los repositorios.

Un único `MongoClient` por proceso (mantiene su propio pool de conexiones);
los repositorios obtienen la base con `get_db()`.
"""
from __future__ import annotations

import logging
from typing import Optional

import certifi
from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError

from notes_api.core.config import Settings

_log = logging.getLogger("notes.mongo")

_client: Optional[MongoClient] = None
_db: Optional[Database] = None


def _build_client(settings: Settings) -> MongoClient:
    uri = settings.mongo_uri
    kwargs = dict(serverSelectionTimeoutMS=15000)
    if uri.startswith("mongodb+srv://"):
        # SRV ya implica TLS; proveemos CA bundle para robustez
        kwargs["tlsCAFile"] = certifi.where()
    elif settings.mongo_tls:
        kwargs["tls"] = True
        kwargs["tlsCAFile"] = certifi.where()
        kwargs["tlsAllowInvalidCertificates"] = settings.mongo_tls_insecure
    return MongoClient(uri, **kwargs)


def init_mongo(settings: Settings, client: Optional[MongoClient] = None) -> None:
    """
    Inicializa el cliente y valida conexión (ping).
    Llamar una sola vez en el startup; `client` permite inyectar uno ya construido.
    """
    global _client, _db
    if client is None:
        client = _build_client(settings)
        try:
            client.admin.command("ping")
        except PyMongoError as e:
            # No tumbar la app: las peticiones fallarán con 500 hasta que haya conexión
            _log.warning("Mongo no accesible: %s", e)
    _client = client
    _db = client[settings.mongo_db]
    _log.info("Mongo listo db=%s", settings.mongo_db)


def get_db() -> Database:
    """
    Devuelve la referencia a la base de datos.
    Úsalo en repositorios/servicios, no en routers.
    """
    if _db is None:
        raise RuntimeError("Mongo no inicializado. Intenta más tarde.")
    return _db


def db_ready() -> bool:
    return _db is not None


def ping() -> bool:
    """True si el servidor responde; usado por /health."""
    if _client is None:
        return False
    try:
        _client.admin.command("ping")
        return True
    except PyMongoError:
        return False


def close_mongo() -> None:
    global _client, _db
    if _client is not None:
        _client.close()
    _client = None
    _db = None
