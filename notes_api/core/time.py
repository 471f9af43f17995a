"""
Utilidades de fecha/hora en UTC compartidas por servicios y repositorios.
"""
from __future__ import annotations

from datetime import datetime, timezone


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime | str) -> datetime:
    """Normaliza un datetime leído de Mongo a UTC aware.

    pymongo devuelve fechas naive (en UTC) salvo que el cliente use tz_aware;
    también se aceptan cadenas ISO-8601 por compatibilidad con datos viejos.
    """
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def iso_utc(value: datetime | None) -> str | None:
    """Serializa a ISO-8601 con sufijo Z (formato que consume el cliente)."""
    if value is None:
        return None
    return as_utc(value).isoformat(timespec="milliseconds").replace("+00:00", "Z")
