"""
Configuración de logging para la aplicación e integración con Uvicorn.
"""
import logging


def setup_logging(level: str = "INFO") -> None:
    lvl = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=lvl,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access", "notes"):
        logging.getLogger(name).setLevel(lvl)
    # pymongo es muy verboso en DEBUG (heartbeats, selección de servidor)
    logging.getLogger("pymongo").setLevel(max(lvl, logging.WARNING))
