"""
Rate limit muy simple en memoria (por identificador + ruta).

Uso típico:
- Envío de OTP: allow((f"{ip}:{email}", "/auth/send-otp"), limit=5, window_seconds=60)
- Verificación de OTP: allow((f"{ip}:{email}", "/auth/verify-otp"), limit=10, window_seconds=60)
- Login: allow((ip, "/auth/login"), limit=10, window_seconds=60)
"""
from threading import Lock
from time import time
from typing import Dict, Tuple

BUCKET: Dict[Tuple[str, str], list[float]] = {}
_lock = Lock()


def _prune(now: float, window_seconds: int) -> None:
    """Descarta claves cuya ventana quedó vacía."""
    for k in [k for k, q in BUCKET.items() if not q or now - q[-1] >= window_seconds]:
        del BUCKET[k]


def allow(key: Tuple[str, str], limit: int = 5, window_seconds: int = 60) -> bool:
    """Devuelve True si se permite la acción y registra el intento.

    key: (identificador, ruta)
    limit: máximo de intentos dentro de la ventana (<= 0 desactiva el límite)
    window_seconds: ventana de tiempo en segundos
    """
    if limit <= 0:
        return True
    now = time()
    with _lock:
        _prune(now, window_seconds)
        q = BUCKET.setdefault(key, [])
        # elimina timestamps fuera de ventana
        q[:] = [t for t in q if now - t < window_seconds]
        if len(q) >= limit:
            return False
        q.append(now)
        return True


def reset() -> None:
    """Limpia el bucket (útil en tests o reinicios)."""
    with _lock:
        BUCKET.clear()
