from __future__ import annotations

from typing import Final

from filmbuff.config_base import (
    _cap_float_min,
    _cap_int,
    _get_env_bool,
    _get_env_float,
    _get_env_int,
    _get_env_str,
)

# ============================================================
# Cliente (defaults; los argumentos del constructor siempre ganan)
# ============================================================

FILMBUFF_LOCALE: str = _get_env_str("FILMBUFF_LOCALE", "en_US") or "en_US"
FILMBUFF_SSL: bool = _get_env_bool("FILMBUFF_SSL", True)

# ============================================================
# Endpoints
# ============================================================

FILMBUFF_LOOKUP_HOST: str = _get_env_str("FILMBUFF_LOOKUP_HOST", "app.imdb.com") or "app.imdb.com"
FILMBUFF_LOOKUP_PATH: Final[str] = "/title/maindetails"

# IMDb no sirve la búsqueda por título sobre https.
FILMBUFF_SEARCH_URL: str = (
    _get_env_str("FILMBUFF_SEARCH_URL", "http://www.imdb.com/xml/find") or "http://www.imdb.com/xml/find"
)

# ============================================================
# HTTP (transporte)
# ============================================================

FILMBUFF_HTTP_TIMEOUT_SECONDS: float = _cap_float_min(
    "FILMBUFF_HTTP_TIMEOUT_SECONDS",
    _get_env_float("FILMBUFF_HTTP_TIMEOUT_SECONDS", 10.0),
    min_v=0.5,
)

# 0 => sin reintentos (comportamiento por defecto del cliente).
FILMBUFF_HTTP_RETRY_TOTAL: int = _cap_int(
    "FILMBUFF_HTTP_RETRY_TOTAL",
    _get_env_int("FILMBUFF_HTTP_RETRY_TOTAL", 0),
    min_v=0,
    max_v=10,
)
FILMBUFF_HTTP_RETRY_BACKOFF_FACTOR: float = _cap_float_min(
    "FILMBUFF_HTTP_RETRY_BACKOFF_FACTOR",
    _get_env_float("FILMBUFF_HTTP_RETRY_BACKOFF_FACTOR", 0.5),
    min_v=0.0,
)

# ============================================================
# Caché en memoria (InMemoryCache)
# ============================================================

FILMBUFF_CACHE_MAX_ENTRIES: int = _cap_int(
    "FILMBUFF_CACHE_MAX_ENTRIES",
    _get_env_int("FILMBUFF_CACHE_MAX_ENTRIES", 512),
    min_v=1,
    max_v=500_000,
)
FILMBUFF_CACHE_TTL_SECONDS: float = _cap_float_min(
    "FILMBUFF_CACHE_TTL_SECONDS",
    _get_env_float("FILMBUFF_CACHE_TTL_SECONDS", 60.0 * 60.0),
    min_v=0.0,
)
