from __future__ import annotations

"""
filmbuff/cache.py

Caché HTTP opcional y enchufable.

- HTTPCache: protocolo mínimo que el cliente usa sin conocer la implementación
  (get/set de cuerpos de respuesta por clave).
- InMemoryCache: implementación en proceso, bounded (LRU aproximado) + TTL.
- build_cache_key(): clave estable "GET <url-con-query-ordenada>".

El cliente trata la caché como best-effort: un fallo de caché se loguea y nunca
rompe la llamada.
"""

import threading
import time
from collections.abc import Mapping
from typing import Protocol

import requests

from filmbuff import config as _config


class HTTPCache(Protocol):
    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str) -> None:
        ...


def build_cache_key(url: str, params: Mapping[str, str], *, method: str = "GET") -> str:
    """Clave independiente del orden en que se pasen los params."""
    ordered = sorted((str(k), str(v)) for k, v in params.items())
    prepared = requests.Request(method, url, params=ordered).prepare()
    return f"{method.upper()} {prepared.url}"


class InMemoryCache:
    """
    Caché en memoria thread-safe.

    - max_entries: al superarlo se expulsa la entrada usada hace más tiempo.
    - ttl_seconds: 0 => sin expiración.
    - None => defaults de filmbuff/config.py (FILMBUFF_CACHE_*).
    """

    def __init__(
        self,
        *,
        max_entries: int | None = None,
        ttl_seconds: float | None = None,
    ) -> None:
        if max_entries is None:
            max_entries = _config.FILMBUFF_CACHE_MAX_ENTRIES
        if ttl_seconds is None:
            ttl_seconds = _config.FILMBUFF_CACHE_TTL_SECONDS
        self._max_entries = max(1, int(max_entries))
        self._ttl_seconds = max(0.0, float(ttl_seconds))
        self._lock = threading.Lock()
        # key -> (value, stored_at, last_used)
        self._items: dict[str, tuple[str, float, float]] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def _is_expired(self, stored_at: float, now: float) -> bool:
        return self._ttl_seconds > 0 and (now - stored_at) >= self._ttl_seconds

    def get(self, key: str) -> str | None:
        now = time.monotonic()
        with self._lock:
            item = self._items.get(key)
            if item is None:
                return None
            value, stored_at, _last_used = item
            if self._is_expired(stored_at, now):
                self._items.pop(key, None)
                return None
            self._items[key] = (value, stored_at, now)
            return value

    def set(self, key: str, value: str) -> None:
        now = time.monotonic()
        with self._lock:
            self._items[key] = (value, now, now)
            if len(self._items) <= self._max_entries:
                return

            oldest_k: str | None = None
            oldest_ts = float("inf")
            for k, (_value, _stored_at, last_used) in self._items.items():
                if last_used < oldest_ts:
                    oldest_ts = last_used
                    oldest_k = k

            if oldest_k is not None:
                self._items.pop(oldest_k, None)

    def clear(self) -> None:
        with self._lock:
            self._items.clear()
