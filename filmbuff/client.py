from __future__ import annotations

"""
filmbuff/client.py

Cliente IMDb: búsqueda por IMDb ID y búsqueda libre por título.

Principios
----------
1) Síncrono y sin reintentos por defecto:
   - Una petición HTTP por operación.
   - Reintentos/timeout son cosa del transporte (requests + urllib3.Retry),
     configurables vía filmbuff/config.py.

2) Estado mínimo por instancia:
   - locale (mutable)
   - protocol (derivado de `ssl`, solo aplica a la búsqueda por ID)
   - user_agent: elegido UNA vez al construir (RNG inyectable para tests)
   - requests.Session memoizada de forma perezosa (lazy-init thread-safe)

3) Colaboradores opacos:
   - cache: cualquier objeto con get/set (ver filmbuff/cache.py)
   - logger: cualquier objeto con .debug()/.warning(); si no hay, se usa
     filmbuff/logger.py

Errores
-------
- look_up_id: status != 200 -> NotFound.
- Errores de red (requests.RequestException) o JSON inválido (ValueError) se
  propagan tal cual: este módulo no los traduce.
- search_for_title nunca falla por falta de resultados: devuelve [].
"""

import json
import random
import threading
from collections.abc import Mapping, Sequence
from typing import Final, Protocol

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from filmbuff import config as _config
from filmbuff import logger as _logger
from filmbuff.cache import HTTPCache, build_cache_key
from filmbuff.errors import NotFound
from filmbuff.title import SearchResult, Title, build_search_result, has_required_fields

USER_AGENTS: Final[tuple[str, ...]] = (
    "Mozilla/5.0 (Windows NT 6.1; Win64; x64; rv:25.0) Gecko/20100101 Firefox/25.0",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10.6; rv:25.0) Gecko/20100101 Firefox/25.0",
    "Mozilla/5.0 (X11; Ubuntu; Linux x86_64; rv:24.0) Gecko/20100101 Firefox/24.0",
    "Mozilla/5.0 (Windows NT 6.0; WOW64; rv:24.0) Gecko/20100101 Firefox/24.0",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10.8; rv:24.0) Gecko/20100101 Firefox/24.0",
)

# Orden de mejor a peor match.
DEFAULT_SEARCH_TYPES: Final[tuple[str, ...]] = (
    "title_popular",
    "title_exact",
    "title_approx",
    "title_substring",
)

_LOG_TAG: Final[str] = "FILMBUFF"


class LoggerLike(Protocol):
    def debug(self, msg: str, *args: object) -> object:
        ...

    def warning(self, msg: str, *args: object) -> object:
        ...


class ResponseLike(Protocol):
    status_code: int
    text: str


class SessionLike(Protocol):
    def get(
        self,
        url: str,
        *,
        params: Mapping[str, str],
        headers: Mapping[str, str],
        timeout: float,
    ) -> ResponseLike:
        ...

    def close(self) -> None:
        ...


def pick_user_agent(rng: random.Random | None = None) -> str:
    chooser = rng if rng is not None else random.Random()
    return chooser.choice(USER_AGENTS)


def _build_session() -> requests.Session:
    """
    requests.Session para el cliente.

    Retry de urllib3 solo se monta si FILMBUFF_HTTP_RETRY_TOTAL > 0;
    por defecto el cliente no reintenta.
    """
    session = requests.Session()

    retry_total = int(_config.FILMBUFF_HTTP_RETRY_TOTAL)
    if retry_total > 0:
        retries = Retry(
            total=retry_total,
            backoff_factor=float(_config.FILMBUFF_HTTP_RETRY_BACKOFF_FACTOR),
            status_forcelist=(429, 500, 502, 503, 504),
            allowed_methods=("GET",),
            raise_on_status=False,
            respect_retry_after_header=True,
        )
        adapter = HTTPAdapter(max_retries=retries)
        session.mount("https://", adapter)
        session.mount("http://", adapter)

    return session


class FilmBuff:
    """
    Cliente de IMDb.

    Ejemplo:
        >>> imdb = FilmBuff()
        >>> imdb.look_up_id("tt0032138").title
        'The Wizard of Oz'
        >>> imdb.search_for_title("The Wizard of Oz", limit=2)
        [{'type': 'title_popular', 'imdb_id': 'tt0032138', ...}, ...]

    Args:
        locale: locale de la búsqueda; IMDb devuelve textos en ese idioma.
        ssl: https (True) o http (False) para la búsqueda por ID. La búsqueda
            por título siempre va por http (IMDb no soporta https ahí).
        cache: caché HTTP opcional (get/set). None => sin caché.
        logger: logger opcional con .debug()/.warning(). Recibe tanto el debug
            de las peticiones como los avisos de caché. None => filmbuff.logger.
        user_agent: fuerza un User-Agent concreto en vez de elegir uno al azar.
        rng: fuente aleatoria para elegir el User-Agent (tests reproducibles).
        session: transporte HTTP ya construido (por defecto, requests.Session).
        timeout: timeout en segundos por petición.

    locale, ssl y timeout a None toman el default de filmbuff/config.py.
    """

    def __init__(
        self,
        locale: str | None = None,
        *,
        ssl: bool | None = None,
        cache: HTTPCache | None = None,
        logger: LoggerLike | None = None,
        user_agent: str | None = None,
        rng: random.Random | None = None,
        session: SessionLike | None = None,
        timeout: float | None = None,
    ) -> None:
        self.locale = locale if locale is not None else _config.FILMBUFF_LOCALE
        use_ssl = _config.FILMBUFF_SSL if ssl is None else ssl
        self._protocol = "https" if use_ssl else "http"
        self.cache = cache
        self.logger = logger
        self._user_agent = user_agent or pick_user_agent(rng)
        self._timeout = float(timeout if timeout is not None else _config.FILMBUFF_HTTP_TIMEOUT_SECONDS)

        self._session: SessionLike | None = session
        self._owns_session = session is None
        self._session_lock = threading.Lock()

    def __repr__(self) -> str:
        return f"FilmBuff(locale={self.locale!r}, protocol={self._protocol!r})"

    def __enter__(self) -> FilmBuff:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def protocol(self) -> str:
        return self._protocol

    @property
    def user_agent(self) -> str:
        return self._user_agent

    @property
    def headers(self) -> dict[str, str]:
        return {"User-Agent": self._user_agent}

    # ------------------------------------------------------------------
    # Transporte
    # ------------------------------------------------------------------

    def _connection(self) -> SessionLike:
        """Session memoizada (double-checked locking)."""
        if self._session is not None:
            return self._session

        with self._session_lock:
            if self._session is None:
                self._session = _build_session()
            return self._session

    def close(self) -> None:
        """Cierra la Session si la creó el cliente. Se recrea al siguiente uso."""
        with self._session_lock:
            session = self._session
            if session is None or not self._owns_session:
                return
            self._session = None
        session.close()

    def _debug(self, msg: str) -> None:
        if self.logger is not None:
            self.logger.debug(msg)
            return
        _logger.debug_ctx(_LOG_TAG, msg)

    def _warn(self, msg: str) -> None:
        if self.logger is not None:
            self.logger.warning(msg)
            return
        _logger.warning(msg)

    def _cache_read(self, key: str) -> str | None:
        if self.cache is None:
            return None
        try:
            return self.cache.get(key)
        except Exception as exc:
            self._warn(f"Failed to read HTTP cache for {key!r}: {exc!r}")
            return None

    def _cache_write(self, key: str, body: str) -> None:
        if self.cache is None:
            return
        try:
            self.cache.set(key, body)
        except Exception as exc:
            self._warn(f"Failed to write HTTP cache for {key!r}: {exc!r}")

    def _get(self, url: str, params: Mapping[str, str]) -> tuple[int, str]:
        """
        GET con caché opcional.

        Devuelve (status, body). Un HIT de caché se trata como 200.
        """
        key = build_cache_key(url, params)
        if self.cache is not None:
            cached = self._cache_read(key)
            if cached is not None:
                self._debug(f"cache hit: {key}")
                return 200, cached

        response = self._connection().get(
            url,
            params=dict(params),
            headers=self.headers,
            timeout=self._timeout,
        )
        status = int(response.status_code)
        body = response.text
        self._debug(f"GET {url} params={dict(params)} -> {status}")

        if status == 200 and self.cache is not None:
            self._cache_write(key, body)

        return status, body

    # ------------------------------------------------------------------
    # API pública
    # ------------------------------------------------------------------

    def look_up_id(self, imdb_id: str) -> Title:
        """
        Busca el título con IMDb ID `imdb_id`.

        Raises:
            NotFound: si IMDb no responde 200.
        """
        url = f"{self._protocol}://{_config.FILMBUFF_LOOKUP_HOST}{_config.FILMBUFF_LOOKUP_PATH}"
        status, body = self._get(url, {"tconst": imdb_id, "locale": self.locale})

        if status != 200:
            raise NotFound(imdb_id, status)

        payload = json.loads(body)
        return Title.from_data(payload["data"])

    def search_for_title(
        self,
        title: str,
        *,
        limit: int | None = None,
        types: Sequence[str] = DEFAULT_SEARCH_TYPES,
    ) -> list[SearchResult]:
        """
        Busca `title` en IMDb y devuelve una lista de resultados.

        - types: categorías de match a incluir (title_popular, title_exact,
          title_approx, title_substring).
        - Las categorías se recorren en el orden en que llegan en la respuesta.
        - limit: máximo de resultados; None => sin límite.
        - Filas sin id/title/description se descartan en silencio.
        """
        if isinstance(types, str):
            types = (types,)
        wanted = set(types)

        _status, body = self._get(_config.FILMBUFF_SEARCH_URL, {"q": title, "json": "1", "tt": "on"})
        payload = json.loads(body)

        output: list[SearchResult] = []
        if not isinstance(payload, dict):
            self._debug(f"search {title!r}: unexpected payload {_logger.truncate_line(body, 120)}")
            return output

        skipped = 0
        for category, rows in payload.items():
            if category not in wanted or not isinstance(rows, list):
                continue

            for row in rows:
                if limit is not None and len(output) >= limit:
                    break
                if not isinstance(row, Mapping) or not has_required_fields(row):
                    skipped += 1
                    continue
                output.append(build_search_result(category, row))

            if limit is not None and len(output) >= limit:
                break

        self._debug(f"search {title!r}: {len(output)} results ({skipped} incomplete rows skipped)")
        return output
