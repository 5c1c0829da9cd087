"""
filmbuff

Cliente ligero de IMDb: búsqueda por IMDb ID y búsqueda libre por título.
"""

from filmbuff.cache import HTTPCache, InMemoryCache
from filmbuff.client import DEFAULT_SEARCH_TYPES, USER_AGENTS, FilmBuff
from filmbuff.errors import FilmBuffError, NotFound
from filmbuff.title import SearchResult, Title

__version__ = "1.0.0"

__all__ = [
    "DEFAULT_SEARCH_TYPES",
    "FilmBuff",
    "FilmBuffError",
    "HTTPCache",
    "InMemoryCache",
    "NotFound",
    "SearchResult",
    "Title",
    "USER_AGENTS",
    "__version__",
]
