from __future__ import annotations

"""
filmbuff/title.py

Title: proyección inmutable de un objeto JSON de IMDb (`data` de maindetails).
SearchResult: fila de búsqueda (mismos campos + categoría de match).

Este módulo NO hace I/O ni logging.
"""

from collections.abc import Mapping
from dataclasses import dataclass
import re
from typing import Final, TypedDict, cast

_LEADING_YEAR_RE: Final[re.Pattern[str]] = re.compile(r"\d{4}")


def extract_release_year(description: object) -> str | None:
    """
    Año de estreno = 4 primeros dígitos al INICIO de la descripción.

    >>> extract_release_year("1939 Victor Fleming")
    '1939'
    >>> extract_release_year("Victor Fleming, 1939") is None
    True
    """
    if not isinstance(description, str):
        return None
    m = _LEADING_YEAR_RE.match(description)
    return m.group(0) if m else None


class SearchResult(TypedDict):
    type: str
    imdb_id: str
    title: str
    release_year: str | None


@dataclass(frozen=True, slots=True)
class Title:
    """
    Título de IMDb.

    - imdb_id: p.ej. "tt0032138"
    - title: título en el idioma del locale pedido
    - release_year: "1939" o None si la descripción no empieza por un año
    """

    imdb_id: str
    title: str
    release_year: str | None = None

    @classmethod
    def from_data(cls, data: Mapping[str, object]) -> Title:
        """Sin validación: los valores de `id` y `title` pasan tal cual."""
        return cls(
            imdb_id=cast(str, data["id"]),
            title=cast(str, data["title"]),
            release_year=extract_release_year(data.get("description")),
        )

    def to_dict(self) -> dict[str, str | None]:
        return {
            "imdb_id": self.imdb_id,
            "title": self.title,
            "release_year": self.release_year,
        }


def has_required_fields(row: Mapping[str, object]) -> bool:
    """Una fila solo es utilizable con id, title y description no vacíos."""
    return all(row.get(key) for key in ("id", "title", "description"))


def build_search_result(category: str, row: Mapping[str, object]) -> SearchResult:
    return {
        "type": category,
        "imdb_id": cast(str, row["id"]),
        "title": cast(str, row["title"]),
        "release_year": extract_release_year(row.get("description")),
    }
