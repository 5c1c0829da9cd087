from __future__ import annotations


class FilmBuffError(Exception):
    """Base de los errores propios de filmbuff."""


class NotFound(FilmBuffError):
    """La búsqueda por IMDb ID no devolvió un 200."""

    def __init__(self, imdb_id: str, status: int | None = None) -> None:
        self.imdb_id = imdb_id
        self.status = status
        super().__init__(f"Title not found: {imdb_id!r} (status={status})")
