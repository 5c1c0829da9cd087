from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Callable

import pytest


@dataclass(slots=True)
class FakeResponse:
    status_code: int
    text: str


@dataclass(slots=True)
class GetCall:
    url: str
    params: dict[str, str]
    headers: dict[str, str]
    timeout: float


@dataclass
class FakeSession:
    """
    Minimal requests.Session stand-in with programmable routing.

    Records calls and returns router(url, params) as the response.
    """

    router: Callable[[str, dict[str, str]], FakeResponse]
    calls: list[GetCall] = field(default_factory=list)
    closed: bool = False

    def get(self, url, *, params, headers, timeout):
        self.calls.append(GetCall(url=url, params=dict(params), headers=dict(headers), timeout=timeout))
        return self.router(url, dict(params))

    def close(self) -> None:
        self.closed = True


def json_response(payload: object, status_code: int = 200) -> FakeResponse:
    return FakeResponse(status_code=status_code, text=json.dumps(payload))


@pytest.fixture()
def wizard_of_oz_payload() -> dict[str, object]:
    return {
        "data": {
            "id": "tt0032138",
            "title": "The Wizard of Oz",
            "description": "1939 Victor Fleming",
        }
    }


@pytest.fixture()
def search_payload() -> dict[str, object]:
    return {
        "title_popular": [
            {"id": "tt0032138", "title": "The Wizard of Oz", "description": "1939, Victor Fleming"},
        ],
        "title_exact": [
            {"id": "tt0016544", "title": "The Wizard of Oz", "description": "1925, Larry Semon"},
            {"id": "tt0001463", "title": "The Wonderful Wizard of Oz", "description": "1910, Otis Turner"},
            {"id": "tt9999999", "title": "No description"},
        ],
        "title_approx": [
            {"id": "tt1623288", "title": "Oz the Great and Powerful", "description": "2013, Sam Raimi"},
            {"id": "", "title": "Empty id", "description": "2001"},
        ],
        "title_substring": [
            {"id": "tt0078504", "title": "The Wiz", "description": "video, Sidney Lumet"},
        ],
    }


@pytest.fixture()
def make_session() -> Callable[..., FakeSession]:
    """
    Factory: make_session(lookup=..., search=...) routes by endpoint.

    Each argument is a FakeResponse or a callable(url, params) -> FakeResponse.
    """

    def _make(*, lookup=None, search=None) -> FakeSession:
        def router(url: str, params: dict[str, str]) -> FakeResponse:
            target = search if url.endswith("/xml/find") else lookup
            if target is None:
                return FakeResponse(status_code=404, text="")
            if callable(target):
                return target(url, params)
            return target

        return FakeSession(router=router)

    return _make


@pytest.fixture()
def to_response() -> Callable[..., FakeResponse]:
    return json_response
