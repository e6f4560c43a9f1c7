"""Pytest bootstrap: imports desde `src/` y fixtures compartidas."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable

import httpx
import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC = PROJECT_ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

FIXTURES = Path(__file__).resolve().parent / "fixtures"

from adapters.http_binding import HTTPSource  # noqa: E402


@pytest.fixture
def client_cert_path() -> Path:
    return FIXTURES / "client.crt"


@pytest.fixture
def client_key_path() -> Path:
    return FIXTURES / "client.key"


@pytest.fixture
def other_key_path() -> Path:
    return FIXTURES / "other.key"


@pytest.fixture
def root_ca_path() -> Path:
    return FIXTURES / "ca.pem"


class Recorder:
    """Handler de `httpx.MockTransport` que guarda las peticiones recibidas."""

    def __init__(self, respond: Callable[[httpx.Request], httpx.Response] | None = None) -> None:
        self.requests: list[httpx.Request] = []
        self._respond = respond or (lambda request: httpx.Response(200, json={"ok": True}))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._respond(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def make_source() -> Callable[..., tuple[HTTPSource, Recorder]]:
    def _make(
        respond: Callable[[httpx.Request], httpx.Response] | None = None,
        **properties: str,
    ) -> tuple[HTTPSource, Recorder]:
        recorder = Recorder(respond)
        source = HTTPSource(transport=httpx.MockTransport(recorder))
        props = {"url": "http://upstream.test/api/"}
        props.update(properties)
        source.init(props)
        return source, recorder

    return _make
