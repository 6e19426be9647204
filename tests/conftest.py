from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
import requests


class FakeResponse:
    def __init__(self, payload: Any = None, *, text: str | None = None, status: int = 200) -> None:
        self.payload = payload
        self.status_code = status
        self.text = text if text is not None else json.dumps(payload, ensure_ascii=False)

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}")

    def json(self) -> Any:
        if self.payload is None:
            raise ValueError("no JSON payload")
        return self.payload


Handler = Callable[..., FakeResponse]


class StubSession:
    """Routes requests by URL prefix to canned responses or handlers."""

    def __init__(self, routes: dict[str, FakeResponse | Handler | Exception] | None = None) -> None:
        self.routes = dict(routes or {})
        self.calls: list[tuple[str, str, dict[str, Any]]] = []

    def _dispatch(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append((method, url, kwargs))
        for prefix, route in self.routes.items():
            if url.startswith(prefix):
                if isinstance(route, Exception):
                    raise route
                if isinstance(route, FakeResponse):
                    return route
                return route(url, **kwargs)
        raise requests.ConnectionError(f"no route for {url}")

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._dispatch("GET", url, **kwargs)

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._dispatch("POST", url, **kwargs)


@pytest.fixture
def stub_session() -> Callable[..., StubSession]:
    return StubSession


@pytest.fixture
def sleeps() -> list[float]:
    return []


@pytest.fixture
def fake_sleep(sleeps: list[float]) -> Callable[[float], None]:
    return sleeps.append


@pytest.fixture
def write_json(tmp_path: Path) -> Callable[[str, Any], Path]:
    def _write(name: str, payload: Any) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
        return path

    return _write
