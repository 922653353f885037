"""Pytest configuration for jiracli tests.

Ensures the in-repo `src` directory is on `sys.path` so the package can be
imported without an editable install, and provides a fake ``requests``
session plus a scripted terminal so no test touches the network or stdin.
"""

from __future__ import annotations

import io
import json
import sys
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pytest
import requests

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from jiracli import logging as jira_logging  # noqa: E402
from jiracli.ux import Terminal  # noqa: E402


@dataclass
class DummyResponse:
    status_code: int
    payload: Any = None

    def json(self) -> Any:
        if self.payload is None or isinstance(self.payload, str):
            raise ValueError("no JSON body")
        return self.payload

    @property
    def text(self) -> str:
        if self.payload is None:
            return ""
        if isinstance(self.payload, (dict, list)):
            return json.dumps(self.payload)
        return str(self.payload)


class DummySession:
    """Stands in for ``requests.Session``; replays queued responses in order.

    Queue an exception instance to simulate a network failure.
    """

    def __init__(self, responses: list[DummyResponse | Exception] | None = None):
        self._responses = list(responses or [])
        self.request_log: list[dict[str, Any]] = []
        self.headers: dict[str, str] = {}
        self.closed = False

    def queue(self, *responses: DummyResponse | Exception) -> None:
        self._responses.extend(responses)

    def request(
        self,
        method: str,
        url: str,
        *,
        auth: tuple[str, str] | None = None,
        headers: dict[str, str] | None = None,
        json: Any | None = None,
        timeout: float | None = None,
    ) -> DummyResponse:
        self.request_log.append(
            {
                "method": method,
                "url": url,
                "auth": auth,
                "headers": dict(headers or {}),
                "json": json,
                "timeout": timeout,
            }
        )
        if not self._responses:
            raise AssertionError(f"No response queued for {method} {url}")
        nxt = self._responses.pop(0)
        if isinstance(nxt, Exception):
            raise nxt
        return nxt

    def close(self) -> None:
        self.closed = True

    @property
    def urls(self) -> list[str]:
        return [entry["url"] for entry in self.request_log]


class OfflineHTTPSession(requests.Session):
    """Real ``requests.Session`` whose ``send`` answers from a queue.

    Request preparation (auth headers, JSON encoding) runs exactly as in
    production; only the network hop is replaced.
    """

    def __init__(self, *payloads: tuple[int, Any]):
        super().__init__()
        self._payloads = list(payloads)
        self.sent: list[requests.PreparedRequest] = []

    def send(self, request: requests.PreparedRequest, **kwargs: Any) -> requests.Response:
        self.sent.append(request)
        status, payload = self._payloads.pop(0)
        response = requests.Response()
        response.status_code = status
        response.url = request.url or ""
        response.request = request
        if payload is not None:
            response._content = json.dumps(payload).encode("utf-8")
            response.headers["Content-Type"] = "application/json"
        else:
            response._content = b""
        return response


class ScriptedTerminal(Terminal):
    """Terminal fed from a list of answers; output is kept in ``output``."""

    def __init__(self, answers: list[str]):
        self.answers = list(answers)
        self.prompts: list[str] = []
        self.output = io.StringIO()
        super().__init__(input_fn=self._next_answer, stream=self.output)

    def _next_answer(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.answers:
            raise EOFError("script exhausted")
        return self.answers.pop(0)

    @property
    def text(self) -> str:
        return self.output.getvalue()


@pytest.fixture
def make_http() -> Callable[..., DummySession]:
    def _factory(*responses: DummyResponse | Exception) -> DummySession:
        return DummySession(list(responses))

    return _factory


@pytest.fixture
def connection_error() -> requests.ConnectionError:
    return requests.ConnectionError("Connection refused")


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for var in ("JIRA_EMAIL", "JIRA_API_TOKEN", "JIRACLI_DEBUG", "JIRACLI_LOG_LEVEL", "NO_COLOR"):
        monkeypatch.delenv(var, raising=False)
    # keep a developer's real .env out of the tests
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(jira_logging, "_GLOBAL", None)
