from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any

import requests

from .config import DEFAULT_TIMEOUT
from .errors import JiraAPIError, describe_error
from .logging import get_logger
from .models import Result
from .session import Session

USER_AGENT = "jiracli/0.2.0"
HTTP_ERROR_STATUS = 400
_BODY_METHODS = frozenset({"POST", "PUT"})


def _parse_body(response: requests.Response) -> Any:
    if not response.text:
        return None
    try:
        return response.json()
    except ValueError:
        return None


@dataclass
class JiraRestClient:
    """Single-request Jira REST client that never raises on API failures.

    Reads the email, token and base URL from ``session`` at call time, so
    credentials changed during setup apply to the next request.
    """

    session: Session
    timeout: float = DEFAULT_TIMEOUT
    http: requests.Session | None = None
    _http: requests.Session = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._http = self.http or requests.Session()
        self._http.headers.setdefault("User-Agent", USER_AGENT)

    def close(self) -> None:
        self._http.close()

    # ---- transport ----------------------------------------------------
    def _request(self, method: str, path: str, *, body: Any | None = None) -> Any:
        url = f"{self.session.api_root}{path}"
        headers = {"Accept": "application/json"}
        kwargs: dict[str, Any] = {}
        if body is not None and method in _BODY_METHODS:
            headers["Content-Type"] = "application/json"
            kwargs["json"] = body

        logger = get_logger()
        start = time.perf_counter()
        try:
            response = self._http.request(
                method,
                url,
                auth=(self.session.email, self.session.api_token),
                headers=headers,
                timeout=self.timeout,
                **kwargs,
            )
        except (requests.RequestException, UnicodeError) as exc:
            # non latin-1 credentials fail while requests builds the auth header
            logger.log_request(method, path, None, (time.perf_counter() - start) * 1000)
            raise JiraAPIError(str(exc)) from exc

        logger.log_request(
            method, path, response.status_code, (time.perf_counter() - start) * 1000
        )
        if response.status_code >= HTTP_ERROR_STATUS:
            raise JiraAPIError(
                f"Request failed with status code {response.status_code}",
                status=response.status_code,
                payload=_parse_body(response),
            )
        return _parse_body(response)

    # ---- normalised entry point ---------------------------------------
    def call(self, path: str, method: str = "GET", body: Any | None = None) -> Result:
        method = method.upper()
        try:
            data = self._request(method, path, body=body)
        except JiraAPIError as exc:
            message = describe_error(exc)
            get_logger().info(
                f"Jira {method} {path} failed: {message}",
                operation="jira_request_failed",
                status=exc.status,
            )
            return Result.fail(message)
        if method == "DELETE":
            return Result.ok(None)
        return Result.ok(data)


__all__ = ["JiraRestClient", "USER_AGENT"]
