from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Result:
    """Uniform success/error envelope returned by every Jira operation.

    Either ``success`` is True and ``data`` holds the parsed response (``None``
    for DELETE), or ``success`` is False and ``error`` holds a display message.
    """

    success: bool
    data: Any = None
    error: str | None = None

    @classmethod
    def ok(cls, data: Any = None) -> Result:
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str) -> Result:
        return cls(success=False, error=error)


__all__ = ["Result"]
