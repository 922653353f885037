"""Terminal output helpers and the line-based prompt used by the workflow."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable, Sequence
from types import TracebackType
from typing import TextIO

RULE_CHAR = "="


class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    MAGENTA = "\033[35m"
    CYAN = "\033[36m"


def _supports_color(stream: TextIO | None = None) -> bool:
    stream = stream or sys.stdout
    # NO_COLOR, non-TTY streams and TERM=dumb all disable colors
    if os.environ.get("NO_COLOR"):
        return False
    if not hasattr(stream, "isatty") or not stream.isatty():
        return False
    if os.environ.get("TERM") == "dumb":
        return False
    return True


def colorize(text: str, color: str, bold: bool = False, stream: TextIO | None = None) -> str:
    """Apply color to text if terminal supports it."""
    if not _supports_color(stream):
        return text
    prefix = (Colors.BOLD if bold else "") + color
    return f"{prefix}{text}{Colors.RESET}"


def _glyph_line(glyph: str, color: str, message: str, stream: TextIO) -> None:
    print(colorize(glyph, color, bold=True, stream=stream) + " " + message, file=stream)


def print_success(message: str, stream: TextIO | None = None) -> None:
    _glyph_line("✓", Colors.GREEN, message, stream or sys.stdout)


def print_error(message: str, stream: TextIO | None = None) -> None:
    _glyph_line("✗", Colors.RED, message, stream or sys.stdout)


def print_warning(message: str, stream: TextIO | None = None) -> None:
    _glyph_line("⚠", Colors.YELLOW, message, stream or sys.stdout)


def print_info(message: str, stream: TextIO | None = None) -> None:
    _glyph_line("ℹ", Colors.BLUE, message, stream or sys.stdout)


def print_tip(message: str, stream: TextIO | None = None) -> None:
    _glyph_line("💡", Colors.MAGENTA, f"Tip: {message}", stream or sys.stdout)


def print_header(message: str, stream: TextIO | None = None) -> None:
    """Print section header in bold cyan, preceded by a blank line."""
    stream = stream or sys.stdout
    print(colorize(f"\n{message}", Colors.CYAN, bold=True, stream=stream), file=stream)


def print_rule(width: int = 40, stream: TextIO | None = None) -> None:
    stream = stream or sys.stdout
    print(colorize(RULE_CHAR * width, Colors.DIM, stream=stream), file=stream)


def print_numbered(labels: Sequence[str], stream: TextIO | None = None) -> None:
    """Print ``labels`` as a 1-based numbered list."""
    stream = stream or sys.stdout
    for index, label in enumerate(labels, start=1):
        print(f"{colorize(str(index), Colors.CYAN, stream=stream)}. {label}", file=stream)


def print_fields(items: Sequence[tuple[str, str]], stream: TextIO | None = None) -> None:
    """Print aligned ``key: value`` pairs."""
    stream = stream or sys.stdout
    width = max((len(k) for k, _ in items), default=0) + 1
    for key, value in items:
        label = colorize(f"{key}:".ljust(width), Colors.BOLD, stream=stream)
        print(f"  {label} {value}", file=stream)


class Terminal:
    """Line-based prompt/response channel.

    Used as a context manager by the workflow; prompting after the context has
    exited raises ``RuntimeError``.
    """

    def __init__(
        self,
        input_fn: Callable[[str], str] = input,
        stream: TextIO | None = None,
    ) -> None:
        self._input = input_fn
        self.stream = stream or sys.stdout
        self.closed = False

    def __enter__(self) -> Terminal:
        self.closed = False
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        if not self.closed:
            self.stream.flush()
            self.closed = True

    def ask(self, prompt: str) -> str:
        if self.closed:
            raise RuntimeError("terminal is closed")
        return self._input(prompt)

    def say(self, text: str = "") -> None:
        print(text, file=self.stream)

    def success(self, message: str) -> None:
        print_success(message, self.stream)

    def error(self, message: str) -> None:
        print_error(message, self.stream)

    def warning(self, message: str) -> None:
        print_warning(message, self.stream)

    def info(self, message: str) -> None:
        print_info(message, self.stream)

    def tip(self, message: str) -> None:
        print_tip(message, self.stream)

    def header(self, message: str) -> None:
        print_header(message, self.stream)

    def rule(self, width: int = 40) -> None:
        print_rule(width, self.stream)

    def numbered(self, labels: Sequence[str]) -> None:
        print_numbered(labels, self.stream)

    def fields(self, items: Sequence[tuple[str, str]]) -> None:
        print_fields(items, self.stream)


__all__ = [
    "Colors",
    "Terminal",
    "colorize",
    "print_error",
    "print_fields",
    "print_header",
    "print_info",
    "print_numbered",
    "print_rule",
    "print_success",
    "print_tip",
    "print_warning",
]
