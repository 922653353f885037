"""Atlassian Document Format helpers for issue descriptions."""

from __future__ import annotations

from typing import Any

_BLOCK_NODES = {"paragraph", "heading", "listItem", "blockquote", "codeBlock"}


def paragraph_document(text: str | None) -> dict[str, Any] | None:
    """Wrap ``text`` in a single-paragraph ADF document, or ``None`` if blank."""
    if not text or not text.strip():
        return None
    return {
        "type": "doc",
        "version": 1,
        "content": [
            {
                "type": "paragraph",
                "content": [{"type": "text", "text": text.strip()}],
            }
        ],
    }


def _collect(node: Any, blocks: list[str], current: list[str]) -> None:
    if isinstance(node, list):
        for child in node:
            _collect(child, blocks, current)
        return
    if not isinstance(node, dict):
        return
    node_type = node.get("type")
    if node_type == "text":
        current.append(str(node.get("text", "")))
        return
    if node_type == "hardBreak":
        current.append("\n")
        return
    if node_type in _BLOCK_NODES:
        inner: list[str] = []
        _collect(node.get("content", []), blocks, inner)
        blocks.append("".join(inner))
        return
    _collect(node.get("content", []), blocks, current)


def document_text(value: Any) -> str:
    """Flatten an ADF document (or a plain string) to display text."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    blocks: list[str] = []
    loose: list[str] = []
    _collect(value, blocks, loose)
    if loose:
        blocks.append("".join(loose))
    return "\n".join(b for b in blocks if b)


__all__ = ["document_text", "paragraph_document"]
