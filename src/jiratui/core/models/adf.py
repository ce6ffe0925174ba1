"""Atlassian Document Format helpers.

Platform API v3 returns rich text (descriptions, comments) as ADF trees and
expects the same shape on write. The client only needs plain text both ways.
"""

from __future__ import annotations

from typing import Any

# Block nodes that end a line when flattened
_BLOCK_TYPES = frozenset(
    {"paragraph", "heading", "blockquote", "codeBlock", "listItem", "rule", "tableRow", "panel"}
)


def text_to_adf(text: str) -> dict[str, Any]:
    """Wrap plain text in a document, one paragraph per line."""
    paragraphs = []
    for line in text.splitlines() or [text]:
        content = [{"type": "text", "text": line}] if line else []
        paragraphs.append({"type": "paragraph", "content": content})
    return {"type": "doc", "version": 1, "content": paragraphs}


def adf_to_text(node: Any) -> str:
    """Flatten an ADF tree (or a legacy plain string) to text."""
    if node is None:
        return ""
    if isinstance(node, str):
        return node
    parts: list[str] = []
    _collect(node, parts)
    return "".join(parts).strip("\n")


def _collect(node: Any, parts: list[str]) -> None:
    if isinstance(node, list):
        for child in node:
            _collect(child, parts)
        return
    if not isinstance(node, dict):
        return

    node_type = node.get("type")
    if node_type == "text":
        parts.append(str(node.get("text", "")))
        return
    if node_type == "hardBreak":
        parts.append("\n")
        return
    if node_type == "mention":
        parts.append(str(node.get("attrs", {}).get("text", "")))
        return
    if node_type == "listItem":
        parts.append("- ")

    _collect(node.get("content", []), parts)

    if node_type in _BLOCK_TYPES and not (parts and parts[-1].endswith("\n")):
        parts.append("\n")
