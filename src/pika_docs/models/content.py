"""Rich-text content tree helpers.

Content is the JSON tree produced by the editor surface, for example::

    {"type": "doc", "content": [
        {"type": "paragraph", "content": [{"type": "text", "text": "Hello"}]},
    ]}

Two values are only ever compared by deep structural equality.
"""

from __future__ import annotations

import copy
import json
import re
from typing import Any

Content = dict[str, Any]

_LINE_NODES = frozenset({"paragraph", "heading", "codeBlock"})
_LIST_NODES = frozenset({"bulletList", "orderedList"})
_WHITESPACE = re.compile(r"\s+")


def empty_content() -> Content:
    """Return a fresh empty document."""
    return {"type": "doc", "content": []}


def is_valid_content(content: object) -> bool:
    """Check that a value has the shape of a document tree."""
    if not isinstance(content, dict) or content.get("type") != "doc":
        return False
    children = content.get("content")
    return children is None or isinstance(children, list)


def parse_content_field(raw: object) -> Content:
    """Normalize a stored content value into a tree.

    Older rows stored the tree as a JSON string, and brand-new rows may hold an
    empty string or nothing at all.
    """
    if isinstance(raw, dict):
        return raw
    if isinstance(raw, str) and raw.strip():
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError:
            return empty_content()
        if is_valid_content(parsed):
            return parsed
    return empty_content()


def contents_equal(left: Content | None, right: Content | None) -> bool:
    """Deep structural equality between two content values."""
    return left == right


def clone_content(content: Content) -> Content:
    return copy.deepcopy(content)


def _node_text(node: dict[str, Any]) -> str:
    if node.get("type") == "text":
        return node.get("text") or ""
    children = node.get("content") or []
    return "".join(_node_text(child) for child in children)


def extract_plain_text(content: Content) -> str:
    """Flatten a document to plain text with one line per block."""
    lines: list[str] = []
    for node in content.get("content") or []:
        node_type = node.get("type")
        if node_type in _LINE_NODES:
            lines.append(_node_text(node))
        elif node_type in _LIST_NODES:
            lines.extend(_node_text(item) for item in node.get("content") or [])
    return "\n".join(lines)


def count_characters(content: Content) -> int:
    """Number of visible characters, used for display and change-size hints."""
    return len(extract_plain_text(content))


def count_words(content: Content) -> int:
    text = extract_plain_text(content).strip()
    if not text:
        return 0
    return len([word for word in _WHITESPACE.split(text) if word])


def is_empty(content: Content) -> bool:
    return not extract_plain_text(content).strip()
