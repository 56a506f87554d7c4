"""
Atlassian Document Format (ADF) to plain text conversion.

Used whenever rich Jira content (descriptions, acceptance criteria, comments)
must be shown or processed as plain text.
"""
import re
from typing import Any, List

from pydantic import BaseModel

_WHITESPACE_BEFORE_NEWLINE = re.compile(r"\s+\n")


def adf_to_plain_text(node: Any) -> str:
    """
    Extract plain text from an ADF document.

    Handles:
    - None → ""
    - str → returned unchanged (already plain, e.g. legacy Jira fields)
    - Document model or ADF dict → text runs concatenated in document order

    A newline is appended after each paragraph unless the text gathered so far
    is blank or already ends in a newline. The result is trimmed and runs of
    whitespace before a newline are collapsed.

    Args:
        node: ADF document in any of the forms above

    Returns:
        Plain text representation
    """
    if node is None:
        return ""
    if isinstance(node, str):
        return node
    if isinstance(node, BaseModel):
        node = node.model_dump(exclude_none=True)
    if not isinstance(node, dict) or not isinstance(node.get("content"), list):
        return ""

    parts: List[str] = []
    _walk(node["content"], parts)
    text = "".join(parts).strip()
    return _WHITESPACE_BEFORE_NEWLINE.sub("\n", text)


def _walk(nodes: List[Any], parts: List[str]) -> None:
    for child in nodes:
        if not isinstance(child, dict):
            continue
        text = child.get("text")
        if child.get("type") == "text" and isinstance(text, str) and text:
            parts.append(text)
        content = child.get("content")
        if isinstance(content, list):
            _walk(content, parts)
        if child.get("type") == "paragraph":
            _end_paragraph(parts)


def _end_paragraph(parts: List[str]) -> None:
    # Separate paragraphs without stacking blank lines
    if not parts:
        return
    last = parts[-1]
    if last.endswith("\n"):
        return
    if "".join(parts).strip():
        parts.append("\n")
