"""
Markdown to Atlassian Document Format (ADF) conversion.

Supports a deliberately small subset of Markdown, one construct per line:

- ``## Title`` / ``# Title`` headings
- ``1. item`` ordered-list items
- ``- item`` / ``* item`` bullet-list items
- any other non-blank line as a paragraph

Anything unrecognised degrades to a plain paragraph; encoding never fails.
"""
import re
from enum import Enum
from typing import List, Optional, Tuple, Union

from ticket_forge.models.adf import (
    BulletList,
    Document,
    Heading,
    ListItem,
    OrderedList,
    Paragraph,
)

_ORDERED_ITEM_PREFIX = re.compile(r"^\d+\. ")
_BULLET_PREFIXES = ("- ", "* ")


class LineKind(str, Enum):
    HEADING_2 = "heading_2"
    HEADING_1 = "heading_1"
    ORDERED_ITEM = "ordered_item"
    BULLET_ITEM = "bullet_item"
    PARAGRAPH = "paragraph"
    BLANK = "blank"


def classify_line(line: str) -> Tuple[LineKind, str]:
    """
    Classify one line of input.

    Args:
        line: Raw input line

    Returns:
        Tuple of (line kind, text content with the markdown prefix removed)
    """
    trimmed = line.strip()
    if not trimmed:
        return LineKind.BLANK, ""
    if trimmed.startswith("## "):
        return LineKind.HEADING_2, trimmed[3:].strip()
    if trimmed.startswith("# "):
        return LineKind.HEADING_1, trimmed[2:].strip()
    match = _ORDERED_ITEM_PREFIX.match(trimmed)
    if match:
        return LineKind.ORDERED_ITEM, trimmed[match.end():].strip()
    if trimmed.startswith(_BULLET_PREFIXES):
        return LineKind.BULLET_ITEM, trimmed[2:].strip()
    return LineKind.PARAGRAPH, trimmed


def markdown_to_adf(text: Optional[str]) -> Optional[Document]:
    """
    Convert markdown-flavoured text into an ADF document.

    Consecutive list items of the same kind are grouped into one list. Any
    other line (blank, heading, paragraph or an item of the other list kind)
    closes the open list, so a later item starts a new list node.

    Args:
        text: Input text (may be None)

    Returns:
        ADF Document, or None when the text produces no blocks
    """
    if not text or not text.strip():
        return None

    blocks: List[Union[Heading, Paragraph, OrderedList, BulletList]] = []
    open_list: Optional[Union[OrderedList, BulletList]] = None

    for line in text.splitlines():
        kind, value = classify_line(line)

        if kind in (LineKind.ORDERED_ITEM, LineKind.BULLET_ITEM):
            list_type = OrderedList if kind == LineKind.ORDERED_ITEM else BulletList
            if not isinstance(open_list, list_type):
                open_list = list_type()
                blocks.append(open_list)
            open_list.content.append(ListItem.of(value))
            continue

        open_list = None
        if kind == LineKind.HEADING_2:
            blocks.append(Heading.of(value, level=2))
        elif kind == LineKind.HEADING_1:
            blocks.append(Heading.of(value, level=1))
        elif kind == LineKind.PARAGRAPH:
            blocks.append(Paragraph.of(value))

    if not blocks:
        return None
    return Document(content=blocks)
