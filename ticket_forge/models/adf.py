"""
Pydantic models for the subset of Atlassian Document Format (ADF) we produce.

Only the node kinds below are recognised. Jira accepts the output of
``Document.to_adf()`` as-is for rich-text fields such as ``description``.
"""
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError


class AdfValidationError(ValueError):
    """Raised when an ADF payload contains unsupported or malformed nodes."""
    pass


class StrongMark(BaseModel):
    """Bold emphasis on a text run."""

    type: Literal["strong"] = "strong"


class Text(BaseModel):
    """Leaf text run."""

    type: Literal["text"] = "text"
    text: str = Field(..., description="Literal text value")
    marks: Optional[List[StrongMark]] = Field(None, description="Optional emphasis marks")

    @classmethod
    def strong(cls, value: str) -> "Text":
        return cls(text=value, marks=[StrongMark()])


class HeadingAttrs(BaseModel):
    level: Literal[1, 2]


class Heading(BaseModel):
    type: Literal["heading"] = "heading"
    attrs: HeadingAttrs
    content: List[Text] = Field(default_factory=list)

    @classmethod
    def of(cls, value: str, level: int = 1) -> "Heading":
        return cls(attrs=HeadingAttrs(level=level), content=[Text(text=value)])


class Paragraph(BaseModel):
    type: Literal["paragraph"] = "paragraph"
    content: List[Text] = Field(default_factory=list)

    @classmethod
    def of(cls, value: str) -> "Paragraph":
        return cls(content=[Text(text=value)])


class ListItem(BaseModel):
    """List entry wrapping exactly one paragraph."""

    type: Literal["listItem"] = "listItem"
    content: List[Paragraph] = Field(..., min_length=1, max_length=1)

    @classmethod
    def of(cls, value: str) -> "ListItem":
        return cls(content=[Paragraph.of(value)])


class OrderedList(BaseModel):
    type: Literal["orderedList"] = "orderedList"
    content: List[ListItem] = Field(default_factory=list)


class BulletList(BaseModel):
    type: Literal["bulletList"] = "bulletList"
    content: List[ListItem] = Field(default_factory=list)


Block = Annotated[
    Union[Heading, Paragraph, OrderedList, BulletList],
    Field(discriminator="type"),
]


class Document(BaseModel):
    """
    Root ADF node.

    A document always holds at least one block; "no document" is represented
    by ``None`` rather than an empty tree.
    """

    type: Literal["doc"] = "doc"
    version: Literal[1] = 1
    content: List[Block] = Field(..., min_length=1)

    def to_adf(self) -> Dict[str, Any]:
        """Serialise to the wire dictionary Jira expects."""
        return self.model_dump(exclude_none=True)


_document_adapter = TypeAdapter(Document)


def parse_document(data: Dict[str, Any]) -> Document:
    """
    Validate an ADF wire dictionary into a Document.

    Args:
        data: ADF dictionary (``{"type": "doc", "version": 1, "content": [...]}``)

    Returns:
        Validated Document

    Raises:
        AdfValidationError: If the payload uses node types outside the
            supported set or is otherwise malformed
    """
    try:
        return _document_adapter.validate_python(data)
    except ValidationError as e:
        raise AdfValidationError(f"Unsupported ADF document: {str(e)}")
