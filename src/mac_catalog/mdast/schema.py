"""Pydantic models for the markdown syntax tree fed into the catalog parser.

Nodes follow the mdast shape emitted by the upstream markdown build: a
discriminated union on the ``type`` field. Node kinds the parser does not
care about validate into ``UnknownNode`` instead of failing, so newer
exports keep loading.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from mac_catalog.exceptions import ParseError


class NodeKind(str, Enum):
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    EMPHASIS = "emphasis"
    STRONG = "strong"
    TEXT = "text"
    INLINE_CODE = "inlineCode"
    LIST = "list"
    LIST_ITEM = "listItem"
    LINK = "link"
    UNKNOWN = "unknown"


# ---------------------------------------------------------------------------
# List item annotations
# ---------------------------------------------------------------------------


class MarkIcon(BaseModel):
    """One attribute badge next to an app entry (freeware, oss, ...)."""

    model_config = ConfigDict(frozen=True)

    type: str
    url: Optional[str] = None


class Mark(BaseModel):
    """Structured metadata attached to a list item by the markdown build."""

    model_config = ConfigDict(frozen=True)

    title: Optional[str] = None
    url: Optional[str] = None
    icons: list[MarkIcon] = Field(default_factory=list)
    delete: bool = False

    @field_validator("icons", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


# ---------------------------------------------------------------------------
# Node types (discriminated union via `type` field)
# ---------------------------------------------------------------------------


class _Node(BaseModel):
    model_config = ConfigDict(frozen=True)


class TextNode(_Node):
    type: Literal["text"] = "text"
    value: str = ""


class InlineCodeNode(_Node):
    type: Literal["inlineCode"] = "inlineCode"
    value: str = ""


class EmphasisNode(_Node):
    type: Literal["emphasis"] = "emphasis"
    children: list[ASTNode] = Field(default_factory=list)


class StrongNode(_Node):
    type: Literal["strong"] = "strong"
    children: list[ASTNode] = Field(default_factory=list)


class LinkNode(_Node):
    type: Literal["link"] = "link"
    url: str = ""
    title: Optional[str] = None
    children: list[ASTNode] = Field(default_factory=list)


class HeadingNode(_Node):
    type: Literal["heading"] = "heading"
    depth: int = Field(ge=0)
    value: Optional[str] = None  # pre-flattened text, when the exporter provides it
    children: list[ASTNode] = Field(default_factory=list)


class ParagraphNode(_Node):
    type: Literal["paragraph"] = "paragraph"
    children: list[ASTNode] = Field(default_factory=list)
    mark: Optional[Mark] = None


class ListItemNode(_Node):
    type: Literal["listItem"] = "listItem"
    children: list[ASTNode] = Field(default_factory=list)
    mark: Optional[Mark] = None


class ListNode(_Node):
    type: Literal["list"] = "list"
    ordered: Optional[bool] = False
    start: Optional[int] = None
    spread: Optional[bool] = False
    children: list[ASTNode] = Field(default_factory=list)


class UnknownNode(_Node):
    """Any node kind outside the catalog grammar (html, code, table, ...)."""

    model_config = ConfigDict(frozen=True, extra="allow")

    type: str
    children: list[ASTNode] = Field(default_factory=list)


_KNOWN_TAGS = frozenset(kind.value for kind in NodeKind if kind is not NodeKind.UNKNOWN)


def _node_tag(value: Any) -> str:
    if isinstance(value, dict):
        kind = value.get("type")
    else:
        kind = getattr(value, "type", None)
    return kind if kind in _KNOWN_TAGS else NodeKind.UNKNOWN.value


ASTNode = Annotated[
    Union[
        Annotated[HeadingNode, Tag("heading")],
        Annotated[ParagraphNode, Tag("paragraph")],
        Annotated[EmphasisNode, Tag("emphasis")],
        Annotated[StrongNode, Tag("strong")],
        Annotated[TextNode, Tag("text")],
        Annotated[InlineCodeNode, Tag("inlineCode")],
        Annotated[ListNode, Tag("list")],
        Annotated[ListItemNode, Tag("listItem")],
        Annotated[LinkNode, Tag("link")],
        Annotated[UnknownNode, Tag("unknown")],
    ],
    Discriminator(_node_tag),
]

# Rebuild container nodes now that ASTNode is defined (recursive reference)
for _model in (EmphasisNode, StrongNode, LinkNode, HeadingNode, ParagraphNode, ListItemNode, ListNode, UnknownNode):
    _model.model_rebuild()


# ---------------------------------------------------------------------------
# Classification and inline helpers
# ---------------------------------------------------------------------------

_KIND_BY_CLASS: dict[type, NodeKind] = {
    HeadingNode: NodeKind.HEADING,
    ParagraphNode: NodeKind.PARAGRAPH,
    EmphasisNode: NodeKind.EMPHASIS,
    StrongNode: NodeKind.STRONG,
    TextNode: NodeKind.TEXT,
    InlineCodeNode: NodeKind.INLINE_CODE,
    ListNode: NodeKind.LIST,
    ListItemNode: NodeKind.LIST_ITEM,
    LinkNode: NodeKind.LINK,
    UnknownNode: NodeKind.UNKNOWN,
}


def classify(node: object) -> NodeKind:
    """Return the kind of a validated node.

    Raises:
        TypeError: If ``node`` is not one of the mdast node models.
    """
    try:
        return _KIND_BY_CLASS[type(node)]
    except KeyError:
        raise TypeError(f"Not an mdast node: {type(node).__name__}") from None


_CONTAINERS = (
    EmphasisNode,
    StrongNode,
    LinkNode,
    HeadingNode,
    ParagraphNode,
    ListItemNode,
    ListNode,
    UnknownNode,
)


def text_content(node: object) -> str:
    """Concatenate the literal text below ``node`` in document order."""
    if isinstance(node, (TextNode, InlineCodeNode)):
        return node.value
    if isinstance(node, HeadingNode) and node.value and node.value.strip():
        return node.value
    if isinstance(node, _CONTAINERS):
        return "".join(text_content(child) for child in node.children)
    return ""


_NODE_LIST = TypeAdapter(list[ASTNode])


def parse_nodes(data: Any) -> list[ASTNode]:
    """Validate a JSON-decoded node sequence.

    Raises:
        ParseError: If ``data`` is not a list of well-formed nodes.
    """
    try:
        return _NODE_LIST.validate_python(data)
    except ValidationError as exc:
        raise ParseError(f"Invalid node sequence: {exc}") from exc


def parse_nodes_json(text: str | bytes) -> list[ASTNode]:
    """Validate a node sequence straight from JSON text."""
    try:
        return _NODE_LIST.validate_json(text)
    except ValidationError as exc:
        raise ParseError(f"Invalid node sequence: {exc}") from exc
