"""Markdown syntax tree models consumed by the catalog parser."""

from mac_catalog.mdast.schema import (
    ASTNode,
    EmphasisNode,
    HeadingNode,
    InlineCodeNode,
    LinkNode,
    ListItemNode,
    ListNode,
    Mark,
    MarkIcon,
    NodeKind,
    ParagraphNode,
    StrongNode,
    TextNode,
    UnknownNode,
    classify,
    parse_nodes,
    parse_nodes_json,
    text_content,
)

__all__ = [
    "ASTNode",
    "EmphasisNode",
    "HeadingNode",
    "InlineCodeNode",
    "LinkNode",
    "ListItemNode",
    "ListNode",
    "Mark",
    "MarkIcon",
    "NodeKind",
    "ParagraphNode",
    "StrongNode",
    "TextNode",
    "UnknownNode",
    "classify",
    "parse_nodes",
    "parse_nodes_json",
    "text_content",
]
