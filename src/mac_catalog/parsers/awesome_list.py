"""Parser for awesome-list style documents (awesome-mac and its locales).

The document is a flat sequence of top-level nodes. ``## Heading`` opens a
category, ``### Heading`` a subcategory of it, an emphasised paragraph right
after a heading describes it, and every list item under a heading is one app.
The key state is ``_Context``, which holds the two active structural levels.
"""

from __future__ import annotations

import importlib.metadata
import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Optional
from urllib.parse import urlparse

from mac_catalog.catalog.schema import App, Category, Diagnostic, ParseResult
from mac_catalog.exceptions import (
    MalformedHeadingError,
    MissingNameError,
    MissingUrlError,
    OrphanItemError,
    ParseError,
)
from mac_catalog.indexer import build_index
from mac_catalog.mdast import (
    ASTNode,
    EmphasisNode,
    HeadingNode,
    LinkNode,
    ListItemNode,
    ListNode,
    Mark,
    MarkIcon,
    NodeKind,
    ParagraphNode,
    StrongNode,
    TextNode,
    classify,
    text_content,
)
from mac_catalog.parsers.base import BaseCatalogParser
from mac_catalog.slugs import SlugRegistry

logger = logging.getLogger(__name__)

CATEGORY_DEPTH = 2
SUBCATEGORY_DEPTH = 3

# Icon type -> attribute it sets. Unknown types are ignored.
_ICON_ATTRIBUTES = {
    "freeware": "free",
    "free": "free",
    "oss": "oss",
    "opensource": "oss",
    "open-source": "oss",
    "appstore": "app-store",
    "app-store": "app-store",
    "awesome": "awesome-list",
    "awesome-list": "awesome-list",
}

_LEADING_SEPARATOR = re.compile(r"^[\s\-–—:]+")


# ---------------------------------------------------------------------------
# Parse state
# ---------------------------------------------------------------------------

@dataclass
class _CategoryDraft:
    """Mutable category while the parse is running; frozen at the end."""
    id: str
    name: str
    depth: int
    parent: Optional[_CategoryDraft] = None
    description: Optional[str] = None
    subcategories: list[_CategoryDraft] = field(default_factory=list)
    apps: list[App] = field(default_factory=list)

    def freeze(self) -> Category:
        return Category(
            id=self.id,
            name=self.name,
            slug=self.id,
            depth=self.depth,
            description=self.description,
            parent_id=self.parent.id if self.parent else None,
            parent_name=self.parent.name if self.parent else None,
            subcategories=tuple(sub.freeze() for sub in self.subcategories),
            apps=tuple(self.apps),
        )


@dataclass
class _Context:
    """The two active structural levels, keyed by heading depth.

    ``skipping`` is set while inside the section of a heading that was
    dropped as malformed: its items belong to no valid category.
    """
    category: Optional[_CategoryDraft] = None
    subcategory: Optional[_CategoryDraft] = None
    skipping: bool = False

    @property
    def target(self) -> Optional[_CategoryDraft]:
        return self.subcategory or self.category

    def open_category(self, draft: _CategoryDraft) -> None:
        self.category = draft
        self.subcategory = None
        self.skipping = False

    def open_subcategory(self, draft: _CategoryDraft) -> None:
        self.subcategory = draft
        self.skipping = False

    def skip_section(self, depth: int) -> None:
        if depth == CATEGORY_DEPTH:
            self.category = None
        self.subcategory = None
        self.skipping = True


@dataclass
class _ParseState:
    registry: SlugRegistry = field(default_factory=SlugRegistry)
    context: _Context = field(default_factory=_Context)
    categories: list[_CategoryDraft] = field(default_factory=list)
    apps: list[App] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)
    # Set by a heading; consumed (or cleared) by the very next node
    awaiting_description: Optional[_CategoryDraft] = None

    def record(self, error: ParseError) -> None:
        self.diagnostics.append(
            Diagnostic(code=error.code, message=str(error), node_index=error.node_index)
        )
        logger.warning("Node %s skipped: %s", error.node_index, error)


class AwesomeListParser(BaseCatalogParser):
    """Single-pass parser from an awesome-list node sequence to a catalog."""

    @property
    def name(self) -> str:
        return "awesome-mac"

    @property
    def version(self) -> str:
        try:
            return importlib.metadata.version("mac-catalog")
        except importlib.metadata.PackageNotFoundError:
            return "unknown"

    def parse(self, nodes: Sequence[ASTNode]) -> ParseResult:
        """Parse a top-level node sequence into a catalog.

        Args:
            nodes: Validated mdast nodes in document order.

        Returns:
            ParseResult with categories, apps and both lookup maps.

        Raises:
            OrphanItemError: If an item or subheading has no enclosing
                category and ``parser.strict_structure`` is on.
            DuplicateKeyError: At the heading whose category slug is already
                taken in this parse.
        """
        state = _ParseState()

        for index, node in enumerate(nodes):
            kind = classify(node)
            awaiting = state.awaiting_description
            state.awaiting_description = None

            if kind is NodeKind.HEADING:
                self._on_heading(node, index, state)
            elif kind is NodeKind.PARAGRAPH:
                if awaiting is not None:
                    awaiting.description = _emphasis_description(node)
            elif kind is NodeKind.LIST:
                self._on_list(node, index, state)
            else:
                logger.debug("Ignoring %s node at %d", kind.value, index)

        categories = [draft.freeze() for draft in state.categories]
        result = build_index(categories, state.apps, state.diagnostics)
        logger.info(
            "Parsed %d categories, %d apps (%d diagnostics)",
            sum(1 for _ in result.iter_categories()),
            len(result.apps),
            len(result.diagnostics),
        )
        return result

    # -- headings ----------------------------------------------------------

    def _on_heading(self, node: HeadingNode, index: int, state: _ParseState) -> None:
        if node.depth not in (CATEGORY_DEPTH, SUBCATEGORY_DEPTH):
            logger.debug("Ignoring depth-%d heading at %d", node.depth, index)
            return

        context = state.context
        name = text_content(node).strip()
        if not name:
            state.record(
                MalformedHeadingError(f"Depth-{node.depth} heading has no text", index)
            )
            context.skip_section(node.depth)
            return

        if node.depth == CATEGORY_DEPTH:
            draft = _CategoryDraft(
                id=state.registry.reserve_category(
                    SlugRegistry.category_slug(name), index
                ),
                name=name,
                depth=CATEGORY_DEPTH,
            )
            state.categories.append(draft)
            context.open_category(draft)
            state.awaiting_description = draft
            return

        parent = context.category
        if parent is None:
            if context.skipping:
                state.record(
                    MalformedHeadingError(
                        f"Subcategory '{name}' is inside a skipped category", index
                    )
                )
            else:
                self._orphan(
                    f"Subcategory '{name}' has no enclosing category", index, state
                )
            context.skip_section(SUBCATEGORY_DEPTH)
            return

        draft = _CategoryDraft(
            id=state.registry.reserve_category(
                SlugRegistry.category_slug(name, parent.id), index
            ),
            name=name,
            depth=SUBCATEGORY_DEPTH,
            parent=parent,
        )
        parent.subcategories.append(draft)
        context.open_subcategory(draft)
        state.awaiting_description = draft

    # -- lists and apps ----------------------------------------------------

    def _on_list(self, node: ListNode, index: int, state: _ParseState) -> None:
        for item in node.children:
            if isinstance(item, ListItemNode):
                self._on_item(item, index, state)

    def _on_item(self, item: ListItemNode, index: int, state: _ParseState) -> None:
        mark = _find_mark(item)
        if mark is not None and mark.delete:
            logger.debug("Dropping deleted item '%s' at %d", mark.title, index)
            return

        context = state.context
        if context.skipping:
            state.record(
                MalformedHeadingError("List item is under a skipped heading", index)
            )
            return

        target = context.target
        if target is None:
            self._orphan("List item has no enclosing category", index, state)
            return

        try:
            app = _build_app(item, mark, target, state.registry, index)
        except (MissingUrlError, MissingNameError) as exc:
            state.record(exc)
        else:
            target.apps.append(app)
            state.apps.append(app)

        for child in item.children:
            if isinstance(child, ListNode):
                self._on_list(child, index, state)

    def _orphan(self, message: str, index: int, state: _ParseState) -> None:
        error = OrphanItemError(message, index)
        if self.config.parser.strict_structure:
            raise error
        state.record(error)


# ---------------------------------------------------------------------------
# Node helpers
# ---------------------------------------------------------------------------

def _is_blank(node: ASTNode) -> bool:
    return isinstance(node, TextNode) and not node.value.strip()


def _emphasis_description(paragraph: ParagraphNode) -> Optional[str]:
    """Text of the paragraph's leading emphasis, if that is how it starts."""
    meaningful = [child for child in paragraph.children if not _is_blank(child)]
    if not meaningful or not isinstance(meaningful[0], EmphasisNode):
        return None
    text = text_content(meaningful[0]).strip()
    return text or None


def _find_mark(item: ListItemNode) -> Optional[Mark]:
    """The item's own mark, else the mark on its first paragraph."""
    if item.mark is not None:
        return item.mark
    for child in item.children:
        if isinstance(child, ParagraphNode):
            return child.mark
    return None


def _inline_children(item: ListItemNode) -> list[ASTNode]:
    for child in item.children:
        if isinstance(child, ParagraphNode):
            return list(child.children)
    return [
        child for child in item.children
        if not isinstance(child, (ListNode, ParagraphNode))
    ]


def _find_link(nodes: Sequence[ASTNode]) -> Optional[LinkNode]:
    for node in nodes:
        if isinstance(node, LinkNode):
            return node
        if isinstance(node, (EmphasisNode, StrongNode)):
            found = _find_link(node.children)
            if found is not None:
                return found
    return None


def _locate_link(inline: Sequence[ASTNode]) -> tuple[Optional[LinkNode], int]:
    """First link among the inline children and the position holding it."""
    for position, child in enumerate(inline):
        link = _find_link([child])
        if link is not None:
            return link, position
    return None, -1


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _app_name(
    mark: Optional[Mark], link: Optional[LinkNode], url: str, index: int
) -> str:
    name = _clean(mark.title) if mark else None
    if name is None and link is not None:
        name = _clean(text_content(link))
    if name is None:
        name = urlparse(url).hostname
    if not name:
        raise MissingNameError(
            f"List item for {url} has no title, link text or host", index
        )
    return name


def _app_description(inline: Sequence[ASTNode], link_position: int) -> Optional[str]:
    text = "".join(
        child.value for child in inline[link_position + 1:] if isinstance(child, TextNode)
    )
    return _clean(_LEADING_SEPARATOR.sub("", text))


def _icon_attributes(icons: Sequence[MarkIcon]) -> dict[str, Any]:
    """Attribute flags and URLs carried by the item's icons, in icon order."""
    attrs: dict[str, Any] = {
        "is_free": False,
        "is_open_source": False,
        "is_app_store": False,
        "has_awesome_list": False,
        "oss_url": None,
        "app_store_url": None,
        "awesome_list_url": None,
    }
    for icon in icons:
        attribute = _ICON_ATTRIBUTES.get(icon.type.strip().lower())
        url = _clean(icon.url)
        if attribute == "free":
            attrs["is_free"] = True
        elif attribute == "oss":
            attrs["is_open_source"] = True
            attrs["oss_url"] = url or attrs["oss_url"]
        elif attribute == "app-store":
            attrs["is_app_store"] = True
            attrs["app_store_url"] = url or attrs["app_store_url"]
        elif attribute == "awesome-list":
            attrs["has_awesome_list"] = True
            attrs["awesome_list_url"] = url or attrs["awesome_list_url"]
    return attrs


def _build_app(
    item: ListItemNode,
    mark: Optional[Mark],
    target: _CategoryDraft,
    registry: SlugRegistry,
    index: int,
) -> App:
    """Convert one list item into an App.

    The slug is claimed last, so an item that fails never consumes one.

    Raises:
        MissingUrlError: If neither the mark nor a link supplies a URL.
        MissingNameError: If no name can be derived.
    """
    inline = _inline_children(item)
    link, link_position = _locate_link(inline)

    url = (_clean(mark.url) if mark else None) or (_clean(link.url) if link else None)
    if url is None:
        raise MissingUrlError("List item has no URL", index)

    name = _app_name(mark, link, url, index)

    slug = registry.claim_app(name)
    parent = target.parent
    return App(
        id=slug,
        slug=slug,
        name=name,
        url=url,
        description=_app_description(inline, link_position),
        category_id=target.id,
        category_name=target.name,
        parent_category_id=parent.id if parent else None,
        parent_category_name=parent.name if parent else None,
        **_icon_attributes(mark.icons if mark else ()),
    )
