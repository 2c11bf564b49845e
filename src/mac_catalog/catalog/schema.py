"""Pydantic models for the normalized catalog.

The catalog is the contract between the parser and everything that renders,
searches or lists apps. All models are frozen and every sequence is a tuple;
the two lookup maps are read-only views, so a ``ParseResult`` can be cached
and shared between threads without copying. JSON uses camelCase keys, the
shape the page-rendering layer reads.
"""

from __future__ import annotations

from collections.abc import Iterator
from types import MappingProxyType
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CatalogModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


# ---------------------------------------------------------------------------
# Apps
# ---------------------------------------------------------------------------


class App(_CatalogModel):
    """One application entry."""

    id: str
    name: str
    slug: str
    url: str
    description: Optional[str] = None
    category_id: str
    category_name: str = ""
    parent_category_id: Optional[str] = None
    parent_category_name: Optional[str] = None
    is_free: bool = False
    is_open_source: bool = False
    is_app_store: bool = False
    has_awesome_list: bool = False
    oss_url: Optional[str] = None
    app_store_url: Optional[str] = None
    awesome_list_url: Optional[str] = None


# ---------------------------------------------------------------------------
# Categories (depth 2) and subcategories (depth 3)
# ---------------------------------------------------------------------------


class Category(_CatalogModel):
    id: str
    name: str
    slug: str
    depth: Literal[2, 3]
    description: Optional[str] = None
    parent_id: Optional[str] = None
    parent_name: Optional[str] = None
    subcategories: tuple[Category, ...] = ()
    apps: tuple[App, ...] = ()

    def walk(self) -> Iterator[Category]:
        """Yield this category followed by its subcategories, depth first."""
        yield self
        for sub in self.subcategories:
            yield from sub.walk()


Category.model_rebuild()


# ---------------------------------------------------------------------------
# Diagnostics
# ---------------------------------------------------------------------------


class Diagnostic(_CatalogModel):
    """A recovered per-node problem: the node was dropped, the parse went on."""

    code: str
    message: str
    node_index: Optional[int] = None


# ---------------------------------------------------------------------------
# Parse result
# ---------------------------------------------------------------------------


def _empty_map() -> MappingProxyType:
    return MappingProxyType({})


class ParseResult(_CatalogModel):
    """The complete catalog produced by one parse invocation.

    ``category_map`` and ``app_map`` are keyed by both slug and id. They are
    derived data: excluded from JSON and rebuilt by ``from_json``.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )

    categories: tuple[Category, ...] = ()
    apps: tuple[App, ...] = ()
    category_map: MappingProxyType[str, Category] = Field(
        default_factory=_empty_map, exclude=True, repr=False
    )
    app_map: MappingProxyType[str, App] = Field(
        default_factory=_empty_map, exclude=True, repr=False
    )
    diagnostics: tuple[Diagnostic, ...] = ()

    def iter_categories(self) -> Iterator[Category]:
        """Every category and subcategory in document order."""
        for category in self.categories:
            yield from category.walk()

    def to_json(self, **kwargs) -> str:
        """Serialize to a deterministic JSON string."""
        return self.model_dump_json(indent=2, by_alias=True, exclude_none=True, **kwargs)

    @classmethod
    def from_json(cls, json_str: str | bytes) -> ParseResult:
        """Deserialize from JSON and rebuild the lookup maps."""
        from mac_catalog.indexer import build_index

        loaded = cls.model_validate_json(json_str)

        # Share App instances between the tree and the flat list
        tree_apps = {
            app.id: app for category in loaded.iter_categories() for app in category.apps
        }
        apps = [tree_apps.get(app.id, app) for app in loaded.apps]
        return build_index(loaded.categories, apps, loaded.diagnostics)
