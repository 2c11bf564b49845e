"""Index builder: assembles the final, read-only ``ParseResult``."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from types import MappingProxyType
from typing import Union

from mac_catalog.catalog.schema import App, Category, Diagnostic, ParseResult
from mac_catalog.exceptions import DuplicateKeyError

logger = logging.getLogger(__name__)


def build_index(
    categories: Sequence[Category],
    apps: Sequence[App],
    diagnostics: Iterable[Diagnostic] = (),
) -> ParseResult:
    """Register every category and app under both its slug and its id.

    Args:
        categories: Top-level categories, subcategories nested inside.
        apps: Flat app list in document order.
        diagnostics: Per-node problems recovered during the parse.

    Returns:
        The finished ParseResult.

    Raises:
        DuplicateKeyError: If two categories, or two apps, share a key.
    """
    category_map: dict[str, Category] = {}
    for top in categories:
        for category in top.walk():
            _register(category_map, category, "category")

    app_map: dict[str, App] = {}
    for app in apps:
        _register(app_map, app, "app")

    logger.debug(
        "Indexed %d categories and %d apps under %d/%d keys",
        sum(1 for top in categories for _ in top.walk()),
        len(apps),
        len(category_map),
        len(app_map),
    )

    return ParseResult(
        categories=tuple(categories),
        apps=tuple(apps),
        category_map=MappingProxyType(category_map),
        app_map=MappingProxyType(app_map),
        diagnostics=tuple(diagnostics),
    )


def _register(
    index: dict, entity: Union[Category, App], namespace: str
) -> None:
    for key in dict.fromkeys((entity.slug, entity.id)):
        existing = index.get(key)
        if existing is not None and existing is not entity:
            raise DuplicateKeyError(
                f"Duplicate {namespace} key '{key}': "
                f"'{existing.name}' and '{entity.name}'"
            )
        index[key] = entity
