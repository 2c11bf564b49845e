"""Slug and identifier generation.

``slugify`` is a pure function. ``SlugRegistry`` holds the app and category
slugs handed out so far and lives for exactly one parse, so repeated or
concurrent parses never see each other's allocations.
"""

from __future__ import annotations

import hashlib
import re
from typing import Optional

from mac_catalog.exceptions import DuplicateKeyError

_DISALLOWED = re.compile(r"[^a-z0-9\s_-]")
_SEPARATORS = re.compile(r"[\s_-]+")


def slugify(text: str) -> str:
    """Convert text to a lowercase, hyphen-separated, URL-safe slug.

    Characters outside ``[a-z0-9]``, whitespace, ``_`` and ``-`` are dropped,
    runs of whitespace, underscores and hyphens become one hyphen, and
    leading/trailing hyphens are removed.

    >>> slugify("Development Tools")
    'development-tools'
    >>> slugify("version 2.0")
    'version-20'
    """
    slug = _DISALLOWED.sub("", text.lower())
    slug = _SEPARATORS.sub("-", slug)
    return slug.strip("-")


def generate_id(text: str, prefix: Optional[str] = None) -> str:
    """Slugify ``text`` and scope it under ``prefix`` when one is given."""
    slug = slugify(text)
    return f"{prefix}-{slug}" if prefix else slug


def fallback_slug(text: str, kind: str) -> str:
    """Deterministic slug for names with no ASCII letters or digits."""
    digest = hashlib.sha1(text.encode("utf-8")).hexdigest()[:8]
    return f"{kind}-{digest}"


def slug_for(text: str, kind: str) -> str:
    """``slugify(text)``, or a hash-based fallback when that comes out empty."""
    return slugify(text) or fallback_slug(text, kind)


class SlugRegistry:
    """Per-parse allocator for catalog identifiers."""

    def __init__(self) -> None:
        self._app_slugs: set[str] = set()
        self._category_slugs: set[str] = set()

    @property
    def app_slugs(self) -> frozenset[str]:
        return frozenset(self._app_slugs)

    @property
    def category_slugs(self) -> frozenset[str]:
        return frozenset(self._category_slugs)

    def claim_app(self, name: str) -> str:
        """Allocate the slug for an app, suffixing ``-2``, ``-3``... on collision."""
        base = slug_for(name, "app")
        candidate = base
        n = 2
        while candidate in self._app_slugs:
            candidate = f"{base}-{n}"
            n += 1
        self._app_slugs.add(candidate)
        return candidate

    def reserve_category(self, slug: str, node_index: Optional[int] = None) -> str:
        """Record a category slug. Category slugs are never suffixed.

        Raises:
            DuplicateKeyError: If ``slug`` was already reserved in this parse.
        """
        if slug in self._category_slugs:
            raise DuplicateKeyError(f"Duplicate category key '{slug}'", node_index)
        self._category_slugs.add(slug)
        return slug

    @staticmethod
    def category_slug(name: str, parent_slug: Optional[str] = None) -> str:
        """Slug (and id) of a category; subcategories are scoped by their parent."""
        return generate_id(slug_for(name, "category"), parent_slug)
