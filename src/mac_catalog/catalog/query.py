"""Read-side queries over a parsed catalog.

Page rendering, search and sitemap generation all go through these lookups.
A ``CatalogQuery`` never mutates the result it wraps.
"""

from __future__ import annotations

from typing import Optional

from mac_catalog.catalog.schema import App, Category, ParseResult


class CatalogQuery:
    """Lookups and filters over one ParseResult."""

    def __init__(self, result: ParseResult):
        self.result = result

    @property
    def categories(self) -> tuple[Category, ...]:
        return self.result.categories

    @property
    def apps(self) -> tuple[App, ...]:
        return self.result.apps

    def get_category(self, id_or_slug: str) -> Optional[Category]:
        """Category or subcategory by id or slug."""
        return self.result.category_map.get(id_or_slug)

    def get_app(self, id_or_slug: str) -> Optional[App]:
        return self.result.app_map.get(id_or_slug)

    def apps_in_category(self, category_id: str) -> list[App]:
        """Apps filed directly under the category or under one of its subcategories."""
        return [
            app
            for app in self.result.apps
            if app.category_id == category_id or app.parent_category_id == category_id
        ]

    def search(self, query: str) -> list[App]:
        """Case-insensitive substring match on app name and description."""
        needle = query.strip().lower()
        if not needle:
            return []
        return [
            app
            for app in self.result.apps
            if needle in app.name.lower()
            or (app.description is not None and needle in app.description.lower())
        ]

    def free_apps(self) -> list[App]:
        return [app for app in self.result.apps if app.is_free]

    def open_source_apps(self) -> list[App]:
        return [app for app in self.result.apps if app.is_open_source]

    def app_store_apps(self) -> list[App]:
        return [app for app in self.result.apps if app.is_app_store]

    def all_app_slugs(self) -> list[str]:
        return [app.slug for app in self.result.apps]

    def all_category_ids(self) -> list[str]:
        """Ids of every category and subcategory, parents before children."""
        return [category.id for category in self.result.iter_categories()]

    def stats(self) -> dict[str, int]:
        return {
            "categories": len(self.result.categories),
            "subcategories": sum(
                1 for category in self.result.iter_categories() if category.depth == 3
            ),
            "apps": len(self.result.apps),
            "free": len(self.free_apps()),
            "open_source": len(self.open_source_apps()),
            "app_store": len(self.app_store_apps()),
        }
