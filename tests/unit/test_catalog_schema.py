"""Tests for catalog models, the index builder and catalog queries."""

import json

import pytest
from pydantic import ValidationError

from mac_catalog.catalog import App, CatalogQuery, Category, Diagnostic, ParseResult
from mac_catalog.exceptions import DuplicateKeyError
from mac_catalog.indexer import build_index


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _app(name, category_id, parent_id=None, **flags) -> App:
    slug = name.lower().replace(" ", "-")
    return App(
        id=slug,
        slug=slug,
        name=name,
        url=f"https://{slug}.example",
        category_id=category_id,
        parent_category_id=parent_id,
        **flags,
    )


def _sample_result() -> ParseResult:
    """Development Tools (one app) > Text Editors (two apps); Utilities (one app)."""
    vscode = _app("VS Code", "development-tools", is_free=True, is_open_source=True,
                  oss_url="https://github.com/microsoft/vscode", description="Editor")
    vim = _app("Vim", "development-tools-text-editors", "development-tools",
               is_free=True, is_open_source=True, description="Modal editor")
    bbedit = _app("BBEdit", "development-tools-text-editors", "development-tools",
                  is_app_store=True)
    alfred = _app("Alfred", "utilities", has_awesome_list=True, description="Launcher")

    editors = Category(
        id="development-tools-text-editors",
        slug="development-tools-text-editors",
        name="Text Editors",
        depth=3,
        parent_id="development-tools",
        parent_name="Development Tools",
        apps=(vim, bbedit),
    )
    dev = Category(
        id="development-tools",
        slug="development-tools",
        name="Development Tools",
        depth=2,
        description="Tools for developers",
        subcategories=(editors,),
        apps=(vscode,),
    )
    utilities = Category(id="utilities", slug="utilities", name="Utilities", depth=2, apps=(alfred,))
    return build_index(
        [dev, utilities],
        [vscode, vim, bbedit, alfred],
        [Diagnostic(code="missing-url", message="List item has no URL", node_index=7)],
    )


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------

class TestModels:
    def test_app_defaults(self):
        app = App(id="x", slug="x", name="X", url="https://x.example", category_id="c")
        assert app.is_free is False
        assert app.is_open_source is False
        assert app.is_app_store is False
        assert app.has_awesome_list is False
        assert app.oss_url is None
        assert app.description is None

    def test_app_is_frozen(self):
        app = App(id="x", slug="x", name="X", url="https://x.example", category_id="c")
        with pytest.raises(ValidationError):
            app.name = "Y"

    def test_category_depth_validated(self):
        with pytest.raises(ValidationError):
            Category(id="x", slug="x", name="X", depth=4)

    def test_camel_case_aliases(self):
        app = App.model_validate({
            "id": "x", "slug": "x", "name": "X", "url": "https://x.example",
            "categoryId": "c", "isFree": True, "ossUrl": "https://github.com/x",
        })
        assert app.category_id == "c"
        assert app.is_free is True
        assert app.oss_url == "https://github.com/x"

    def test_walk_order(self):
        result = _sample_result()
        assert [c.id for c in result.iter_categories()] == [
            "development-tools",
            "development-tools-text-editors",
            "utilities",
        ]


class TestParseResult:
    def test_empty(self):
        result = build_index([], [])
        assert result.categories == ()
        assert result.apps == ()
        assert dict(result.category_map) == {}
        assert dict(result.app_map) == {}

    def test_maps_are_read_only(self):
        result = _sample_result()
        with pytest.raises(TypeError):
            result.app_map["new"] = result.apps[0]
        with pytest.raises(TypeError):
            result.category_map["new"] = result.categories[0]

    def test_result_is_frozen(self):
        result = _sample_result()
        with pytest.raises(ValidationError):
            result.apps = ()

    def test_json_uses_camel_case_and_omits_maps(self):
        data = json.loads(_sample_result().to_json())
        assert set(data) == {"categories", "apps", "diagnostics"}
        assert data["apps"][0]["categoryId"] == "development-tools"
        assert data["apps"][0]["isOpenSource"] is True
        assert "parentCategoryId" not in data["apps"][0]
        assert data["diagnostics"][0]["nodeIndex"] == 7
        sub = data["categories"][0]["subcategories"][0]
        assert sub["parentId"] == "development-tools"

    def test_json_round_trip_rebuilds_maps(self):
        original = _sample_result()
        restored = ParseResult.from_json(original.to_json())
        assert restored.to_json() == original.to_json()
        assert restored.app_map["vim"].category_id == "development-tools-text-editors"
        assert restored.category_map["utilities"].name == "Utilities"
        assert restored.diagnostics == original.diagnostics

    def test_round_trip_shares_app_instances(self):
        restored = ParseResult.from_json(_sample_result().to_json())
        tree_vim = restored.categories[0].subcategories[0].apps[0]
        assert restored.app_map["vim"] is tree_vim
        assert restored.apps[1] is tree_vim


# ---------------------------------------------------------------------------
# Index builder
# ---------------------------------------------------------------------------

class TestBuildIndex:
    def test_every_category_indexed(self):
        result = _sample_result()
        for category in result.iter_categories():
            assert result.category_map[category.id] is category
            assert result.category_map[category.slug] is category
        assert len(result.category_map) == 3

    def test_every_app_indexed(self):
        result = _sample_result()
        for app in result.apps:
            assert result.app_map[app.id] is app
            assert result.app_map[app.slug] is app

    def test_slug_and_id_keys_differ(self):
        app = App(id="a1", slug="alfred", name="Alfred", url="https://a.example", category_id="u")
        result = build_index([], [app])
        assert result.app_map["a1"] is app
        assert result.app_map["alfred"] is app

    def test_duplicate_category_slug_raises(self):
        first = Category(id="tools", slug="tools", name="Tools", depth=2)
        nested = Category(id="tools", slug="tools", name="Tools", depth=3, parent_id="x")
        second = Category(id="x", slug="x", name="X", depth=2, subcategories=(nested,))
        with pytest.raises(DuplicateKeyError, match="category key 'tools'"):
            build_index([first, second], [])

    def test_duplicate_app_slug_raises(self):
        a = _app("Finder", "u")
        b = _app("Finder", "v")
        with pytest.raises(DuplicateKeyError, match="app key 'finder'"):
            build_index([], [a, b])

    def test_app_and_category_namespaces_separate(self):
        category = Category(id="alfred", slug="alfred", name="Alfred", depth=2)
        app = _app("Alfred", "alfred")
        result = build_index([category], [app])
        assert result.category_map["alfred"] is category
        assert result.app_map["alfred"] is app


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

class TestCatalogQuery:
    def test_get_category_by_id_or_slug(self):
        query = CatalogQuery(_sample_result())
        assert query.get_category("development-tools-text-editors").name == "Text Editors"
        assert query.get_category("missing") is None

    def test_get_app(self):
        query = CatalogQuery(_sample_result())
        assert query.get_app("alfred").name == "Alfred"
        assert query.get_app("nope") is None

    def test_apps_in_category_includes_subcategories(self):
        query = CatalogQuery(_sample_result())
        names = [a.name for a in query.apps_in_category("development-tools")]
        assert names == ["VS Code", "Vim", "BBEdit"]
        sub_names = [a.name for a in query.apps_in_category("development-tools-text-editors")]
        assert sub_names == ["Vim", "BBEdit"]

    def test_search(self):
        query = CatalogQuery(_sample_result())
        assert [a.name for a in query.search("EDITOR")] == ["VS Code", "Vim"]
        assert [a.name for a in query.search("alf")] == ["Alfred"]
        assert query.search("   ") == []

    def test_filters(self):
        query = CatalogQuery(_sample_result())
        assert [a.name for a in query.free_apps()] == ["VS Code", "Vim"]
        assert [a.name for a in query.open_source_apps()] == ["VS Code", "Vim"]
        assert [a.name for a in query.app_store_apps()] == ["BBEdit"]

    def test_slugs_and_ids(self):
        query = CatalogQuery(_sample_result())
        assert query.all_app_slugs() == ["vs-code", "vim", "bbedit", "alfred"]
        assert query.all_category_ids() == [
            "development-tools", "development-tools-text-editors", "utilities",
        ]

    def test_stats(self):
        stats = CatalogQuery(_sample_result()).stats()
        assert stats == {
            "categories": 2,
            "subcategories": 1,
            "apps": 4,
            "free": 2,
            "open_source": 2,
            "app_store": 1,
        }
