"""Normalized macOS app catalog built from awesome-list markdown syntax trees."""

from mac_catalog.catalog import App, CatalogQuery, Category, Diagnostic, ParseReport, ParseResult
from mac_catalog.parsers import create_parser, parse_catalog

__all__ = [
    "App",
    "CatalogQuery",
    "Category",
    "Diagnostic",
    "ParseReport",
    "ParseResult",
    "create_parser",
    "parse_catalog",
]
