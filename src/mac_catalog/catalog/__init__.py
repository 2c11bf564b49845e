"""Normalized catalog models, queries and reporting."""

from mac_catalog.catalog.query import CatalogQuery
from mac_catalog.catalog.report import ParseReport
from mac_catalog.catalog.schema import App, Category, Diagnostic, ParseResult

__all__ = [
    "App",
    "CatalogQuery",
    "Category",
    "Diagnostic",
    "ParseReport",
    "ParseResult",
]
