"""Catalog parser implementations."""

from mac_catalog.parsers.base import BaseCatalogParser
from mac_catalog.parsers.factory import create_parser, parse_catalog

__all__ = ["BaseCatalogParser", "create_parser", "parse_catalog"]
