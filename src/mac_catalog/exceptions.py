"""Exception hierarchy for the catalog builder."""

from __future__ import annotations

from typing import Optional


class CatalogError(Exception):
    """Base exception for all mac-catalog errors."""


class ConfigError(CatalogError):
    """Raised when configuration is invalid or missing."""


class ParseError(CatalogError):
    """Raised when the input node sequence cannot be turned into a catalog."""

    code = "parse"

    def __init__(self, message: str, node_index: Optional[int] = None):
        super().__init__(message)
        self.node_index = node_index


class ItemError(ParseError):
    """A single node could not be converted. Recovered as a diagnostic."""

    code = "item"


class MalformedHeadingError(ItemError):
    """A heading node has no extractable text."""

    code = "malformed-heading"


class MissingUrlError(ItemError):
    """A list item yields no URL."""

    code = "missing-url"


class MissingNameError(ItemError):
    """A list item has a URL but no title, link text or host to name it by."""

    code = "missing-name"


class StructuralError(ParseError):
    """The document violates the two-level category structure. Fatal."""

    code = "structural"


class OrphanItemError(StructuralError):
    """A list item or subcategory appeared with no enclosing category."""

    code = "orphan-item"


class DuplicateKeyError(StructuralError):
    """Two entities of the same namespace share a slug or id."""

    code = "duplicate-key"
