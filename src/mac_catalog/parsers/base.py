"""Abstract base class for catalog parsers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from mac_catalog.catalog.schema import ParseResult
from mac_catalog.config import Config
from mac_catalog.mdast import ASTNode, parse_nodes


class BaseCatalogParser(ABC):
    """Base class that all catalog parser implementations must extend."""

    def __init__(self, config: Config | None = None):
        self.config = config or Config.default()

    @abstractmethod
    def parse(self, nodes: Sequence[ASTNode]) -> ParseResult:
        """Turn a top-level node sequence into a catalog.

        Args:
            nodes: Validated mdast nodes in document order.

        Returns:
            The finished, read-only ParseResult. Per-node problems are
            reported in its ``diagnostics``.

        Raises:
            StructuralError: If the document breaks the category structure.
        """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the parser engine name (e.g. 'awesome-mac')."""

    @property
    @abstractmethod
    def version(self) -> str:
        """Return the parser version string."""

    def parse_raw(self, data: Any) -> ParseResult:
        """Validate JSON-decoded nodes, then parse them.

        Raises:
            ParseError: If ``data`` is not a valid node sequence.
        """
        return self.parse(parse_nodes(data))
