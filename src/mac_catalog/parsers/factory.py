"""Parser factory — selects a parser implementation based on config."""

from __future__ import annotations

from collections.abc import Sequence

from mac_catalog.catalog.schema import ParseResult
from mac_catalog.config import Config
from mac_catalog.exceptions import ConfigError
from mac_catalog.mdast import ASTNode
from mac_catalog.parsers.base import BaseCatalogParser


def create_parser(config: Config | None = None) -> BaseCatalogParser:
    """Create a parser instance based on config.

    Args:
        config: Catalog configuration. Uses default if None.

    Returns:
        A BaseCatalogParser implementation.

    Raises:
        ConfigError: If the configured engine is unknown.
    """
    config = config or Config.default()
    engine = config.parser.engine.lower()

    if engine in ("awesome-mac", "awesome-list"):
        from mac_catalog.parsers.awesome_list import AwesomeListParser

        return AwesomeListParser(config)
    else:
        raise ConfigError(
            f"Unknown parser engine: '{engine}'. Available: awesome-mac"
        )


def parse_catalog(nodes: Sequence[ASTNode], config: Config | None = None) -> ParseResult:
    """Parse a node sequence with the configured parser."""
    return create_parser(config).parse(nodes)
