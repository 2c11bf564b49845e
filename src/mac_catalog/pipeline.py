"""Pipeline orchestrator: AST JSON → catalog → (optional report) → catalog JSON.

This is the data-loading side of the catalog: it reads the node sequence the
markdown build exported for one locale, runs the parser and writes the result
to the cache file the rendering layer reads.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from mac_catalog.catalog.report import ParseReport
from mac_catalog.catalog.schema import ParseResult
from mac_catalog.config import Config
from mac_catalog.exceptions import ParseError, StructuralError
from mac_catalog.mdast import ASTNode, parse_nodes_json
from mac_catalog.parsers.factory import create_parser

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _CachedCatalog:
    path: Path
    mtime_ns: int
    result: ParseResult


class Pipeline:
    """Orchestrates AST → catalog conversion and catalog caching."""

    def __init__(self, config: Config | None = None):
        self.config = config or Config.default()
        self.last_report: ParseReport | None = None
        self._cached: _CachedCatalog | None = None

    def build(
        self,
        ast_path: Path,
        output_path: Path | None = None,
        save_report: bool = False,
        report_path: Path | None = None,
    ) -> Path:
        """Full pipeline: AST JSON → ParseResult → catalog JSON.

        Args:
            ast_path: Input node sequence (JSON array).
            output_path: Catalog JSON file. Defaults to
                ``{ast_stem}{loader.catalog_suffix}`` next to the input.
            save_report: Whether to save a parse report JSON.
            report_path: Custom path for the report. Defaults to
                ``{ast_stem}{loader.report_suffix}``.

        Returns:
            Path to the written catalog JSON.
        """
        ast_path = Path(ast_path)
        if output_path is None:
            output_path = self._sibling(ast_path, self.config.loader.catalog_suffix)

        t0 = time.monotonic()
        result = self.parse(self.load_nodes(ast_path))
        t1 = time.monotonic()

        self.save_catalog(result, output_path)

        report = self._report(result, ast_path)
        report.parse_time_seconds = t1 - t0
        self.last_report = report

        if save_report:
            if report_path is None:
                report_path = self._sibling(ast_path, self.config.loader.report_suffix)
            Path(report_path).write_text(report.to_json(), encoding="utf-8")
            logger.info("Saved report to %s", report_path)

        return Path(output_path)

    def load_nodes(self, ast_path: Path) -> list[ASTNode]:
        """Read and validate a node sequence from a JSON file.

        Raises:
            ParseError: If the file is missing or not a valid node sequence.
        """
        ast_path = Path(ast_path)
        logger.info("Loading nodes from %s", ast_path)
        try:
            raw = ast_path.read_bytes()
        except FileNotFoundError:
            raise ParseError(f"AST file not found: {ast_path}")
        return parse_nodes_json(raw)

    def parse(self, nodes: Sequence[ASTNode]) -> ParseResult:
        """Run the configured parser over a node sequence."""
        parser = create_parser(self.config)
        return parser.parse(nodes)

    def get_catalog(self, ast_path: Path) -> ParseResult:
        """Parse ``ast_path``, reusing the last result while its mtime is unchanged.

        With ``loader.fallback_to_cache`` on, a structural failure on a
        changed file logs a warning and serves the previous good catalog.
        """
        ast_path = Path(ast_path)
        try:
            mtime_ns = ast_path.stat().st_mtime_ns
        except FileNotFoundError:
            raise ParseError(f"AST file not found: {ast_path}")

        cached = self._cached
        if cached is not None and cached.path == ast_path and cached.mtime_ns == mtime_ns:
            return cached.result

        try:
            result = self.parse(self.load_nodes(ast_path))
        except StructuralError as exc:
            if self.config.loader.fallback_to_cache and cached is not None:
                logger.warning(
                    "Re-parse of %s failed (%s); serving cached catalog", ast_path, exc
                )
                return cached.result
            raise

        self._cached = _CachedCatalog(ast_path, mtime_ns, result)
        return result

    def inspect(self, ast_path: Path) -> str:
        """Parse an AST file and return the catalog as formatted JSON."""
        return self.parse(self.load_nodes(ast_path)).to_json()

    @staticmethod
    def save_catalog(result: ParseResult, path: Path) -> Path:
        """Save a catalog to a JSON file.

        Args:
            result: The parsed catalog.
            path: Output JSON file path.

        Returns:
            The path written to.
        """
        path = Path(path)
        logger.info("Saving catalog to %s", path)
        path.write_text(result.to_json(), encoding="utf-8")
        return path

    @staticmethod
    def load_catalog(path: Path) -> ParseResult:
        """Load a catalog previously written by ``save_catalog``.

        Raises:
            ParseError: If the file is missing or cannot be decoded.
        """
        path = Path(path)
        logger.info("Loading catalog from %s", path)
        try:
            json_str = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise ParseError(f"Catalog file not found: {path}")
        try:
            return ParseResult.from_json(json_str)
        except ValueError as exc:
            raise ParseError(f"Failed to load catalog from {path}: {exc}") from exc

    def _report(self, result: ParseResult, ast_path: Path) -> ParseReport:
        parser = create_parser(self.config)
        return ParseReport.from_result(
            result,
            source_file=ast_path.name,
            parser=parser.name,
            parser_version=parser.version,
        )

    @staticmethod
    def _sibling(path: Path, suffix: str) -> Path:
        return path.with_name(path.stem + suffix)
