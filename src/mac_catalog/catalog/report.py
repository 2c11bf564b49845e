"""Parse report — diagnostics and statistics from one catalog build."""

from __future__ import annotations

import json
from dataclasses import dataclass, field

from mac_catalog.catalog.schema import Diagnostic, ParseResult


@dataclass
class ParseReport:
    """Summary of a markdown-AST-to-catalog run."""

    # Source info
    source_file: str = ""
    parser: str = ""
    parser_version: str = ""

    # Timing
    parse_time_seconds: float = 0.0

    # Entity counts
    category_count: int = 0
    subcategory_count: int = 0
    app_count: int = 0

    # Attribute counts
    free_count: int = 0
    open_source_count: int = 0
    app_store_count: int = 0
    awesome_list_count: int = 0

    # Categories with neither apps nor subcategories (kept, but worth a look)
    empty_categories: list[str] = field(default_factory=list)

    # Per-node problems recovered during the parse
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def diagnostics_by_code(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for diagnostic in self.diagnostics:
            counts[diagnostic.code] = counts.get(diagnostic.code, 0) + 1
        return counts

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return json.dumps(self._to_dict(), indent=indent)

    def _to_dict(self) -> dict:
        """Convert to a plain dict for JSON serialization."""
        return {
            "source_file": self.source_file,
            "parser": self.parser,
            "parser_version": self.parser_version,
            "timing": {
                "parse_seconds": round(self.parse_time_seconds, 3),
            },
            "counts": {
                "categories": self.category_count,
                "subcategories": self.subcategory_count,
                "apps": self.app_count,
            },
            "attributes": {
                "free": self.free_count,
                "open_source": self.open_source_count,
                "app_store": self.app_store_count,
                "awesome_list": self.awesome_list_count,
            },
            "empty_categories": self.empty_categories,
            "diagnostics_by_code": dict(sorted(self.diagnostics_by_code.items())),
            "diagnostics": [
                {
                    "code": d.code,
                    "message": d.message[:120],
                    "node_index": d.node_index,
                }
                for d in self.diagnostics
            ],
        }

    @classmethod
    def from_result(cls, result: ParseResult, **source) -> ParseReport:
        """Build a report by walking a ParseResult.

        Args:
            result: The parsed catalog.
            **source: ``source_file``, ``parser`` and ``parser_version``.
        """
        report = cls(**source)

        for category in result.iter_categories():
            if category.depth == 2:
                report.category_count += 1
            else:
                report.subcategory_count += 1
            if not category.apps and not category.subcategories:
                report.empty_categories.append(category.id)

        for app in result.apps:
            report.app_count += 1
            report.free_count += app.is_free
            report.open_source_count += app.is_open_source
            report.app_store_count += app.is_app_store
            report.awesome_list_count += app.has_awesome_list

        report.diagnostics = list(result.diagnostics)
        return report
