"""Click CLI for the catalog builder.

Commands:
    build     — AST JSON → catalog JSON (the data file the site reads)
    inspect   — Parse AST JSON and print the catalog (for debugging)
    lookup    — Look up a category or app by slug or id in a built catalog
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from mac_catalog.catalog.query import CatalogQuery
from mac_catalog.config import Config
from mac_catalog.exceptions import CatalogError
from mac_catalog.pipeline import Pipeline


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose logging.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to a YAML configuration file.",
)
@click.pass_context
def main(ctx: click.Context, verbose: bool, config_path: Path | None) -> None:
    """Build the macOS app catalog from an awesome-list syntax tree."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        config = Config.load(config_path)
    except CatalogError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1)
    if verbose:
        config.verbose = True

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["pipeline"] = Pipeline(config)


@main.command()
@click.argument("ast_json", type=click.Path(exists=True, path_type=Path))
@click.argument("output_json", type=click.Path(path_type=Path), required=False)
@click.option("--report", is_flag=True, help="Save parse report JSON alongside output.")
@click.option(
    "--report-path",
    type=click.Path(path_type=Path),
    default=None,
    help="Custom path for the report JSON file.",
)
@click.option(
    "--lenient",
    is_flag=True,
    help="Drop items outside any category instead of failing.",
)
@click.pass_context
def build(
    ctx: click.Context,
    ast_json: Path,
    output_json: Path | None,
    report: bool,
    report_path: Path | None,
    lenient: bool,
) -> None:
    """Convert an AST JSON export into a catalog JSON file."""
    pipeline: Pipeline = ctx.obj["pipeline"]

    if lenient:
        pipeline.config.parser.strict_structure = False

    try:
        result = pipeline.build(
            ast_json,
            output_json,
            save_report=report,
            report_path=report_path,
        )
        click.echo(f"Generated: {result}")

        rpt = pipeline.last_report
        if rpt is not None:
            click.echo(
                f"Catalog: {rpt.category_count} categories, "
                f"{rpt.subcategory_count} subcategories, {rpt.app_count} apps, "
                f"{len(rpt.diagnostics)} diagnostics"
            )
    except CatalogError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1)


@main.command()
@click.argument("ast_json", type=click.Path(exists=True, path_type=Path))
@click.pass_context
def inspect(ctx: click.Context, ast_json: Path) -> None:
    """Parse an AST JSON export and print the catalog as JSON."""
    pipeline: Pipeline = ctx.obj["pipeline"]

    try:
        click.echo(pipeline.inspect(ast_json))
    except CatalogError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1)


@main.command()
@click.argument("catalog_json", type=click.Path(exists=True, path_type=Path))
@click.argument("key")
@click.pass_context
def lookup(ctx: click.Context, catalog_json: Path, key: str) -> None:
    """Print the category or app stored under KEY (slug or id)."""
    pipeline: Pipeline = ctx.obj["pipeline"]

    try:
        query = CatalogQuery(pipeline.load_catalog(catalog_json))
    except CatalogError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1)

    entity = query.get_category(key) or query.get_app(key)
    if entity is None:
        click.echo(f"Not found: {key}", err=True)
        raise SystemExit(1)
    click.echo(entity.model_dump_json(indent=2, by_alias=True, exclude_none=True))
