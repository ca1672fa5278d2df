"""
Command-line interface for API Change Detector.

This module provides the CLI using Click framework for argument parsing
and orchestrates loading, comparison and rendering.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from api_change_detector import __version__
from api_change_detector.config import Config, find_config_file, load_config
from api_change_detector.models.asyncapi import AsyncApiSpec
from api_change_detector.models.change import Severity
from api_change_detector.models.changelog import Changelog
from api_change_detector.models.graphql import GraphQLSchema
from api_change_detector.models.protobuf import ProtoFile
from api_change_detector.models.spec import ApiSpec

console = Console()

OUTPUT_FORMATS = ["text", "json", "yaml", "markdown", "html"]

BREAKING_EXIT_CODE = 1


def configure_logging(verbose: bool) -> None:
    """Route library logging through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def describe_spec(spec) -> tuple[str, dict[str, int]]:
    """Get the protocol name and entity counts of a loaded document."""
    if isinstance(spec, GraphQLSchema):
        return "graphql", {
            "types": len(spec.types),
            "queries": len(spec.queries),
            "mutations": len(spec.mutations),
            "subscriptions": len(spec.subscriptions),
        }
    if isinstance(spec, ProtoFile):
        return "grpc", {
            "services": len(spec.services),
            "rpc methods": sum(len(s.methods) for s in spec.services),
            "messages": len(spec.messages),
            "enums": len(spec.enums),
        }
    if isinstance(spec, AsyncApiSpec):
        return "asyncapi", {
            "servers": len(spec.servers),
            "channels": len(spec.channels),
            "operations": len(spec.operations),
            "messages": len(spec.messages),
            "schemas": len(spec.schemas),
        }
    if isinstance(spec, ApiSpec):
        return "rest", {
            "endpoints": len(spec.endpoints),
            "schemas": len(spec.schemas),
        }
    raise TypeError(f"Unsupported API description type: {type(spec).__name__}")


def should_fail(changelog: Changelog, config: Config, fail_on_breaking: bool) -> bool:
    """Decide whether the run should exit with a failure status."""
    if (fail_on_breaking or config.analysis.fail_on_breaking) and changelog.has_breaking_changes:
        return True
    threshold: Optional[Severity] = config.analysis.fail_on_severity
    if threshold is not None:
        return any(c.severity.is_at_least(threshold) for c in changelog.changes)
    return False


def build_changelog(config: Config, old: Path, new: Path) -> Changelog:
    """Load both documents and assemble their changelog."""
    from api_change_detector.analyzer.changelog import ChangelogGenerator
    from api_change_detector.parser.loader import load_spec

    old_spec = load_spec(old)
    new_spec = load_spec(new)
    return ChangelogGenerator(config.analysis).generate(old_spec, new_spec)


@click.group()
@click.version_option(version=__version__, prog_name="api-change-detector")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file. Defaults to the nearest .api-change-detector.yaml.",
)
@click.pass_context
def cli(ctx: click.Context, config: Optional[Path]) -> None:
    """API Change Detector - Classify changes between two versions of an API."""
    ctx.ensure_object(dict)
    try:
        config_path = config or find_config_file(Path.cwd())
        ctx.obj["config"] = load_config(config_path)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise click.Abort()


@cli.command()
@click.argument("old", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("new", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(OUTPUT_FORMATS),
    default=None,
    help="Output format (default: text, or the configured format).",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    help="Output file path. If not specified, prints to stdout.",
)
@click.option(
    "--fail-on-breaking",
    is_flag=True,
    help="Exit with status 1 when breaking changes are detected.",
)
@click.option(
    "--no-color",
    is_flag=True,
    help="Disable colors in text output.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output.",
)
@click.pass_context
def compare(
    ctx: click.Context,
    old: Path,
    new: Path,
    output_format: Optional[str],
    output: Optional[Path],
    fail_on_breaking: bool,
    no_color: bool,
    verbose: bool,
) -> None:
    """Compare OLD and NEW API descriptions and render the changelog."""
    from api_change_detector.output.formatters import get_formatter

    config: Config = ctx.obj["config"]
    configure_logging(verbose)
    output_format = output_format or config.output.format

    if verbose:
        console.print(f"[blue]Comparing:[/blue] {old} → {new}")

    try:
        changelog = build_changelog(config, old, new)

        if output_format == "text":
            colorize = config.output.colorize and not no_color and output is None
            formatter = get_formatter(output_format, colorize=colorize)
        else:
            formatter = get_formatter(output_format)
        formatted_output = formatter.format(changelog)

        if output:
            output.write_text(formatted_output, encoding="utf-8")
            console.print(f"[green]Changelog written to:[/green] {output}")
        else:
            # Print directly to stdout to preserve ANSI codes from formatter
            sys.stdout.write(formatted_output)
            sys.stdout.flush()

    except Exception as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        if verbose:
            import traceback
            console.print(traceback.format_exc())
        raise click.Abort()

    if should_fail(changelog, config, fail_on_breaking):
        ctx.exit(BREAKING_EXIT_CODE)


@cli.command()
@click.argument("old", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("new", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def breaking(ctx: click.Context, old: Path, new: Path) -> None:
    """List breaking and dangerous changes between OLD and NEW."""
    config: Config = ctx.obj["config"]

    try:
        changelog = build_changelog(config, old, new)
    except Exception as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise click.Abort()

    if not changelog.breaking_changes:
        console.print("[green]No breaking changes detected.[/green]")
        return

    table = Table(title="Breaking Changes", show_header=True, header_style="bold")
    table.add_column("Impact", justify="right")
    table.add_column("Severity")
    table.add_column("Path", style="cyan")
    table.add_column("Description")
    table.add_column("Migration", style="dim")

    for bc in changelog.breaking_changes:
        style = "bold red" if bc.severity == Severity.BREAKING else "dark_orange"
        table.add_row(
            str(bc.impact_score),
            f"[{style}]{bc.severity.value}[/{style}]",
            escape(bc.path),
            escape(bc.description),
            escape(bc.migration_suggestion or ""),
        )

    console.print(table)
    console.print(
        f"\nTotal: {changelog.risk_assessment.breaking_changes_count} breaking, "
        f"{len(changelog.breaking_changes)} surfaced"
    )

    if changelog.has_breaking_changes:
        ctx.exit(BREAKING_EXIT_CODE)


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def validate(file: Path) -> None:
    """Check that FILE holds a valid API description."""
    from api_change_detector.parser.loader import load_spec

    try:
        spec = load_spec(file)
        protocol, counts = describe_spec(spec)
    except Exception as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise click.Abort()

    console.print(f"[green]Valid[/green] {protocol} document: {file}")
    for name, count in counts.items():
        console.print(f"  {name}: {count}")


def main() -> None:
    """Main entry point for the CLI."""
    cli(obj={})
