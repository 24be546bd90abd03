"""
Command-line interface for schemagen.

Loads a schema document, runs a generator over it and writes one source
file per generated unit below the output directory.
"""

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from . import __version__
from .codegen import (
    GenerationResult,
    RegistryError,
    generate_code,
    get_generator,
    get_language_info,
    list_supported_languages,
)
from .codegen.core.config import ConfigError, load_config
from .codegen.registry import get_registry
from .logging_config import configure_logging, get_logger
from .utils import SchemaLoadError, load_schema, write_units

logger = get_logger(__name__)

console = Console()

DEFAULT_OUTPUT_DIR = "gen-scala"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schemagen",
        description="Generate Scala sources from a JSON schema document.",
    )
    parser.add_argument(
        "schema", nargs="?", metavar="SCHEMA", help="Schema document (file or URL)"
    )
    parser.add_argument(
        "--language", "-l", default="scala", help="Target language (default: scala)"
    )
    parser.add_argument(
        "--output-dir",
        "-o",
        metavar="DIR",
        help="Root directory for generated files (default: config output_dir or gen-scala)",
    )
    parser.add_argument("--config", metavar="FILE", help="JSON configuration file")
    parser.add_argument(
        "--package-name", metavar="NAME", help="Override the module's namespace"
    )
    parser.add_argument(
        "--strict-namespaces",
        action="store_true",
        help="Fail on references to modules without a namespace",
    )
    parser.add_argument(
        "--stdout",
        action="store_true",
        help="Print generated units instead of writing files",
    )
    parser.add_argument(
        "--list-languages", action="store_true", help="List supported languages"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser


def _list_languages() -> int:
    """Print the supported languages as a table."""
    table = Table(title="Supported Languages", box=box.ROUNDED, title_style="bold cyan")
    table.add_column("Language", style="bold green", no_wrap=True)
    table.add_column("Extension", style="cyan")
    table.add_column("Generator Class", style="dim")
    table.add_column("Aliases", style="blue")

    for language in list_supported_languages():
        info = get_language_info(language)
        aliases = ", ".join(info["aliases"]) if info["aliases"] else "[dim]none[/dim]"
        table.add_row(language, info["file_extension"], info["class"], aliases)

    console.print(table)
    return 0


def _print_units(result: GenerationResult, language: str) -> None:
    for unit in result.units:
        console.print(
            Panel(
                Syntax(unit.code, language, theme="monokai"),
                title=unit.filename,
                border_style="green",
            )
        )


def _report(result: GenerationResult) -> None:
    if result.warnings:
        console.print("[yellow]Warnings:[/yellow]")
        for warning in result.warnings:
            console.print(f"  [yellow]•[/yellow] {warning}")

    if result.errors:
        console.print("[red]Declarations not generated:[/red]")
        for error in result.errors:
            console.print(f"  [red]•[/red] {error}")


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the command line interface.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(logging.DEBUG if args.verbose else logging.WARNING)

    try:
        if args.list_languages:
            return _list_languages()

        if not args.schema:
            parser.print_usage()
            console.print("[red]✗ No schema document given[/red]")
            return 1

        language = get_registry().resolve_language(args.language)

        overrides = {}
        if args.package_name:
            overrides["package_name"] = args.package_name
        if args.strict_namespaces:
            overrides["strict_namespaces"] = True
        config = load_config(language, overrides, args.config)

        generator = get_generator(language, config)
        module = load_schema(args.schema)
    except (RegistryError, ConfigError, SchemaLoadError) as e:
        console.print(f"[red]✗[/red] {e}")
        return 1

    result = generate_code(generator, module)
    if not result.success and not result.units:
        console.print(f"[red]✗ {result.error_message or 'Code generation failed'}[/red]")
        _report(result)
        return 1

    if args.stdout:
        _print_units(result, language)
    else:
        output_dir = Path(args.output_dir or config.output_dir or DEFAULT_OUTPUT_DIR)
        try:
            written = write_units(result.units, output_dir, generator.package_name)
        except OSError as e:
            console.print(f"[red]✗ Failed to write output:[/red] {e}")
            return 1
        console.print(
            f"[green]✓[/green] Wrote {len(written)} {language} files to [cyan]{output_dir}[/cyan]"
        )

    _report(result)
    return 0 if result.success else 1
