"""CLI interface for nacptool using Typer."""

from __future__ import annotations

import logging
import warnings
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from nacptool import __version__
from nacptool.core.constants import Language
from nacptool.core.records import NacpFile, TitleInfo

app = typer.Typer(
    name="nacptool",
    help="Inspect control.nacp title metadata (legacy and compressed title blocks).",
    add_completion=False,
)
console = Console()

_verbose = False
_quiet = False


def _print(msg: str, *, verbose_only: bool = False) -> None:
    """Print respecting --verbose/--quiet flags. Errors bypass --quiet."""
    if _quiet:
        return
    if verbose_only and not _verbose:
        return
    console.print(msg)


def _error(msg: str) -> None:
    console.print(f"[red]Error:[/red] {msg}")


def _setup_logging(verbose: bool) -> None:
    pkg_logger = logging.getLogger("nacptool")
    pkg_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if not any(isinstance(h, RichHandler) for h in pkg_logger.handlers):
        pkg_logger.addHandler(RichHandler(console=console, show_path=False))


def _require_file(file: Path) -> None:
    if not file.exists():
        _error(f"File not found: {file}")
        raise typer.Exit(1)


def _load(file: Path) -> NacpFile:
    """Load a NACP file, turning loader warnings into console output."""
    from nacptool.core.nacp import load_nacp

    _require_file(file)
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        nacp = load_nacp(file)
    for w in caught:
        _print(f"[yellow]Warning:[/yellow] {w.message}")
    if nacp.degraded:
        _print("[yellow]Titles were read from the raw title block and may be garbled.[/yellow]")
    return nacp


def _titles_table(titles: list[TitleInfo], caption: str) -> Table:
    table = Table(title=caption)
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Language")
    table.add_column("Name")
    table.add_column("Publisher")
    table.add_column("Source", style="dim")
    for t in titles:
        table.add_row(
            str(t.language.value),
            t.language.display_name,
            t.name,
            t.publisher,
            "extended" if t.is_extended else "legacy",
        )
    return table


def version_callback(value: bool) -> None:
    if value:
        console.print(f"nacptool {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v",
        help="Show extra info (debug logging).",
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Only show errors.",
    ),
) -> None:
    """nacptool: Decode control.nacp title metadata."""
    global _verbose, _quiet
    _verbose = verbose
    _quiet = quiet
    _setup_logging(verbose)


@app.command()
def info(
    file: Path = typer.Argument(..., help="Path to the control.nacp file."),
) -> None:
    """Show metadata and every localized title of a NACP file."""
    nacp = _load(file)
    control = nacp.control

    fmt = "compressed" if nacp.compressed else "legacy"
    console.print(f"Title block: [cyan]{fmt}[/cyan]")
    console.print(f"Display version: [cyan]{control.display_version or '-'}[/cyan]")
    console.print(f"Presence group ID: [dim]{control.presence_group_id}[/dim]")
    console.print(f"Add-on content base ID: [dim]{control.add_on_content_base_id}[/dim]")
    console.print(f"Save data owner ID: [dim]{control.save_data_owner_id}[/dim]")
    if control.application_error_code_category:
        console.print(f"Error code category: {control.application_error_code_category}")
    if control.isbn:
        console.print(f"ISBN: {control.isbn}")
    _print(
        "Supported languages: "
        + (", ".join(lang.display_name for lang in control.supported_languages) or "-"),
        verbose_only=True,
    )

    titles = nacp.title_infos()
    console.print(f"Found [green]{len(titles)}[/green] localized titles\n")
    if titles:
        console.print(_titles_table(titles, f"Titles in {file.name}"))


@app.command()
def titles(
    file: Path = typer.Argument(..., help="Path to the control.nacp file."),
    language: str | None = typer.Option(
        None, "--language", "-l",
        help="Only show this language (e.g. AmericanEnglish, polish).",
    ),
) -> None:
    """List localized names and publishers."""
    lang: Language | None = None
    if language is not None:
        try:
            lang = Language.from_name(language)
        except ValueError as e:
            raise typer.BadParameter(str(e), param_hint="--language") from e

    nacp = _load(file)
    infos = nacp.title_infos()
    if lang is not None:
        infos = [t for t in infos if t.language == lang]
        if not infos:
            _print(f"No title for [cyan]{lang.display_name}[/cyan]")
            return

    for t in infos:
        console.print(str(t), markup=False)


@app.command()
def canonical(
    file: Path = typer.Argument(..., help="Path to the control.nacp file."),
    output: Path | None = typer.Option(
        None, "--output", "-o",
        help="Output path. Defaults to <name>_canonical.nacp.",
    ),
) -> None:
    """Write the NACP rearranged into the legacy title block layout."""
    from nacptool.core.compression import DecompressionError, is_compressed
    from nacptool.core.title_block import to_canonical

    _require_file(file)
    data = file.read_bytes()
    try:
        result = to_canonical(data)
    except DecompressionError as e:
        _error(f"{e} [dim]({e.kind.value})[/dim]")
        raise typer.Exit(1) from e

    if output is None:
        output = file.with_name(f"{file.stem}_canonical.nacp")
    output.write_bytes(result)

    if not is_compressed(data):
        _print("Title block already in legacy layout; copied unchanged.")
    _print(f"Wrote [green]{len(result):#x}[/green] bytes to [cyan]{output}[/cyan]")


@app.command()
def decompress(
    file: Path = typer.Argument(..., help="Path to the control.nacp file."),
    output: Path | None = typer.Option(
        None, "--output", "-o",
        help="Output path. Defaults to <name>_titles.bin.",
    ),
) -> None:
    """Write the raw decompressed title table of a compressed NACP."""
    from nacptool.core.compression import (
        DecompressionError,
        decompress_title_block,
        is_compressed,
    )
    from nacptool.core.constants import TITLE_ENTRY_SIZE

    _require_file(file)
    data = file.read_bytes()
    if not is_compressed(data):
        _error(f"Title block of {file.name} is not compressed")
        raise typer.Exit(1)

    try:
        table = decompress_title_block(data)
    except DecompressionError as e:
        _error(f"{e} [dim]({e.kind.value})[/dim]")
        raise typer.Exit(1) from e

    if output is None:
        output = file.with_name(f"{file.stem}_titles.bin")
    output.write_bytes(table)
    _print(
        f"Wrote [green]{len(table) // TITLE_ENTRY_SIZE}[/green] title entries "
        f"({len(table):#x} bytes) to [cyan]{output}[/cyan]"
    )


@app.command()
def export(
    file: Path = typer.Argument(..., help="Path to the control.nacp file."),
    report: Path = typer.Option(
        ..., "--report", "-r",
        help="Save report to file (json/md/csv).",
    ),
) -> None:
    """Export decoded NACP metadata as a JSON, Markdown, or CSV report."""
    from nacptool.reporting.formatters import save_report
    from nacptool.reporting.report import NacpReport

    nacp = _load(file)
    save_report(NacpReport.from_nacp(nacp, source_file=file), report)
    _print(f"Report saved: [cyan]{report}[/cyan]")


if __name__ == "__main__":
    app()
