"""State table extractor CLI."""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table as RichTable

from gettables.config import settings
from gettables.errors import GetTablesError
from gettables.models import ExtractionResult, Variant
from gettables.pipeline import HTMLRenderer, extract_all, extract_file

app = typer.Typer(
    name="gettables",
    help="Extract OpenGL state tables from the specification's table sources",
    add_completion=False,
)
console = Console()


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _extract(
    variants: Optional[list[str]],
    tables_dir: Optional[Path],
    parallel: bool = False,
) -> list[ExtractionResult]:
    source_settings = settings
    if tables_dir is not None:
        source_settings = settings.model_copy(update={"tables_dir": tables_dir})
    try:
        return extract_all(variants or None, source_settings, parallel=parallel)
    except (GetTablesError, FileNotFoundError) as e:
        console.print(f"[bold red]Extraction failed:[/bold red] {e}")
        raise typer.Exit(code=1)


@app.callback()
def main(
    log_level: str = typer.Option(settings.log_level, help="Logging level"),
) -> None:
    """Configure logging for all commands."""
    configure_logging(log_level)


@app.command()
def extract(
    variant: Optional[list[str]] = typer.Option(None, help="Variant(s) to extract"),
    tables_dir: Optional[Path] = typer.Option(None, help="Directory with table sources"),
    output: Path = typer.Option(settings.output_path, help="HTML output path"),
    parallel: bool = typer.Option(False, help="Extract variants in parallel"),
) -> None:
    """Extract state tables and write them as HTML."""
    results = _extract(variant, tables_dir, parallel=parallel)
    HTMLRenderer().write(results, output)
    for result in results:
        console.print(
            f"[bold blue]{result.variant.value}:[/bold blue] "
            f"{len(result.tables)} tables, {result.entry_count} entries"
        )
        for diagnostic in result.diagnostics:
            console.print(f"[yellow]  {diagnostic}[/yellow]")
    console.print(f"[dim]Output: {output}[/dim]")


@app.command()
def show(
    source: Path = typer.Argument(..., help="Table source file"),
    variant: Variant = typer.Option(Variant.GL, help="Document variant of the source"),
    label: Optional[str] = typer.Option(None, help="Only show the table with this label"),
) -> None:
    """Print the tables of one source file to the console."""
    try:
        result = extract_file(source, variant)
    except (GetTablesError, FileNotFoundError) as e:
        console.print(f"[bold red]Extraction failed:[/bold red] {e}")
        raise typer.Exit(code=1)

    for table in result.tables:
        if label is not None and table.label != label:
            continue
        view = RichTable(title=f"{table.title} [dim]({table.label})[/dim]")
        for column in ("Get value", "Type", "Get command", "Initial value", "Condition"):
            view.add_column(column)
        for entry in table.entries:
            if entry.has_parsed_type:
                value_type = str(entry.value_type)
            elif entry.value_type is not None:
                # Unparsed type, kept as written
                value_type = f"[yellow]{escape(entry.value_type)}[/yellow]"
            else:
                value_type = "-"
            view.add_row(
                entry.get_value or "-",
                value_type,
                entry.get_command or "-",
                entry.initial_value or "-",
                entry.condition.value if entry.condition else "",
            )
        console.print(view)
        for index, footnote in enumerate(table.footnotes):
            console.print(f"[dim]{'†‡'[index]} {footnote}[/dim]")


@app.command()
def dump(
    variant: Optional[list[str]] = typer.Option(None, help="Variant(s) to extract"),
    tables_dir: Optional[Path] = typer.Option(None, help="Directory with table sources"),
    output: Optional[Path] = typer.Option(None, help="JSON output path (default stdout)"),
) -> None:
    """Dump extracted tables as JSON."""
    results = _extract(variant, tables_dir)
    text = "[\n" + ",\n".join(r.model_dump_json(indent=2) for r in results) + "\n]\n"
    if output is None:
        typer.echo(text, nl=False)
    else:
        output.write_text(text, encoding="utf-8")
        console.print(f"[dim]Output: {output}[/dim]")


if __name__ == "__main__":
    app()
