"""Typer CLI application for the Semantic SEO engine.

Provides commands to analyse a parsed page payload, inspect the heuristic
tables and check configuration status.
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from src.utils.validators import ConfigurationError, InvalidInputError

console = Console()
app = typer.Typer(
    name="seo-semantic",
    help="Semantic SEO analysis -- core topic, entities, E-E-A-T and keyword inference.",
    add_completion=False,
    no_args_is_help=True,
)

DEFAULT_CONFIG = "config/settings.yaml"


def _setup_logging(verbose: bool = False) -> None:
    """Configure logging level and format."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _get_app(config_path: str, verbose: bool = False):
    """Lazy-import, initialise and return the application facade."""
    from src.app import SEOSemanticApp
    seo_app = SEOSemanticApp(config_path=config_path)
    seo_app.initialize()
    if verbose:
        logging.getLogger("src").setLevel(logging.DEBUG)
    return seo_app


def _fail(message: str) -> None:
    console.print(f"[red]✘ {message}[/red]")
    raise typer.Exit(code=1)


def _print_keywords(title: str, block: dict[str, Any]) -> None:
    """Pretty-print one keyword class using Rich."""
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Keyword", style="cyan", min_width=25)
    table.add_column("Confidence", justify="right", min_width=10)
    table.add_column("Found in", max_width=60)
    for kw in block["keywords"]:
        table.add_row(
            kw["term"],
            f"{kw['confidence_score']:.2f}",
            ", ".join(kw["extracted_from"]),
        )
    console.print(table)
    console.print(f"Class confidence: [bold]{block['confidence_score']:.2f}[/bold]")
    console.print(f"[dim]{block['reasoning_summary']}[/dim]\n")


def _print_analysis(result: dict[str, Any]) -> None:
    semantic = result["semantic_analysis"]
    main_topic = semantic["core_topic_analysis"]["main_topic"]
    console.print(Panel(
        f"[bold cyan]{main_topic['topic']}[/bold cyan]  "
        f"(confidence {main_topic['confidence_score']:.2f})\n{main_topic['reasoning']}",
        title="Core Topic",
    ))

    scores = Table(title="Content Scores", show_header=True, header_style="bold magenta")
    scores.add_column("Metric", style="cyan", min_width=25)
    scores.add_column("Value", justify="right", min_width=10)
    scores.add_row("Readability", str(semantic["readability_score"]))
    scores.add_row("Content quality", str(semantic["content_quality_score"]))
    scores.add_row("Topical authority", str(semantic["topical_authority_score"]))
    scores.add_row("Dominant intent", semantic["dominant_intent"] or "-")
    for name, value in semantic["eeat_score"].items():
        scores.add_row(f"E-E-A-T {name}", str(value))
    console.print(scores)

    entities = Table(title="Entities", show_header=True, header_style="bold magenta")
    entities.add_column("Category", style="cyan", min_width=15)
    entities.add_column("Values", max_width=70)
    for category, values in semantic["entity_extraction"].items():
        if values:
            entities.add_row(category, ", ".join(values))
    console.print(entities)

    keywords = result["inferred_keywords"]
    _print_keywords("Primary Keywords", keywords["primary"])
    _print_keywords("Secondary Keywords", keywords["secondary"])


# ------------------------------------------------------------------
# analyze
# ------------------------------------------------------------------
@app.command()
def analyze(
    payload_file: Path = typer.Argument(..., help="JSON payload produced by the page parser."),
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON result."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write JSON result to a file."),
    config: str = typer.Option(DEFAULT_CONFIG, "--config", "-c", help="Path to settings.yaml."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Run semantic analysis and keyword inference on one page payload."""
    _setup_logging(verbose)
    try:
        seo_app = _get_app(config, verbose)
        with open(payload_file, "r", encoding="utf-8") as fh:
            payload = json.load(fh)
        result = seo_app.analyze_page(payload)
    except json.JSONDecodeError as exc:
        _fail(f"Invalid JSON in {payload_file}: {exc}")
    except ConfigurationError as exc:
        _fail(f"Invalid configuration: {exc}")
    except InvalidInputError as exc:
        _fail(f"Invalid input: {exc}")
    except OSError as exc:
        _fail(f"Cannot read {payload_file}: {exc}")

    indent = seo_app.config.get("output", {}).get("indent", 2)
    rendered = json.dumps(result, indent=indent, sort_keys=True, ensure_ascii=False)

    if output is not None:
        try:
            output.write_text(rendered + "\n", encoding="utf-8")
        except OSError as exc:
            _fail(f"Cannot write {output}: {exc}")
        console.print(f"[green]✔[/green] Result written to {output}")
    if as_json:
        typer.echo(rendered)
    elif output is None:
        _print_analysis(result)


# ------------------------------------------------------------------
# heuristics
# ------------------------------------------------------------------
@app.command()
def heuristics(
    config: str = typer.Option(DEFAULT_CONFIG, "--config", "-c", help="Path to settings.yaml."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Show the heuristic table version and vocabulary sizes."""
    _setup_logging(verbose)
    try:
        seo_app = _get_app(config, verbose)
    except ConfigurationError as exc:
        _fail(f"Invalid configuration: {exc}")
    except InvalidInputError as exc:
        _fail(f"Invalid heuristics: {exc}")

    summary = seo_app.tables.summary()
    console.print(Panel(f"[bold cyan]Heuristic Tables v{summary['version']}[/bold cyan]"))

    table = Table(title="Vocabularies", show_header=True, header_style="bold magenta")
    table.add_column("Table", style="cyan", min_width=25)
    table.add_column("Entries", justify="right", min_width=10)
    for key, value in summary.items():
        if key in ("version", "source"):
            continue
        if isinstance(value, dict):
            for sub, count in value.items():
                table.add_row(f"{key}.{sub}", str(count))
        else:
            table.add_row(key, str(value))
    console.print(table)
    console.print(f"Source: {summary['source']}")


# ------------------------------------------------------------------
# status
# ------------------------------------------------------------------
@app.command()
def status(
    config: str = typer.Option(DEFAULT_CONFIG, "--config", "-c", help="Path to settings.yaml."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Show configuration and heuristic table status."""
    _setup_logging(verbose)
    console.print(Panel("[bold cyan]System Status[/bold cyan]"))
    try:
        seo_app = _get_app(config, verbose)
    except ConfigurationError as exc:
        _fail(f"Invalid configuration: {exc}")
    except InvalidInputError as exc:
        _fail(f"Invalid heuristics: {exc}")

    table = Table(title="Component Status", show_header=True, header_style="bold magenta")
    table.add_column("Component", style="cyan", min_width=25)
    table.add_column("Status", min_width=10)
    table.add_column("Details", max_width=60)
    for component, info in seo_app.get_status().items():
        if info["status"] == "ok":
            status_display = "[green]✔ OK[/green]"
        else:
            status_display = "[yellow]⚠ Warning[/yellow]"
        table.add_row(component.title(), status_display, info["details"])
    console.print(table)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
