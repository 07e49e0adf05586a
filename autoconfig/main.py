import asyncio
import json
import logging
from pathlib import Path
from typing import List, Optional
import typer
from rich.console import Console
from rich.json import JSON
from rich.table import Table
from .core import ConfigGenerator
from .errors import AutoconfigError
from .fetcher import fetcher_for_url, normalize_html
from .labeler import LLMFieldLabeler
from .locations import assign_colors
from .models import ConfigOptions


app = typer.Typer(help="Generate scraper configs from the repeated structure of a web page")
console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


@app.command()
def generate(
    url: str = typer.Argument(..., help="URL of the page (http(s):// or file://)"),
    min_occ: Optional[List[int]] = typer.Option(
        None,
        "--min-occ",
        "-m",
        help="Minimum number of items on the page, can be repeated (default: 5, 10, 20)"
    ),
    only_varying: bool = typer.Option(False, "--only-varying", help="Only keep fields with varying values"),
    url_required: bool = typer.Option(
        False,
        "--url-required",
        help="Only keep configs with a link to a subpage"
    ),
    shorten_root: bool = typer.Option(False, "--shorten-root", help="Use a shortened item selector"),
    skip_invalid: bool = typer.Option(
        False,
        "--skip-invalid",
        help="Skip configs the item parser fails on instead of aborting"
    ),
    output_dir: Optional[Path] = typer.Option(
        None,
        "--output-dir",
        "-o",
        help="Directory to write one JSON config per candidate to"
    ),
    html_dir: Optional[Path] = typer.Option(None, "--html-dir", help="Directory to write the normalized HTML to"),
    label: bool = typer.Option(False, "--label", help="Name fields with an OpenAI model"),
    api_key: Optional[str] = typer.Option(None, "--api-key", help="OpenAI API key"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")
):
    """Generate candidate configs for a page."""
    _setup_logging(verbose)

    options = ConfigOptions(
        input_url=url,
        only_varying=only_varying,
        url_required=url_required,
        shorten_root=shorten_root,
        abort_on_validation_error=not skip_invalid,
        html_output_dir=html_dir,
        **({"min_occurrences": min_occ} if min_occ else {})
    )
    labeler = None
    if label:
        try:
            labeler = LLMFieldLabeler(api_key=api_key)
        except ValueError as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(1)
    generator = ConfigGenerator(options, labeler=labeler)

    console.print(f"[cyan]Analyzing:[/cyan] {url}")
    try:
        results = asyncio.run(generator.configs_for_url())
    except AutoconfigError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    finally:
        if labeler is not None:
            labeler.close()

    table = Table(title=f"{len(results)} candidate configs")
    table.add_column("id")
    table.add_column("item selector")
    table.add_column("fields", justify="right")
    table.add_column("items", justify="right")
    table.add_column("values", justify="right")
    for cid in sorted(results):
        candidate = results[cid]
        table.add_row(
            cid,
            candidate.config.item,
            str(len(candidate.config.fields)),
            str(len(candidate.records)),
            str(candidate.total_fields)
        )
    console.print(table)

    if output_dir:
        output_dir.mkdir(parents=True, exist_ok=True)
        for cid, candidate in results.items():
            with open(output_dir / f"{cid}.json", "w") as f:
                json.dump(candidate.config.model_dump(), f, indent=2)
        console.print(f"[green]Saved {len(results)} configs to {output_dir}[/green]")
    elif results:
        best = max(results.values(), key=lambda c: c.total_fields)
        console.print(f"\n[cyan]Best config ({best.id}):[/cyan]")
        console.print(JSON(json.dumps(best.config.model_dump(), indent=2)))
        console.print(f"\n[cyan]Sample records:[/cyan]")
        console.print(JSON(json.dumps(best.as_dicts[:3], indent=2)))


@app.command()
def inspect(
    url: str = typer.Argument(..., help="URL of the page (http(s):// or file://)"),
    min_occ: int = typer.Option(5, "--min-occ", "-m", help="Minimum number of occurrences"),
    only_varying: bool = typer.Option(False, "--only-varying", help="Only keep fields with varying values"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")
):
    """Show the field locations found on a page."""
    _setup_logging(verbose)

    options = ConfigOptions(input_url=url, only_varying=only_varying, min_occurrences=[min_occ])
    generator = ConfigGenerator(options)

    try:
        res = asyncio.run(fetcher_for_url(url).fetch(url))
        locations = generator.analyze(normalize_html(res.html), min_occ)
    except AutoconfigError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if not locations:
        console.print("[yellow]No fields found[/yellow]")
        raise typer.Exit(1)

    assign_colors(locations)
    table = Table(title=f"{len(locations)} field locations")
    table.add_column("#", justify="right")
    table.add_column("name")
    table.add_column("count", justify="right")
    table.add_column("path")
    for c in range(3):
        table.add_column(f"example [{c}]")
    for i, lp in enumerate(locations):
        examples = [ex[:40] for ex in lp.examples[:3]]
        examples += [""] * (3 - len(examples))
        path = str(lp.path) + (f" @{lp.attr}" if lp.attr else f" #{lp.text_index}")
        table.add_row(str(i), lp.name, str(lp.count), path, *examples, style=lp.color)
    console.print(table)


if __name__ == "__main__":
    app()
