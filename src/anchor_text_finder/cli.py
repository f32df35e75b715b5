"""
Command-line interface for Anchor Text Finder.

Provides a CLI for generating anchor text suggestions for a target URL.
"""

import asyncio
import json
import sys
from typing import Optional

import click
import httpx
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .config import FALLBACK_STRATEGIES, AnchorFinderConfig
from .errors import (
    ConfigurationError,
    MalformedResponseError,
    UpstreamError,
    ValidationError,
)
from .finder import AnchorTextFinder
from .logging_config import configure_logging
from .models import FinderResult, RawAnchorText

console = Console()


@click.command()
@click.argument("target_url", required=False)
@click.option(
    "--topic",
    "-t",
    type=str,
    default=None,
    help="Business niche; only keywords containing it are kept.",
)
@click.option(
    "--country",
    type=str,
    default=None,
    help="Market code for keyword metrics (default: de).",
)
@click.option(
    "--fallback-strategy",
    type=click.Choice(FALLBACK_STRATEGIES),
    default=None,
    help="How competitor keywords are gathered when the target has none.",
)
@click.option(
    "--ahrefs-api-key",
    type=str,
    envvar="AHREFS_API_KEY",
    help="Ahrefs API key. Can also be set via AHREFS_API_KEY env var.",
)
@click.option(
    "--openai-api-key",
    type=str,
    envvar="OPENAI_API_KEY",
    help="OpenAI API key. Can also be set via OPENAI_API_KEY env var.",
)
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    default=False,
    help="Print the raw JSON payload instead of tables.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Enable verbose output.",
)
def main(
    target_url: Optional[str],
    topic: Optional[str],
    country: Optional[str],
    fallback_strategy: Optional[str],
    ahrefs_api_key: Optional[str],
    openai_api_key: Optional[str],
    as_json: bool,
    verbose: bool,
) -> None:
    """
    Anchor Text Finder - Suggest backlink anchor texts for a URL.

    Looks up the keywords TARGET_URL ranks for, keeps the low-difficulty,
    decent-volume ones and asks an LLM for anchor text suggestions.

    Examples:

        anchor-finder https://example.com/shoes --topic shoes

        anchor-finder example.com --json
    """
    configure_logging("DEBUG" if verbose else "WARNING", rich_output=True)

    try:
        config = AnchorFinderConfig.from_env(
            ahrefs_api_key=ahrefs_api_key,
            openai_api_key=openai_api_key,
            country=country,
            fallback_strategy=fallback_strategy,
        )
    except ValueError as e:
        console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        sys.exit(1)

    finder = AnchorTextFinder(config=config)

    try:
        if as_json:
            result = asyncio.run(finder.run(target_url, topic))
            click.echo(json.dumps(result.to_payload(), indent=2))
            return

        console.print(Panel.fit(
            "[bold blue]Anchor Text Finder[/bold blue]\n"
            "Keyword-driven anchor text suggestions",
            border_style="blue",
        ))
        with console.status("[bold green]Fetching keywords and generating suggestions..."):
            result = asyncio.run(finder.run(target_url, topic))

        _display_result(result, verbose)

    except ValidationError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)
    except ConfigurationError as e:
        console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        sys.exit(1)
    except (UpstreamError, MalformedResponseError) as e:
        console.print(f"[red]Upstream error:[/red] {escape(str(e))}")
        sys.exit(1)
    except httpx.HTTPError as e:
        console.print(f"[red]Network error:[/red] {escape(str(e))}")
        sys.exit(1)


def _display_result(result: FinderResult, verbose: bool) -> None:
    """Display refined keywords and anchor suggestions."""
    refined = result.refined

    kw_table = Table(title="Refined Keywords", show_header=True)
    kw_table.add_column("Keyword", style="green")
    kw_table.add_column("Volume", justify="right")
    kw_table.add_column("Difficulty", justify="right")
    for record in refined:
        kw_table.add_row(
            escape(record.keyword),
            "-" if record.volume is None else str(record.volume),
            "-" if record.difficulty is None else str(record.difficulty),
        )
    console.print(kw_table)

    if refined.used_fallback:
        console.print("[yellow]Keywords taken from competitor pages.[/yellow]")
    if verbose:
        console.print(f"[dim]Candidates examined: {refined.candidate_count}[/dim]")

    if isinstance(result.anchor_texts, RawAnchorText):
        console.print(Panel(escape(result.anchor_texts.text), title="Anchor Texts (unstructured)"))
        return

    anchor_table = Table(title="Anchor Text Suggestions", show_header=True)
    anchor_table.add_column("Type", style="cyan")
    anchor_table.add_column("Anchor Text", style="green")
    anchor_table.add_column("Search Volume", justify="right")
    anchor_table.add_column("Difficulty")
    anchor_table.add_column("Best For")
    for suggestion in result.anchor_texts.suggestions():
        anchor_table.add_row(
            escape(suggestion.category),
            escape(suggestion.text),
            "" if suggestion.search_volume is None else escape(str(suggestion.search_volume)),
            escape(suggestion.difficulty or ""),
            escape(suggestion.best_for or ""),
        )
    console.print(anchor_table)


def run_cli() -> None:
    """Entry point for the CLI."""
    main()


if __name__ == "__main__":
    run_cli()
