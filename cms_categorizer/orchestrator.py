import asyncio
import json
import sys
from pathlib import Path

import click
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .categorizer import AutoCategorizer, BatchCategorizationResult, ReviewEntry
from .config import get_settings, validate_config
from .exceptions import CategorizerError
from .logging import get_logger, setup_logging
from .processing.rules import build_category_rules
from .processing.scoring import CategorySuggestion
from .render import ReviewReportRenderer
from .store import MemoryContentStore
from .utils import truncate_text

logger = get_logger(__name__)
console = Console()


def build_categorizer(catalog_path: Path | None) -> AutoCategorizer:
    """Create a categorizer over a YAML catalog store."""
    settings = get_settings()
    store = MemoryContentStore.from_catalog(catalog_path or settings.catalog_path)
    return AutoCategorizer(store, store, store, settings=settings)


def display_suggestions(suggestions: list[CategorySuggestion], title: str = "Category Suggestions") -> None:
    """Display ranked suggestions in a table."""
    if not suggestions:
        console.print("[yellow]No category scored above the visibility threshold[/yellow]")
        return

    table = Table(title=title, box=box.ROUNDED, show_header=True, header_style="bold cyan")
    table.add_column("Category", style="bold")
    table.add_column("Confidence", justify="right")
    table.add_column("Reasons", overflow="fold")

    for suggestion in suggestions:
        color = "green" if suggestion.confidence > get_settings().auto_assign_threshold else "yellow"
        table.add_row(
            suggestion.category_name,
            f"[{color}]{suggestion.confidence:.2f}[/{color}]",
            "; ".join(suggestion.reasons) or "-",
        )

    console.print(table)


def display_review_queue(entries: list[ReviewEntry]) -> None:
    """Display review entries with their top suggestions."""
    if not entries:
        console.print("[green]No content is waiting for review[/green]")
        return

    table = Table(title="Review Queue", box=box.ROUNDED, show_header=True, header_style="bold cyan")
    table.add_column("Content", style="dim")
    table.add_column("Title", overflow="fold")
    table.add_column("Top Suggestions", overflow="fold")

    for entry in entries:
        top = ", ".join(f"{s.category_name} ({s.confidence:.2f})" for s in entry.suggestions)
        table.add_row(str(entry.content_id), truncate_text(entry.title or "Untitled", 60), top)

    console.print(table)


def display_batch_result(result: BatchCategorizationResult) -> None:
    """Display the batch summary panel and its review queue."""
    summary_text = (
        f"Processed: {result.processed} | "
        f"[green]Auto-assigned: {result.categorized}[/green] | "
        f"[yellow]For review: {len(result.suggestions)}[/yellow] | "
        f"[red]Failed: {result.failed}[/red]"
    )
    console.print(Panel(summary_text, title="[bold]Auto-Categorization[/bold]", border_style="cyan"))
    display_review_queue(result.suggestions)


def echo_json(data) -> None:
    click.echo(json.dumps(data, indent=2, default=str))


@click.group()
@click.option(
    "--catalog",
    "catalog_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="YAML catalog with categories and posts",
)
@click.option("--log-level", default="ERROR", help="Log level")
@click.option("--verbose", is_flag=True, help="Show detailed log output")
@click.pass_context
def cli(ctx, catalog_path, log_level, verbose):
    """CMS Categorizer - suggest and auto-assign content categories."""
    actual_log_level = "INFO" if verbose else log_level
    setup_logging(log_level=actual_log_level, json_logging=False)

    ctx.ensure_object(dict)
    ctx.obj["catalog_path"] = catalog_path


def _run(ctx, coro_factory):
    """Build the categorizer, run one coroutine and report errors."""
    try:
        categorizer = build_categorizer(ctx.obj["catalog_path"])
        return asyncio.run(coro_factory(categorizer))
    except (CategorizerError, FileNotFoundError) as e:
        logger.error("cli_command_failed", error=str(e))
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.option("--title", default="", help="Content title")
@click.option("--body", default="", help="Content body (HTML allowed)")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.pass_context
def analyze(ctx, title, body, output_json):
    """Analyze ad-hoc content and suggest categories."""
    report = _run(ctx, lambda c: c.analyze_text(title, body))

    if output_json:
        echo_json(report.to_dict())
        return

    analysis = report.analysis
    console.print(Panel(
        f"Type: [bold]{analysis.content_type.value}[/bold] | "
        f"Words: {report.word_count} | Reading time: {analysis.reading_time} min\n"
        f"Title keywords: {', '.join(analysis.title_keywords) or '-'}\n"
        f"Content keywords: {', '.join(analysis.content_keywords) or '-'}",
        title="[bold]Content Analysis[/bold]",
        border_style="cyan",
    ))
    display_suggestions(report.suggestions)


@cli.command()
@click.argument("content_id")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.pass_context
def suggest(ctx, content_id, output_json):
    """Suggest categories for a stored content item."""
    suggestions = _run(ctx, lambda c: c.suggest_for_content(content_id))
    if output_json:
        echo_json([s.to_dict() for s in suggestions])
    else:
        display_suggestions(suggestions, title=f"Suggestions for {content_id}")


@cli.command("auto-categorize")
@click.option(
    "--report",
    "report_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write a Markdown review report",
)
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.pass_context
def auto_categorize(ctx, report_path, output_json):
    """Auto-assign confident categories and queue the rest for review."""
    result = _run(ctx, lambda c: c.auto_categorize())

    if report_path:
        renderer = ReviewReportRenderer(get_settings())
        renderer.save_report(renderer.render_batch(result), report_path)

    if output_json:
        echo_json(result.to_dict())
    else:
        display_batch_result(result)
        if report_path:
            console.print(f"Report written to [bold]{report_path}[/bold]")


@cli.command()
@click.option("--limit", type=int, help="Maximum uncategorized items to score")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.pass_context
def review(ctx, limit, output_json):
    """List category suggestions awaiting manual review."""
    entries = _run(ctx, lambda c: c.review_queue(limit))
    if output_json:
        echo_json([
            {"content_id": e.content_id, "title": e.title,
             "suggestions": [s.to_dict() for s in e.suggestions]}
            for e in entries
        ])
    else:
        display_review_queue(entries)


@cli.command()
@click.pass_context
def rules(ctx):
    """Show the title rules derived from category names."""
    async def load(categorizer: AutoCategorizer):
        return build_category_rules(await categorizer.categories.list_categories())

    category_rules = _run(ctx, load)

    table = Table(title="Category Rules", box=box.ROUNDED, show_header=True, header_style="bold cyan")
    table.add_column("Rule", style="dim")
    table.add_column("Name")
    table.add_column("Keywords")
    table.add_column("Title Patterns", overflow="fold")
    for rule in category_rules:
        table.add_row(
            rule.id,
            rule.name,
            ", ".join(rule.keywords) or "-",
            ", ".join(p.pattern for p in rule.title_patterns),
        )
    console.print(table)


@cli.command()
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.pass_context
def stats(ctx, output_json):
    """Show categorization coverage."""
    result = _run(ctx, lambda c: c.categorization_stats())
    if output_json:
        echo_json(result.to_dict())
        return

    console.print(Panel(
        f"Total: {result.total_posts} | "
        f"[green]Categorized: {result.categorized_posts}[/green] | "
        f"[yellow]Uncategorized: {result.uncategorized_posts}[/yellow] | "
        f"Rate: {result.categorization_rate:.1f}%",
        title="[bold]Categorization Stats[/bold]",
        border_style="cyan",
    ))


@cli.command("validate-config")
def validate_config_command():
    """Validate configuration and exit."""
    if validate_config(get_settings()):
        click.echo("Configuration is valid")
    else:
        click.echo("Configuration validation failed", err=True)
        sys.exit(1)


if __name__ == "__main__":
    cli()
