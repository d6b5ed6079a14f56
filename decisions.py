#!/usr/bin/env python3
"""
Decision Queue - Command Line Interface
Ranks, rolls up and curates decision items exported by the evaluators
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Optional

import typer
from rich.console import Console

from decision_queue.core import Config, DecisionItem, DecisionQueueError, InvalidItemError
from decision_queue.dashboard import DashboardFormatter
from decision_queue.engine import (
    PostprocessResult,
    flatten_for_filter,
    postprocess,
    score_breakdown,
    select_top_for_dashboard,
)

app = typer.Typer(help="Decision Queue - rank and curate what needs a decision")
console = Console()

NOW_HELP = "Reference time (ISO 8601). Defaults to the current UTC time."


def configure_logging(config: Config, verbose: bool = False) -> None:
    """Configure root logging from the config's log level."""
    level = logging.DEBUG if verbose else getattr(logging, config.log_level, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def parse_now(value: Optional[str]) -> datetime:
    """Parse the --now option, assuming UTC when no offset is given."""
    if not value:
        return datetime.now(timezone.utc)
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise typer.BadParameter(f"Not an ISO 8601 timestamp: {value}")
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def load_items(path: Path) -> List[DecisionItem]:
    """
    Load decision items from a JSON file.

    Accepts either a list of items or an object with an "items" list.

    Raises:
        InvalidItemError: If the document or one of its items is malformed
    """
    with open(path, "r") as f:
        document: Any = json.load(f)

    if isinstance(document, dict):
        document = document.get("items", [])
    if not isinstance(document, list):
        raise InvalidItemError("Expected a list of decision items")

    return [DecisionItem.from_dict(record) for record in document]


def run_pipeline(path: Path, now: datetime, config: Config) -> PostprocessResult:
    """Load items and run them through postprocess with configured options."""
    items = load_items(path)
    return postprocess(
        items,
        now,
        dedupe=config.dedupe,
        resolve_conflicts=config.resolve_conflicts,
    )


def _formatter(config: Config) -> DashboardFormatter:
    return DashboardFormatter(
        console,
        title_width=config.get("title_width", "display", 48),
        show_chips=config.get("show_chips", "display", True),
    )


def _print_json(data: Any) -> None:
    console.print_json(json.dumps(data))


@app.command()
def rank(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON file of decision items"),
    now: Optional[str] = typer.Option(None, "--now", help=NOW_HELP),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table"),
    config_dir: Optional[Path] = typer.Option(None, "--config-dir", help="Configuration directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """
    Show the full ranked action queue
    """
    config = Config(config_dir)
    configure_logging(config, verbose)

    try:
        result = run_pipeline(file, parse_now(now), config)
    except (DecisionQueueError, json.JSONDecodeError) as e:
        console.print(f"[red]Error ranking items: {e}[/red]")
        raise typer.Exit(1)

    if as_json:
        _print_json({
            "actionItems": [i.to_dict() for i in result.action_items],
            "intelItems": [i.to_dict() for i in result.intel_items],
            "meta": result.meta.to_dict(),
        })
        return

    formatter = _formatter(config)
    console.print(formatter.format_queue(result))
    console.print(formatter.format_stats_bar(result), justify="center")


@app.command()
def dashboard(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON file of decision items"),
    now: Optional[str] = typer.Option(None, "--now", help=NOW_HELP),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", help="Number of rows (default from config)"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table"),
    config_dir: Optional[Path] = typer.Option(None, "--config-dir", help="Configuration directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """
    Show the curated dashboard (Rule of 6)

    Top items by score, with every decision tier and core category
    represented where the budget allows.
    """
    config = Config(config_dir)
    configure_logging(config, verbose)

    try:
        result = run_pipeline(file, parse_now(now), config)
    except (DecisionQueueError, json.JSONDecodeError) as e:
        console.print(f"[red]Error loading dashboard: {e}[/red]")
        raise typer.Exit(1)

    curated = select_top_for_dashboard(result.action_items, limit or config.dashboard_limit)

    if as_json:
        _print_json([i.to_dict() for i in curated])
        return

    _formatter(config).render_dashboard(result, curated)


@app.command()
def explain(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON file of decision items"),
    item_id: str = typer.Argument(..., help="Id of the item (or rollup) to explain"),
    now: Optional[str] = typer.Option(None, "--now", help=NOW_HELP),
    config_dir: Optional[Path] = typer.Option(None, "--config-dir", help="Configuration directory"),
):
    """
    Explain how an item's score was computed
    """
    config = Config(config_dir)
    configure_logging(config)
    reference = parse_now(now)

    try:
        result = run_pipeline(file, reference, config)
    except (DecisionQueueError, json.JSONDecodeError) as e:
        console.print(f"[red]Error explaining item: {e}[/red]")
        raise typer.Exit(1)

    candidates = result.action_items + result.intel_items
    matches = [i for i in candidates if i.id == item_id]
    if not matches:
        matches = flatten_for_filter(candidates, lambda i: i.id == item_id)
    if not matches:
        console.print(f"[red]No item with id {item_id}[/red]")
        raise typer.Exit(1)

    item = matches[0]
    console.print(_formatter(config).format_breakdown(item, score_breakdown(item, reference)))


if __name__ == "__main__":
    app()
