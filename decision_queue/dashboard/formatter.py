"""
Rich formatter module for the decision queue dashboard.

Handles all Rich-based CLI formatting for ranked and curated decision
items.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from decision_queue.core.models import DecisionItem
from decision_queue.engine.postprocess import PostprocessResult
from decision_queue.engine.scoring import elapsed_days


# Severity markers
SEVERITY_ICONS = {
    "red": "[red bold]●[/red bold]",
    "orange": "[yellow]●[/yellow]",
    "blue": "[blue]●[/blue]",
    "gray": "[dim]○[/dim]",
}

# Tier badge colors
TIER_COLORS = {
    "capital": "magenta bold",
    "integrity": "cyan",
    "coverage": "white",
}


class DashboardFormatter:
    """
    Rich-based formatter for decision items.

    Renders the curated dashboard, the full ranked queue and score
    breakdowns using Rich panels and tables.
    """

    def __init__(self, console: Optional[Console] = None, title_width: int = 48,
                 show_chips: bool = True):
        """
        Initialize formatter.

        Args:
            console: Rich Console instance (creates default if not provided)
            title_width: Titles longer than this are truncated
            show_chips: Render chips under each title
        """
        self.console = console or Console()
        self.title_width = title_width
        self.show_chips = show_chips

    def _format_tier(self, tier: Optional[str]) -> str:
        """Format decision tier as colored badge."""
        if tier is None:
            return "[dim]---[/dim]"
        color = TIER_COLORS.get(str(tier), "dim")
        return f"[{color}]{str(tier).upper()}[/{color}]"

    def _format_title(self, item: DecisionItem) -> str:
        title = item.title or item.id
        if len(title) > self.title_width:
            title = title[:self.title_width] + "..."
        if item.is_rollup:
            title += f" [dim]({len(item.children)} items)[/dim]"
        if self.show_chips and item.chips:
            chips = " · ".join(f"{c.label}: {c.value}" for c in item.chips)
            title += f"\n[dim]{chips}[/dim]"
        return title

    def _format_age(self, item: DecisionItem, now: datetime) -> str:
        if item.created_at is None:
            return "[dim]---[/dim]"
        days = elapsed_days(item.created_at, now)
        if days == 0:
            return "today"
        if days == 1:
            return "1 day"
        return f"{days} days"

    def _items_table(self, items: Sequence[DecisionItem], now: datetime) -> Table:
        table = Table(
            show_header=False,
            box=None,
            padding=(0, 1),
            expand=True,
        )
        table.add_column("#", width=3)
        table.add_column("Sev", width=2)
        table.add_column("Tier", width=10)
        table.add_column("Title", ratio=1)
        table.add_column("Category", width=9)
        table.add_column("Age", width=9, justify="right")
        table.add_column("Score", width=7, justify="right")

        for i, item in enumerate(items, 1):
            table.add_row(
                f"[bold]{i}.[/bold]",
                SEVERITY_ICONS.get(str(item.severity), "○"),
                self._format_tier(item.decision_tier),
                self._format_title(item),
                f"[dim]{item.category}[/dim]",
                self._format_age(item, now),
                f"[dim]{item.sort_score:.0f}[/dim]",
            )
        return table

    def format_dashboard(self, items: Sequence[DecisionItem], now: datetime) -> Panel:
        """
        Create panel with the curated dashboard rows.

        Args:
            items: Curated items from select_top_for_dashboard
            now: Reference clock for ages

        Returns:
            Rich Panel
        """
        if not items:
            return Panel(
                Text("Nothing needs a decision", justify="center", style="dim"),
                title="[bold]Decisions[/bold]",
                border_style="green",
                padding=(0, 1),
            )

        return Panel(
            self._items_table(items, now),
            title="[bold]Decisions[/bold]",
            border_style="green",
            padding=(0, 1),
        )

    def format_queue(self, result: PostprocessResult) -> Panel:
        """Create panel with the full ranked action queue."""
        now = result.meta.generated_at
        title = f"[bold]Action Queue ({len(result.action_items)})[/bold]"
        if not result.action_items:
            return Panel(
                Text("Queue is empty", justify="center", style="dim"),
                title=title,
                border_style="blue",
                padding=(0, 1),
            )
        return Panel(
            self._items_table(result.action_items, now),
            title=title,
            border_style="blue",
            padding=(0, 1),
        )

    def format_breakdown(self, item: DecisionItem, breakdown: Dict[str, Any]) -> Panel:
        """
        Create panel explaining an item's score.

        Args:
            item: Explained item
            breakdown: Output of score_breakdown

        Returns:
            Rich Panel with one line per component
        """
        lines = [
            f"Tier       {self._format_tier(item.decision_tier)}  [dim]+{breakdown['tier']['weight']}[/dim]",
            f"Severity   {SEVERITY_ICONS.get(str(item.severity), '○')} {item.severity}  "
            f"[dim]+{breakdown['severity']['weight']}[/dim]",
            f"Age        {breakdown['age']['days']} days  [dim]+{breakdown['age']['weight']}[/dim]",
            "[dim]" + "─" * 40 + "[/dim]",
            f"Total      [bold]{breakdown['total']:.0f}[/bold]",
        ]
        return Panel(
            "\n".join(lines),
            title=f"[bold]{item.id}[/bold]",
            border_style="magenta",
            padding=(0, 1),
        )

    def format_stats_bar(self, result: PostprocessResult) -> str:
        """
        Create bottom stats bar.

        Args:
            result: Pipeline result

        Returns:
            Formatted stats string
        """
        parts: List[str] = []
        red = sum(1 for i in result.action_items if str(i.severity) == "red")

        parts.append(f"[white]{result.meta.counts.get('action', 0)} actions[/white]")
        if red:
            parts.append(f"[red]● {red} urgent[/red]")
        if result.meta.rollup_count:
            parts.append(f"[dim]{result.meta.rollup_count} rolled up[/dim]")
        parts.append(f"[dim]{result.meta.counts.get('intel', 0)} intel[/dim]")

        return " │ ".join(parts)

    def render_dashboard(
        self,
        result: PostprocessResult,
        curated: Sequence[DecisionItem]
    ) -> None:
        """
        Render the curated dashboard to console.

        Args:
            result: Full pipeline result (for stats)
            curated: Curated rows to display
        """
        self.console.print(self.format_dashboard(curated, result.meta.generated_at))
        self.console.print("─" * 60)
        self.console.print(self.format_stats_bar(result), justify="center")
        self.console.print("─" * 60)
