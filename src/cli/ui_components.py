"""CLI UI components (Rich).

Why separate components:
- Keeps command logic apart from visual details.
- Tables/panels are reused by several commands.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.errors import BackgroundCheckError, InvalidInputError
from core.domain.models import CriterionResult, VerificationResult


def print_banner(console: Console) -> None:
    title = Text("bgcheck", style="bold cyan")
    subtitle = Text("Background checks • Account age • Friends • Groups", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def format_criterion(criterion: CriterionResult) -> str:
    mark = "✅" if criterion.passed else "❌"
    return f"{mark} {criterion.measured} {criterion.unit} (min {criterion.threshold})"


def build_verdict_table(result: VerificationResult) -> Table:
    """One row per criterion, in contract order, then the overall status."""

    passed = result.overall_passed
    table = Table(
        title=f"Background Check - {result.subject_name}",
        border_style="green" if passed else "red",
        caption="Background Check System",
    )
    table.add_column("Criterion", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")

    for criterion in result.criteria:
        table.add_row(criterion.name, format_criterion(criterion))
    table.add_row(
        "Overall Status",
        Text("🟢 PASSED", style="bold green") if passed else Text("🔴 FAILED", style="bold red"),
    )
    return table


def build_error_panel(name: str, error: BackgroundCheckError) -> Panel:
    title = "Internal error" if isinstance(error, InvalidInputError) else "Error"
    body = Text(f"{type(error).__name__}: {error}")
    return Panel(body, title=Text(f"{title} - {name}", style="bold red"), border_style="red")
