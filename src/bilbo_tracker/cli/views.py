"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of tracker data.  All weights
arrive in kilograms and are converted with the unit passed in.
"""

import math
from datetime import datetime

from rich.console import Console
from rich.table import Table

from ..core.ascii_plot import create_weekly_sessions_chart, create_weight_progress_plot
from ..core.models import (
    FORMULAS,
    BilboSessionRecord,
    BilboStats,
    Formula,
    Improvement,
    ProgressData,
    TrackedExerciseState,
)
from .units import WeightUnit, format_weight, scale_from_kg

FORMULA_NAMES: dict[str, str] = {
    "epley": "Epley",
    "brzycki": "Brzycki",
    "lombardi": "Lombardi",
    "oconnor": "O'Connor",
    "wathan": "Wathan",
}

FORMULA_DESCRIPTIONS: dict[str, str] = {
    "epley": "Most common; accurate for most exercises",
    "brzycki": "Good for maximal-strength work",
    "lombardi": "Suited to power exercises",
    "oconnor": "Conservative, tends to underestimate",
    "wathan": "Good for endurance-oriented sets",
}

console = Console()


def formula_name(formula: Formula) -> str:
    return FORMULA_NAMES.get(formula, formula)


def format_status_display(
    state: TrackedExerciseState,
    summary: dict,
    unit: WeightUnit = "kg",
) -> str:
    """
    Format the tracked-exercise summary as Rich markup.

    Args:
        state: Tracked state
        summary: Derived values (percentage, in_range, next_weight, rir,
            needs_recalc, progress_pct)
        unit: Display unit
    """
    low, high = state.target_rep_range
    source = state.one_rm_source
    if source.is_auto_calculated and source.calculated_at is not None:
        source_text = f"auto ({formula_name(source.formula)}, {source.calculated_at:%Y-%m-%d})"
    else:
        source_text = "manual"

    lines = [
        f"[bold cyan]{state.exercise_id}[/bold cyan] · BILBO",
        "",
        f"1RM:             {format_weight(state.one_rep_max, unit)}  [dim]({source_text})[/dim]",
        f"Training weight: {format_weight(state.training_weight, unit)}"
        f"  [dim]({summary['percentage']:.1f}% of 1RM)[/dim]",
        f"Target reps:     {low}–{high}",
    ]

    outcome = state.last_session_outcome
    if outcome is None:
        lines.append("Last session:    [dim]none yet[/dim]")
    else:
        lines.append(
            f"Last session:    {outcome.reps_completed} reps on {outcome.performed_at:%Y-%m-%d}"
            f"  [dim](~{summary['rir']} RIR)[/dim]"
        )

    lines.append(f"Next session:    [bold green]{format_weight(summary['next_weight'], unit)}[/bold green]")
    lines.append(f"Progress:        {summary['progress_pct']:.0f}%")

    if not summary["in_range"]:
        lines.append("")
        lines.append(
            "[yellow]Training weight is outside 45–55% of 1RM; consider updating the 1RM.[/yellow]"
        )
    if summary["needs_recalc"]:
        lines.append("[yellow]Auto-calculated 1RM is over a week old; run 'recalc-1rm'.[/yellow]")

    return "\n".join(lines)


def format_session_table(sessions: list[BilboSessionRecord], unit: WeightUnit = "kg") -> Table:
    """
    Format session history as a Rich table.

    Args:
        sessions: Sessions to display (chronological)
        unit: Display unit

    Returns:
        Rich Table object
    """
    table = Table(title="BILBO Sessions", show_header=True, header_style="bold")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Date", style="cyan")
    table.add_column("Weight", justify="right")
    table.add_column("Reps", justify="right", style="bold")
    table.add_column("Volume", justify="right")
    table.add_column("Notes")

    scale = scale_from_kg(unit)
    for i, s in enumerate(sessions, 1):
        table.add_row(
            str(i),
            s.performed_at.strftime("%Y-%m-%d %H:%M"),
            format_weight(s.weight_used, unit),
            str(s.reps_completed),
            f"{s.volume * scale:.0f}",
            s.notes,
        )

    return table


def print_history(sessions: list[BilboSessionRecord], unit: WeightUnit = "kg") -> None:
    """Print session history to console."""
    if not sessions:
        console.print("[yellow]No sessions recorded yet.[/yellow]")
        return

    console.print(format_session_table(sessions, unit))


def print_stats(
    stats: BilboStats,
    improvement: Improvement,
    progress_pct: float,
    unit: WeightUnit = "kg",
) -> None:
    """Print aggregate statistics and improvement since the first session."""
    if stats.total_sessions == 0:
        console.print("[yellow]No sessions recorded yet.[/yellow]")
        return

    scale = scale_from_kg(unit)

    table = Table(title="BILBO Statistics", show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Sessions", str(stats.total_sessions))
    table.add_row("Average weight", format_weight(stats.avg_weight, unit))
    table.add_row("Max weight", format_weight(stats.max_weight, unit))
    table.add_row("Average reps", f"{stats.avg_reps:.1f}")
    table.add_row("Max reps", str(stats.max_reps))
    table.add_row("Total volume", f"{stats.total_volume * scale:.0f} {unit}")
    table.add_row("Progress", f"{progress_pct:.0f}%")
    console.print(table)

    sign = "+" if improvement.weight_increase >= 0 else "-"
    console.print(
        f"Since first session: weight {sign}{format_weight(abs(improvement.weight_increase), unit)}, "
        f"reps {improvement.reps_increase:+d}, "
        f"volume {improvement.volume_increase * scale:+.0f} "
        f"({improvement.percentage_improvement:+.1f}%)"
    )


def print_progress_plot(data: ProgressData, exercise_name: str, unit: WeightUnit = "kg") -> None:
    """Print ASCII plot of training weight per session."""
    console.print(
        create_weight_progress_plot(
            data, exercise_name=exercise_name, unit=unit, scale=scale_from_kg(unit)
        )
    )


def print_weekly_chart(stats: BilboStats, weeks: int = 4, today: datetime | None = None) -> None:
    """Print sessions-per-week chart."""
    console.print(
        create_weekly_sessions_chart(
            stats.sessions_by_week, weeks, today.date() if today is not None else None
        )
    )


def format_estimate_table(
    weight_kg: float,
    reps: int,
    estimates: dict[str, float],
    average: float,
    unit: WeightUnit = "kg",
) -> Table:
    """Table of 1RM estimates for every formula plus their average."""
    table = Table(
        title=f"1RM from {format_weight(weight_kg, unit)} × {reps}",
        show_header=True,
        header_style="bold",
    )
    table.add_column("Formula", style="cyan")
    table.add_column("1RM", justify="right", style="bold")
    table.add_column("Notes", style="dim")

    for formula in FORMULAS:
        value = estimates[formula]
        text = format_weight(value, unit) if math.isfinite(value) else str(value)
        table.add_row(formula_name(formula), text, FORMULA_DESCRIPTIONS[formula])
    table.add_row("[bold]Average[/bold]", format_weight(average, unit), "")
    return table


def print_tracked_list(rows: list[tuple[str, float, float]], unit: WeightUnit = "kg") -> None:
    """Print tracked exercises as (id, 1RM, training weight) rows."""
    if not rows:
        console.print("[yellow]No exercises tracked yet.[/yellow]")
        return

    table = Table(title="Tracked Exercises", show_header=True, header_style="bold")
    table.add_column("Exercise", style="cyan")
    table.add_column("1RM", justify="right")
    table.add_column("Training weight", justify="right", style="bold")
    for exercise_id, one_rm, weight in rows:
        table.add_row(exercise_id, format_weight(one_rm, unit), format_weight(weight, unit))
    console.print(table)


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")


def confirm_action(message: str) -> bool:
    """
    Prompt user for confirmation.

    Args:
        message: Confirmation message

    Returns:
        True if confirmed, False otherwise
    """
    response = console.input(f"{message} [y/N]: ")
    return response.lower() in ("y", "yes")
