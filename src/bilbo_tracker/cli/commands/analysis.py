"""Analysis commands: status, stats, plot, estimate."""

import json
import math
from typing import Annotated, Optional

import typer

from ...core.models import FORMULAS
from ...core.one_rm import estimate_average_one_rm, estimate_max_reps, estimate_one_rm
from ...core.progression import (
    current_percentage,
    estimated_reps_in_reserve,
    is_in_correct_range,
    should_recalculate_one_rm,
    suggested_next_weight,
)
from ...core.statistics import get_bilbo_stats, get_improvement, get_progress_data, progress_percentage
from ...io.serializers import ValidationError, validate_formula
from .. import views
from ..app import (
    DataDirOption,
    ExerciseOption,
    JsonOption,
    UnitOption,
    app,
    get_policy,
    open_tracked,
    resolve_unit,
)
from ..units import from_kg, to_kg


def _load_sessions(store):
    try:
        return store.load_sessions()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)


def _json_number(value: float) -> float | str:
    """JSON has no infinity; emit non-finite values as strings."""
    return round(value, 4) if math.isfinite(value) else str(value)


@app.command()
def status(
    exercise_id: ExerciseOption,
    data_dir: DataDirOption = None,
    unit: UnitOption = "kg",
    json_out: JsonOption = False,
) -> None:
    """
    Show current 1RM, training weight and the next-session suggestion.
    """
    u = resolve_unit(unit)
    store, state = open_tracked(data_dir, exercise_id)
    policy = get_policy()
    sessions = _load_sessions(store)

    summary = {
        "percentage": current_percentage(state),
        "in_range": is_in_correct_range(state),
        "next_weight": suggested_next_weight(state, policy),
        "rir": estimated_reps_in_reserve(state),
        "needs_recalc": should_recalculate_one_rm(state, policy=policy),
        "progress_pct": progress_percentage(
            sessions, state.training_weight, policy.target_progress_window_kg
        ),
    }

    if json_out:
        outcome = state.last_session_outcome
        print(json.dumps({
            "exercise_id": state.exercise_id,
            "unit": u,
            "one_rep_max": round(from_kg(state.one_rep_max, u), 2),
            "training_weight": round(from_kg(state.training_weight, u), 2),
            "percentage_of_one_rm": round(summary["percentage"], 2),
            "in_correct_range": summary["in_range"],
            "next_weight": round(from_kg(summary["next_weight"], u), 2),
            "last_reps": outcome.reps_completed if outcome is not None else None,
            "estimated_rir": summary["rir"],
            "one_rm_source": state.one_rm_source.kind,
            "one_rm_formula": state.one_rm_source.formula,
            "should_recalculate_one_rm": summary["needs_recalc"],
            "progress_percentage": round(summary["progress_pct"], 2),
        }, indent=2))
        return

    views.console.print()
    views.console.print(views.format_status_display(state, summary, u))
    views.console.print()


@app.command()
def stats(
    exercise_id: ExerciseOption,
    weeks: Annotated[int, typer.Option("--weeks", "-w", help="Weeks shown in the chart")] = 4,
    data_dir: DataDirOption = None,
    unit: UnitOption = "kg",
    json_out: JsonOption = False,
) -> None:
    """
    Show BILBO statistics, improvement since the first session and weekly counts.
    """
    u = resolve_unit(unit)
    store, state = open_tracked(data_dir, exercise_id)
    policy = get_policy()
    sessions = _load_sessions(store)

    bilbo_stats = get_bilbo_stats(sessions)
    improvement = get_improvement(sessions)
    progress = progress_percentage(sessions, state.training_weight, policy.target_progress_window_kg)

    if json_out:
        print(json.dumps({
            "unit": u,
            "total_sessions": bilbo_stats.total_sessions,
            "avg_weight": round(from_kg(bilbo_stats.avg_weight, u), 2),
            "max_weight": round(from_kg(bilbo_stats.max_weight, u), 2),
            "avg_reps": round(bilbo_stats.avg_reps, 2),
            "max_reps": bilbo_stats.max_reps,
            "total_volume": round(from_kg(bilbo_stats.total_volume, u), 2),
            "sessions_by_week": {
                week.isoformat(): count for week, count in bilbo_stats.sessions_by_week.items()
            },
            "improvement": {
                "weight_increase": round(from_kg(improvement.weight_increase, u), 2),
                "reps_increase": improvement.reps_increase,
                "volume_increase": round(from_kg(improvement.volume_increase, u), 2),
                "percentage_improvement": round(improvement.percentage_improvement, 2),
            },
            "progress_percentage": round(progress, 2),
        }, indent=2))
        return

    views.console.print()
    views.print_stats(bilbo_stats, improvement, progress, u)
    if bilbo_stats.total_sessions:
        views.console.print()
        views.print_weekly_chart(bilbo_stats, weeks)
    views.console.print()


@app.command()
def plot(
    exercise_id: ExerciseOption,
    data_dir: DataDirOption = None,
    unit: UnitOption = "kg",
) -> None:
    """
    Show an ASCII chart of the weight used per session.
    """
    u = resolve_unit(unit)
    store, state = open_tracked(data_dir, exercise_id)
    sessions = _load_sessions(store)
    views.print_progress_plot(get_progress_data(sessions), state.exercise_id, u)


@app.command()
def estimate(
    weight: Annotated[float, typer.Option("--weight", "-w", help="Weight lifted")],
    reps: Annotated[int, typer.Option("--reps", "-r", help="Reps performed")],
    at_weight: Annotated[
        Optional[float],
        typer.Option("--at-weight", "-a", help="Also estimate max reps at this weight"),
    ] = None,
    formula: Annotated[
        str,
        typer.Option("--formula", "-F", help="Formula used for --at-weight"),
    ] = "epley",
    unit: UnitOption = "kg",
    json_out: JsonOption = False,
) -> None:
    """
    Estimate 1RM from a set with every formula (no tracking needed).
    """
    u = resolve_unit(unit)
    try:
        f = validate_formula(formula)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    weight_kg = to_kg(weight, u)
    estimates = {name: estimate_one_rm(weight_kg, reps, name) for name in FORMULAS}
    average = estimate_average_one_rm(weight_kg, reps)

    max_reps: int | None = None
    if at_weight is not None:
        max_reps = estimate_max_reps(to_kg(at_weight, u), estimates[f], f)

    if json_out:
        print(json.dumps({
            "unit": u,
            "estimates": {name: _json_number(from_kg(v, u)) for name, v in estimates.items()},
            "average": _json_number(from_kg(average, u)),
            "max_reps_at_weight": max_reps,
        }, indent=2))
        return

    if weight_kg <= 0 or reps <= 0:
        views.print_warning("Weight and reps must be positive; every estimate is 0.")

    views.console.print(views.format_estimate_table(weight_kg, reps, estimates, average, u))
    if max_reps is not None:
        views.print_info(
            f"{views.formula_name(f)}: about {max_reps} reps at {at_weight:g} {u}"
        )
