"""Session commands: log-session, log-workout, history."""

import json
from datetime import datetime
from typing import Annotated, Optional

import typer

from ...core.models import WorkoutSample
from ...core.one_rm import calculate_bilbo_weight, is_appropriate_bilbo_weight, validate_workout_data
from ...core.progression import (
    estimated_reps_in_reserve,
    record_session,
    should_progress,
    suggested_next_weight,
)
from ...io.serializers import (
    ValidationError,
    session_record_to_dict,
    validate_non_negative,
    validate_positive,
)
from .. import views
from ..app import (
    DataDirOption,
    ExerciseOption,
    JsonOption,
    UnitOption,
    app,
    get_policy,
    open_tracked,
    parse_date_option,
    resolve_unit,
)
from ..units import format_weight, to_kg


@app.command("log-session")
def log_session(
    exercise_id: ExerciseOption,
    reps: Annotated[int, typer.Option("--reps", "-r", help="Reps completed")],
    weight: Annotated[
        Optional[float],
        typer.Option("--weight", "-w", help="Weight used (default: current training weight)"),
    ] = None,
    notes: Annotated[str, typer.Option("--notes", "-n", help="Free-text notes")] = "",
    date: Annotated[
        Optional[str],
        typer.Option("--date", "-d", help="Session date/time (ISO, default: now)"),
    ] = None,
    data_dir: DataDirOption = None,
    unit: UnitOption = "kg",
) -> None:
    """
    Log a BILBO session and show the weight for the next one.
    """
    u = resolve_unit(unit)
    when = parse_date_option(date)
    store, state = open_tracked(data_dir, exercise_id)
    policy = get_policy()

    weight_kg = to_kg(weight, u) if weight is not None else state.training_weight
    try:
        validate_non_negative(reps, "reps")
        validate_positive(weight_kg, "weight")
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if not state.has_sessions and not is_appropriate_bilbo_weight(
        weight_kg, state.one_rep_max, policy.rounding_increment
    ):
        views.print_warning(
            f"{format_weight(weight_kg, u)} is more than 10% away from the BILBO starting weight "
            f"{format_weight(calculate_bilbo_weight(state.one_rep_max, policy.rounding_increment), u)}."
        )

    record = record_session(state, weight_kg, reps, notes=notes, now=when, policy=policy)
    store.append_session(record)
    store.save_state(state)

    views.print_success(
        f"Logged {format_weight(record.weight_used, u)} × {record.reps_completed} reps"
    )
    low, high = state.target_rep_range
    if reps > high:
        views.print_warning(f"{reps} reps is above the {low}–{high} target range.")
    if should_progress(state, policy):
        views.print_info(
            f"More than {policy.progression_rep_threshold} reps: next session "
            f"{format_weight(state.training_weight, u)} (~{estimated_reps_in_reserve(state)} RIR)"
        )
    else:
        views.print_info(f"Hold at {format_weight(suggested_next_weight(state, policy), u)} next session.")


@app.command("log-workout")
def log_workout(
    exercise_id: ExerciseOption,
    weight: Annotated[float, typer.Option("--weight", "-w", help="Weight lifted")],
    reps: Annotated[int, typer.Option("--reps", "-r", help="Reps performed")],
    date: Annotated[
        Optional[str],
        typer.Option("--date", "-d", help="Workout date/time (ISO, default: now)"),
    ] = None,
    data_dir: DataDirOption = None,
    unit: UnitOption = "kg",
) -> None:
    """
    Log a regular working set, used as evidence for 1RM recalculation.
    """
    u = resolve_unit(unit)
    when = parse_date_option(date) or datetime.now()
    store, _ = open_tracked(data_dir, exercise_id)

    weight_kg = to_kg(weight, u)
    if not validate_workout_data(weight_kg, reps):
        views.print_error("Workout looks unrealistic (need weight > 0, 1–50 reps, weight ≤ 200 kg).")
        raise typer.Exit(1)

    store.append_workout(WorkoutSample(weight_kg=weight_kg, reps=reps, performed_at=when))
    views.print_success(f"Logged workout {format_weight(weight_kg, u)} × {reps}")


@app.command()
def history(
    exercise_id: ExerciseOption,
    data_dir: DataDirOption = None,
    unit: UnitOption = "kg",
    json_out: JsonOption = False,
) -> None:
    """
    Show logged BILBO sessions.
    """
    u = resolve_unit(unit)
    store, _ = open_tracked(data_dir, exercise_id)

    try:
        sessions = store.load_sessions()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if json_out:
        print(json.dumps([session_record_to_dict(s) for s in sessions], indent=2))
        return

    views.print_history(sessions, u)
