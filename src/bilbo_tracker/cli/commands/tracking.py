"""Tracking commands: track, untrack, list, set-1rm, recalc-1rm."""

import math
from typing import Annotated, Optional

import typer

from ...core.models import OneRMSource
from ...core.one_rm import find_recent_reliable_one_rm, usable_samples
from ...core.progression import calculate_one_rm_from_history, initialize_tracking, update_one_rm
from ...io.serializers import ValidationError, validate_formula, validate_positive
from ...io.tracker_store import TrackerStore, get_default_data_dir, list_tracked
from .. import views
from ..app import (
    DataDirOption,
    ExerciseOption,
    UnitOption,
    app,
    get_policy,
    get_store,
    open_tracked,
    resolve_unit,
)
from ..units import format_weight, to_kg

# Seed heuristic when only the exercise's usual working weight is known
DEFAULT_WEIGHT_TO_ONE_RM = 2.0


@app.command()
def track(
    exercise_id: ExerciseOption,
    one_rm: Annotated[
        Optional[float],
        typer.Option("--one-rm", "-m", help="Known or estimated 1RM"),
    ] = None,
    default_weight: Annotated[
        Optional[float],
        typer.Option("--default-weight", "-w", help="Usual working weight; 1RM is seeded as 2x this"),
    ] = None,
    notes: Annotated[str, typer.Option("--notes", "-n", help="Free-text notes")] = "",
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Replace the state of an already tracked exercise"),
    ] = False,
    data_dir: DataDirOption = None,
    unit: UnitOption = "kg",
) -> None:
    """
    Start tracking an exercise with the BILBO method.
    """
    u = resolve_unit(unit)

    if one_rm is None and default_weight is None:
        views.print_error("Provide --one-rm or --default-weight.")
        raise typer.Exit(1)

    try:
        store = get_store(data_dir, exercise_id)
        seed = one_rm if one_rm is not None else default_weight * DEFAULT_WEIGHT_TO_ONE_RM  # type: ignore[operator]
        validate_positive(seed, "1RM")
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if store.exists() and not force:
        views.print_error(f"'{store.exercise_id}' is already tracked. Use --force to replace it.")
        raise typer.Exit(1)

    state = initialize_tracking(store.exercise_id, to_kg(seed, u), OneRMSource(), notes=notes)
    store.init(state)

    views.print_success(f"Tracking {store.exercise_id}")
    views.print_info(
        f"1RM {format_weight(state.one_rep_max, u)} → start with "
        f"{format_weight(state.training_weight, u)} for 15–50 reps"
    )


@app.command()
def untrack(
    exercise_id: ExerciseOption,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Do not ask for confirmation")] = False,
    data_dir: DataDirOption = None,
) -> None:
    """
    Stop tracking an exercise and delete its sessions and workouts.
    """
    store, _ = open_tracked(data_dir, exercise_id)

    if not yes and not views.confirm_action(f"Delete {store.exercise_id} and all of its history?"):
        views.print_info("Cancelled.")
        return

    store.delete()
    views.print_success(f"Stopped tracking {store.exercise_id}")


@app.command("list")
def list_exercises(
    data_dir: DataDirOption = None,
    unit: UnitOption = "kg",
) -> None:
    """
    List tracked exercises.
    """
    u = resolve_unit(unit)
    base = data_dir if data_dir is not None else get_default_data_dir()

    rows: list[tuple[str, float, float]] = []
    for exercise_id in list_tracked(base):
        try:
            state = TrackerStore(base, exercise_id).load_state()
        except (FileNotFoundError, ValidationError) as e:
            views.print_warning(str(e))
            continue
        rows.append((state.exercise_id, state.one_rep_max, state.training_weight))

    views.print_tracked_list(rows, u)


@app.command("set-1rm")
def set_one_rm(
    exercise_id: ExerciseOption,
    value: Annotated[float, typer.Argument(help="New 1RM")],
    data_dir: DataDirOption = None,
    unit: UnitOption = "kg",
) -> None:
    """
    Manually set the 1RM; the training weight resets to 50 % of it.
    """
    u = resolve_unit(unit)
    store, state = open_tracked(data_dir, exercise_id)

    try:
        validate_positive(value, "1RM")
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    update_one_rm(
        state,
        to_kg(value, u),
        formula=state.one_rm_source.formula,
        is_auto_calculated=False,
        policy=get_policy(),
    )
    store.save_state(state)

    views.print_success(
        f"1RM set to {format_weight(state.one_rep_max, u)}; "
        f"training weight {format_weight(state.training_weight, u)}"
    )


@app.command("recalc-1rm")
def recalc_one_rm(
    exercise_id: ExerciseOption,
    formula: Annotated[
        str,
        typer.Option("--formula", "-F", help="epley, brzycki, lombardi, oconnor or wathan"),
    ] = "epley",
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Apply even if within 5% of the current 1RM"),
    ] = False,
    data_dir: DataDirOption = None,
    unit: UnitOption = "kg",
) -> None:
    """
    Recalculate the 1RM from logged workouts (recent best effort first).
    """
    u = resolve_unit(unit)
    store, state = open_tracked(data_dir, exercise_id)
    policy = get_policy()

    try:
        f = validate_formula(formula)
        workouts = store.load_workouts()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    samples = usable_samples(workouts)
    if not samples:
        views.print_warning("No usable workouts logged. Use 'log-workout' first.")
        raise typer.Exit(1)

    proposed = calculate_one_rm_from_history(state, samples, f, policy=policy)
    if proposed is None:
        estimate = find_recent_reliable_one_rm(samples, f, max_days_back=policy.recent_window_days)
        if not math.isfinite(estimate) or estimate <= 0:
            views.print_error(
                f"{views.formula_name(f)} gives no usable 1RM for these workouts "
                "(too many reps for the formula). Try another --formula."
            )
            raise typer.Exit(1)
        if not force:
            views.print_info(
                f"Estimate is within 5% of the current 1RM ({format_weight(state.one_rep_max, u)}); "
                "nothing changed."
            )
            return
        proposed = estimate

    old = state.one_rep_max
    update_one_rm(state, proposed, formula=f, is_auto_calculated=True, policy=policy)
    store.save_state(state)

    views.print_success(
        f"1RM {format_weight(old, u)} → {format_weight(state.one_rep_max, u)} "
        f"({views.formula_name(f)}); training weight {format_weight(state.training_weight, u)}"
    )
