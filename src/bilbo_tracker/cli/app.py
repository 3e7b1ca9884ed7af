"""Shared Typer app object, shared option types, and store utility."""

from datetime import datetime
from pathlib import Path
from typing import Annotated, Optional

import typer

from ..core.config import BilboPolicy
from ..core.engine.config_loader import load_policy
from ..core.models import TrackedExerciseState
from ..io.serializers import ValidationError, parse_timestamp
from ..io.tracker_store import TrackerStore, get_default_data_dir
from . import views
from .units import WeightUnit, validate_unit

# Shared --exercise option type used across all per-exercise commands
ExerciseOption = Annotated[
    str,
    typer.Option("--exercise", "-e", help="Exercise id, e.g. bench_press"),
]

DataDirOption = Annotated[
    Optional[Path],
    typer.Option("--data-dir", "-p", help="Directory holding tracker files"),
]

UnitOption = Annotated[
    str,
    typer.Option("--unit", "-u", help="Display/input unit: kg (default) or lb"),
]

JsonOption = Annotated[
    bool,
    typer.Option("--json", "-j", help="Output as JSON for machine processing"),
]

app = typer.Typer(
    name="bilbo-tracker",
    help="BILBO high-rep strength progression tracker with 1RM estimation.",
    no_args_is_help=True,
)


def get_store(data_dir: Path | None, exercise_id: str) -> TrackerStore:
    """Get a tracker store from a path or the default location."""
    if data_dir is None:
        data_dir = get_default_data_dir()
    return TrackerStore(data_dir, exercise_id)


def get_policy() -> BilboPolicy:
    """Effective policy: bundled defaults merged with the user's bilbo.yaml."""
    return load_policy()


def resolve_unit(unit: str) -> WeightUnit:
    """Validate --unit, exiting with an error message on bad input."""
    try:
        return validate_unit(unit)
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)


def open_tracked(data_dir: Path | None, exercise_id: str) -> tuple[TrackerStore, TrackedExerciseState]:
    """Open the store and load the state, exiting with an error if unavailable."""
    try:
        store = get_store(data_dir, exercise_id)
        state = store.load_state()
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    return store, state


def parse_date_option(value: str | None) -> datetime | None:
    """Parse a --date option (YYYY-MM-DD or ISO datetime); None means now."""
    if value is None:
        return None
    try:
        return parse_timestamp(value)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)
