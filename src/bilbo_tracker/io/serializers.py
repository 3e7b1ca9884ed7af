"""
JSON serialization for tracker data models.

Handles conversion between dataclasses and JSON-compatible dicts.
Timestamps are stored as ISO-8601 strings.
"""

import json
import math
from datetime import datetime
from typing import Any

from ..core.models import (
    FORMULAS,
    BilboSessionRecord,
    Formula,
    OneRMSource,
    SessionOutcome,
    TrackedExerciseState,
    WorkoutSample,
)


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO-8601 date or datetime string.

    A bare date (YYYY-MM-DD) maps to midnight.

    Raises:
        ValidationError: If the string is not ISO-8601
    """
    if not isinstance(value, str):
        raise ValidationError(f"Invalid timestamp: {value!r}. Expected an ISO-8601 string")
    try:
        return datetime.fromisoformat(value)
    except ValueError as e:
        raise ValidationError(f"Invalid timestamp: {value}. Expected ISO-8601") from e


def format_timestamp(value: datetime) -> str:
    """Format a datetime as an ISO-8601 string with second precision."""
    return value.isoformat(timespec="seconds")


def validate_formula(formula: str) -> Formula:
    """
    Validate a formula name (case-insensitive, apostrophes ignored).

    Accepts display spellings such as "O'Connor".

    Raises:
        ValidationError: If the name is not one of FORMULAS
    """
    normalized = str(formula).strip().lower().replace("'", "")
    if normalized not in FORMULAS:
        raise ValidationError(
            f"Invalid formula: {formula}. Must be one of {', '.join(FORMULAS)}"
        )
    return normalized  # type: ignore


def validate_non_negative(value: int | float, name: str) -> int | float:
    """
    Validate that a value is non-negative.

    Raises:
        ValidationError: If value is negative
    """
    if value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")
    return value


def validate_positive(value: int | float, name: str) -> int | float:
    """
    Validate that a value is a positive, finite number.

    Raises:
        ValidationError: If value is not positive or not finite
    """
    if not math.isfinite(value) or value <= 0:
        raise ValidationError(f"{name} must be positive, got {value}")
    return value


def validate_exercise_id(exercise_id: str) -> str:
    """
    Validate an exercise identifier used as a file-name stem.

    Allowed: letters, digits, underscore and hyphen.

    Raises:
        ValidationError: If the identifier is empty or has other characters
    """
    cleaned = exercise_id.strip()
    if not cleaned or not all(c.isalnum() or c in "_-" for c in cleaned):
        raise ValidationError(
            f"Invalid exercise id: {exercise_id!r}. Use letters, digits, '_' or '-'."
        )
    return cleaned


# ---------------------------------------------------------------------------
# WorkoutSample
# ---------------------------------------------------------------------------


def workout_sample_to_dict(sample: WorkoutSample) -> dict[str, Any]:
    return {
        "performed_at": format_timestamp(sample.performed_at),
        "weight_kg": sample.weight_kg,
        "reps": sample.reps,
    }


def dict_to_workout_sample(data: dict[str, Any]) -> WorkoutSample:
    """
    Convert dict to WorkoutSample.

    Raises:
        ValidationError: If data is invalid
    """
    try:
        weight = float(data["weight_kg"])
        reps = int(data["reps"])
        performed_at = parse_timestamp(data["performed_at"])
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError(f"Invalid workout record: {e}") from e

    validate_non_negative(weight, "weight_kg")
    validate_non_negative(reps, "reps")
    return WorkoutSample(weight_kg=weight, reps=reps, performed_at=performed_at)


# ---------------------------------------------------------------------------
# BilboSessionRecord
# ---------------------------------------------------------------------------


def session_record_to_dict(record: BilboSessionRecord) -> dict[str, Any]:
    """Convert BilboSessionRecord to JSON-compatible dict (notes omitted if empty)."""
    result: dict[str, Any] = {
        "performed_at": format_timestamp(record.performed_at),
        "weight_used": record.weight_used,
        "reps_completed": record.reps_completed,
    }
    if record.notes:
        result["notes"] = record.notes
    return result


def dict_to_session_record(data: dict[str, Any]) -> BilboSessionRecord:
    """
    Convert dict to BilboSessionRecord.

    Raises:
        ValidationError: If data is invalid
    """
    try:
        weight = float(data["weight_used"])
        reps = int(data["reps_completed"])
        performed_at = parse_timestamp(data["performed_at"])
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError(f"Invalid session record: {e}") from e

    validate_non_negative(weight, "weight_used")
    validate_non_negative(reps, "reps_completed")
    return BilboSessionRecord(
        performed_at=performed_at,
        weight_used=weight,
        reps_completed=reps,
        notes=str(data.get("notes", "")),
    )


def session_to_json_line(record: BilboSessionRecord) -> str:
    """Serialize a session record as a single JSONL line (no newline)."""
    return json.dumps(session_record_to_dict(record), ensure_ascii=False)


def workout_to_json_line(sample: WorkoutSample) -> str:
    """Serialize a workout sample as a single JSONL line (no newline)."""
    return json.dumps(workout_sample_to_dict(sample), ensure_ascii=False)


# ---------------------------------------------------------------------------
# TrackedExerciseState
# ---------------------------------------------------------------------------


def one_rm_source_to_dict(source: OneRMSource) -> dict[str, Any]:
    return {
        "kind": source.kind,
        "formula": source.formula,
        "calculated_at": (
            format_timestamp(source.calculated_at) if source.calculated_at is not None else None
        ),
    }


def dict_to_one_rm_source(data: dict[str, Any]) -> OneRMSource:
    """
    Convert dict to OneRMSource.

    Raises:
        ValidationError: If data is invalid
    """
    kind = data.get("kind", "manual")
    if kind not in ("manual", "auto"):
        raise ValidationError(f"Invalid 1RM source kind: {kind}")
    formula = validate_formula(data.get("formula", "epley"))
    raw_at = data.get("calculated_at")
    calculated_at = parse_timestamp(raw_at) if raw_at is not None else None
    if kind == "manual":
        calculated_at = None
    return OneRMSource(kind=kind, formula=formula, calculated_at=calculated_at)


def state_to_dict(state: TrackedExerciseState) -> dict[str, Any]:
    """Convert TrackedExerciseState to JSON-compatible dict."""
    outcome = state.last_session_outcome
    return {
        "exercise_id": state.exercise_id,
        "one_rep_max": state.one_rep_max,
        "training_weight": state.training_weight,
        "target_rep_range": list(state.target_rep_range),
        "last_session_outcome": (
            {
                "reps_completed": outcome.reps_completed,
                "performed_at": format_timestamp(outcome.performed_at),
            }
            if outcome is not None
            else None
        ),
        "one_rm_source": one_rm_source_to_dict(state.one_rm_source),
        "notes": state.notes,
        "created_at": format_timestamp(state.created_at),
        "updated_at": format_timestamp(state.updated_at),
    }


def dict_to_state(data: dict[str, Any]) -> TrackedExerciseState:
    """
    Convert dict to TrackedExerciseState.

    Raises:
        ValidationError: If data is invalid
    """
    try:
        exercise_id = validate_exercise_id(str(data["exercise_id"]))
        one_rep_max = float(data["one_rep_max"])
        training_weight = float(data["training_weight"])
        low, high = (int(v) for v in data.get("target_rep_range", (15, 50)))
        created_at = parse_timestamp(data["created_at"])
        updated_at = parse_timestamp(data.get("updated_at", data["created_at"]))
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError(f"Invalid tracked exercise state: {e}") from e

    validate_non_negative(one_rep_max, "one_rep_max")
    validate_non_negative(training_weight, "training_weight")

    outcome_data = data.get("last_session_outcome")
    outcome: SessionOutcome | None = None
    if outcome_data is not None:
        try:
            outcome = SessionOutcome(
                reps_completed=int(outcome_data["reps_completed"]),
                performed_at=parse_timestamp(outcome_data["performed_at"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ValidationError(f"Invalid last_session_outcome: {e}") from e

    try:
        return TrackedExerciseState(
            exercise_id=exercise_id,
            one_rep_max=one_rep_max,
            training_weight=training_weight,
            target_rep_range=(low, high),
            last_session_outcome=outcome,
            one_rm_source=dict_to_one_rm_source(data.get("one_rm_source") or {}),
            notes=str(data.get("notes", "")),
            created_at=created_at,
            updated_at=updated_at,
        )
    except ValueError as e:
        raise ValidationError(str(e)) from e
