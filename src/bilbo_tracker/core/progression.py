"""
BILBO progression rules.

Owns the lifecycle of a TrackedExerciseState:

    initialize_tracking  →  Tracking (no sessions)
    record_session       →  Tracking (≥ 1 session), weight may step up
    update_one_rm        →  baseline weight reset from the new 1RM

The single progression rule: completing more than 15 reps earns a flat
+2.5 kg (snapped to the rounding increment); anything else holds the
weight.  There is no deload rule.

Functions mutate the state they are given and never touch caller-owned
session history; record_session returns the new record for the caller
to persist.
"""

import logging
import math
from datetime import datetime
from typing import Sequence

from .config import (
    BILBO_FRACTION,
    CORRECT_RANGE_HIGH_PCT,
    CORRECT_RANGE_LOW_PCT,
    DEFAULT_POLICY,
    ONE_RM_CHANGE_THRESHOLD,
    RIR_MAX,
    RIR_MIN,
    RIR_REFERENCE_REPS,
    TARGET_REP_HIGH,
    TARGET_REP_LOW,
    BilboPolicy,
)
from .models import (
    BilboSessionRecord,
    Formula,
    OneRMSource,
    SessionOutcome,
    TrackedExerciseState,
    WorkoutSample,
)
from .one_rm import (
    calculate_bilbo_weight,
    compute_percentage,
    find_recent_reliable_one_rm,
    round_to_increment,
    usable_samples,
)

logger = logging.getLogger(__name__)


def initialize_tracking(
    exercise_id: str,
    one_rm: float,
    source: OneRMSource | None = None,
    notes: str = "",
    now: datetime | None = None,
) -> TrackedExerciseState:
    """
    Start tracking an exercise under BILBO.

    The training weight is one_rm × 0.5, left unrounded; update_one_rm
    is the call site that rounds.

    Args:
        exercise_id: Identifier of the exercise
        one_rm: Initial 1RM estimate (manual or computed)
        source: Provenance of the 1RM (default: manual, Epley)
        notes: Free-text notes
        now: Creation time (default: datetime.now())

    Returns:
        Fresh state with no sessions
    """
    if now is None:
        now = datetime.now()
    if source is None:
        source = OneRMSource()

    state = TrackedExerciseState(
        exercise_id=exercise_id,
        one_rep_max=one_rm,
        training_weight=one_rm * BILBO_FRACTION,
        target_rep_range=(TARGET_REP_LOW, TARGET_REP_HIGH),
        one_rm_source=source,
        notes=notes,
        created_at=now,
        updated_at=now,
    )
    logger.debug(
        "Tracking %s: 1RM=%.2f, training weight=%.2f",
        exercise_id, state.one_rep_max, state.training_weight,
    )
    return state


def should_progress(state: TrackedExerciseState, policy: BilboPolicy = DEFAULT_POLICY) -> bool:
    """True if the last session exceeded the progression threshold."""
    outcome = state.last_session_outcome
    if outcome is None:
        return False
    return outcome.reps_completed > policy.progression_rep_threshold


def suggested_next_weight(state: TrackedExerciseState, policy: BilboPolicy = DEFAULT_POLICY) -> float:
    """
    Weight to prescribe for the next session.

    No session yet → current training weight.
    Last reps > 15  → training weight + 2.5, snapped to the increment.
    Otherwise       → current training weight.
    """
    if not should_progress(state, policy):
        return state.training_weight
    return round_to_increment(
        state.training_weight + policy.progression_increment,
        policy.rounding_increment,
    )


def record_session(
    state: TrackedExerciseState,
    weight_used: float,
    reps_completed: int,
    notes: str = "",
    now: datetime | None = None,
    policy: BilboPolicy = DEFAULT_POLICY,
) -> BilboSessionRecord:
    """
    Apply a logged BILBO session to the state.

    The weight actually used becomes the new baseline; if the session
    earned progression, the baseline is immediately replaced by
    suggested_next_weight.  A 16+ rep session at 52.5 kg therefore ends
    with training_weight = 55.0, a 15 rep session at 50 kg with 50.0.

    Args:
        state: State to update in place
        weight_used: Weight lifted (kg)
        reps_completed: Reps completed
        notes: Free-text notes stored on the record
        now: Session time (default: datetime.now())
        policy: Progression policy

    Returns:
        The new BilboSessionRecord, to be appended to history by the caller
    """
    if now is None:
        now = datetime.now()

    record = BilboSessionRecord(
        performed_at=now,
        weight_used=weight_used,
        reps_completed=reps_completed,
        notes=notes,
    )

    state.last_session_outcome = SessionOutcome(reps_completed=reps_completed, performed_at=now)
    state.training_weight = weight_used
    if should_progress(state, policy):
        state.training_weight = suggested_next_weight(state, policy)
        logger.debug(
            "%s: %d reps > %d, weight %.2f -> %.2f",
            state.exercise_id, reps_completed, policy.progression_rep_threshold,
            weight_used, state.training_weight,
        )
    state.updated_at = now

    return record


def current_percentage(state: TrackedExerciseState) -> float:
    """Training weight as a percentage of the current 1RM."""
    return compute_percentage(state.training_weight, state.one_rep_max)


def is_in_correct_range(state: TrackedExerciseState) -> bool:
    """
    Health check: training weight between 45 % and 55 % of 1RM.

    Only a warning signal; nothing enforces it.
    """
    return CORRECT_RANGE_LOW_PCT <= current_percentage(state) <= CORRECT_RANGE_HIGH_PCT


def estimated_reps_in_reserve(state: TrackedExerciseState) -> int:
    """
    Rough RIR guess from the last session.

    15+ reps → clip(20 − reps, 1, 3); fewer reps or no session → 0.
    """
    outcome = state.last_session_outcome
    if outcome is None or outcome.reps_completed < TARGET_REP_LOW:
        return 0
    return min(RIR_MAX, max(RIR_MIN, RIR_REFERENCE_REPS - outcome.reps_completed))


def update_one_rm(
    state: TrackedExerciseState,
    new_one_rm: float,
    formula: Formula = "epley",
    is_auto_calculated: bool = False,
    now: datetime | None = None,
    policy: BilboPolicy = DEFAULT_POLICY,
) -> TrackedExerciseState:
    """
    Replace the 1RM and reset the training weight to the rounded BILBO weight.

    Provenance is recorded: auto-calculated values carry a timestamp used by
    should_recalculate_one_rm, manual values do not.
    """
    if now is None:
        now = datetime.now()

    state.one_rep_max = new_one_rm
    state.training_weight = calculate_bilbo_weight(new_one_rm, policy.rounding_increment)
    state.one_rm_source = OneRMSource(
        kind="auto" if is_auto_calculated else "manual",
        formula=formula,
        calculated_at=now if is_auto_calculated else None,
    )
    state.updated_at = now
    logger.debug(
        "%s: 1RM set to %.2f (%s, %s), training weight %.2f",
        state.exercise_id, new_one_rm, state.one_rm_source.kind, formula, state.training_weight,
    )
    return state


def should_recalculate_one_rm(
    state: TrackedExerciseState,
    now: datetime | None = None,
    policy: BilboPolicy = DEFAULT_POLICY,
) -> bool:
    """
    True if the 1RM is auto-calculated and at least 7 whole days old.

    A signal for the caller to prompt a recalculation; it does not
    recalculate anything itself.
    """
    source = state.one_rm_source
    if not source.is_auto_calculated or source.calculated_at is None:
        return False
    if now is None:
        now = datetime.now()
    return (now - source.calculated_at).days >= policy.recalc_staleness_days


def calculate_one_rm_from_history(
    state: TrackedExerciseState,
    samples: Sequence[WorkoutSample],
    formula: Formula = "epley",
    now: datetime | None = None,
    policy: BilboPolicy = DEFAULT_POLICY,
) -> float | None:
    """
    Propose a new 1RM from logged workouts.

    Uses find_recent_reliable_one_rm over the usable samples.  Estimates
    past a formula pole (infinite or non-positive) are never proposed.

    Returns:
        The proposed 1RM, or None if there is no usable data, the
        estimate is not a finite positive number, or it is within 5 % of
        the current 1RM
    """
    usable = usable_samples(samples)
    if not usable:
        return None

    calculated = find_recent_reliable_one_rm(
        usable, formula, max_days_back=policy.recent_window_days, now=now,
    )
    if not math.isfinite(calculated) or calculated <= 0:
        logger.debug(
            "%s: %s estimate %.2f is unusable, keeping 1RM %.2f",
            state.exercise_id, formula, calculated, state.one_rep_max,
        )
        return None
    if state.one_rep_max <= 0:
        return calculated

    difference = abs(calculated - state.one_rep_max) / state.one_rep_max
    if difference > ONE_RM_CHANGE_THRESHOLD:
        return calculated
    return None
