"""
One-rep-max estimation.

Pure functions only.  Every function is total: degenerate input
(non-positive weight, reps or 1RM, empty sample lists) yields 0 or an
empty aggregate instead of raising.

Forward formulas (w = weight, r = reps):

    Epley     1RM = w × (1 + r/30)
    Brzycki   1RM = w × 36 / (37 − r)
    Lombardi  1RM = w × r^0.10
    O'Connor  1RM = w × (1 + r/40)
    Wathan    1RM = w × 100 / (101.3 − 2.67123 × r)

Brzycki and Wathan have a pole where the denominator reaches zero
(r = 37 for Brzycki, r ≈ 37.9 for Wathan).  The values are returned as
computed, including +inf at the exact pole and negative numbers past it;
callers decide what to do with them.
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta
from typing import Callable, Iterable, Sequence

from .config import (
    BILBO_FRACTION,
    BILBO_WEIGHT_TOLERANCE,
    MAX_VALID_REPS,
    MAX_VALID_WEIGHT_KG,
    RECENT_WINDOW_DAYS,
    ROUNDING_INCREMENT,
)
from .models import FORMULAS, Formula, WorkoutSample, WorkoutStats


def _divide(numerator: float, denominator: float) -> float:
    """Floating-point division that yields ±inf (or nan) instead of raising."""
    if denominator == 0:
        if numerator == 0:
            return math.nan
        return math.copysign(math.inf, numerator)
    return numerator / denominator


# ---------------------------------------------------------------------------
# Forward formulas
# ---------------------------------------------------------------------------


def _epley(weight: float, reps: int) -> float:
    return weight * (1 + reps / 30.0)


def _brzycki(weight: float, reps: int) -> float:
    return _divide(weight * 36.0, 37.0 - reps)


def _lombardi(weight: float, reps: int) -> float:
    return weight * reps ** 0.10


def _oconnor(weight: float, reps: int) -> float:
    return weight * (1 + reps / 40.0)


def _wathan(weight: float, reps: int) -> float:
    return _divide(weight * 100.0, 101.3 - 2.67123 * reps)


_ESTIMATORS: dict[str, Callable[[float, int], float]] = {
    "epley": _epley,
    "brzycki": _brzycki,
    "lombardi": _lombardi,
    "oconnor": _oconnor,
    "wathan": _wathan,
}


# ---------------------------------------------------------------------------
# Inverse formulas (solve for reps)
# ---------------------------------------------------------------------------

_INVERSES: dict[str, Callable[[float, float], float]] = {
    "epley": lambda weight, one_rm: (one_rm / weight - 1) * 30,
    "brzycki": lambda weight, one_rm: 37 - 36 * weight / one_rm,
    "lombardi": lambda weight, one_rm: (one_rm / weight) ** 10,
    "oconnor": lambda weight, one_rm: (one_rm / weight - 1) * 40,
    "wathan": lambda weight, one_rm: (101.3 - 100 * weight / one_rm) / 2.67123,
}


def estimate_one_rm(weight: float, reps: int, formula: Formula = "epley") -> float:
    """
    Estimate 1RM from a single set.

    Args:
        weight: Weight lifted (kg)
        reps: Reps performed
        formula: One of FORMULAS

    Returns:
        Estimated 1RM in kg, or 0.0 if weight or reps is not positive
    """
    if weight <= 0 or reps <= 0:
        return 0.0
    return _ESTIMATORS[formula](weight, reps)


def estimate_average_one_rm(weight: float, reps: int) -> float:
    """Arithmetic mean of the estimates of all five formulas."""
    estimates = [estimate_one_rm(weight, reps, f) for f in FORMULAS]
    return sum(estimates) / len(estimates)


def estimate_max_reps(weight: float, one_rm: float, formula: Formula = "epley") -> int:
    """
    Estimate how many reps can be done at ``weight`` given a known 1RM.

    Exact algebraic inverse of the forward formula, truncated toward zero.
    The result is not clamped, so a weight above the 1RM gives a
    negative or zero count.

    Args:
        weight: Working weight (kg)
        one_rm: Known 1RM (kg)
        formula: One of FORMULAS

    Returns:
        Estimated reps, or 0 if weight or one_rm is not positive
        (or the inverse is not a finite number)
    """
    if one_rm <= 0 or weight <= 0:
        return 0
    try:
        raw = _INVERSES[formula](weight, one_rm)
    except OverflowError:
        # Lombardi's tenth power on an extreme 1RM/weight ratio
        return 0
    if not math.isfinite(raw):
        return 0
    return int(raw)


# ---------------------------------------------------------------------------
# Selection over samples
# ---------------------------------------------------------------------------


def usable_samples(samples: Iterable[WorkoutSample]) -> list[WorkoutSample]:
    """Drop samples that cannot produce an estimate (weight or reps ≤ 0)."""
    return [s for s in samples if s.weight_kg > 0 and s.reps > 0]


def find_best_one_rm(samples: Sequence[WorkoutSample], formula: Formula = "epley") -> float:
    """
    Highest estimate over all samples, in any order.

    Returns:
        Best estimated 1RM, or 0.0 for an empty sequence
    """
    best = 0.0
    for sample in samples:
        est = estimate_one_rm(sample.weight_kg, sample.reps, formula)
        if est > best:
            best = est
    return best


def find_recent_reliable_one_rm(
    samples: Sequence[WorkoutSample],
    formula: Formula = "epley",
    max_days_back: int = RECENT_WINDOW_DAYS,
    now: datetime | None = None,
) -> float:
    """
    Estimate 1RM trusting recent performance over old records.

    1. Keep samples performed within ``max_days_back`` days of ``now``.
    2. If any remain, estimate from the one with the highest weight × reps
       (first one wins ties).
    3. Otherwise fall back to find_best_one_rm over *all* samples, so an
       empty recent window never reports zero for a non-empty history.

    Args:
        samples: Workout samples (any order)
        formula: One of FORMULAS
        max_days_back: Size of the recent window in days
        now: Reference time (default: datetime.now())

    Returns:
        Estimated 1RM, or 0.0 for an empty sequence
    """
    if not samples:
        return 0.0

    if now is None:
        now = datetime.now()
    cutoff = now - timedelta(days=max_days_back)

    recent = [s for s in samples if s.performed_at >= cutoff]
    if not recent:
        return find_best_one_rm(samples, formula)

    best_effort = max(recent, key=lambda s: s.volume)
    return estimate_one_rm(best_effort.weight_kg, best_effort.reps, formula)


# ---------------------------------------------------------------------------
# Rounding and percentages
# ---------------------------------------------------------------------------


def round_to_increment(value: float, increment: float = ROUNDING_INCREMENT) -> float:
    """
    Round to the nearest multiple of ``increment`` (halves away from zero).

    A non-positive increment, or a value that is not finite, returns
    ``value`` unchanged.

    Examples:
        round_to_increment(41.0) → 41.25
        round_to_increment(40.6) → 40.0
    """
    if increment <= 0:
        return value
    steps = value / increment
    if not math.isfinite(steps):
        return value
    rounded = math.floor(abs(steps) + 0.5)
    return math.copysign(rounded, steps) * increment


def calculate_bilbo_weight(one_rm: float, increment: float = ROUNDING_INCREMENT) -> float:
    """BILBO starting weight: 50 % of 1RM snapped to the rounding increment."""
    return round_to_increment(one_rm * BILBO_FRACTION, increment)


def compute_percentage(weight: float, one_rm: float) -> float:
    """Weight as a percentage of 1RM, or 0.0 if one_rm is not positive."""
    if one_rm <= 0:
        return 0.0
    return weight * 100 / one_rm


def is_appropriate_bilbo_weight(
    weight: float, one_rm: float, increment: float = ROUNDING_INCREMENT
) -> bool:
    """True if ``weight`` is within 10 % of the BILBO weight for ``one_rm``."""
    bilbo_weight = calculate_bilbo_weight(one_rm, increment)
    tolerance = bilbo_weight * BILBO_WEIGHT_TOLERANCE
    return abs(weight - bilbo_weight) <= tolerance


def validate_workout_data(weight: float, reps: int) -> bool:
    """Sanity check for user-entered sets (not enforced by the estimators)."""
    if weight <= 0 or reps <= 0 or reps > MAX_VALID_REPS:
        return False
    return weight <= MAX_VALID_WEIGHT_KG


def aggregate_stats(samples: Sequence[WorkoutSample]) -> WorkoutStats:
    """
    Reduce samples to max weight, max reps, count and last timestamp.

    Returns:
        WorkoutStats; all zero / None for an empty sequence
    """
    if not samples:
        return WorkoutStats()

    return WorkoutStats(
        max_weight=max(s.weight_kg for s in samples),
        max_reps=max(s.reps for s in samples),
        session_count=len(samples),
        last_session_at=max(s.performed_at for s in samples),
    )
