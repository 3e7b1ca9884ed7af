"""
Derived statistics over a BILBO session history.

Read-only projections: every function takes the history as a sequence,
sorts a copy chronologically where order matters, and returns a freshly
computed aggregate.  Empty history gives all-zero results.
"""

from datetime import date, timedelta
from typing import Sequence

from .config import TARGET_PROGRESS_WINDOW_KG
from .models import BilboSessionRecord, BilboStats, Improvement, ProgressData


def _chronological(history: Sequence[BilboSessionRecord]) -> list[BilboSessionRecord]:
    return sorted(history, key=lambda s: s.performed_at)


def week_start(day: date) -> date:
    """Monday of the ISO week containing ``day``."""
    return day - timedelta(days=day.weekday())


def sessions_by_week(history: Sequence[BilboSessionRecord]) -> dict[date, int]:
    """
    Count sessions per ISO week.

    Returns:
        Mapping week-start (Monday) → session count, in chronological order
    """
    counts: dict[date, int] = {}
    for session in _chronological(history):
        key = week_start(session.performed_at.date())
        counts[key] = counts.get(key, 0) + 1
    return counts


def get_bilbo_stats(history: Sequence[BilboSessionRecord]) -> BilboStats:
    """
    Totals, averages and maxima over the session history.

    total_volume = Σ weight × reps.

    Args:
        history: Logged sessions (any order)

    Returns:
        BilboStats (all zero / empty for no sessions)
    """
    if not history:
        return BilboStats()

    n = len(history)
    return BilboStats(
        total_sessions=n,
        avg_weight=sum(s.weight_used for s in history) / n,
        max_weight=max(s.weight_used for s in history),
        avg_reps=sum(s.reps_completed for s in history) / n,
        max_reps=max(s.reps_completed for s in history),
        total_volume=sum(s.volume for s in history),
        sessions_by_week=sessions_by_week(history),
    )


def progress_percentage(
    history: Sequence[BilboSessionRecord],
    current_weight: float,
    target_increase_kg: float = TARGET_PROGRESS_WINDOW_KG,
) -> float:
    """
    Progress toward a fixed weight increase since the first session.

    progress = clip((current − first_weight) / 10 kg × 100, 0, 100)

    Args:
        history: Logged sessions
        current_weight: Current training weight (kg)
        target_increase_kg: Increase that counts as 100 %

    Returns:
        Progress in percent, 0.0 for empty history
    """
    if not history or target_increase_kg <= 0:
        return 0.0

    first = _chronological(history)[0]
    increase = current_weight - first.weight_used
    return min(100.0, max(0.0, increase / target_increase_kg * 100))


def get_improvement(history: Sequence[BilboSessionRecord]) -> Improvement:
    """
    Deltas between the chronologically first and last sessions.

    percentage_improvement compares volumes and is 0 when the first
    session had zero volume.
    """
    if not history:
        return Improvement()

    ordered = _chronological(history)
    first, last = ordered[0], ordered[-1]

    first_volume = first.volume
    last_volume = last.volume
    pct = (last_volume - first_volume) / first_volume * 100 if first_volume > 0 else 0.0

    return Improvement(
        weight_increase=last.weight_used - first.weight_used,
        reps_increase=last.reps_completed - first.reps_completed,
        volume_increase=last_volume - first_volume,
        percentage_improvement=pct,
    )


def get_progress_data(history: Sequence[BilboSessionRecord]) -> ProgressData:
    """Chronological weight, reps and volume series for charts."""
    ordered = _chronological(history)
    return ProgressData(
        weight=[(s.performed_at, s.weight_used) for s in ordered],
        reps=[(s.performed_at, s.reps_completed) for s in ordered],
        volume=[(s.performed_at, s.volume) for s in ordered],
    )
