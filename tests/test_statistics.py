"""Tests for statistics derived from the BILBO session history."""

from datetime import date, datetime, timedelta

import pytest

from bilbo_tracker.core.models import BilboSessionRecord, BilboStats, Improvement
from bilbo_tracker.core.statistics import (
    get_bilbo_stats,
    get_improvement,
    get_progress_data,
    progress_percentage,
    sessions_by_week,
    week_start,
)

# 2026-03-02 is a Monday
MONDAY = datetime(2026, 3, 2, 18, 0, 0)


def _session(weight: float, reps: int, day_offset: float = 0) -> BilboSessionRecord:
    return BilboSessionRecord(
        performed_at=MONDAY + timedelta(days=day_offset),
        weight_used=weight,
        reps_completed=reps,
    )


class TestBilboStats:

    def test_empty(self):
        assert get_bilbo_stats([]) == BilboStats()

    def test_aggregates(self):
        history = [_session(40, 15), _session(42.5, 16, 2), _session(45, 20, 7)]
        stats = get_bilbo_stats(history)
        assert stats.total_sessions == 3
        assert stats.avg_weight == pytest.approx(42.5)
        assert stats.max_weight == 45
        assert stats.avg_reps == pytest.approx(17.0)
        assert stats.max_reps == 20
        # 600 + 680 + 900
        assert stats.total_volume == pytest.approx(2180.0)
        assert stats.sessions_by_week == {date(2026, 3, 2): 2, date(2026, 3, 9): 1}


class TestSessionsByWeek:

    def test_week_start(self):
        assert week_start(date(2026, 3, 2)) == date(2026, 3, 2)
        assert week_start(date(2026, 3, 5)) == date(2026, 3, 2)
        assert week_start(date(2026, 3, 8)) == date(2026, 3, 2)

    def test_sunday_belongs_to_previous_monday(self):
        history = [_session(40, 15, 6), _session(40, 15, 7)]
        assert sessions_by_week(history) == {date(2026, 3, 2): 1, date(2026, 3, 9): 1}

    def test_keys_are_chronological(self):
        history = [_session(40, 15, 14), _session(40, 15, 0), _session(40, 15, 7)]
        assert list(sessions_by_week(history)) == [
            date(2026, 3, 2), date(2026, 3, 9), date(2026, 3, 16),
        ]


class TestImprovement:

    def test_empty(self):
        assert get_improvement([]) == Improvement()

    def test_first_to_last(self):
        history = [_session(40, 15, 0), _session(50, 20, 10)]
        imp = get_improvement(history)
        assert imp.weight_increase == pytest.approx(10.0)
        assert imp.reps_increase == 5
        # 1000 − 600
        assert imp.volume_increase == pytest.approx(400.0)
        assert imp.percentage_improvement == pytest.approx(66.6667, rel=1e-5)

    def test_input_order_does_not_matter(self):
        history = [_session(50, 20, 10), _session(45, 12, 5), _session(40, 15, 0)]
        assert get_improvement(history) == get_improvement(list(reversed(history)))
        assert get_improvement(history).weight_increase == pytest.approx(10.0)

    def test_zero_first_volume(self):
        history = [_session(0, 10, 0), _session(50, 10, 3)]
        imp = get_improvement(history)
        assert imp.percentage_improvement == 0.0
        assert imp.volume_increase == pytest.approx(500.0)

    def test_single_session(self):
        imp = get_improvement([_session(40, 15)])
        assert imp == Improvement()


class TestProgressPercentage:

    def test_empty(self):
        assert progress_percentage([], 50.0) == 0.0

    @pytest.mark.parametrize("current,expected", [
        (40.0, 0.0),
        (45.0, 50.0),
        (47.5, 75.0),
        (50.0, 100.0),
        (60.0, 100.0),
        (35.0, 0.0),
    ])
    def test_clamped(self, current, expected):
        history = [_session(42.5, 18, 3), _session(40, 15, 0)]
        assert progress_percentage(history, current) == pytest.approx(expected)

    def test_custom_window(self):
        history = [_session(40, 15)]
        assert progress_percentage(history, 45.0, target_increase_kg=20.0) == pytest.approx(25.0)


class TestProgressData:

    def test_chronological_series(self):
        history = [_session(45, 20, 7), _session(40, 15, 0)]
        data = get_progress_data(history)
        assert data.weight == [(MONDAY, 40), (MONDAY + timedelta(days=7), 45)]
        assert data.reps == [(MONDAY, 15), (MONDAY + timedelta(days=7), 20)]
        assert data.volume == [(MONDAY, 600), (MONDAY + timedelta(days=7), 900)]

    def test_empty(self):
        data = get_progress_data([])
        assert data.weight == [] and data.reps == [] and data.volume == []
