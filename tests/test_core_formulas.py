"""
Formula-focused unit tests for the 1RM engine.

Values are hand-computed from the formulas listed in each comment.
"""

import math
from datetime import datetime, timedelta

import pytest

from bilbo_tracker.core.config import ROUNDING_INCREMENT
from bilbo_tracker.core.models import FORMULAS, WorkoutSample, WorkoutStats
from bilbo_tracker.core.one_rm import (
    aggregate_stats,
    calculate_bilbo_weight,
    compute_percentage,
    estimate_average_one_rm,
    estimate_max_reps,
    estimate_one_rm,
    find_best_one_rm,
    find_recent_reliable_one_rm,
    is_appropriate_bilbo_weight,
    round_to_increment,
    usable_samples,
    validate_workout_data,
)

NOW = datetime(2026, 3, 1, 12, 0, 0)


def _sample(weight: float, reps: int, days_ago: float = 0) -> WorkoutSample:
    return WorkoutSample(weight_kg=weight, reps=reps, performed_at=NOW - timedelta(days=days_ago))


# ===========================================================================
# estimate_one_rm: forward formulas
# ===========================================================================

class TestEstimateOneRM:
    """100 kg × 10 reps through every formula."""

    def test_epley(self):
        # 100 × (1 + 10/30) = 133.33
        assert estimate_one_rm(100, 10, "epley") == pytest.approx(133.3333, rel=1e-6)

    def test_brzycki(self):
        # 100 × 36 / 27 = 133.33
        assert estimate_one_rm(100, 10, "brzycki") == pytest.approx(133.3333, rel=1e-6)

    def test_lombardi(self):
        # 100 × 10^0.10 = 125.89
        assert estimate_one_rm(100, 10, "lombardi") == pytest.approx(125.8925, rel=1e-6)

    def test_oconnor(self):
        # 100 × (1 + 10/40) = 125
        assert estimate_one_rm(100, 10, "oconnor") == pytest.approx(125.0)

    def test_wathan(self):
        # 100 × 100 / (101.3 − 26.7123) = 134.07
        assert estimate_one_rm(100, 10, "wathan") == pytest.approx(134.0704, rel=1e-5)

    def test_default_formula_is_epley(self):
        assert estimate_one_rm(80, 5) == estimate_one_rm(80, 5, "epley")

    def test_single_rep_epley_is_not_identity(self):
        # No special case for reps == 1: 100 × (1 + 1/30)
        assert estimate_one_rm(100, 1, "epley") == pytest.approx(103.3333, rel=1e-6)

    @pytest.mark.parametrize("formula", FORMULAS)
    @pytest.mark.parametrize("weight,reps", [(0, 10), (-5, 10), (100, 0), (100, -3), (0, 0)])
    def test_non_positive_input_returns_zero(self, formula, weight, reps):
        assert estimate_one_rm(weight, reps, formula) == 0.0

    @pytest.mark.parametrize("formula", FORMULAS)
    @pytest.mark.parametrize("weight,reps", [(2.5, 1), (60, 12), (140, 3), (40, 30)])
    def test_positive_inside_domain(self, formula, weight, reps):
        assert estimate_one_rm(weight, reps, formula) > 0


class TestBrzyckiPole:
    """Brzycki divides by (37 − reps): documented numeric edge, not clamped."""

    def test_reps_36_is_36x_weight(self):
        assert estimate_one_rm(100, 36, "brzycki") == pytest.approx(3600.0)

    def test_reps_37_is_infinite(self):
        result = estimate_one_rm(100, 37, "brzycki")
        assert math.isinf(result) and result > 0

    def test_past_pole_goes_negative(self):
        assert estimate_one_rm(100, 38, "brzycki") == pytest.approx(-3600.0)

    def test_wathan_past_pole_goes_negative(self):
        # 101.3 − 2.67123 × 38 < 0
        assert estimate_one_rm(100, 38, "wathan") < 0


class TestAverageOneRM:

    def test_mean_of_all_formulas(self):
        expected = sum(estimate_one_rm(100, 10, f) for f in FORMULAS) / 5
        assert estimate_average_one_rm(100, 10) == pytest.approx(expected)
        assert estimate_average_one_rm(100, 10) == pytest.approx(130.3259, rel=1e-5)

    def test_zero_input(self):
        assert estimate_average_one_rm(0, 10) == 0.0


# ===========================================================================
# estimate_max_reps: inverse formulas
# ===========================================================================

class TestEstimateMaxReps:

    def test_epley_inverse(self):
        # (150/100 − 1) × 30 = 15
        assert estimate_max_reps(100, 150, "epley") == 15

    def test_oconnor_inverse(self):
        # (150/100 − 1) × 40 = 20
        assert estimate_max_reps(100, 150, "oconnor") == 20

    def test_brzycki_inverse(self):
        # 37 − 36 × 100/144 = 12
        assert estimate_max_reps(100, 144, "brzycki") == 12

    def test_lombardi_inverse(self):
        # (200/100)^10 = 1024
        assert estimate_max_reps(100, 200, "lombardi") == 1024

    def test_wathan_inverse_truncates(self):
        # (101.3 − 50) / 2.67123 = 19.20 → 19
        assert estimate_max_reps(100, 200, "wathan") == 19

    def test_weight_above_one_rm_is_not_clamped(self):
        # (100/200 − 1) × 30 = −15
        assert estimate_max_reps(200, 100, "epley") == -15

    @pytest.mark.parametrize("formula", FORMULAS)
    @pytest.mark.parametrize("weight,one_rm", [(0, 100), (100, 0), (-1, 100), (100, -1)])
    def test_non_positive_input_returns_zero(self, formula, weight, one_rm):
        assert estimate_max_reps(weight, one_rm, formula) == 0

    def test_infinite_one_rm_returns_zero(self):
        assert estimate_max_reps(100, math.inf, "epley") == 0

    @pytest.mark.parametrize("formula", ["epley", "oconnor"])
    @pytest.mark.parametrize("weight,reps", [(100, 10), (62.5, 17), (40, 25), (120, 3)])
    def test_linear_formulas_round_trip(self, formula, weight, reps):
        # Truncation can lose one rep to floating-point error
        one_rm = estimate_one_rm(weight, reps, formula)
        assert abs(estimate_max_reps(weight, one_rm, formula) - reps) <= 1


# ===========================================================================
# Best / recent-reliable selection
# ===========================================================================

class TestFindBestOneRM:

    def test_empty(self):
        assert find_best_one_rm([], "epley") == 0.0

    def test_picks_highest_estimate_regardless_of_order(self):
        samples = [_sample(60, 12, 1), _sample(100, 10, 40), _sample(80, 5, 3)]
        assert find_best_one_rm(samples) == pytest.approx(133.3333, rel=1e-6)
        assert find_best_one_rm(list(reversed(samples))) == pytest.approx(133.3333, rel=1e-6)

    def test_degenerate_samples_contribute_zero(self):
        assert find_best_one_rm([_sample(0, 10), _sample(50, 0)]) == 0.0


class TestFindRecentReliableOneRM:

    def test_empty(self):
        assert find_recent_reliable_one_rm([], "epley", now=NOW) == 0.0

    def test_recent_best_volume_beats_old_record(self):
        samples = [
            _sample(100, 10, days_ago=60),  # old PR, epley 133.3
            _sample(80, 5, days_ago=5),     # volume 400, epley 93.3
            _sample(60, 12, days_ago=2),    # volume 720, epley 84.0
        ]
        # Highest recent volume wins even though 80×5 has the higher estimate
        assert find_recent_reliable_one_rm(samples, "epley", now=NOW) == pytest.approx(84.0)

    def test_falls_back_to_best_ever_when_nothing_recent(self):
        samples = [_sample(100, 10, days_ago=60), _sample(60, 12, days_ago=45)]
        assert find_recent_reliable_one_rm(samples, "epley", now=NOW) == pytest.approx(
            find_best_one_rm(samples, "epley")
        )

    def test_window_boundary_is_inclusive(self):
        samples = [_sample(100, 10, days_ago=60), _sample(60, 12, days_ago=30)]
        assert find_recent_reliable_one_rm(samples, "epley", max_days_back=30, now=NOW) == pytest.approx(84.0)

    def test_custom_window(self):
        samples = [_sample(100, 10, days_ago=60), _sample(60, 12, days_ago=2)]
        # 90-day window makes the old PR "recent" and it has the larger volume
        assert find_recent_reliable_one_rm(samples, "epley", max_days_back=90, now=NOW) == pytest.approx(
            133.3333, rel=1e-6
        )

    def test_uses_requested_formula(self):
        samples = [_sample(60, 12, days_ago=2)]
        assert find_recent_reliable_one_rm(samples, "oconnor", now=NOW) == pytest.approx(78.0)

    def test_volume_tie_keeps_first(self):
        samples = [_sample(50, 12, days_ago=1), _sample(60, 10, days_ago=1)]
        assert find_recent_reliable_one_rm(samples, "epley", now=NOW) == pytest.approx(70.0)


# ===========================================================================
# Rounding and percentages
# ===========================================================================

class TestRoundToIncrement:

    def test_rounds_up(self):
        # 41 / 1.25 = 32.8 → 33 → 41.25
        assert round_to_increment(41.0) == pytest.approx(41.25)

    def test_rounds_down(self):
        # 40.6 / 1.25 = 32.48 → 32 → 40.0
        assert round_to_increment(40.6) == pytest.approx(40.0)

    def test_half_rounds_away_from_zero(self):
        # 40.625 / 1.25 = 32.5 → 33
        assert round_to_increment(40.625) == pytest.approx(41.25)
        assert round_to_increment(-40.625) == pytest.approx(-41.25)

    def test_custom_increment(self):
        assert round_to_increment(43.0, 2.5) == pytest.approx(42.5)

    @pytest.mark.parametrize("increment", [0, -1.25])
    def test_non_positive_increment_is_passthrough(self, increment):
        assert round_to_increment(41.3, increment) == 41.3

    @pytest.mark.parametrize("value", [math.inf, -math.inf])
    def test_infinite_value_is_passthrough(self, value):
        assert round_to_increment(value) == value

    def test_nan_is_passthrough(self):
        assert math.isnan(round_to_increment(math.nan))

    def test_brzycki_pole_estimate_does_not_raise(self):
        pole = estimate_one_rm(100, 37, "brzycki")
        assert round_to_increment(pole) == math.inf

    @pytest.mark.parametrize("value", [0.0, 0.6, 17.3, 41.0, 52.49, 99.99, 133.33, 250.1])
    def test_idempotent(self, value):
        once = round_to_increment(value, ROUNDING_INCREMENT)
        assert round_to_increment(once, ROUNDING_INCREMENT) == pytest.approx(once)


class TestBilboWeight:

    def test_half_of_one_rm(self):
        assert calculate_bilbo_weight(100) == pytest.approx(50.0)

    def test_snapped(self):
        # 83 × 0.5 = 41.5 → 41.25
        assert calculate_bilbo_weight(83) == pytest.approx(41.25)

    @pytest.mark.parametrize("one_rm", [0, 1, 37.3, 80, 83, 101.7, 142.5, 333.3])
    def test_always_multiple_of_increment(self, one_rm):
        steps = calculate_bilbo_weight(one_rm) / ROUNDING_INCREMENT
        assert steps == pytest.approx(round(steps))

    def test_infinite_one_rm(self):
        assert calculate_bilbo_weight(math.inf) == math.inf

    def test_appropriate_weight_uses_increment(self):
        # 83 × 0.5 = 41.5 → 42.5 with a 2.5 increment, tolerance 4.25
        assert is_appropriate_bilbo_weight(46.5, 83, increment=2.5)
        assert not is_appropriate_bilbo_weight(46.5, 83)

    def test_appropriate_weight_within_ten_percent(self):
        # BILBO weight 50, tolerance 5
        assert is_appropriate_bilbo_weight(52, 100)
        assert is_appropriate_bilbo_weight(45, 100)
        assert not is_appropriate_bilbo_weight(56, 100)


class TestComputePercentage:

    def test_basic(self):
        assert compute_percentage(50, 100) == pytest.approx(50.0)

    @pytest.mark.parametrize("weight", [45, 55])
    def test_range_bounds_are_exact(self, weight):
        # 55 / 100 × 100 would give 55.00000000000001
        assert compute_percentage(weight, 100) == float(weight)

    @pytest.mark.parametrize("one_rm", [0, -10])
    def test_non_positive_one_rm(self, one_rm):
        assert compute_percentage(50, one_rm) == 0.0


# ===========================================================================
# Validation and aggregation
# ===========================================================================

class TestValidateWorkoutData:

    @pytest.mark.parametrize("weight,reps", [(100, 10), (200, 50), (0.5, 1)])
    def test_realistic(self, weight, reps):
        assert validate_workout_data(weight, reps)

    @pytest.mark.parametrize("weight,reps", [(0, 10), (100, 0), (100, 51), (200.5, 5), (-20, 5)])
    def test_unrealistic(self, weight, reps):
        assert not validate_workout_data(weight, reps)


class TestAggregateStats:

    def test_empty(self):
        assert aggregate_stats([]) == WorkoutStats(0.0, 0, 0, None)

    def test_reduction(self):
        samples = [_sample(80, 5, 10), _sample(60, 12, 2), _sample(70, 8, 5)]
        stats = aggregate_stats(samples)
        assert stats.max_weight == 80
        assert stats.max_reps == 12
        assert stats.session_count == 3
        assert stats.last_session_at == NOW - timedelta(days=2)

    def test_usable_samples_drops_degenerate(self):
        samples = [_sample(0, 5), _sample(60, 0), _sample(60, 12)]
        assert usable_samples(samples) == [samples[2]]
