"""
Configuration constants for the BILBO progression model.

All adjustable parameters are centralized here for easy tuning.
The six values grouped in BilboPolicy may be overridden from bilbo.yaml;
everything else is a fixed protocol constant.
"""

from dataclasses import dataclass
from typing import Final

# =============================================================================
# ROUNDING
# =============================================================================

ROUNDING_INCREMENT: Final[float] = 1.25  # Smallest plate pair step (kg)

# =============================================================================
# BILBO PROTOCOL
# =============================================================================

BILBO_FRACTION: Final[float] = 0.5  # Training weight as fraction of 1RM
TARGET_REP_LOW: Final[int] = 15  # Lower bound of the target rep range
TARGET_REP_HIGH: Final[int] = 50  # Upper bound of the target rep range

CORRECT_RANGE_LOW_PCT: Final[float] = 45.0  # Healthy %1RM window, lower edge
CORRECT_RANGE_HIGH_PCT: Final[float] = 55.0  # Healthy %1RM window, upper edge
BILBO_WEIGHT_TOLERANCE: Final[float] = 0.10  # Accepted drift from BILBO weight

# =============================================================================
# PROGRESSION
# =============================================================================

PROGRESSION_REP_THRESHOLD: Final[int] = TARGET_REP_LOW  # Reps must EXCEED this
PROGRESSION_INCREMENT: Final[float] = 2.5  # kg added after a successful session
TARGET_PROGRESS_WINDOW_KG: Final[float] = 10.0  # Increase counted as 100 % progress

# RIR heuristic: RIR ~= clip(RIR_REFERENCE_REPS - reps, RIR_MIN, RIR_MAX)
RIR_REFERENCE_REPS: Final[int] = 20
RIR_MIN: Final[int] = 1
RIR_MAX: Final[int] = 3

# =============================================================================
# 1RM ESTIMATION
# =============================================================================

RECENT_WINDOW_DAYS: Final[int] = 30  # Samples newer than this are "recent"
RECALC_STALENESS_DAYS: Final[int] = 7  # Auto 1RM is stale after this many days
ONE_RM_CHANGE_THRESHOLD: Final[float] = 0.05  # Min relative change to suggest a new 1RM

# =============================================================================
# INPUT VALIDATION
# =============================================================================

MAX_VALID_REPS: Final[int] = 50
MAX_VALID_WEIGHT_KG: Final[float] = 200.0


@dataclass(frozen=True)
class BilboPolicy:
    """Policy values a host application may surface as settings."""

    rounding_increment: float = ROUNDING_INCREMENT
    progression_rep_threshold: int = PROGRESSION_REP_THRESHOLD
    progression_increment: float = PROGRESSION_INCREMENT
    recalc_staleness_days: int = RECALC_STALENESS_DAYS
    recent_window_days: int = RECENT_WINDOW_DAYS
    target_progress_window_kg: float = TARGET_PROGRESS_WINDOW_KG

    def __post_init__(self) -> None:
        """Validate policy values."""
        if self.rounding_increment < 0:
            raise ValueError("rounding_increment must be non-negative")
        if self.progression_rep_threshold < 0:
            raise ValueError("progression_rep_threshold must be non-negative")
        if self.progression_increment < 0:
            raise ValueError("progression_increment must be non-negative")
        if self.recalc_staleness_days < 0:
            raise ValueError("recalc_staleness_days must be non-negative")
        if self.recent_window_days < 0:
            raise ValueError("recent_window_days must be non-negative")
        if self.target_progress_window_kg <= 0:
            raise ValueError("target_progress_window_kg must be positive")


DEFAULT_POLICY: Final[BilboPolicy] = BilboPolicy()
