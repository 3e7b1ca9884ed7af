"""
Data models for bilbo-tracker.

All core dataclasses representing workout evidence, the tracked BILBO
state and the aggregates derived from session history.
Weights are canonical kilograms; conversion to other units happens only
at the presentation layer.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Final, Literal

Formula = Literal["epley", "brzycki", "lombardi", "oconnor", "wathan"]
FORMULAS: Final[tuple[Formula, ...]] = ("epley", "brzycki", "lombardi", "oconnor", "wathan")

OneRMSourceKind = Literal["manual", "auto"]


@dataclass(frozen=True)
class WorkoutSample:
    """
    One completed set, used as evidence for 1RM estimation.

    Degenerate values (zero weight or reps) are allowed; the estimators
    treat them as "no usable input" and return 0.
    """

    weight_kg: float
    reps: int
    performed_at: datetime

    @property
    def volume(self) -> float:
        """Work-volume proxy weight × reps."""
        return self.weight_kg * self.reps


@dataclass
class OneRMSource:
    """
    Provenance of the current 1RM.

    ``calculated_at`` is only set for auto-calculated values.
    ``formula`` is kept for manual entries too, so the UI can
    preselect it on the next recalculation.
    """

    kind: OneRMSourceKind = "manual"
    formula: Formula = "epley"
    calculated_at: datetime | None = None

    def __post_init__(self) -> None:
        """Validate source data."""
        if self.kind not in ("manual", "auto"):
            raise ValueError(f"Invalid 1RM source kind: {self.kind}")
        if self.formula not in FORMULAS:
            raise ValueError(f"Invalid formula: {self.formula}")
        if self.kind == "manual" and self.calculated_at is not None:
            raise ValueError("manual 1RM source cannot carry a calculation timestamp")

    @property
    def is_auto_calculated(self) -> bool:
        return self.kind == "auto"


@dataclass
class SessionOutcome:
    """Result of the most recent BILBO session."""

    reps_completed: int
    performed_at: datetime


@dataclass
class TrackedExerciseState:
    """
    Mutable progression record for one exercise under BILBO.

    training_weight is nominally one_rep_max × 0.5 snapped to the rounding
    increment, but drifts upward through progression until the 1RM is
    edited or recalculated.
    """

    exercise_id: str
    one_rep_max: float
    training_weight: float
    target_rep_range: tuple[int, int] = (15, 50)
    last_session_outcome: SessionOutcome | None = None
    one_rm_source: OneRMSource = field(default_factory=OneRMSource)
    notes: str = ""
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self) -> None:
        """Validate state data."""
        if not self.exercise_id or not self.exercise_id.strip():
            raise ValueError("exercise_id must be a non-empty string")
        if self.one_rep_max < 0:
            raise ValueError("one_rep_max must be non-negative")
        if self.training_weight < 0:
            raise ValueError("training_weight must be non-negative")
        low, high = self.target_rep_range
        if not 0 < low <= high:
            raise ValueError(f"Invalid target_rep_range: {self.target_rep_range}")

    @property
    def has_sessions(self) -> bool:
        """True once at least one BILBO session has been recorded."""
        return self.last_session_outcome is not None


@dataclass(frozen=True)
class BilboSessionRecord:
    """One logged BILBO session.  Append-only."""

    performed_at: datetime
    weight_used: float
    reps_completed: int
    notes: str = ""

    def __post_init__(self) -> None:
        """Validate session data."""
        if self.weight_used < 0:
            raise ValueError("weight_used must be non-negative")
        if self.reps_completed < 0:
            raise ValueError("reps_completed must be non-negative")

    @property
    def volume(self) -> float:
        return self.weight_used * self.reps_completed


@dataclass
class WorkoutStats:
    """Simple reduction over a set of workout samples."""

    max_weight: float = 0.0
    max_reps: int = 0
    session_count: int = 0
    last_session_at: datetime | None = None


@dataclass
class BilboStats:
    """Aggregate statistics over a BILBO session history."""

    total_sessions: int = 0
    avg_weight: float = 0.0
    max_weight: float = 0.0
    avg_reps: float = 0.0
    max_reps: int = 0
    total_volume: float = 0.0
    sessions_by_week: dict[date, int] = field(default_factory=dict)


@dataclass
class Improvement:
    """Change between the chronologically first and last sessions."""

    weight_increase: float = 0.0
    reps_increase: int = 0
    volume_increase: float = 0.0
    percentage_improvement: float = 0.0


@dataclass
class ProgressData:
    """Chronological series for progress charts."""

    weight: list[tuple[datetime, float]] = field(default_factory=list)
    reps: list[tuple[datetime, int]] = field(default_factory=list)
    volume: list[tuple[datetime, float]] = field(default_factory=list)
