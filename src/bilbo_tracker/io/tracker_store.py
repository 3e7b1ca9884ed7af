"""
JSON/JSONL storage for tracked exercises.

Each tracked exercise owns three files in the data directory:

- ``<id>_state.json``      the TrackedExerciseState
- ``<id>_sessions.jsonl``  BILBO sessions, one JSON object per line
- ``<id>_workouts.jsonl``  raw workout samples used for 1RM estimation
"""

import json
import logging
import os
from pathlib import Path

from ..core.models import BilboSessionRecord, TrackedExerciseState, WorkoutSample
from .serializers import (
    ValidationError,
    dict_to_session_record,
    dict_to_state,
    dict_to_workout_sample,
    session_to_json_line,
    state_to_dict,
    validate_exercise_id,
    workout_to_json_line,
)

logger = logging.getLogger(__name__)

STATE_SUFFIX = "_state.json"


class TrackerStore:
    """
    Manages the files of one tracked exercise.

    Sessions and workouts are append-only from the engine's point of view;
    the store keeps them sorted by time on disk.
    """

    def __init__(self, data_dir: str | Path, exercise_id: str):
        """
        Initialize the store.

        Args:
            data_dir: Directory holding all tracker files
            exercise_id: Exercise identifier (file-name safe)

        Raises:
            ValidationError: If exercise_id is not file-name safe
        """
        self.data_dir = Path(data_dir)
        self.exercise_id = validate_exercise_id(exercise_id)
        self.state_path = self.data_dir / f"{self.exercise_id}{STATE_SUFFIX}"
        self.sessions_path = self.data_dir / f"{self.exercise_id}_sessions.jsonl"
        self.workouts_path = self.data_dir / f"{self.exercise_id}_workouts.jsonl"

    def exists(self) -> bool:
        """Check if the exercise is tracked (state file exists)."""
        return self.state_path.exists()

    def init(self, state: TrackedExerciseState) -> None:
        """
        Create the files for a newly tracked exercise.

        Creates parent directories if needed.  Existing history files are
        left untouched.
        """
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.save_state(state)
        for path in (self.sessions_path, self.workouts_path):
            if not path.exists():
                path.touch()

    # -----------------------------------------------------------------------
    # State
    # -----------------------------------------------------------------------

    def load_state(self) -> TrackedExerciseState:
        """
        Load the tracked state.

        Raises:
            FileNotFoundError: If the exercise is not tracked
            ValidationError: If the file is invalid
        """
        if not self.state_path.exists():
            raise FileNotFoundError(
                f"Exercise '{self.exercise_id}' is not tracked ({self.state_path}). Run 'track' first."
            )
        try:
            with open(self.state_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Error parsing {self.state_path}: {e}") from e
        return dict_to_state(data)

    def save_state(self, state: TrackedExerciseState) -> None:
        """Write the tracked state."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        with open(self.state_path, "w", encoding="utf-8") as f:
            json.dump(state_to_dict(state), f, indent=2, ensure_ascii=False)
        logger.debug("Saved state for %s to %s", self.exercise_id, self.state_path)

    # -----------------------------------------------------------------------
    # Sessions
    # -----------------------------------------------------------------------

    def load_sessions(self) -> list[BilboSessionRecord]:
        """
        Load all BILBO sessions, sorted by time.

        Returns:
            Sessions (empty list if the file does not exist yet)

        Raises:
            ValidationError: If a line is invalid
        """
        return sorted(
            self._read_jsonl(self.sessions_path, dict_to_session_record),
            key=lambda s: s.performed_at,
        )

    def append_session(self, record: BilboSessionRecord) -> None:
        """
        Append a session, keeping the file in chronological order.

        Raises:
            FileNotFoundError: If the exercise is not tracked
        """
        self._require_tracked()
        sessions = self.load_sessions()
        sessions.append(record)
        sessions.sort(key=lambda s: s.performed_at)
        self._write_lines(self.sessions_path, [session_to_json_line(s) for s in sessions])
        logger.debug("Appended session for %s (%d total)", self.exercise_id, len(sessions))

    # -----------------------------------------------------------------------
    # Workouts
    # -----------------------------------------------------------------------

    def load_workouts(self) -> list[WorkoutSample]:
        """
        Load all workout samples, sorted by time.

        Raises:
            ValidationError: If a line is invalid
        """
        return sorted(
            self._read_jsonl(self.workouts_path, dict_to_workout_sample),
            key=lambda s: s.performed_at,
        )

    def append_workout(self, sample: WorkoutSample) -> None:
        """
        Append a workout sample, keeping the file in chronological order.

        Raises:
            FileNotFoundError: If the exercise is not tracked
        """
        self._require_tracked()
        workouts = self.load_workouts()
        workouts.append(sample)
        workouts.sort(key=lambda s: s.performed_at)
        self._write_lines(self.workouts_path, [workout_to_json_line(w) for w in workouts])

    # -----------------------------------------------------------------------
    # Lifecycle
    # -----------------------------------------------------------------------

    def delete(self) -> None:
        """Stop tracking: remove state, sessions and workouts."""
        for path in (self.state_path, self.sessions_path, self.workouts_path):
            if path.exists():
                path.unlink()
        logger.debug("Deleted all files for %s", self.exercise_id)

    # -----------------------------------------------------------------------
    # Internal helpers
    # -----------------------------------------------------------------------

    def _require_tracked(self) -> None:
        if not self.exists():
            raise FileNotFoundError(
                f"Exercise '{self.exercise_id}' is not tracked ({self.state_path}). Run 'track' first."
            )

    @staticmethod
    def _read_jsonl(path: Path, convert):
        if not path.exists():
            return []

        items = []
        with open(path, "r", encoding="utf-8") as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue
                try:
                    items.append(convert(json.loads(line)))
                except (json.JSONDecodeError, ValidationError) as e:
                    raise ValidationError(f"Error parsing line {line_num} in {path}: {e}") from e
        return items

    @staticmethod
    def _write_lines(path: Path, lines: list[str]) -> None:
        with open(path, "w", encoding="utf-8") as f:
            for line in lines:
                f.write(line + "\n")


def list_tracked(data_dir: str | Path) -> list[str]:
    """
    List tracked exercise ids in a data directory.

    Returns:
        Sorted exercise ids (empty if the directory does not exist)
    """
    base = Path(data_dir)
    if not base.is_dir():
        return []
    return sorted(p.name[: -len(STATE_SUFFIX)] for p in base.glob(f"*{STATE_SUFFIX}"))


def get_default_data_dir() -> Path:
    """
    Get the default data directory.

    ``$BILBO_TRACKER_HOME`` when set, ``~/.bilbo-tracker`` otherwise.
    """
    home = os.environ.get("BILBO_TRACKER_HOME")
    if home:
        return Path(home).expanduser()
    return Path.home() / ".bilbo-tracker"
