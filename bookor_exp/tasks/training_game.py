from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Optional, Tuple

from constants import (
    TRAINING_GRID_COLUMNS,
    TRAINING_GRID_ROWS,
    TRAINING_MARKER_COUNT,
    TRAINING_MAX_ATTEMPTS,
    TRAINING_MIN_DISTANCE,
    TRAINING_REGION_HEIGHT,
    TRAINING_REGION_WIDTH,
    dot_image,
)
from utils.dev_log import dev_log


@dataclass
class Marker:
    id: str
    x: int
    y: int
    image: str
    cleared: bool = False


def _too_close(x: int, y: int, placed: List[Marker], min_distance: int) -> bool:
    return any(abs(m.x - x) + abs(m.y - y) < min_distance for m in placed)


def place_markers(
    count: int = TRAINING_MARKER_COUNT,
    rng: Optional[random.Random] = None,
    width: int = TRAINING_REGION_WIDTH,
    height: int = TRAINING_REGION_HEIGHT,
    min_distance: int = TRAINING_MIN_DISTANCE,
    max_attempts: int = TRAINING_MAX_ATTEMPTS,
) -> List[Marker]:
    """
    Rejection-sample `count` marker positions in [0, width) x [0, height).

    No two markers are closer than `min_distance` (Manhattan). Raises
    RuntimeError when a marker cannot be placed within `max_attempts` draws.
    """
    rng = rng or random
    placed: List[Marker] = []
    for i in range(1, count + 1):
        for _ in range(max_attempts):
            x = rng.randrange(width)
            y = rng.randrange(height)
            if not _too_close(x, y, placed, min_distance):
                placed.append(Marker(id=f"dot_{i}", x=x, y=y, image=dot_image(i)))
                break
        else:
            raise RuntimeError(
                f"[TRAINING] Could not place marker {i} of {count} in a {width}x{height} region "
                f"with min distance {min_distance} after {max_attempts} attempts."
            )
    return placed


class TrainingGame:
    """Touch-competence check: every marker must be dismissed once."""

    def __init__(self, count: int = TRAINING_MARKER_COUNT, rng: Optional[random.Random] = None) -> None:
        self.count = count
        self.rng = rng
        self.markers: List[Marker] = []
        self.remaining = 0
        self.state = "idle"

    def start(self) -> List[Marker]:
        self.state = "placing"
        self.markers = place_markers(self.count, rng=self.rng)
        self.remaining = len(self.markers)
        self.state = "awaiting"
        dev_log("TRAINING", f"placed {[(m.id, m.x, m.y) for m in self.markers]}")
        return self.markers

    def clear(self, marker_id: str) -> bool:
        """Dismiss a marker. Returns False for unknown or already-cleared markers."""
        if self.state != "awaiting":
            return False
        marker = next((m for m in self.markers if m.id == marker_id), None)
        if marker is None or marker.cleared:
            return False
        marker.cleared = True
        self.remaining -= 1
        if self.remaining == 0:
            self.markers = []
            self.state = "done"
        return True

    @property
    def done(self) -> bool:
        return self.state == "done"


def grid_cell(
    marker: Marker,
    columns: int = TRAINING_GRID_COLUMNS,
    rows: int = TRAINING_GRID_ROWS,
    width: int = TRAINING_REGION_WIDTH,
    height: int = TRAINING_REGION_HEIGHT,
) -> Tuple[int, int]:
    """Map a marker position to a (row, column) cell of the render grid."""
    col = min(columns - 1, marker.x * columns // width)
    row = min(rows - 1, marker.y * rows // height)
    return row, col
