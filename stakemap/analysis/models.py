"""Data structures for aggregation and dissonance results.

These are plain dataclasses (not Pydantic) since they're ephemeral, recomputed
from the current session snapshot on every call, and never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from stakemap.models import Coordinates


@dataclass
class PlacementTally:
    """Running sums for one (respondent, target) or (target) grouping."""

    x_sum: float = 0.0
    y_sum: float = 0.0
    distance_sum: int = 0
    points: list[Coordinates] = field(default_factory=list)
    distances: list[int] = field(default_factory=list)  # normalised, one per session

    @property
    def count(self) -> int:
        return len(self.points)


@dataclass
class AggregatedPoint:
    """Summary of every placement of one target within a grouping."""

    id: str  # target stakeholder id
    mean: Coordinates  # projected mean, on the circle of the average distance
    points: list[Coordinates]
    mean_score: int  # 0-100; inverted (100 - distance) in centrality mode
    std_dev: float  # population std dev of normalised distances, 1 decimal
    count: int
    mean_distance: float = 0.0  # unrounded average normalised distance


@dataclass
class DistanceMatrix:
    """Average normalised distance respondent ``row`` gave target ``col``.

    Cells without data hold 0 in ``values`` and 0 in ``counts``.
    """

    values: dict[str, dict[str, int]] = field(default_factory=dict)
    counts: dict[str, dict[str, int]] = field(default_factory=dict)
    labels: list[str] = field(default_factory=list)


@dataclass
class DissonancePair:
    """Mismatch between how two stakeholders place each other."""

    a: str
    b: str
    gap: int  # |a_to_b - b_to_a|
    a_to_b: int  # average distance at which a placed b (0 when a never did)
    b_to_a: int
    a_to_b_count: int = 0
    b_to_a_count: int = 0

    @property
    def is_mutual(self) -> bool:
        """Both directions are backed by at least one placement."""
        return self.a_to_b_count > 0 and self.b_to_a_count > 0
