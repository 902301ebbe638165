"""Low-level geometry and statistics for placement analysis.

Pure arithmetic: no I/O, no session handling.  The aggregators and the
dissonance calculator call these.

Rounding follows the dashboard's convention of half-up (``2.5 → 3``), not
Python's banker's rounding, so scores match what participants were shown.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from stakemap.board import DEFAULT_BOARD, BoardGeometry
from stakemap.errors import EmptyZonesError
from stakemap.models import Coordinates, ZoneConfig

# Below this centroid length (px) the average direction is meaningless
DEGENERATE_CENTROID_PX = 0.1


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round with ties going towards +infinity."""
    factor = 10**ndigits
    return math.floor(value * factor + 0.5) / factor


def normalize_distance(
    position: Coordinates | None,
    board: BoardGeometry = DEFAULT_BOARD,
) -> int | None:
    """Distance of *position* from the board centre on a 0–100 scale.

    100 means the edge of the playable disk.  Points a drag left slightly
    outside are clamped to 100.  Returns ``None`` for an unplaced token.
    """
    if position is None:
        return None
    if board.playable_radius <= 0:
        return 0
    ratio = board.distance_from_center(position) / board.playable_radius
    return int(round_half_up(100 * max(0.0, min(1.0, ratio))))


def impact_score(distance: int) -> int:
    """Importance on a 0–100 scale: the closer to the centre, the higher."""
    return 100 - distance


def zone_index(distance: float, zone_count: int) -> int:
    """Index of the zone band holding *distance*, innermost = 0.

    Bands are equal-width slices of 0–100.  Anything at or past the outer
    edge lands in the last band; negatives land in the first.
    """
    if zone_count <= 0:
        raise EmptyZonesError()
    index = math.floor(distance * zone_count / 100)
    return max(0, min(index, zone_count - 1))


def zone_label(distance: float, zones: Sequence[ZoneConfig]) -> str:
    """Label of the configured zone holding *distance*."""
    return zones[zone_index(distance, len(zones))].label


def population_std_dev(values: Sequence[float]) -> float:
    """Population standard deviation (divides by N, not N-1).

    Returns 0 for an empty sequence.
    """
    if not values:
        return 0.0
    mean = sum(values) / len(values)
    variance = sum((v - mean) ** 2 for v in values) / len(values)
    return math.sqrt(variance)


def projected_mean(
    x_sum: float,
    y_sum: float,
    distance_sum: float,
    count: int,
    board: BoardGeometry = DEFAULT_BOARD,
) -> Coordinates:
    """Average position that keeps the average *distance* intact.

    The raw centroid of points spread around the centre collapses inwards
    (opposite vectors cancel), which would misreport how far out the target
    was placed.  Instead the centroid only supplies a direction; the result
    sits at exactly the average normalised distance, converted back to pixels.

    A centroid within ``DEGENERATE_CENTROID_PX`` of the centre has no usable
    direction, so the point is put straight up from the centre.

    ``count`` must be positive.
    """
    avg_distance = distance_sum / count
    target_radius = (avg_distance / 100) * board.playable_radius

    vx = x_sum / count - board.center
    vy = y_sum / count - board.center
    centroid_dist = math.hypot(vx, vy)

    if centroid_dist < DEGENERATE_CENTROID_PX:
        return Coordinates(x=board.center, y=board.center - target_radius)

    scale = target_radius / centroid_dist
    return Coordinates(x=board.center + vx * scale, y=board.center + vy * scale)
