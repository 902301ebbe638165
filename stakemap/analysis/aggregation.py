"""Aggregate placements into per-respondent and consensus summaries.

Two views over the same maths:

- ``aggregate_per_respondent`` groups by (respondent, target): how each
  stakeholder group, on average, placed every other stakeholder.
- ``aggregate_global`` groups by target only, the consensus view, blind to
  who answered.

A grouping with no placed tokens produces no ``AggregatedPoint`` at all, so
callers never see zero or NaN placeholders.  Unplaced tokens are skipped;
that is the only point where a missing position is tolerated silently.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable

from stakemap.analysis.metrics import (
    impact_score,
    normalize_distance,
    population_std_dev,
    projected_mean,
    round_half_up,
)
from stakemap.analysis.models import AggregatedPoint, PlacementTally
from stakemap.board import DEFAULT_BOARD, BoardGeometry
from stakemap.models import Coordinates, InterviewSession, MapType, Placement, ProjectConfig

logger = logging.getLogger(__name__)


def aggregate_per_respondent(
    sessions: Iterable[InterviewSession],
    mode: MapType,
    config: ProjectConfig,
    board: BoardGeometry = DEFAULT_BOARD,
) -> dict[str, dict[str, AggregatedPoint]]:
    """Summarise placements per (respondent, target).

    Returns ``{respondent_id: {target_id: AggregatedPoint}}``.  Every roster
    member appears as a respondent key (possibly with an empty dict); targets
    appear only when at least one session placed them.  Both levels follow
    roster order.
    """
    roster = config.roster_ids
    tallies: dict[str, dict[str, PlacementTally]] = {
        r: {t: PlacementTally() for t in roster} for r in roster
    }

    for session in sessions:
        row = tallies.get(session.respondent_id)
        if row is None:
            logger.warning(
                "Session %s: respondent %r is not in the roster, skipped",
                session.session_id,
                session.respondent_id,
            )
            continue
        for placement in session.placements(mode):
            _add_placement(row, placement, session.session_id, board)

    result: dict[str, dict[str, AggregatedPoint]] = {}
    for respondent, row in tallies.items():
        result[respondent] = {
            target: _summarise(target, tally, mode, board)
            for target, tally in row.items()
            if tally.count > 0
        }
    logger.debug(
        "Per-respondent %s aggregation: %d points",
        mode.value,
        sum(len(r) for r in result.values()),
    )
    return result


def aggregate_global(
    sessions: Iterable[InterviewSession],
    mode: MapType,
    config: ProjectConfig,
    board: BoardGeometry = DEFAULT_BOARD,
) -> dict[str, AggregatedPoint]:
    """Summarise placements per target across all respondents.

    Returns ``{target_id: AggregatedPoint}`` in roster order, omitting
    targets nobody placed.
    """
    tallies = {t: PlacementTally() for t in config.roster_ids}
    for session in sessions:
        for placement in session.placements(mode):
            _add_placement(tallies, placement, session.session_id, board)

    result = {
        target: _summarise(target, tally, mode, board)
        for target, tally in tallies.items()
        if tally.count > 0
    }
    logger.debug("Global %s aggregation: %d points", mode.value, len(result))
    return result


def _usable_position(placement: Placement) -> Coordinates | None:
    pos = placement.position
    if pos is None or not (math.isfinite(pos.x) and math.isfinite(pos.y)):
        return None
    return pos


def _add_placement(
    tallies: dict[str, PlacementTally],
    placement: Placement,
    session_id: str,
    board: BoardGeometry,
) -> None:
    """Fold one placement into its target's tally."""
    pos = _usable_position(placement)
    if pos is None:
        return
    tally = tallies.get(placement.id)
    if tally is None:
        logger.warning(
            "Session %s: placement for unknown stakeholder %r skipped",
            session_id,
            placement.id,
        )
        return
    distance = normalize_distance(pos, board)
    assert distance is not None
    tally.x_sum += pos.x
    tally.y_sum += pos.y
    tally.distance_sum += distance
    tally.distances.append(distance)
    tally.points.append(Coordinates(x=pos.x, y=pos.y))


def _summarise(
    target_id: str,
    tally: PlacementTally,
    mode: MapType,
    board: BoardGeometry,
) -> AggregatedPoint:
    """Turn a non-empty tally into an ``AggregatedPoint``."""
    count = tally.count
    mean_distance = tally.distance_sum / count
    avg = int(round_half_up(mean_distance))
    score = impact_score(avg) if mode == MapType.CENTRALITY else avg
    return AggregatedPoint(
        id=target_id,
        mean=projected_mean(tally.x_sum, tally.y_sum, tally.distance_sum, count, board),
        points=list(tally.points),
        mean_score=score,
        std_dev=round_half_up(population_std_dev(tally.distances), 1),
        count=count,
        mean_distance=mean_distance,
    )
