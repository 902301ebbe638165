"""Relational dissonance — do two stakeholders see their relationship alike?

Only relationship-mode placements count.  For each respondent ``r`` and
target ``c`` the matrix holds the average distance at which ``r`` put ``c``
across all of ``r``'s sessions.  A pair (A, B) is then compared in both
directions: if A keeps B close but B keeps A far away, the gap is large.

A respondent's placement of themselves is ignored here even if the caller
left one in the list.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from stakemap.analysis.metrics import normalize_distance, round_half_up
from stakemap.analysis.models import DissonancePair, DistanceMatrix
from stakemap.board import DEFAULT_BOARD, BoardGeometry
from stakemap.models import InterviewSession, MapType, ProjectConfig

logger = logging.getLogger(__name__)


def build_distance_matrix(
    sessions: Iterable[InterviewSession],
    config: ProjectConfig,
    board: BoardGeometry = DEFAULT_BOARD,
) -> DistanceMatrix:
    """Build the respondent x target matrix of average relationship distance."""
    roster = config.roster_ids
    sums: dict[str, dict[str, int]] = {r: {c: 0 for c in roster} for r in roster}
    counts: dict[str, dict[str, int]] = {r: {c: 0 for c in roster} for r in roster}

    for session in sessions:
        respondent = session.respondent_id
        row_sums = sums.get(respondent)
        if row_sums is None:
            continue
        for placement in session.placements(MapType.RELATIONSHIP):
            if placement.id == respondent or placement.id not in row_sums:
                continue
            distance = normalize_distance(placement.position, board)
            if distance is None:
                continue
            row_sums[placement.id] += distance
            counts[respondent][placement.id] += 1

    values: dict[str, dict[str, int]] = {}
    for r in roster:
        values[r] = {}
        for c in roster:
            n = counts[r][c]
            values[r][c] = int(round_half_up(sums[r][c] / n)) if n > 0 else 0

    return DistanceMatrix(values=values, counts=counts, labels=list(roster))


def compute_dissonance(
    sessions: Iterable[InterviewSession],
    config: ProjectConfig,
    board: BoardGeometry = DEFAULT_BOARD,
) -> list[DissonancePair]:
    """Pairwise perception gaps, largest first.

    Each unordered pair is visited once, in roster order (A before B).  Pairs
    where neither side ever placed the other are left out.  Equal gaps keep
    roster order, so identical input always gives identical output.
    """
    matrix = build_distance_matrix(sessions, config, board)
    roster = matrix.labels
    pairs: list[DissonancePair] = []

    for i, a in enumerate(roster):
        for b in roster[i + 1 :]:
            a_count = matrix.counts[a][b]
            b_count = matrix.counts[b][a]
            if a_count == 0 and b_count == 0:
                continue
            a_to_b = matrix.values[a][b]
            b_to_a = matrix.values[b][a]
            pairs.append(
                DissonancePair(
                    a=a,
                    b=b,
                    gap=abs(a_to_b - b_to_a),
                    a_to_b=a_to_b,
                    b_to_a=b_to_a,
                    a_to_b_count=a_count,
                    b_to_a_count=b_count,
                )
            )

    # sorted() is stable: ties stay in roster order
    pairs = sorted(pairs, key=lambda p: p.gap, reverse=True)
    logger.debug("Dissonance: %d pairs from %d stakeholders", len(pairs), len(roster))
    return pairs
