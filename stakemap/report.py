"""Dashboard analysis bundle — everything the results page shows at once."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from stakemap.analysis import (
    AggregatedPoint,
    DissonancePair,
    aggregate_global,
    aggregate_per_respondent,
    compute_dissonance,
    zone_label,
)
from stakemap.board import DEFAULT_BOARD, BoardGeometry
from stakemap.models import InterviewSession, MapType, Project, SessionStatus

logger = logging.getLogger(__name__)


@dataclass
class ProjectReport:
    """Analysis results for one project snapshot."""

    project_id: str
    total_sessions: int
    completed_sessions: int
    relationships: dict[str, dict[str, AggregatedPoint]]  # respondent -> target -> point
    consensus: dict[str, AggregatedPoint]  # target -> centrality consensus
    dissonance: list[DissonancePair]
    relationship_zone_labels: dict[str, dict[str, str]] = field(default_factory=dict)

    def consensus_ranking(self) -> list[AggregatedPoint]:
        """Consensus points, most important first."""
        return sorted(self.consensus.values(), key=lambda p: p.mean_score, reverse=True)


def build_report(
    project: Project,
    sessions: Sequence[InterviewSession],
    board: BoardGeometry = DEFAULT_BOARD,
    *,
    completed_only: bool = False,
) -> ProjectReport:
    """Compute the per-respondent map, the consensus map and dissonance."""
    config = project.config
    completed = [s for s in sessions if s.status == SessionStatus.COMPLETED]
    used = completed if completed_only else list(sessions)

    relationships = aggregate_per_respondent(used, MapType.RELATIONSHIP, config, board)
    consensus = aggregate_global(used, MapType.CENTRALITY, config, board)
    dissonance = compute_dissonance(used, config, board)

    labels: dict[str, dict[str, str]] = {}
    if config.relationship_zones:
        for respondent, targets in relationships.items():
            labels[respondent] = {
                t: zone_label(p.mean_score, config.relationship_zones) for t, p in targets.items()
            }

    logger.info(
        "Report for %s: %d/%d sessions, %d consensus points, %d dissonance pairs",
        project.id,
        len(used),
        len(sessions),
        len(consensus),
        len(dissonance),
    )
    return ProjectReport(
        project_id=project.id,
        total_sessions=len(sessions),
        completed_sessions=len(completed),
        relationships=relationships,
        consensus=consensus,
        dissonance=dissonance,
        relationship_zone_labels=labels,
    )
