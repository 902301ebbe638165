"""Session lifecycle — seeding, moving tokens, and submission.

Every function returns a new ``InterviewSession``; the caller's object is
never modified.  A session accepts placements only while ``created``; the
one allowed transition is created → completed.
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Iterable, Sequence

from stakemap.analysis.metrics import zone_index
from stakemap.board import DEFAULT_BOARD, BoardGeometry, clamp_to_board
from stakemap.errors import EmptyZonesError, SessionLockedError, UnknownTargetError
from stakemap.models import (
    NOTES_MAX_CHARS,
    Coordinates,
    InterviewSession,
    MapType,
    Placement,
    ProjectConfig,
    SessionStatus,
    ZoneConfig,
)

logger = logging.getLogger(__name__)


def _now_ms() -> float:
    return time.time() * 1000


def new_session(
    project_id: str,
    respondent_id: str,
    config: ProjectConfig,
    notes: str = "",
    *,
    session_id: str | None = None,
    now: float | None = None,
) -> InterviewSession:
    """Create a session with every roster token unplaced on both maps."""
    if config.stakeholder(respondent_id) is None:
        raise UnknownTargetError(respondent_id)
    ts = _now_ms() if now is None else now
    return InterviewSession(
        session_id=session_id or f"sess_{uuid.uuid4().hex[:9]}",
        project_id=project_id,
        respondent_id=respondent_id,
        timestamp=ts,
        created_at=ts,
        status=SessionStatus.CREATED,
        notes=notes[:NOTES_MAX_CHARS],
        relationship_map=_blank_map(config),
        centrality_map=_blank_map(config),
    )


def _blank_map(config: ProjectConfig) -> list[Placement]:
    return [Placement(id=s.id) for s in config.stakeholders]


def pixel_zone_label(
    point: Coordinates,
    zones: Sequence[ZoneConfig],
    board: BoardGeometry = DEFAULT_BOARD,
) -> str:
    """Zone under a token while it is being dragged.

    The participant board bands the full board radius (not the playable
    radius), so the outer zone is reached slightly before the drag limit.
    """
    dist = min(board.distance_from_center(point), board.max_radius)
    return zones[zone_index(100 * dist / board.max_radius, len(zones))].label


def default_drop_position(
    zones: Sequence[ZoneConfig],
    board: BoardGeometry = DEFAULT_BOARD,
) -> tuple[Coordinates, str]:
    """Where a token lands when placed with a tap instead of a drag.

    Straight below the centre, in the middle of the second zone (or the
    only zone).
    """
    if not zones:
        raise EmptyZonesError()
    idx = 1 if len(zones) > 1 else 0
    fraction = (idx + 0.5) / len(zones)
    point = Coordinates(x=board.center, y=board.center + board.max_radius * fraction)
    return point, zones[idx].label


def place(
    session: InterviewSession,
    mode: MapType,
    target_id: str,
    position: Coordinates | None,
    config: ProjectConfig,
    board: BoardGeometry = DEFAULT_BOARD,
) -> InterviewSession:
    """Move *target_id*'s token on one map, or take it off with ``None``.

    The position is clamped to the playable disk and the zone label is
    recorded as shown to the participant at the moment of placement.
    """
    if session.status == SessionStatus.COMPLETED:
        raise SessionLockedError(session.session_id)
    if config.stakeholder(target_id) is None:
        raise UnknownTargetError(target_id)

    if position is None:
        updated = Placement(id=target_id)
    else:
        zones = config.zones_for(mode)
        label = pixel_zone_label(position, zones, board) if zones else None
        updated = Placement(
            id=target_id,
            position=clamp_to_board(position, board),
            zone_label=label,
        )

    current = session.placements(mode) or _blank_map(config)
    new_map = [updated if p.id == target_id else p.model_copy() for p in current]
    if not any(p.id == target_id for p in current):
        new_map.append(updated)

    field = "centrality_map" if mode == MapType.CENTRALITY else "relationship_map"
    return session.model_copy(update={field: new_map, "timestamp": _now_ms()})


def complete_session(session: InterviewSession, now: float | None = None) -> InterviewSession:
    """Submit a session.  Completing twice is an error."""
    if session.status == SessionStatus.COMPLETED:
        raise SessionLockedError(session.session_id)
    ts = _now_ms() if now is None else now
    logger.info("Session %s completed", session.session_id)
    return session.model_copy(
        update={
            "status": SessionStatus.COMPLETED,
            "timestamp": ts,
            "submitted_at": ts,
            "relationship_map": [p.model_copy() for p in session.relationship_map],
            "centrality_map": [p.model_copy() for p in session.centrality_map],
        }
    )


def filter_sessions(
    sessions: Iterable[InterviewSession],
    *,
    status: SessionStatus | None = None,
    respondent_id: str | None = None,
    search: str = "",
) -> list[InterviewSession]:
    """Sessions matching every given criterion.

    *search* is a case-insensitive substring match on notes or session id.
    """
    needle = search.lower()
    return [
        s
        for s in sessions
        if (status is None or s.status == status)
        and (respondent_id is None or s.respondent_id == respondent_id)
        and (needle in s.notes.lower() or needle in s.session_id.lower())
    ]
