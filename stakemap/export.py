"""Flat per-session rows for the raw data table and spreadsheet downloads.

Builds plain ``dict`` rows keyed by column name; turning them into CSV or any
other file format is left to the caller.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timezone

from stakemap.analysis.metrics import impact_score, normalize_distance, round_half_up
from stakemap.board import DEFAULT_BOARD, BoardGeometry
from stakemap.models import InterviewSession, Placement, ProjectConfig

_BASE_COLUMNS = ["Session ID", "Status", "Date", "Respondent Role", "Participant Notes"]

Cell = str | int


def export_columns(config: ProjectConfig) -> list[str]:
    """Column names in output order."""
    columns = list(_BASE_COLUMNS)
    for s in config.stakeholders:
        columns += [f"REL_{s.label}_Dist", f"REL_{s.label}_X", f"REL_{s.label}_Y"]
    for s in config.stakeholders:
        columns += [f"IMP_{s.label}_Score", f"IMP_{s.label}_X", f"IMP_{s.label}_Y"]
    return columns


def _format_timestamp(ms: float) -> str:
    return datetime.fromtimestamp(ms / 1000, tz=timezone.utc).strftime("%d/%m/%Y %H:%M")


def _find(placements: list[Placement], target_id: str) -> Placement | None:
    for p in placements:
        if p.id == target_id:
            return p
    return None


def export_rows(
    sessions: Iterable[InterviewSession],
    config: ProjectConfig,
    board: BoardGeometry = DEFAULT_BOARD,
) -> list[dict[str, Cell]]:
    """One row per session.

    Unplaced tokens leave their three cells empty.  A respondent has no
    relationship with themselves, so that slot reads ``0, N/A, N/A``.
    """
    rows: list[dict[str, Cell]] = []
    for session in sessions:
        row: dict[str, Cell] = {
            "Session ID": session.session_id,
            "Status": session.status.value,
            "Date": _format_timestamp(session.timestamp),
            "Respondent Role": config.label_for(session.respondent_id),
            "Participant Notes": session.notes,
        }

        for s in config.stakeholders:
            keys = (f"REL_{s.label}_Dist", f"REL_{s.label}_X", f"REL_{s.label}_Y")
            item = _find(session.relationship_map, s.id)
            if item is not None and item.position is not None:
                values: tuple[Cell, Cell, Cell] = (
                    normalize_distance(item.position, board),
                    int(round_half_up(item.position.x)),
                    int(round_half_up(item.position.y)),
                )
            elif session.respondent_id == s.id:
                values = (0, "N/A", "N/A")
            else:
                values = ("", "", "")
            row.update(zip(keys, values))

        for s in config.stakeholders:
            keys = (f"IMP_{s.label}_Score", f"IMP_{s.label}_X", f"IMP_{s.label}_Y")
            item = _find(session.centrality_map, s.id)
            if item is not None and item.position is not None:
                distance = normalize_distance(item.position, board)
                values = (
                    impact_score(distance),
                    int(round_half_up(item.position.x)),
                    int(round_half_up(item.position.y)),
                )
            else:
                values = ("", "", "")
            row.update(zip(keys, values))

        rows.append(row)
    return rows
