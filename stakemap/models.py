"""Pydantic models for project configuration and interview sessions.

These mirror the documents the persistence layer stores.  Field names are
snake_case in Python and camelCase on the wire (``respondentId``,
``relationshipMap`` ...); both spellings validate.
"""

from __future__ import annotations

import logging
import math
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

NOTES_MAX_CHARS = 500


class SessionStatus(str, Enum):
    """Lifecycle of an interview session."""

    CREATED = "created"
    COMPLETED = "completed"


class MapType(str, Enum):
    """Which of a session's two placement lists to read.

    Relationship mode: distance from centre = how close the respondent works
    with each stakeholder.  Centrality mode: distance from centre = how
    peripheral the stakeholder is (inverted into an impact score).
    """

    RELATIONSHIP = "relationshipMap"
    CENTRALITY = "centralityMap"


class _Model(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Coordinates(_Model):
    x: float
    y: float


class ZoneConfig(_Model):
    """One labelled band of distance, ordered innermost first."""

    id: str
    label: str
    color: str = ""


class StakeholderDef(_Model):
    id: str  # e.g. "sh_1"
    label: str  # display name, e.g. "ECB"
    color: str = ""


class ProjectConfig(_Model):
    """Roster and zone configuration for one project."""

    stakeholders: list[StakeholderDef] = Field(default_factory=list)
    relationship_zones: list[ZoneConfig] = Field(default_factory=list)
    impact_zones: list[ZoneConfig] = Field(default_factory=list)
    use_stakeholder_colors: bool = False

    @property
    def roster_ids(self) -> list[str]:
        return [s.id for s in self.stakeholders]

    def stakeholder(self, stakeholder_id: str) -> StakeholderDef | None:
        for s in self.stakeholders:
            if s.id == stakeholder_id:
                return s
        return None

    def label_for(self, stakeholder_id: str) -> str:
        """Display label for an id, falling back to the id itself."""
        s = self.stakeholder(stakeholder_id)
        return s.label if s is not None else stakeholder_id

    def zones_for(self, mode: MapType) -> list[ZoneConfig]:
        if mode == MapType.CENTRALITY:
            return self.impact_zones
        return self.relationship_zones


class Project(_Model):
    id: str
    name: str
    description: str = ""
    icon: str = "📁"
    icon_type: str = "emoji"  # "emoji" or "image"
    created_at: float = 0
    config: ProjectConfig = Field(default_factory=ProjectConfig)


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


class Placement(_Model):
    """One respondent's placement of one stakeholder token.

    ``position is None`` means "not yet placed", never the origin.
    """

    id: str  # stakeholder id of the placed token
    position: Coordinates | None = None
    zone_label: str | None = None

    @field_validator("position", mode="before")
    @classmethod
    def _drop_malformed_position(cls, value: Any) -> Any:
        if value is None or isinstance(value, Coordinates):
            return value
        if isinstance(value, dict) and _is_number(value.get("x")) and _is_number(value.get("y")):
            return value
        logger.debug("Treating malformed position %r as unplaced", value)
        return None

    @property
    def is_placed(self) -> bool:
        return self.position is not None


class InterviewSession(_Model):
    """One respondent's answers: a relationship map and a centrality map."""

    session_id: str
    project_id: str = ""
    respondent_id: str  # stakeholder id of the person answering
    participant_uid: str | None = None
    timestamp: float = 0  # ms since epoch, last change
    created_at: float | None = None
    submitted_at: float | None = None
    status: SessionStatus = SessionStatus.CREATED
    notes: str = ""
    relationship_map: list[Placement] = Field(default_factory=list)
    centrality_map: list[Placement] = Field(default_factory=list)

    @field_validator("relationship_map", "centrality_map", mode="before")
    @classmethod
    def _missing_map_is_empty(cls, value: Any) -> Any:
        # The realtime store drops empty arrays, so a map can arrive as null
        return [] if value is None else value

    @field_validator("notes", mode="before")
    @classmethod
    def _missing_notes_is_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    def placements(self, mode: MapType) -> list[Placement]:
        if mode == MapType.CENTRALITY:
            return self.centrality_map
        return self.relationship_map


class Snapshot(_Model):
    """A project plus every session recorded against it."""

    project: Project
    sessions: list[InterviewSession] = Field(default_factory=list)


def load_snapshot(path: Path) -> Snapshot:
    """Read a snapshot JSON document exported by the persistence layer."""
    snapshot = Snapshot.model_validate_json(path.read_text(encoding="utf-8"))
    logger.info(
        "Loaded project %s with %d sessions from %s",
        snapshot.project.id,
        len(snapshot.sessions),
        path,
    )
    return snapshot
