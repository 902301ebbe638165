"""Exceptions raised when callers break the core's input contract."""

from __future__ import annotations


class StakemapError(Exception):
    """Base class for all stakemap errors."""


class SessionLockedError(StakemapError):
    """A completed session was asked to change."""

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session {session_id!r} is completed and can no longer change")
        self.session_id = session_id


class UnknownTargetError(StakemapError, KeyError):
    """A stakeholder id is not part of the project roster."""

    def __init__(self, target_id: str) -> None:
        super().__init__(f"Stakeholder {target_id!r} is not in the project roster")
        self.target_id = target_id

    def __str__(self) -> str:
        return self.args[0]


class EmptyZonesError(StakemapError, ValueError):
    """A zone lookup was attempted against an empty zone list."""

    def __init__(self) -> None:
        super().__init__("At least one zone is required to classify a distance")
