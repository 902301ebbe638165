"""Shared test fixtures for stakemap tests."""

from __future__ import annotations

import pytest

from stakemap.board import BoardGeometry
from stakemap.models import ProjectConfig, StakeholderDef, ZoneConfig


@pytest.fixture
def board() -> BoardGeometry:
    """A 400 px board with point tokens: centre (200, 200), playable radius 200."""
    return BoardGeometry(board_size=400, token_radius=0)


@pytest.fixture
def config() -> ProjectConfig:
    """Four stakeholders A-D with four relationship and four impact zones."""
    return ProjectConfig(
        stakeholders=[
            StakeholderDef(id="A", label="Agency", color="#dc2626"),
            StakeholderDef(id="B", label="Bank", color="#2563eb"),
            StakeholderDef(id="C", label="City", color="#16a34a"),
            StakeholderDef(id="D", label="Donor", color="#d97706"),
        ],
        relationship_zones=[
            ZoneConfig(id="z_r1", label="Strategic"),
            ZoneConfig(id="z_r2", label="Frequent"),
            ZoneConfig(id="z_r3", label="Occasional"),
            ZoneConfig(id="z_r4", label="None"),
        ],
        impact_zones=[
            ZoneConfig(id="z_i1", label="Critical"),
            ZoneConfig(id="z_i2", label="Important"),
            ZoneConfig(id="z_i3", label="Relevant"),
            ZoneConfig(id="z_i4", label="Peripheral"),
        ],
    )
