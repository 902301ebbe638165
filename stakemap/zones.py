"""Zone palettes and the default project configuration."""

from __future__ import annotations

import re

from stakemap.models import ProjectConfig, StakeholderDef, ZoneConfig

PALETTE = [
    "#dc2626", "#ea580c", "#d97706", "#ca8a04",
    "#65a30d", "#16a34a", "#059669", "#0d9488",
    "#0891b2", "#2563eb", "#4f46e5", "#7c3aed",
    "#9333ea", "#c026d3", "#db2777", "#e11d48",
]

# Pastel (100) zone backgrounds, mapped to their saturated (600) accent
THEME_ACCENTS: dict[str, str] = {
    "#d1fae5": "#059669",  # emerald
    "#ccfbf1": "#0d9488",  # teal
    "#e0f2fe": "#0284c7",  # sky
    "#dbeafe": "#2563eb",  # blue
    "#e0e7ff": "#4f46e5",  # indigo
    "#ede9fe": "#7c3aed",  # violet
    "#fae8ff": "#c026d3",  # fuchsia
    "#ffe4e6": "#e11d48",  # rose
    "#fee2e2": "#dc2626",  # red
    "#ffedd5": "#ea580c",  # orange
    "#fef3c7": "#d97706",  # amber
    "#ecfccb": "#65a30d",  # lime
}
THEME_COLORS = list(THEME_ACCENTS)

DEFAULT_ACCENT = "#2563eb"
FIXED_PENULTIMATE_COLOR = "#f9fafc"
WHITE = "#ffffff"

# Stakeholder colour is lightened this much to tint its zone background
STAKEHOLDER_TINT = 0.85

_HEX_RE = re.compile(r"^#?([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})$", re.IGNORECASE)
_SHORT_HEX_RE = re.compile(r"^#?([0-9a-f])([0-9a-f])([0-9a-f])$", re.IGNORECASE)
_VALID_HEX_RE = re.compile(r"^#([0-9a-f]{6}|[0-9a-f]{3})$", re.IGNORECASE)


def is_valid_hex_color(color: str | None) -> bool:
    return bool(color) and _VALID_HEX_RE.match(color) is not None


def _hex_to_rgb(color: str) -> tuple[int, int, int]:
    """Parse ``#rgb`` or ``#rrggbb``; anything else reads as white."""
    short = _SHORT_HEX_RE.match(color)
    if short:
        color = "".join(c * 2 for c in short.groups())
    m = _HEX_RE.match(color)
    if m is None:
        return (255, 255, 255)
    r, g, b = (int(part, 16) for part in m.groups())
    return (r, g, b)


def _rgb_to_hex(r: int, g: int, b: int) -> str:
    return f"#{r:02x}{g:02x}{b:02x}"


def _mix(a: int, b: int, factor: float) -> int:
    # Half-up, to match the colours the board renders
    return int(a + factor * (b - a) + 0.5)


def interpolate_color(color1: str, color2: str, factor: float) -> str:
    """Blend from *color1* (factor 0) to *color2* (factor 1)."""
    c1 = _hex_to_rgb(color1)
    c2 = _hex_to_rgb(color2)
    return _rgb_to_hex(*(_mix(a, b, factor) for a, b in zip(c1, c2)))


def lighten_color(color: str, factor: float) -> str:
    """Tint towards white: 0 = unchanged, 1 = white."""
    return interpolate_color(color, WHITE, factor)


def theme_accent(theme_color: str) -> str:
    return THEME_ACCENTS.get(theme_color.lower(), DEFAULT_ACCENT)


def apply_gradient_to_zones(zones: list[ZoneConfig], start_color: str) -> list[ZoneConfig]:
    """Recolour zones from *start_color* at the centre fading to white at the edge.

    The outermost zone is always white and, with three or more zones, the one
    inside it is always ``FIXED_PENULTIMATE_COLOR``.  Returns new zone objects.
    """
    n = len(zones)
    if n == 0:
        return []
    if n == 1:
        return [zones[0].model_copy(update={"color": start_color})]
    if n == 2:
        return [
            zones[0].model_copy(update={"color": start_color}),
            zones[1].model_copy(update={"color": WHITE}),
        ]

    pivot = n - 2
    recoloured: list[ZoneConfig] = []
    for idx, zone in enumerate(zones):
        if idx == n - 1:
            color = WHITE
        elif idx == pivot:
            color = FIXED_PENULTIMATE_COLOR
        elif idx == 0:
            color = start_color
        else:
            color = interpolate_color(start_color, FIXED_PENULTIMATE_COLOR, idx / pivot)
        recoloured.append(zone.model_copy(update={"color": color}))
    return recoloured


def zones_for_respondent(config: ProjectConfig, respondent_id: str) -> list[ZoneConfig]:
    """Relationship zones as drawn on one respondent's aggregated map.

    With stakeholder colouring on, the zones are re-tinted from a light
    version of the respondent's own colour.
    """
    zones = config.relationship_zones
    if not config.use_stakeholder_colors:
        return [z.model_copy() for z in zones]
    respondent = config.stakeholder(respondent_id)
    if respondent is None or not is_valid_hex_color(respondent.color):
        return [z.model_copy() for z in zones]
    return apply_gradient_to_zones(zones, lighten_color(respondent.color, STAKEHOLDER_TINT))


def default_project_config() -> ProjectConfig:
    """A fresh four-stakeholder configuration for new projects."""
    relationship = [
        ZoneConfig(id="z_r1", label="Strategic"),
        ZoneConfig(id="z_r2", label="Frequent"),
        ZoneConfig(id="z_r3", label="Occasional"),
        ZoneConfig(id="z_r4", label="None"),
    ]
    impact = [
        ZoneConfig(id="z_i1", label="Critical"),
        ZoneConfig(id="z_i2", label="Important"),
        ZoneConfig(id="z_i3", label="Relevant"),
        ZoneConfig(id="z_i4", label="Peripheral"),
    ]
    return ProjectConfig(
        stakeholders=[
            StakeholderDef(id="sh_1", label="Stakeholder 1", color="#dc2626"),
            StakeholderDef(id="sh_2", label="Stakeholder 2", color="#2563eb"),
            StakeholderDef(id="sh_3", label="Stakeholder 3", color="#16a34a"),
            StakeholderDef(id="sh_4", label="Stakeholder 4", color="#d97706"),
        ],
        relationship_zones=apply_gradient_to_zones(relationship, THEME_COLORS[0]),
        impact_zones=apply_gradient_to_zones(impact, THEME_COLORS[3]),
        use_stakeholder_colors=False,
    )
