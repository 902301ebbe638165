"""Board geometry — the disk every placement lives on.

Coordinates are SVG pixels with the origin at the top-left of a square board,
so the centre sits at ``(board_size / 2, board_size / 2)`` and *y grows
downwards*.  A token's centre may travel at most ``playable_radius`` from the
centre so the whole token stays inside the disk.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from stakemap.models import Coordinates

BOARD_SIZE = 600
TOKEN_RADIUS = 24


@dataclass(frozen=True)
class BoardGeometry:
    """Square board with an inscribed circular playing area."""

    board_size: float = BOARD_SIZE
    token_radius: float = TOKEN_RADIUS

    @property
    def center(self) -> float:
        return self.board_size / 2

    @property
    def max_radius(self) -> float:
        return self.board_size / 2

    @property
    def playable_radius(self) -> float:
        return self.max_radius - self.token_radius

    def distance_from_center(self, point: Coordinates) -> float:
        """Euclidean pixel distance of *point* from the board centre."""
        return math.hypot(point.x - self.center, point.y - self.center)


DEFAULT_BOARD = BoardGeometry()


def clamp_to_board(point: Coordinates, board: BoardGeometry = DEFAULT_BOARD) -> Coordinates:
    """Pull *point* back onto the playable disk along its own angle.

    Points already inside are returned as a fresh copy, never the same object.
    """
    dx = point.x - board.center
    dy = point.y - board.center
    dist = math.hypot(dx, dy)
    limit = board.playable_radius
    if dist <= limit:
        return Coordinates(x=point.x, y=point.y)
    angle = math.atan2(dy, dx)
    return Coordinates(
        x=board.center + limit * math.cos(angle),
        y=board.center + limit * math.sin(angle),
    )
