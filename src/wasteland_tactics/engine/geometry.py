"""Isometric coordinate mapping, distances and facing.

``grid_to_screen`` projects a cell onto the isometric plane and
``screen_to_grid`` inverts it by solving the 2x2 system and flooring, so
integer cells round-trip exactly.
"""

from __future__ import annotations

import math

from wasteland_tactics.models.enums import Facing
from wasteland_tactics.models.grid import Point


DEFAULT_TILE_WIDTH = 64
DEFAULT_TILE_HEIGHT = 32

# (sign dx, sign dy) -> facing; +x is screen south-east, +y screen south-west
_STEP_FACING: dict[tuple[int, int], Facing] = {
    (1, 0): Facing.SE,
    (-1, 0): Facing.NW,
    (0, 1): Facing.SW,
    (0, -1): Facing.NE,
    (1, 1): Facing.S,
    (-1, -1): Facing.N,
    (1, -1): Facing.E,
    (-1, 1): Facing.W,
}


def grid_to_screen(
    x: int,
    y: int,
    *,
    tile_width: float = DEFAULT_TILE_WIDTH,
    tile_height: float = DEFAULT_TILE_HEIGHT,
) -> tuple[float, float]:
    """Project a grid cell to isometric screen coordinates.

    Args:
        x: Cell column.
        y: Cell row.
        tile_width: Tile width in screen units.
        tile_height: Tile height in screen units.

    Returns:
        ``(screen_x, screen_y)`` of the cell's top corner.

    Example:
        >>> grid_to_screen(1, 0)
        (32.0, 16.0)
    """
    half_w = tile_width / 2
    half_h = tile_height / 2
    return ((x - y) * half_w, (x + y) * half_h)


def screen_to_grid(
    screen_x: float,
    screen_y: float,
    *,
    tile_width: float = DEFAULT_TILE_WIDTH,
    tile_height: float = DEFAULT_TILE_HEIGHT,
) -> Point:
    """Map screen coordinates back to the grid cell containing them.

    Example:
        >>> screen_to_grid(*grid_to_screen(5, 3))
        Point(x=5, y=3)
    """
    u = screen_x / (tile_width / 2)
    v = screen_y / (tile_height / 2)
    return Point(x=math.floor((u + v) / 2), y=math.floor((v - u) / 2))


def manhattan_distance(a: Point, b: Point) -> int:
    """``|dx| + |dy|``; used for detection and melee range."""
    return abs(a.x - b.x) + abs(a.y - b.y)


def euclidean_distance(a: Point, b: Point) -> float:
    """Straight-line distance; used for pickup range."""
    return math.hypot(a.x - b.x, a.y - b.y)


def facing_for_step(dx: int, dy: int, current: Facing | None = None) -> Facing:
    """Facing an entity takes when stepping by ``(dx, dy)``.

    A zero step keeps ``current``, defaulting to south.
    """
    sign = ((dx > 0) - (dx < 0), (dy > 0) - (dy < 0))
    if sign == (0, 0):
        return current or Facing.S
    return _STEP_FACING[sign]


__all__ = [
    "grid_to_screen",
    "screen_to_grid",
    "manhattan_distance",
    "euclidean_distance",
    "facing_for_step",
]
