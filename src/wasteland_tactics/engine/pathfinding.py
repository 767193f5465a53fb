"""Breadth-first path finding on a 4-connected grid.

Neighbors expand in the fixed order +x, -x, +y, -y. Among several
shortest paths the one found first under that order is returned, which
makes results reproducible.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Collection

from wasteland_tactics.core.constants import NEIGHBOR_OFFSETS
from wasteland_tactics.core.logging import get_logger
from wasteland_tactics.models.grid import Point


logger = get_logger(__name__)


def find_path(
    start: Point,
    goal: Point,
    obstacles: Collection[str],
    grid_size: int = 20,
) -> list[Point]:
    """Find a shortest 4-directional path from ``start`` to ``goal``.

    Args:
        start: Starting cell (not included in the result).
        goal: Destination cell (last element of a non-empty result).
        obstacles: Blocked cells as ``"x,y"`` keys.
        grid_size: Cells outside ``[0, grid_size)`` are not traversable.

    Returns:
        The cells to step through, ending at ``goal``. Empty when
        ``start == goal`` or when no path exists, including when the goal
        itself is blocked or out of bounds.

    Example:
        >>> [p.key for p in find_path(Point(x=0, y=0), Point(x=2, y=1), set())]
        ['1,0', '2,0', '2,1']
    """
    if start == goal:
        return []
    if not goal.in_bounds(grid_size) or goal.key in obstacles:
        return []

    # parent links instead of per-node path copies
    parents: dict[Point, Point | None] = {start: None}
    queue: deque[Point] = deque([start])

    while queue:
        current = queue.popleft()
        for dx, dy in NEIGHBOR_OFFSETS:
            neighbor = current.offset(dx, dy)
            if neighbor in parents:
                continue
            if not neighbor.in_bounds(grid_size) or neighbor.key in obstacles:
                continue
            parents[neighbor] = current
            if neighbor == goal:
                return _unwind(parents, goal)
            queue.append(neighbor)

    logger.debug("No path found", start=start.key, goal=goal.key)
    return []


def _unwind(parents: dict[Point, Point | None], goal: Point) -> list[Point]:
    path: list[Point] = []
    node: Point | None = goal
    while node is not None and parents[node] is not None:
        path.append(node)
        node = parents[node]
    path.reverse()
    return path


__all__ = ["find_path"]
