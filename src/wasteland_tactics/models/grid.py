"""Grid cell coordinates.

A Point is a value object: immutable, hashable, and convertible to and
from the ``"x,y"`` keys used for obstacle sets.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Point(BaseModel):
    """A grid cell coordinate.

    Attributes:
        x: Column index.
        y: Row index.

    Example:
        >>> Point(x=3, y=4).key
        '3,4'
        >>> Point.from_key("3,4") == Point(x=3, y=4)
        True
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    x: int = Field(description="Column index")
    y: int = Field(description="Row index")

    @property
    def key(self) -> str:
        """Obstacle-set key of this cell."""
        return cell_key(self.x, self.y)

    @classmethod
    def from_key(cls, key: str) -> Point:
        """Parse an ``"x,y"`` key back into a Point.

        Raises:
            ValueError: If the key is not two comma-separated integers.
        """
        raw_x, sep, raw_y = key.partition(",")
        if not sep:
            raise ValueError(f"Invalid cell key: {key!r}")
        return cls(x=int(raw_x), y=int(raw_y))

    def offset(self, dx: int, dy: int) -> Point:
        """Return the cell displaced by ``(dx, dy)``."""
        return Point(x=self.x + dx, y=self.y + dy)

    def in_bounds(self, grid_size: int) -> bool:
        """Check whether the cell lies inside a ``grid_size`` square map."""
        return 0 <= self.x < grid_size and 0 <= self.y < grid_size

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"


def cell_key(x: int, y: int) -> str:
    """Build the ``"x,y"`` key used in obstacle sets."""
    return f"{x},{y}"


__all__ = ["Point", "cell_key"]
