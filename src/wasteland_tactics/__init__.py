"""Wasteland Tactics - simulation core of a turn-based isometric tactical RPG.

The package owns the rules; a presentation layer owns the screen. The
core exposes entity positions and stats, a walkability predicate, and
notifications (HUD log lines and visual effect triggers) to render.

Example:
    >>> from wasteland_tactics import GameLoop, Point
    >>>
    >>> loop = GameLoop()
    >>> loop.click_tile(Point(x=3, y=2))  # walk one tile east
    >>> loop.advance(0.25)
    >>> loop.state.player.position
    Point(x=3, y=2)

Modules:
    core: Configuration, logging, constants and base exceptions.
    models: Pydantic V2 data model (entities, items, world, progression).
    engine: Rules, state machine, scheduler and the game loop.
"""

from __future__ import annotations

# Core
from wasteland_tactics.core.config import Settings, get_settings
from wasteland_tactics.core.exceptions import WastelandError
from wasteland_tactics.core.logging import configure_logging, get_logger

# Models
from wasteland_tactics.models import (
    Entity,
    GameMode,
    GameState,
    Item,
    Point,
    Turn,
    create_initial_state,
    create_item,
)

# Engine
from wasteland_tactics.engine import (
    ActionResult,
    DiceRoller,
    GameLoop,
    find_path,
    hit_chance,
)


__version__ = "0.1.0"
__all__ = [
    "__version__",
    # Core
    "WastelandError",
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    # Models
    "Entity",
    "GameMode",
    "GameState",
    "Item",
    "Point",
    "Turn",
    "create_initial_state",
    "create_item",
    # Engine
    "ActionResult",
    "DiceRoller",
    "GameLoop",
    "find_path",
    "hit_chance",
]
