"""Layout generation package.

Stages (mask, rooms, connectivity, pruning, exits, stairs, doors) each live in
their own module and operate on a shared ``DungeonGrid``; ``pipeline`` wires
them together.
"""
from .config import (  # noqa: F401
    ConnectivityStrategy,
    CorridorStyle,
    DeadEndPolicy,
    DungeonConfig,
    MaskShape,
    PlacementStrategy,
    RoomSizeBias,
)
from .models import Door, DoorOrientation, DungeonGrid, Room, Stair  # noqa: F401
from .pipeline import DungeonPipeline, generate, generate_from_outline  # noqa: F401
from .tiles import EMPTY, FLOOR, WALL, CellType  # noqa: F401
from .validation import ValidationError  # noqa: F401

__all__ = [
    "CellType",
    "ConnectivityStrategy",
    "CorridorStyle",
    "DeadEndPolicy",
    "Door",
    "DoorOrientation",
    "DungeonConfig",
    "DungeonGrid",
    "DungeonPipeline",
    "EMPTY",
    "FLOOR",
    "MaskShape",
    "PlacementStrategy",
    "Room",
    "RoomSizeBias",
    "Stair",
    "ValidationError",
    "WALL",
    "generate",
    "generate_from_outline",
]
