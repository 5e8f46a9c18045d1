from .layout import (  # noqa: F401
    CellType,
    ConnectivityStrategy,
    CorridorStyle,
    DeadEndPolicy,
    Door,
    DoorOrientation,
    DungeonConfig,
    DungeonGrid,
    DungeonPipeline,
    MaskShape,
    PlacementStrategy,
    Room,
    RoomSizeBias,
    Stair,
    ValidationError,
    generate,
    generate_from_outline,
)
from .walls import WallBuilder, WallSegment, build_walls, merge_segments  # noqa: F401

__version__ = "0.1.0"

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
    "MaskShape",
    "PlacementStrategy",
    "Room",
    "RoomSizeBias",
    "Stair",
    "ValidationError",
    "WallBuilder",
    "WallSegment",
    "build_walls",
    "generate",
    "generate_from_outline",
    "merge_segments",
]
