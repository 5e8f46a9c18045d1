"""Generation options.

``DungeonConfig`` carries every knob the pipeline reads. Strategy selectors are
closed string enums so a config built from loose option dicts is checked once,
up front, instead of at each stage.

Override precedence (lowest first): dataclass defaults, explicit options,
``DUNGEONGEN_*`` environment variables (a ``.env`` file is honoured), then the
Flask application config when an app context is active.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from dotenv import load_dotenv

from .validation import ValidationError, coerce_choice, validate_dimensions, validate_int, validate_range

# Allow DUNGEONGEN_* to be supplied from a local .env during development.
load_dotenv()


class MaskShape(str, Enum):
    RECTANGLE = "rectangle"
    ROUND = "round"
    CROSS = "cross"
    KEEP = "keep"
    CAVERNOUS = "cavernous"


class PlacementStrategy(str, Enum):
    STANDARD = "standard"
    RELAXATION = "relaxation"
    SYMMETRIC = "symmetric"


class RoomSizeBias(str, Enum):
    SMALL = "small"
    BALANCED = "balanced"
    LARGE = "large"


class ConnectivityStrategy(str, Enum):
    MST = "mst"
    MST_LOOPS = "mst_loops"
    FULL = "full"


class CorridorStyle(str, Enum):
    STRAIGHT = "straight"
    L_PATH = "l_path"
    ERRANT = "errant"


class DeadEndPolicy(str, Enum):
    NONE = "none"
    SOME = "some"
    ALL = "all"


_CHOICES = {
    "mask_shape": MaskShape,
    "placement": PlacementStrategy,
    "room_size_bias": RoomSizeBias,
    "connectivity": ConnectivityStrategy,
    "corridor_style": CorridorStyle,
    "dead_end_removal": DeadEndPolicy,
}

# Original host option names -> field names
_OPTION_ALIASES = {
    "maskType": "mask_shape",
    "mask": "mask_shape",
    "numRooms": "num_rooms",
    "minRoomSize": "min_room_size",
    "maxRoomSize": "max_room_size",
    "roomSizeBias": "room_size_bias",
    "placementAlgorithm": "placement",
    "corridorStyle": "corridor_style",
    "deadEndRemoval": "dead_end_removal",
    "peripheralEgress": "peripheral_egress",
    "doorDensity": "door_density",
    "wallBand": "wall_band",
    "errantNoise": "errant_noise",
    "enableMetrics": "enable_metrics",
}

_ENV_OVERRIDES = {
    "DUNGEONGEN_SEED": ("seed", int),
    "DUNGEONGEN_MASK": ("mask_shape", str),
    "DUNGEONGEN_DOOR_DENSITY": ("door_density", float),
    "DUNGEONGEN_DEAD_ENDS": ("dead_end_removal", str),
    "DUNGEONGEN_ENABLE_METRICS": ("enable_metrics", bool),
}


def _env_bool(raw: str) -> bool:
    return raw.strip().lower() not in {"0", "false", "no", "off", ""}


@dataclass
class DungeonConfig:
    width: int = 60
    height: int = 60
    mask_shape: MaskShape = MaskShape.RECTANGLE
    num_rooms: Optional[int] = None
    density: float = 0.4
    min_room_size: int = 6
    max_room_size: int = 12
    room_size_bias: RoomSizeBias = RoomSizeBias.BALANCED
    placement: PlacementStrategy = PlacementStrategy.STANDARD
    connectivity: ConnectivityStrategy = ConnectivityStrategy.MST_LOOPS
    corridor_style: CorridorStyle = CorridorStyle.L_PATH
    dead_end_removal: DeadEndPolicy = DeadEndPolicy.NONE
    peripheral_egress: bool = False
    door_density: float = 1.0
    errant_noise: float = 0.2
    stairs_up: int = 1
    stairs_down: int = 1
    wall_band: int = 1
    seed: Optional[int] = None
    enable_metrics: bool = True

    def __post_init__(self):
        self.validate()

    def validate(self) -> "DungeonConfig":
        self.width, self.height = validate_dimensions(self.width, self.height)
        for name, enum_cls in _CHOICES.items():
            setattr(self, name, coerce_choice(getattr(self, name), enum_cls, name))
        if self.seed is not None:
            self.seed = validate_int(self.seed, "seed")
        if self.num_rooms is not None:
            self.num_rooms = validate_int(self.num_rooms, "num_rooms", 0)
        validate_range(self.density, "density", 0.0)
        self.min_room_size = validate_int(self.min_room_size, "min_room_size", 1)
        self.max_room_size = validate_int(self.max_room_size, "max_room_size", 1)
        if self.max_room_size < self.min_room_size:
            raise ValidationError("max_room_size", "must be >= min_room_size", "range")
        validate_range(self.door_density, "door_density", 0.0, 1.0)
        validate_range(self.errant_noise, "errant_noise", 0.0)
        self.stairs_up = validate_int(self.stairs_up, "stairs_up", 0)
        self.stairs_down = validate_int(self.stairs_down, "stairs_down", 0)
        self.wall_band = validate_int(self.wall_band, "wall_band", 0)
        return self

    @classmethod
    def from_options(cls, options: Mapping[str, Any] | None = None, **overrides) -> "DungeonConfig":
        """Build a config from a loose option mapping (snake_case or host camelCase keys).

        Unknown keys are ignored so host-level options (textures, themes) can be
        passed through untouched. ``stairs`` may be given as ``{"up": n, "down": m}``.
        """
        merged: Dict[str, Any] = dict(options or {})
        merged.update(overrides)
        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in merged.items():
            if key == "stairs" and isinstance(value, Mapping):
                if "up" in value:
                    kwargs["stairs_up"] = value["up"]
                if "down" in value:
                    kwargs["stairs_down"] = value["down"]
                continue
            name = _OPTION_ALIASES.get(key, key)
            if name in known and value is not None:
                kwargs[name] = value
        return cls(**kwargs)

    def apply_overrides(self) -> "DungeonConfig":
        """Layer environment and Flask app-config overrides onto this config in place."""
        for env_key, (attr, kind) in _ENV_OVERRIDES.items():
            raw = os.environ.get(env_key)
            if raw is None or raw == "":
                continue
            if kind is bool:
                setattr(self, attr, _env_bool(raw))
            else:
                try:
                    setattr(self, attr, kind(raw))
                except ValueError:
                    raise ValidationError(attr, f"bad value in {env_key}: {raw!r}", "env") from None
        from flask import current_app, has_app_context

        if has_app_context():
            cfg = current_app.config
            for env_key, (attr, kind) in _ENV_OVERRIDES.items():
                if env_key in cfg and cfg[env_key] is not None:
                    value = cfg[env_key]
                    try:
                        setattr(self, attr, bool(value) if kind is bool else kind(value))
                    except (TypeError, ValueError):
                        raise ValidationError(attr, f"bad value in app config {env_key}: {value!r}", "env") from None
        return self.validate()

    def to_dict(self) -> Dict[str, Any]:
        out = {}
        for f in fields(self):
            value = getattr(self, f.name)
            out[f.name] = value.value if isinstance(value, Enum) else value
        return out


__all__ = [
    "DungeonConfig",
    "MaskShape",
    "PlacementStrategy",
    "RoomSizeBias",
    "ConnectivityStrategy",
    "CorridorStyle",
    "DeadEndPolicy",
]
