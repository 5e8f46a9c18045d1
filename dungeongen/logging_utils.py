"""Minimal structured logging helper for generation runs.

Emits one key=value (or JSON) line per event through print(), so a batch of
generated dungeons can be grepped by seed or phase without configuring the
stdlib logging tree.

Usage:
    from dungeongen.logging_utils import get_logger
    log = get_logger("dungeongen.pipeline")
    run_log = log.bind(seed=42)
    run_log.debug(event="phase_complete", phase="rooms", ms=3)

``DUNGEONGEN_LOG_LEVEL`` and ``DUNGEONGEN_LOG_JSON`` are read on every call,
so a host (or a test) can change them at runtime. A logger given an explicit
level through ``set_level`` ignores the environment. Bound fields are merged
under the call's own fields. Reserved keys: level, ts, logger.
"""

from __future__ import annotations

import json
import os
import sys
import time
from typing import Any, Dict, Optional

LEVELS = {"debug": 10, "info": 20, "warn": 30, "error": 40}
DEFAULT_LEVEL = "info"
_TRUTHY = ("1", "true", "yes", "on")


def env_level() -> int:
    raw = os.getenv("DUNGEONGEN_LOG_LEVEL", DEFAULT_LEVEL).strip().lower()
    return LEVELS.get(raw, LEVELS[DEFAULT_LEVEL])


def json_mode() -> bool:
    return os.getenv("DUNGEONGEN_LOG_JSON", "0").strip().lower() in _TRUTHY


def _format(level: str, fields: Dict[str, Any]) -> str:
    ts = int(time.time())
    if json_mode():
        rec = {k: v for k, v in fields.items() if v is not None}
        rec["level"] = level
        rec["ts"] = ts
        try:
            return json.dumps(rec, separators=(",", ":"), default=str)
        except (TypeError, ValueError):
            return json.dumps({"level": level, "ts": ts, "error": "json_encode_failed"})
    parts = [f"level={level}", f"ts={ts}"]
    for k, v in fields.items():
        if v is None:
            continue
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            parts.append(f"{k}={str(v).replace(' ', '_')}")
        else:
            parts.append(f"{k}={v}")
    return " ".join(parts)


class _Logger:
    def __init__(self, name: str, context: Optional[Dict[str, Any]] = None, level: Optional[int] = None):
        self.name = name
        self.context = dict(context or {})
        self.level = level

    def set_level(self, level: Optional[str]) -> None:
        """Pin this logger to ``level``; None goes back to the environment."""
        if level is None:
            self.level = None
            return
        if level not in LEVELS:
            raise ValueError(f"unknown log level {level!r}")
        self.level = LEVELS[level]

    def enabled_for(self, lvl: str) -> bool:
        threshold = self.level if self.level is not None else env_level()
        return LEVELS[lvl] >= threshold

    def bind(self, **fields) -> "_Logger":
        """Child logger that adds ``fields`` to every record it emits."""
        merged = dict(self.context)
        merged.update(fields)
        return _Logger(self.name, merged, self.level)

    def _log(self, lvl: str, **fields):
        if not self.enabled_for(lvl):
            return
        record = dict(self.context)
        record.update(fields)
        record.setdefault("logger", self.name)
        print(_format(lvl, record), file=sys.stderr if lvl == "error" else sys.stdout)

    def debug(self, **fields):
        self._log("debug", **fields)

    def info(self, **fields):
        self._log("info", **fields)

    def warn(self, **fields):
        self._log("warn", **fields)

    def error(self, **fields):
        self._log("error", **fields)


_LOGGER_CACHE: Dict[str, _Logger] = {}


def get_logger(name: str = "dungeongen") -> _Logger:
    if name not in _LOGGER_CACHE:
        _LOGGER_CACHE[name] = _Logger(name)
    return _LOGGER_CACHE[name]
