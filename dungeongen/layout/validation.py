"""Caller-input validation for the generation core.

Only genuinely malformed input is rejected here: grid dimensions that are not
positive integers, option values outside their documented range, unknown
strategy names, and outline rooms that cannot be read as a rectangle. Every
other degenerate situation (empty masks, zero rooms, failed searches) is
handled by the stages themselves without raising.

Errors carry the offending field and a short machine-readable code:

    ValidationError('width', 'must be a positive integer', 'dimension')
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Mapping, Tuple, Type


class ValidationError(ValueError):
    def __init__(self, field: str, message: str, code: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message
        self.code = code

    def to_dict(self) -> Dict[str, str]:
        return {'field': self.field, 'error': self.message, 'code': self.code}


def _as_int(value: Any, field: str, code: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(field, 'must be an integer', code)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValidationError(field, 'must be a whole number', code)
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            raise ValidationError(field, f'not an integer: {value!r}', code) from None
    raise ValidationError(field, f'unsupported type {type(value).__name__}', code)


def validate_dimensions(width: Any, height: Any) -> Tuple[int, int]:
    w = _as_int(width, 'width', 'dimension')
    h = _as_int(height, 'height', 'dimension')
    if w <= 0:
        raise ValidationError('width', 'must be a positive integer', 'dimension')
    if h <= 0:
        raise ValidationError('height', 'must be a positive integer', 'dimension')
    return w, h


def validate_range(value: Any, field: str, lo: float, hi: float | None = None) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(field, 'must be a number', 'range')
    if value < lo or (hi is not None and value > hi):
        bound = f'[{lo}, {hi}]' if hi is not None else f'>= {lo}'
        raise ValidationError(field, f'{value} outside {bound}', 'range')
    return value


def validate_int(value: Any, field: str, lo: int | None = None, hi: int | None = None,
                 code: str = 'range') -> int:
    """Whole-number option check. Integral floats and numeric strings are accepted."""
    n = _as_int(value, field, code)
    if (lo is not None and n < lo) or (hi is not None and n > hi):
        bound = f'[{lo}, {hi}]' if hi is not None else f'>= {lo}'
        raise ValidationError(field, f'{n} outside {bound}', code)
    return n


def coerce_choice(value: Any, enum_cls: Type[Enum], field: str):
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        try:
            return enum_cls(value.strip().lower())
        except ValueError:
            pass
    allowed = ', '.join(m.value for m in enum_cls)
    raise ValidationError(field, f'{value!r} is not one of: {allowed}', 'choice')


def coerce_outline_room(entry: Any, index: int) -> Dict[str, Any]:
    """Normalise one outline room entry to {'id', 'x', 'y', 'width', 'height'}.

    Accepts mappings using either width/height or w/h keys. A missing id is
    replaced with ``room-<index>``. Raises ValidationError (code 'outline')
    when the entry cannot describe a rectangle of positive size.
    """
    field = f'rooms[{index}]'
    if not isinstance(entry, Mapping):
        raise ValidationError(field, 'room entry must be an object', 'outline')
    out: Dict[str, Any] = {}
    for key, aliases in (('x', ('x',)), ('y', ('y',)), ('width', ('width', 'w')), ('height', ('height', 'h'))):
        raw = next((entry[a] for a in aliases if a in entry), None)
        if raw is None:
            raise ValidationError(f'{field}.{key}', 'missing', 'outline')
        out[key] = _as_int(raw, f'{field}.{key}', 'outline')
    if out['width'] <= 0 or out['height'] <= 0:
        raise ValidationError(field, 'width and height must be positive', 'outline')
    rid = entry.get('id')
    out['id'] = str(rid).strip() if rid is not None and str(rid).strip() else f'room-{index}'
    return out


__all__ = [
    'ValidationError',
    'validate_dimensions',
    'validate_range',
    'validate_int',
    'coerce_choice',
    'coerce_outline_room',
]
