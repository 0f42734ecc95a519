"""Apply suggested single-field corrections to a Trip.

Suggestions address a field with a dotted path such as
``legs.1.metrics.block_time_minutes``. Paths are parsed into a closed set of
variants, each with its own typed setter; anything else parses to
``UnsupportedPath`` and applying it leaves the trip untouched.
"""

from __future__ import annotations

import copy
import dataclasses
import re
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Union

from .models import AIRPORT_TEXT_FIELDS, VISIBILITY_FLAGS, AISuggestion, Trip


@dataclass(frozen=True)
class BlockTimePath:
    leg_index: int


@dataclass(frozen=True)
class LegLabelPath:
    leg_index: int


@dataclass(frozen=True)
class AirportFieldPath:
    leg_index: int
    side: str
    field: str


@dataclass(frozen=True)
class VisibilityPath:
    flag: str


@dataclass(frozen=True)
class TailNumberPath:
    pass


@dataclass(frozen=True)
class UnsupportedPath:
    raw: str


FieldPath = Union[
    BlockTimePath, LegLabelPath, AirportFieldPath, VisibilityPath, TailNumberPath, UnsupportedPath
]

_INDEX_RE = re.compile(r"^\d+$")
_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def parse_field_path(path: Any) -> FieldPath:
    if not isinstance(path, str):
        return UnsupportedPath(str(path))
    parts = path.split(".")

    if path == "aircraft.tail_number":
        return TailNumberPath()

    if len(parts) == 2 and parts[0] == "visibility" and parts[1] in VISIBILITY_FLAGS:
        return VisibilityPath(parts[1])

    if len(parts) >= 3 and parts[0] == "legs" and _INDEX_RE.match(parts[1]):
        index = int(parts[1])
        rest = parts[2:]
        if rest == ["metrics", "block_time_minutes"]:
            return BlockTimePath(index)
        if rest == ["label"]:
            return LegLabelPath(index)
        if len(rest) == 2 and rest[0] in ("departure", "arrival") and rest[1] in AIRPORT_TEXT_FIELDS:
            return AirportFieldPath(index, rest[0], rest[1])

    return UnsupportedPath(path)


def parse_int_safe(value: Any) -> Optional[int]:
    """Read a leading integer the way a lenient form field would."""

    if isinstance(value, bool) or value is None:
        return None
    match = _LEADING_INT_RE.match(str(value))
    return int(match.group(1)) if match else None


def parse_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).lower() == "true"


def _as_text(value: Any) -> str:
    return "" if value is None else str(value)


def apply_fix(trip: Trip, field: Any, value: Any) -> Trip:
    """Return a copy of ``trip`` with one field changed.

    Unsupported paths, leg indices past the end and unparseable block times
    return ``trip`` itself.
    """

    path = parse_field_path(field)

    if isinstance(path, UnsupportedPath):
        return trip

    if isinstance(path, VisibilityPath):
        visibility = dataclasses.replace(trip.visibility, **{path.flag: parse_boolean(value)})
        return dataclasses.replace(trip, visibility=visibility)

    if isinstance(path, TailNumberPath):
        aircraft = dataclasses.replace(trip.aircraft, tail_number=_as_text(value))
        return dataclasses.replace(trip, aircraft=aircraft)

    if path.leg_index >= len(trip.legs):
        return trip

    if isinstance(path, BlockTimePath):
        minutes = parse_int_safe(value)
        if minutes is None:
            return trip

    updated = copy.deepcopy(trip)
    leg = updated.legs[path.leg_index]
    if isinstance(path, BlockTimePath):
        leg.metrics = dataclasses.replace(leg.metrics, block_time_minutes=minutes)
    elif isinstance(path, LegLabelPath):
        leg.label = _as_text(value)
    elif isinstance(path, AirportFieldPath):
        airport = getattr(leg, path.side)
        setattr(leg, path.side, dataclasses.replace(airport, **{path.field: _as_text(value)}))
    return updated


def apply_suggestion(trip: Trip, suggestion: AISuggestion) -> Trip:
    fix = suggestion.suggested_fix
    if fix is None:
        return trip
    return apply_fix(trip, fix.field, fix.value)


def apply_suggestions(trip: Trip, suggestions: Iterable[AISuggestion]) -> Trip:
    """Apply a batch of suggestions in order, starting from ``trip``.

    ``trip`` is never modified; when two fixes touch the same field the later
    one wins.
    """

    result = copy.deepcopy(trip)
    for suggestion in suggestions:
        result = apply_suggestion(result, suggestion)
    return result
