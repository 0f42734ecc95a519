"""Turn a raw, best-effort extraction payload into a render-ready Trip.

The extraction service is asked for a JSON object shaped like a trip, but
nothing it returns can be trusted: any field may be missing, blank or of the
wrong type. ``normalize_extraction`` runs the payload through four passes:

1. gap detection, with at most one repair call back to the extractor;
2. structural completion (ids, labels, placeholder sub-records);
3. default filling of required text fields with ``"TBD"``;
4. derived metrics (block time from the local departure/arrival times).

It never raises on malformed input. Only the repair callable can raise, and
those errors belong to the caller.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Callable, Dict, List, Optional

from .models import Trip, VISIBILITY_FLAGS, trip_from_dict
from .utils import calc_block_time_minutes, new_trip_id


logger = logging.getLogger(__name__)

TBD = "TBD"

# Blank values for these stay blank; everything else required becomes "TBD".
REQUIRED_AIRPORT_FIELDS = ("airport_code", "airport_name", "city", "datetime_local")
COSMETIC_AIRPORT_FIELDS = ("state", "country", "timezone")

RepairCall = Callable[[Dict[str, Any]], Dict[str, Any]]


def _has_text(value: Any) -> bool:
    if isinstance(value, str):
        return bool(value.strip())
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _as_dict(value: Any) -> Dict[str, Any]:
    return dict(value) if isinstance(value, dict) else {}


def has_critical_gaps(raw: Any) -> bool:
    if not isinstance(raw, dict):
        return True
    client = _as_dict(raw.get("client"))
    aircraft = _as_dict(raw.get("aircraft"))
    if not _has_text(client.get("name")):
        return True
    if not _has_text(aircraft.get("model")) or not _has_text(aircraft.get("tail_number")):
        return True
    legs = raw.get("legs")
    if not isinstance(legs, list) or not legs:
        return True
    for leg in legs:
        leg = _as_dict(leg)
        departure = _as_dict(leg.get("departure"))
        arrival = _as_dict(leg.get("arrival"))
        if not (
            _has_text(departure.get("airport_code"))
            and _has_text(arrival.get("airport_code"))
            and _has_text(departure.get("datetime_local"))
            and _has_text(arrival.get("datetime_local"))
        ):
            return True
    return False


def default_leg_label(index: int, total: int) -> str:
    if index == 0:
        return "Outbound"
    if index == total - 1:
        return "Return"
    return f"Leg {index + 1}"


def _complete_structure(raw: Dict[str, Any]) -> Dict[str, Any]:
    data = copy.deepcopy(raw)

    trip_id = data.get("trip_id")
    if isinstance(trip_id, (int, float)) and not isinstance(trip_id, bool):
        trip_id = str(trip_id)
    data["trip_id"] = trip_id if isinstance(trip_id, str) and trip_id else new_trip_id()

    data["client"] = _as_dict(data.get("client"))
    data["aircraft"] = _as_dict(data.get("aircraft"))
    data["passengers"] = data.get("passengers") if isinstance(data.get("passengers"), list) else []
    data["crew"] = data.get("crew") if isinstance(data.get("crew"), list) else []

    raw_legs: List[Any] = data.get("legs") if isinstance(data.get("legs"), list) else []
    if not raw_legs:
        raw_legs = [{}]
    legs = []
    for index, raw_leg in enumerate(raw_legs):
        leg = _as_dict(raw_leg)
        leg["leg_id"] = f"leg-{index}"
        if not _has_text(leg.get("label")):
            leg["label"] = default_leg_label(index, len(raw_legs))
        leg["departure"] = _as_dict(leg.get("departure"))
        leg["arrival"] = _as_dict(leg.get("arrival"))
        leg["metrics"] = _as_dict(leg.get("metrics"))
        legs.append(leg)
    data["legs"] = legs

    visibility = _as_dict(data.get("visibility"))
    data["visibility"] = {
        flag: visibility[flag] if isinstance(visibility.get(flag), bool) else True
        for flag in VISIBILITY_FLAGS
    }
    return data


def _safe(value: Any, fallback: str = TBD) -> Any:
    return value if _has_text(value) else fallback


def fill_defaults(data: Dict[str, Any]) -> Dict[str, Any]:
    """Replace blank required text fields with placeholders.

    Expects the output of the structural pass (every sub-record present).
    """

    data["client"]["name"] = _safe(data["client"].get("name"))
    data["aircraft"]["model"] = _safe(data["aircraft"].get("model"))
    data["aircraft"]["tail_number"] = _safe(data["aircraft"].get("tail_number"))
    for leg in data["legs"]:
        leg["label"] = _safe(leg.get("label"))
        leg["date_local"] = _safe(leg.get("date_local"), "")
        for side in ("departure", "arrival"):
            airport = leg[side]
            for name in REQUIRED_AIRPORT_FIELDS:
                airport[name] = _safe(airport.get(name))
            for name in COSMETIC_AIRPORT_FIELDS:
                airport[name] = _safe(airport.get(name), "")
    return data


def normalize_extraction(raw: Any, source_call: Optional[RepairCall] = None) -> Trip:
    """Produce a structurally complete Trip from an extraction payload.

    ``source_call`` re-runs the extraction with a repair instruction and the
    current payload; it is invoked at most once, and only when the payload
    is missing critical fields.
    """

    if has_critical_gaps(raw) and source_call is not None:
        logger.info("Extraction missing critical fields; requesting one repair pass")
        raw = source_call(raw if isinstance(raw, dict) else {})
        if has_critical_gaps(raw):
            logger.warning("Repaired extraction still incomplete; filling placeholders")

    data = fill_defaults(_complete_structure(raw if isinstance(raw, dict) else {}))
    trip = trip_from_dict(data)

    for leg in trip.legs:
        if leg.metrics.block_time_minutes is None:
            leg.metrics.block_time_minutes = calc_block_time_minutes(
                leg.departure.datetime_local, leg.arrival.datetime_local
            )
    return trip
