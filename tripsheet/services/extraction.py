"""Trip sheet extraction via the OpenAI Responses API."""

from __future__ import annotations

import base64
import binascii
import json
import logging
from typing import Any, Dict, List, Tuple

from openai import OpenAIError

from ..config import get_settings
from ..llm import function_call
from ..models import Trip
from ..normalizer import normalize_extraction


logger = logging.getLogger(__name__)


class ExtractionError(RuntimeError):
    """Raised when the extraction or suggestion service call fails."""


_FBO_SCHEMA = {
    "type": "object",
    "properties": {
        "name": {"type": "string"},
        "address": {"type": "string"},
        "phone": {"type": "string"},
    },
}

_AIRPORT_SCHEMA = {
    "type": "object",
    "properties": {
        "airport_code": {"type": "string"},
        "airport_name": {"type": "string"},
        "city": {"type": "string"},
        "state": {"type": "string"},
        "country": {"type": "string"},
        "timezone": {"type": "string", "description": "Abbreviation, e.g. PDT"},
        "datetime_local": {"type": "string", "description": "Local time as YYYY-MM-DDTHH:MM:SS"},
        "fbo": _FBO_SCHEMA,
    },
}

TRIP_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "trip_id": {"type": "string"},
        "client": {
            "type": "object",
            "properties": {
                "name": {"type": "string"},
                "company": {"type": "string"},
                "email": {"type": "string"},
            },
            "required": ["name"],
        },
        "aircraft": {
            "type": "object",
            "properties": {
                "model": {"type": "string"},
                "tail_number": {"type": "string"},
                "category": {"type": "string"},
            },
            "required": ["model", "tail_number"],
        },
        "passengers": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "full_name": {"type": "string"},
                    "notes": {"type": "string"},
                },
            },
        },
        "crew": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "role": {"type": "string", "description": "e.g., PIC, SIC, Flight Attendant"},
                    "name": {"type": "string"},
                    "phone": {"type": "string"},
                },
            },
        },
        "legs": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "label": {"type": "string"},
                    "date_local": {"type": "string"},
                    "departure": _AIRPORT_SCHEMA,
                    "arrival": _AIRPORT_SCHEMA,
                    "metrics": {
                        "type": "object",
                        "properties": {
                            "distance_nm": {"type": "number"},
                            "block_time_minutes": {"type": "number"},
                        },
                    },
                },
            },
        },
    },
}

EXTRACTION_PROMPT = """
You are an expert private aviation charter broker assistant.
Extract all trip details from the provided trip sheet document.

Rules:
1. Extract the itinerary/trip/charter reference number exactly as printed on the document
   (it may be labelled "Itinerary #", "Trip #", "Charter #", "Ref #", "Booking #", or similar).
   Output it as trip_id. Preserve the original value character-for-character; do NOT invent or alter it.
2. Identify all flight legs, in the order they are flown.
3. Extract airport codes (IATA/ICAO), airport names, cities, states and local times.
4. Extract aircraft model and tail number.
5. Extract passenger names and crew (role, name, phone) if present.
6. Extract FBO name, address and phone for each departure and arrival if present.
7. If block time is missing but ETD/ETA are present, calculate it.
8. Avoid empty strings in required fields. If you cannot read a value, infer it from context.
   If still unknown, use "TBD".

Call record_trip with the extracted data.
"""

REPAIR_PROMPT = """
The extraction missed critical fields. Re-read the document and fill the missing values.
Use the existing JSON as a starting point. Do not leave required fields blank.
If truly unreadable, infer from context or use "TBD".
Call record_trip with the completed data.
"""


def decode_data_url(data: str) -> Tuple[bytes, str]:
    """Return ``(bytes, mime_type)`` for a base64 payload or ``data:`` URL.

    The mime type is empty when the payload is bare base64.
    """

    mime_type = ""
    if data.startswith("data:"):
        header, _, data = data.partition(",")
        mime_type = header[5:].split(";")[0]
    try:
        return base64.b64decode(data, validate=True), mime_type
    except (binascii.Error, ValueError) as exc:
        raise ValueError("File data is not valid base64.") from exc


def document_part(file_bytes: bytes, mime_type: str) -> Dict[str, Any]:
    encoded = base64.b64encode(file_bytes).decode("ascii")
    data_url = f"data:{mime_type};base64,{encoded}"
    if mime_type.startswith("image/"):
        return {"type": "input_image", "image_url": data_url}
    return {"type": "input_file", "filename": "trip-sheet.pdf", "file_data": data_url}


def _record_trip(content: List[Dict[str, Any]], label: str) -> Dict[str, Any]:
    settings = get_settings()
    try:
        data = function_call(
            content,
            name="record_trip",
            description="Record the structured trip extracted from the trip sheet.",
            parameters=TRIP_SCHEMA,
            timeout=settings.extraction_timeout_s,
        )
    except (OpenAIError, RuntimeError, json.JSONDecodeError) as exc:
        raise ExtractionError(f"{label} failed: {exc}") from exc
    return data if isinstance(data, dict) else {}


def extract_trip_data(file_bytes: bytes, mime_type: str) -> Trip:
    """Extract and normalize a trip from an uploaded trip sheet.

    Makes one extraction call, plus at most one repair call when required
    fields come back missing.
    """

    document = document_part(file_bytes, mime_type)
    raw = _record_trip(
        [{"type": "input_text", "text": EXTRACTION_PROMPT}, document],
        "Trip extraction",
    )

    def repair(existing: Dict[str, Any]) -> Dict[str, Any]:
        return _record_trip(
            [
                {"type": "input_text", "text": REPAIR_PROMPT},
                {"type": "input_text", "text": f"Existing JSON: {json.dumps(existing)}"},
                document,
            ],
            "Trip repair",
        )

    trip = normalize_extraction(raw, source_call=repair)
    logger.info("Extracted trip %s with %s leg(s)", trip.trip_id, len(trip.legs))
    return trip
