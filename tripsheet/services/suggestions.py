"""AI review of an extracted trip."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List
from uuid import uuid4

from openai import OpenAIError

from ..config import get_settings
from ..llm import function_call
from ..models import AISuggestion, Trip, suggestion_from_dict, trip_to_dict
from ..utils import truncate_summary
from .extraction import ExtractionError


logger = logging.getLogger(__name__)

SUGGESTION_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "suggestions": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "id": {"type": "string"},
                    "type": {
                        "type": "string",
                        "description": "One of: timezone, timing, block_time, privacy, other",
                    },
                    "message": {"type": "string"},
                    "explanation": {"type": "string"},
                    "affected_leg_id": {"type": "string"},
                    "suggested_fix": {
                        "type": "object",
                        "properties": {
                            "field": {
                                "type": "string",
                                "description": "The path to the field to fix, e.g., 'legs.0.metrics.block_time_minutes'",
                            },
                            "value": {
                                "type": "string",
                                "description": "The suggested value (as a string, to be parsed if needed)",
                            },
                        },
                    },
                },
                "required": ["id", "type", "message", "explanation"],
            },
        }
    },
    "required": ["suggestions"],
}


def build_review_prompt(trip: Trip) -> str:
    return f"""
    Review this extracted trip data for a private aviation charter.
    Identify potential errors or improvements:
    1. Timezone mismatches (e.g., arrival before departure in UTC).
    2. Missing block times (suggest auto-calculation if ETD/ETA are present).
    3. Round trip detection (if leg 2 returns to leg 1 origin).
    4. Weather risks (if you can infer from locations/dates).
    5. Privacy suggestions (hiding tail or pax names).

    Supported fix paths: legs.<n>.metrics.block_time_minutes, legs.<n>.label,
    legs.<n>.departure.<field>, legs.<n>.arrival.<field>, visibility.<flag>,
    aircraft.tail_number. Leave suggested_fix out when no single field fixes the issue.

    Trip Data: {json.dumps(trip_to_dict(trip))}

    Keep each message to one short sentence. Call record_suggestions with the list.
    """


def get_ai_suggestions(trip: Trip) -> List[AISuggestion]:
    settings = get_settings()
    try:
        data = function_call(
            build_review_prompt(trip),
            name="record_suggestions",
            description="Record review suggestions for the trip.",
            parameters=SUGGESTION_SCHEMA,
            timeout=settings.suggestion_timeout_s,
        )
    except (OpenAIError, RuntimeError, json.JSONDecodeError) as exc:
        raise ExtractionError(f"AI suggestions failed: {exc}") from exc

    items = data.get("suggestions", []) if isinstance(data, dict) else []
    suggestions: List[AISuggestion] = []
    seen_ids = set()
    for item in items if isinstance(items, list) else []:
        suggestion = suggestion_from_dict(item)
        if suggestion is None:
            logger.debug("Skipping malformed suggestion: %r", item)
            continue
        # ids are unique within one review
        while not suggestion.id or suggestion.id in seen_ids:
            suggestion.id = uuid4().hex[:9]
        seen_ids.add(suggestion.id)
        suggestion.message = truncate_summary(suggestion.message, max_words=25, max_sentences=1)
        suggestions.append(suggestion)
    return suggestions
