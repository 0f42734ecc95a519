"""Trip sheet builder: AI extraction, normalization and branded itineraries."""

from .models import AISuggestion, BrokerProfile, Trip
from .normalizer import normalize_extraction
from .field_paths import apply_fix, apply_suggestions
from .route_map import render_route_map

__all__ = [
    "AISuggestion",
    "BrokerProfile",
    "Trip",
    "normalize_extraction",
    "apply_fix",
    "apply_suggestions",
    "render_route_map",
]
