"""FastAPI application exposing the trip sheet builder."""

from dataclasses import asdict
from typing import Any, Dict, List, Optional
from uuid import uuid4

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field

from .agent import run_upload_pipeline, summarize_response
from .field_paths import apply_suggestions
from .models import (
    TEMPLATE_IDS,
    broker_profile_from_dict,
    broker_profile_to_dict,
    suggestion_from_dict,
    suggestion_to_dict,
    trip_from_dict,
    trip_to_dict,
)
from .normalizer import normalize_extraction
from .preview import export_filename, render_itinerary_html
from .route_map import render_route_map
from .services.billing import BillingError, get_entitlement
from .services.extraction import ExtractionError, decode_data_url
from .services.storage import TripStore
from .services.suggestions import get_ai_suggestions


app = FastAPI(title="TripSheet", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

store = TripStore()

TEMPLATE_PATTERN = r"^(classic|executive|premium)$"


class UploadPayload(BaseModel):
    file_data: str = Field(..., min_length=1, description="Base64 or data: URL")
    mime_type: Optional[str] = None


class RawExtractionPayload(BaseModel):
    raw: Dict[str, Any]


class TripPayload(BaseModel):
    trip: Dict[str, Any]


class ApplySuggestionsPayload(BaseModel):
    trip: Dict[str, Any]
    suggestions: List[Dict[str, Any]]


class RouteMapPayload(BaseModel):
    legs: List[Dict[str, Any]]
    map_style: str = Field("leaflet", pattern=r"^(leaflet|svg)$")
    export_mode: bool = False
    height: int = Field(200, ge=80, le=800)


class ExportPayload(BaseModel):
    trip: Dict[str, Any]
    broker_profile: Dict[str, Any] = Field(default_factory=dict)
    template: str = Field("classic", pattern=TEMPLATE_PATTERN)
    customer_id: Optional[str] = None
    exports_used: int = Field(0, ge=0)


class SharePayload(BaseModel):
    user_id: str
    trip: Dict[str, Any]
    broker_profile: Dict[str, Any] = Field(default_factory=dict)
    template: str = Field("classic", pattern=TEMPLATE_PATTERN)


class SaveTripPayload(BaseModel):
    trip: Dict[str, Any]
    template: str = Field("classic", pattern=TEMPLATE_PATTERN)


def _load_trip(data: Dict[str, Any]):
    trip = trip_from_dict(data)
    if not trip.legs:
        raise HTTPException(status_code=400, detail="A trip needs at least one leg.")
    return trip


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.post("/trips/extract")
def extract_trip(payload: UploadPayload) -> Dict[str, Any]:
    try:
        file_bytes, data_mime = decode_data_url(payload.file_data)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    mime_type = payload.mime_type or data_mime
    if not mime_type:
        raise HTTPException(status_code=400, detail="mime_type is required.")
    state = run_upload_pipeline(file_bytes, mime_type, thread_id=f"upload-{uuid4()}")
    if state.get("error"):
        raise HTTPException(status_code=502, detail=state["error"])
    return summarize_response(state)


@app.post("/trips/normalize")
def normalize_trip(payload: RawExtractionPayload) -> Dict[str, Any]:
    return trip_to_dict(normalize_extraction(payload.raw))


@app.post("/trips/suggestions")
def suggest(payload: TripPayload) -> List[Dict[str, Any]]:
    trip = _load_trip(payload.trip)
    try:
        suggestions = get_ai_suggestions(trip)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ExtractionError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return [suggestion_to_dict(s) for s in suggestions]


@app.post("/trips/apply-suggestions")
def apply_trip_suggestions(payload: ApplySuggestionsPayload) -> Dict[str, Any]:
    trip = _load_trip(payload.trip)
    suggestions = [s for s in map(suggestion_from_dict, payload.suggestions) if s]
    return trip_to_dict(apply_suggestions(trip, suggestions))


@app.post("/route-map")
def route_map(payload: RouteMapPayload) -> Dict[str, str]:
    trip = trip_from_dict({"legs": payload.legs})
    rendered = render_route_map(
        trip.legs,
        map_style=payload.map_style,
        export_mode=payload.export_mode,
        height=payload.height,
    )
    return asdict(rendered)


@app.post("/trips/export")
def export_trip(payload: ExportPayload) -> HTMLResponse:
    trip = _load_trip(payload.trip)
    try:
        entitlement = get_entitlement(payload.customer_id, payload.exports_used)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except BillingError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    if not entitlement.can_export:
        raise HTTPException(status_code=402, detail="Payment required: no exports remaining.")

    profile = broker_profile_from_dict(payload.broker_profile)
    html = render_itinerary_html(trip, profile, payload.template, export_mode=True)
    headers = {
        "X-Export-Filename": export_filename(trip),
        "X-Exports-Remaining": str(entitlement.exports_remaining) if entitlement.exports_remaining is not None else "unlimited",
    }
    return HTMLResponse(content=html, headers=headers)


@app.post("/trips/share")
def share_trip(payload: SharePayload) -> Dict[str, str]:
    trip = _load_trip(payload.trip)
    profile = broker_profile_from_dict(payload.broker_profile)
    share_id = store.create_share_link(payload.user_id, trip, profile, payload.template)
    return {"share_id": share_id}


@app.get("/shared/{share_id}")
def load_shared(share_id: str) -> Dict[str, Any]:
    shared = store.load_shared_trip(share_id)
    if shared is None:
        raise HTTPException(status_code=404, detail="Shared trip not found.")
    template = shared.template if shared.template in TEMPLATE_IDS else "classic"
    return {
        "trip": trip_to_dict(shared.trip),
        "broker_profile": broker_profile_to_dict(shared.broker_profile),
        "template": template,
    }


@app.post("/users/{user_id}/trips")
def save_trip(user_id: str, payload: SaveTripPayload) -> Dict[str, str]:
    trip = _load_trip(payload.trip)
    return {"id": store.save_trip(user_id, trip, payload.template)}


@app.get("/users/{user_id}/trips")
def list_trips(user_id: str) -> List[Dict[str, Any]]:
    return [
        {
            "id": record.id,
            "trip_id": record.trip_id,
            "client_name": record.client_name,
            "route": record.route,
            "template": record.template,
            "created_at": record.created_at.isoformat(),
        }
        for record in store.load_trips(user_id)
    ]


@app.delete("/users/{user_id}/trips/{doc_id}")
def delete_trip(user_id: str, doc_id: str) -> Dict[str, bool]:
    if not store.delete_trip(user_id, doc_id):
        raise HTTPException(status_code=404, detail="Trip not found.")
    return {"deleted": True}
