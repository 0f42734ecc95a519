"""HTTP tests for the FastAPI app with external services stubbed out."""

from __future__ import annotations

import base64
from unittest.mock import patch

from fastapi.testclient import TestClient

from tripsheet.api import app
from tripsheet.models import trip_to_dict
from tripsheet.services.billing import BillingError, Entitlement
from tripsheet.services.extraction import ExtractionError
from tripsheet.session import sample_trip


client = TestClient(app)


def _trip_json():
    return trip_to_dict(sample_trip())


def test_health():
    assert client.get("/health").json() == {"status": "ok"}


@patch("tripsheet.api.run_upload_pipeline")
def test_extract_returns_summary(mock_pipeline):
    mock_pipeline.return_value = {
        "trip": _trip_json(),
        "suggestions": [],
        "messages": [],
        "is_complete": True,
        "error": None,
    }
    payload = "data:application/pdf;base64," + base64.b64encode(b"%PDF").decode()

    response = client.post("/trips/extract", json={"file_data": payload})

    assert response.status_code == 200
    assert response.json()["trip"]["trip_id"] == "HYXND2"
    args = mock_pipeline.call_args.args
    assert args == (b"%PDF", "application/pdf")


@patch("tripsheet.api.run_upload_pipeline")
def test_extract_failure_maps_to_502(mock_pipeline):
    mock_pipeline.return_value = {"trip": None, "error": "Trip extraction failed"}
    payload = base64.b64encode(b"%PDF").decode()

    response = client.post("/trips/extract", json={"file_data": payload, "mime_type": "application/pdf"})

    assert response.status_code == 502


def test_extract_rejects_bad_payloads():
    assert client.post("/trips/extract", json={"file_data": "%%%", "mime_type": "application/pdf"}).status_code == 400
    bare = base64.b64encode(b"%PDF").decode()
    assert client.post("/trips/extract", json={"file_data": bare}).status_code == 400


def test_normalize_fills_placeholders():
    response = client.post("/trips/normalize", json={"raw": {}})

    body = response.json()
    assert response.status_code == 200
    assert body["client"]["name"] == "TBD"
    assert body["legs"][0]["leg_id"] == "leg-0"


@patch("tripsheet.api.get_ai_suggestions", side_effect=ExtractionError("timeout"))
def test_suggestion_failure_maps_to_502(_mock_suggest):
    response = client.post("/trips/suggestions", json={"trip": _trip_json()})
    assert response.status_code == 502


def test_apply_suggestions_endpoint():
    response = client.post(
        "/trips/apply-suggestions",
        json={
            "trip": _trip_json(),
            "suggestions": [
                {"id": "a", "type": "other", "message": "m", "suggested_fix": {"field": "legs.0.label", "value": "A"}},
                {"id": "b", "type": "other", "message": "m", "suggested_fix": {"field": "legs.0.label", "value": "B"}},
            ],
        },
    )
    assert response.json()["legs"][0]["label"] == "B"


def test_trip_without_legs_is_rejected():
    trip = _trip_json()
    trip["legs"] = []
    assert client.post("/trips/apply-suggestions", json={"trip": trip, "suggestions": []}).status_code == 400


def test_route_map_endpoint():
    legs = _trip_json()["legs"]
    assert client.post("/route-map", json={"legs": legs}).json()["mode"] == "leaflet"
    assert client.post("/route-map", json={"legs": legs, "export_mode": True}).json()["mode"] == "svg"
    assert client.post("/route-map", json={"legs": legs, "map_style": "globe"}).status_code == 422


@patch("tripsheet.api.get_entitlement", return_value=Entitlement(is_subscribed=False, exports_used=3))
def test_export_requires_payment(_mock_entitlement):
    response = client.post("/trips/export", json={"trip": _trip_json(), "exports_used": 3})
    assert response.status_code == 402


@patch("tripsheet.api.get_entitlement", return_value=Entitlement(is_subscribed=False, exports_used=1))
def test_export_returns_static_html(_mock_entitlement):
    response = client.post("/trips/export", json={"trip": _trip_json(), "exports_used": 1})

    assert response.status_code == 200
    assert response.headers["x-export-filename"] == "TripSheet-HYXND2.pdf"
    assert response.headers["x-exports-remaining"] == "2"
    assert "<svg" in response.text


@patch("tripsheet.api.get_entitlement", side_effect=BillingError("down"))
def test_export_billing_outage(_mock_entitlement):
    response = client.post("/trips/export", json={"trip": _trip_json(), "customer_id": "cus_1"})
    assert response.status_code == 503


def test_share_and_history_flow():
    shared = client.post("/trips/share", json={"user_id": "u1", "trip": _trip_json(), "template": "premium"})
    share_id = shared.json()["share_id"]

    loaded = client.get(f"/shared/{share_id}").json()
    assert loaded["template"] == "premium"
    assert loaded["trip"]["trip_id"] == "HYXND2"
    assert client.get("/shared/nope").status_code == 404

    doc_id = client.post("/users/u1/trips", json={"trip": _trip_json()}).json()["id"]
    listed = client.get("/users/u1/trips").json()
    assert [t["id"] for t in listed] == [doc_id]
    assert listed[0]["route"] == "VNY → VNY"
    assert client.delete(f"/users/u1/trips/{doc_id}").json() == {"deleted": True}
    assert client.delete(f"/users/u1/trips/{doc_id}").status_code == 404
