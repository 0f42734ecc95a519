"""Tests for trip history, share links and image compression."""

from __future__ import annotations

import base64
import io

from PIL import Image

from tripsheet.models import default_broker_profile
from tripsheet.services.images import compress_data_url
from tripsheet.services.storage import TripStore, build_route
from tripsheet.session import sample_trip


def _png_data_url(size=(1200, 300), mode="RGBA"):
    buffer = io.BytesIO()
    Image.new(mode, size, (10, 20, 30, 0) if mode == "RGBA" else (10, 20, 30)).save(buffer, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buffer.getvalue()).decode()


def _decode(data_url):
    _, _, encoded = data_url.partition(",")
    return Image.open(io.BytesIO(base64.b64decode(encoded)))


def test_compress_downscales_to_max_side():
    compressed = compress_data_url(_png_data_url(), max_px=600)

    assert compressed.startswith("data:image/jpeg;base64,")
    image = _decode(compressed)
    assert image.size == (600, 150)
    assert image.mode == "RGB"


def test_compress_png_keeps_transparency():
    compressed = compress_data_url(_png_data_url((100, 100)), fmt="PNG")
    assert compressed.startswith("data:image/png;base64,")
    assert _decode(compressed).mode == "RGBA"


def test_hosted_and_broken_images_pass_through():
    assert compress_data_url("https://cdn.example.com/logo.png") == "https://cdn.example.com/logo.png"
    broken = "data:image/png;base64,bm90IGFuIGltYWdl"
    assert compress_data_url(broken) == broken


def test_save_load_delete_trips():
    store = TripStore()
    trip = sample_trip()

    first = store.save_trip("user-1", trip, "classic")
    second = store.save_trip("user-1", trip, "premium")

    records = store.load_trips("user-1")
    assert {r.id for r in records} == {first, second}
    assert records[0].route == "VNY → VNY"
    assert records[0].client_name == "Calvin Yoon"
    assert store.load_trips("user-2") == []

    assert store.delete_trip("user-1", first)
    assert not store.delete_trip("user-1", first)
    assert [r.id for r in store.load_trips("user-1")] == [second]


def test_saved_trip_is_a_snapshot():
    store = TripStore()
    trip = sample_trip()
    store.save_trip("user-1", trip, "classic")

    trip.legs[0].label = "Changed"

    assert store.load_trips("user-1")[0].trip.legs[0].label == "Outbound"


def test_share_link_round_trip():
    store = TripStore()
    profile = default_broker_profile()
    profile.logo_dataurl = _png_data_url((1000, 1000))
    profile.exterior_image_dataurl = "https://cdn.example.com/jet.jpg"

    share_id = store.create_share_link("user-1", sample_trip(), profile, "executive")
    shared = store.load_shared_trip(share_id)

    assert len(share_id) == 14
    assert shared.template == "executive"
    assert shared.trip.trip_id == "HYXND2"
    assert _decode(shared.broker_profile.logo_dataurl).size == (600, 600)
    assert shared.broker_profile.exterior_image_dataurl == "https://cdn.example.com/jet.jpg"
    assert profile.logo_dataurl != shared.broker_profile.logo_dataurl
    assert store.load_shared_trip("missing") is None


def test_build_route_without_legs():
    trip = sample_trip()
    trip.legs = []
    assert build_route(trip) == "—"
