"""Tests for the itinerary HTML."""

from __future__ import annotations

import dataclasses

from tripsheet.models import default_broker_profile
from tripsheet.preview import export_filename, image_tag, render_itinerary_html
from tripsheet.session import sample_trip


def test_visibility_flags_hide_details():
    trip = sample_trip()
    trip.visibility = dataclasses.replace(
        trip.visibility, show_tail_number=False, show_passenger_names=False, show_crew_contact=False
    )

    html = render_itinerary_html(trip, default_broker_profile())

    assert "N116HL" not in html
    assert "Arizechukwu" not in html
    assert "2 passenger(s)" in html
    assert "760-801-8534" not in html


def test_details_shown_by_default():
    html = render_itinerary_html(sample_trip(), default_broker_profile())

    assert "N116HL" in html
    assert "Arizechukwu Nwosu" in html
    assert "Castle &amp; Cooke Aviation (South)" in html
    assert "1h 02m" in html
    assert 'id="pdf-content"' in html


def test_images_follow_template_usage():
    profile = default_broker_profile()
    profile.exterior_image_dataurl = "https://cdn.example.com/jet.jpg"

    classic = render_itinerary_html(sample_trip(), profile, "classic")
    executive = render_itinerary_html(sample_trip(), profile, "executive")

    assert 'src="https://cdn.example.com/jet.jpg"' in classic
    assert "jet.jpg" not in executive


def test_export_mode_uses_svg_map():
    profile = default_broker_profile()

    live = render_itinerary_html(sample_trip(), profile)
    export = render_itinerary_html(sample_trip(), profile, export_mode=True)

    assert "leaflet.js" in live
    assert "leaflet.js" not in export
    assert "<svg" in export


def test_image_tag_cross_origin():
    assert 'crossorigin="anonymous"' in image_tag("https://cdn.example.com/a.png", "a")
    assert "crossorigin" not in image_tag("data:image/png;base64,AAAA", "a")
    assert image_tag(None, "a") == ""


def test_export_filename():
    trip = sample_trip()
    trip.trip_id = "abc123"
    assert export_filename(trip) == "TripSheet-ABC123.pdf"
