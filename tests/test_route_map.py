"""Tests for route map projection and rendering."""

from __future__ import annotations

import re

from tripsheet.airports import get_coords
from tripsheet.models import leg_from_dict
from tripsheet.route_map import (
    build_leaflet_spec,
    build_route_points,
    project_coords,
    render_route_map,
    render_svg_map,
    route_label,
)


def _legs(*codes):
    return [
        leg_from_dict(
            {"departure": {"airport_code": dep}, "arrival": {"airport_code": arr}}, i
        )
        for i, (dep, arr) in enumerate(zip(codes, codes[1:]))
    ]


def _circles(svg):
    return re.findall(r'<circle cx="([-\d.]+)" cy="([-\d.]+)"', svg)


def test_k_prefixed_icao_codes_resolve():
    assert get_coords("KVNY") == get_coords("VNY")
    assert get_coords(" sjc ") == get_coords("SJC")
    assert get_coords("ZZZZ") is None
    assert get_coords(None) is None


def test_round_trip_projection_path():
    svg = render_svg_map(_legs("VNY", "SJC", "VNY"))

    assert 'd="M612.00,172.00 L28.00,28.00 L612.00,172.00"' in svg
    assert len(_circles(svg)) == 3
    assert 'fill="#dc2626"' in svg and 'fill="#16a34a"' in svg


def test_projected_points_stay_finite_for_identical_coords():
    points = project_coords([(34.2, -118.4), (34.2, -118.4)], 640, 200, 28)
    for x, y in points:
        assert x == x and y == y  # not NaN
        assert 28 <= x <= 612 and 28 <= y <= 172


def test_identical_airports_use_placeholder_layout():
    svg = render_svg_map(_legs("VNY", "KVNY"))

    circles = _circles(svg)
    assert len(circles) == 2
    assert circles[0] != circles[1]
    assert "nan" not in svg.lower()


def test_unknown_codes_get_one_label_each():
    svg = render_svg_map(_legs("XXX", "YYY", "ZZZ"))

    assert len(_circles(svg)) == 3
    for code in ("XXX", "YYY", "ZZZ"):
        assert f">{code}</text>" in svg


def test_blank_codes_render_tbd():
    svg = render_svg_map(_legs("", ""))
    assert svg.count(">TBD</text>") == 2


def test_no_legs_still_renders():
    route = build_route_points([])
    assert route.codes == ["TBD", "TBD"]
    assert len(_circles(render_svg_map([]))) == 2


def test_leaflet_spec_requires_two_known_points():
    assert build_leaflet_spec(_legs("VNY", "XXX")) is None

    spec = build_leaflet_spec(_legs("VNY", "SJC"))
    assert spec is not None
    assert [m["code"] for m in spec["markers"]] == ["VNY", "SJC"]
    assert spec["tiles"]["crossOrigin"] == "anonymous"
    assert spec["options"]["dragging"] is False


def test_render_route_map_picks_mode():
    legs = _legs("VNY", "SJC")

    live = render_route_map(legs)
    assert live.mode == "leaflet"
    assert "registry[id].remove()" in live.markup

    assert render_route_map(legs, export_mode=True).mode == "svg"
    assert render_route_map(legs, map_style="svg").mode == "svg"
    assert render_route_map(_legs("XXX", "YYY")).mode == "svg"


def test_route_label():
    assert route_label(_legs("VNY", "SJC", "VNY")) == "VNY → SJC → VNY"


def test_leaflet_spec_needs_distinct_airports():
    legs = _legs("VNY", "KVNY")

    assert build_leaflet_spec(legs) is None
    assert render_route_map(legs).mode == "svg"
