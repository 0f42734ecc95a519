"""Route map rendering for the itinerary preview.

Two interchangeable outputs:

* a Leaflet map description (``build_leaflet_spec``) plus the markup that
  mounts it, used for the live preview;
* a static SVG (``render_svg_map``) built from an equirectangular projection
  of the airport coordinates, used for exports and whenever the live map
  cannot show the route.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from html import escape
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .airports import Coords, get_coords
from .models import Leg


logger = logging.getLogger(__name__)

SVG_WIDTH = 640
SVG_PADDING = 28
MIN_RANGE_DEG = 0.001
ZIGZAG_OFFSET = 12

START_COLOR = "#dc2626"
END_COLOR = "#16a34a"
STOP_COLOR = "#2563eb"
LABEL_COLOR = "#475569"

TILE_URL = "https://{s}.basemaps.cartocdn.com/light_all/{z}/{x}/{y}{r}.png"
TILE_ATTRIBUTION = '&copy; <a href="https://carto.com/">CARTO</a>'

Point = Tuple[float, float]


@dataclass
class RoutePoints:
    codes: List[str]
    points: List[Tuple[str, Coords]] = field(default_factory=list)

    @property
    def coords(self) -> List[Coords]:
        return [coords for _, coords in self.points]

    @property
    def has_projection(self) -> bool:
        """At least two distinct airports resolved to coordinates."""
        return len(set(self.coords)) >= 2


@dataclass
class RouteMapRender:
    mode: str
    markup: str


def route_codes(legs: Sequence[Leg]) -> List[str]:
    codes: List[str] = []
    for index, leg in enumerate(legs):
        if index == 0:
            codes.append(leg.departure.airport_code)
        codes.append(leg.arrival.airport_code)
    return codes


def route_label(legs: Sequence[Leg]) -> str:
    stops: List[str] = []
    for index, leg in enumerate(legs):
        if index == 0:
            stops.append(leg.departure.airport_code or leg.departure.city)
        stops.append(leg.arrival.airport_code or leg.arrival.city)
    return " → ".join(stop for stop in stops if stop)


def build_route_points(legs: Sequence[Leg]) -> RoutePoints:
    codes = route_codes(legs)
    if len(codes) < 2:
        codes.extend(["TBD", "TBD"])
    points = []
    for code in codes:
        coords = get_coords(code)
        if coords is not None:
            points.append((code, coords))
    return RoutePoints(codes=codes, points=points)


def project_coords(coords: Sequence[Coords], width: float, height: float, padding: float) -> List[Point]:
    """Equirectangular projection of (lat, lon) pairs onto a padded canvas."""

    lats = [lat for lat, _ in coords]
    lons = [lon for _, lon in coords]
    min_lat, max_lat = min(lats), max(lats)
    min_lon, max_lon = min(lons), max(lons)
    lat_range = max(MIN_RANGE_DEG, max_lat - min_lat)
    lon_range = max(MIN_RANGE_DEG, max_lon - min_lon)
    inner_w = width - padding * 2
    inner_h = height - padding * 2
    return [
        (
            padding + (lon - min_lon) / lon_range * inner_w,
            # screen y grows downward
            padding + (max_lat - lat) / lat_range * inner_h,
        )
        for lat, lon in coords
    ]


def zigzag_layout(count: int, width: float, height: float, padding: float) -> List[Point]:
    span = max(1, count - 1)
    return [
        (
            padding + (i / span) * (width - padding * 2),
            height / 2 + (-ZIGZAG_OFFSET if i % 2 == 0 else ZIGZAG_OFFSET),
        )
        for i in range(count)
    ]


def _dot_style(index: int, total: int) -> Tuple[int, str]:
    if index == 0:
        return 6, START_COLOR
    if index == total - 1:
        return 6, END_COLOR
    return 4, STOP_COLOR


def render_svg_map(
    legs: Sequence[Leg],
    height: int = 200,
    width: int = SVG_WIDTH,
    padding: int = SVG_PADDING,
) -> str:
    route = build_route_points(legs)
    if route.has_projection:
        labels = [code for code, _ in route.points]
        points = project_coords(route.coords, width, height, padding)
    else:
        logger.info("Route %s has too few known airports; using placeholder layout", route.codes)
        labels = route.codes
        points = zigzag_layout(len(labels), width, height, padding)

    path = " ".join(
        f"{'M' if i == 0 else 'L'}{x:.2f},{y:.2f}" for i, (x, y) in enumerate(points)
    )
    parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 {width} {height}" '
        f'width="100%" height="{height}" style="display:block;background:#f8fafc">',
        "<defs>"
        '<linearGradient id="routeLine" x1="0" y1="0" x2="1" y2="0">'
        f'<stop offset="0%" stop-color="{START_COLOR}"/>'
        f'<stop offset="100%" stop-color="{END_COLOR}"/>'
        "</linearGradient>"
        "</defs>",
        f'<path d="{path}" fill="none" stroke="url(#routeLine)" stroke-width="2.5" stroke-dasharray="6 5"/>',
    ]
    for i, (x, y) in enumerate(points):
        radius, color = _dot_style(i, len(points))
        label = escape(labels[i] or "TBD")
        parts.append(
            f'<g><circle cx="{x:.2f}" cy="{y:.2f}" r="{radius}" fill="{color}" stroke="#fff" stroke-width="2"/>'
            f'<text x="{x:.2f}" y="{y + 16:.2f}" text-anchor="middle" font-size="9" '
            f'font-weight="700" fill="{LABEL_COLOR}">{label}</text></g>'
        )
    parts.append("</svg>")
    return "".join(parts)


def build_leaflet_spec(legs: Sequence[Leg]) -> Optional[Dict[str, Any]]:
    """Describe a display-only Leaflet map for the route, or None."""

    route = build_route_points(legs)
    if not route.has_projection:
        return None
    total = len(route.points)
    markers = []
    for i, (code, (lat, lon)) in enumerate(route.points):
        _, color = _dot_style(i, total)
        markers.append(
            {
                "code": code,
                "lat": lat,
                "lon": lon,
                "color": color,
                "size": 14 if i in (0, total - 1) else 11,
            }
        )
    lats = [lat for lat, _ in route.coords]
    lons = [lon for _, lon in route.coords]
    return {
        "options": {
            "zoomControl": False,
            "attributionControl": True,
            "scrollWheelZoom": False,
            "dragging": False,
            "touchZoom": False,
            "doubleClickZoom": False,
            "keyboard": False,
            "boxZoom": False,
        },
        "tiles": {
            "url": TILE_URL,
            "attribution": TILE_ATTRIBUTION,
            "subdomains": "abcd",
            "crossOrigin": "anonymous",
            "maxZoom": 19,
        },
        "polyline": {
            "latlngs": [[lat, lon] for lat, lon in route.coords],
            "color": START_COLOR,
            "weight": 2.5,
            "dashArray": "8 5",
            "opacity": 0.85,
        },
        "markers": markers,
        "bounds": [[min(lats), min(lons)], [max(lats), max(lons)]],
        "padding": [SVG_PADDING, SVG_PADDING],
    }


_LEAFLET_MOUNT_JS = """
(function (id, spec) {
  var registry = window.__tripsheetMaps = window.__tripsheetMaps || {};
  if (registry[id]) { registry[id].remove(); delete registry[id]; }
  var map = L.map(id, spec.options);
  L.tileLayer(spec.tiles.url, spec.tiles).addTo(map);
  L.polyline(spec.polyline.latlngs, spec.polyline).addTo(map);
  spec.markers.forEach(function (m) {
    var pin = '<div style="width:' + m.size + 'px;height:' + m.size + 'px;background:' + m.color +
      ';border:2.5px solid white;border-radius:50%;box-shadow:0 2px 6px rgba(0,0,0,0.35)"></div>';
    L.marker([m.lat, m.lon], {icon: L.divIcon({className: '', html: pin,
      iconSize: [m.size, m.size], iconAnchor: [m.size / 2, m.size / 2]})}).addTo(map);
    L.marker([m.lat, m.lon], {icon: L.divIcon({className: '',
      html: '<div class="route-label">' + m.code + '</div>', iconSize: [60, 20], iconAnchor: [0, 0]})}).addTo(map);
  });
  map.fitBounds(spec.bounds, {padding: spec.padding});
  map.attributionControl.setPrefix(false);
  registry[id] = map;
  setTimeout(function () { map.invalidateSize(); }, 0);
})(__CONTAINER_ID__, __SPEC__);
"""


def render_leaflet_html(spec: Dict[str, Any], container_id: str = "route-map", height: int = 200) -> str:
    """Container plus mount script.

    The script removes whatever map is registered for ``container_id``
    before creating the new one, so re-rendering never stacks tile layers.
    """

    script = _LEAFLET_MOUNT_JS.replace("__CONTAINER_ID__", json.dumps(container_id)).replace(
        "__SPEC__", json.dumps(spec)
    )
    return (
        f'<div id="{escape(container_id)}" style="height:{height}px;width:100%"></div>'
        f"<script>{script}</script>"
    )


def render_route_map(
    legs: Sequence[Leg],
    map_style: str = "leaflet",
    export_mode: bool = False,
    height: int = 200,
    container_id: str = "route-map",
) -> RouteMapRender:
    """Pick the live map or the static SVG for this route.

    Exports always get the SVG: tiles are cross-origin and the map is drawn
    asynchronously, so neither survives a DOM snapshot.
    """

    if not export_mode and map_style != "svg":
        spec = build_leaflet_spec(legs)
        if spec is not None:
            return RouteMapRender(mode="leaflet", markup=render_leaflet_html(spec, container_id, height))
    return RouteMapRender(mode="svg", markup=render_svg_map(legs, height=height))
