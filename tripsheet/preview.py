"""Client-facing itinerary HTML."""

from __future__ import annotations

from html import escape
from typing import List, Optional

from .models import Airport, BrokerProfile, Leg, TEMPLATE_IDS, Trip
from .route_map import render_route_map, route_label
from .utils import format_block_time, format_friendly_date, format_friendly_time


LEAFLET_ASSETS = (
    '<link rel="stylesheet" href="https://unpkg.com/leaflet@1.9.4/dist/leaflet.css" crossorigin="anonymous">'
    '<script src="https://unpkg.com/leaflet@1.9.4/dist/leaflet.js" crossorigin="anonymous"></script>'
)


def export_filename(trip: Trip) -> str:
    return f"TripSheet-{(trip.trip_id or 'export').upper()}.pdf"


def image_tag(src: Optional[str], alt: str, css_class: str = "") -> str:
    """``<img>`` for inline or hosted images.

    Hosted images are marked ``crossorigin="anonymous"``; without it the
    rasterizer's canvas is tainted and the export fails.
    """

    if not src:
        return ""
    attrs = f'src="{escape(src)}" alt="{escape(alt)}"'
    if css_class:
        attrs += f' class="{css_class}"'
    if not src.startswith("data:"):
        attrs += ' crossorigin="anonymous"'
    return f"<img {attrs}>"


def _airport_block(airport: Airport, trip: Trip, title: str) -> str:
    visibility = trip.visibility
    place = ", ".join(part for part in (airport.city, airport.state, airport.country) if part)
    time_text = format_friendly_time(airport.datetime_local)
    if airport.timezone:
        time_text = f"{time_text} {airport.timezone}"
    lines = [
        f'<div class="airport"><span class="caption">{escape(title)}</span>',
        f'<strong class="code">{escape(airport.airport_code)}</strong>',
        f"<div>{escape(airport.airport_name)}</div>",
        f'<div class="muted">{escape(place)}</div>',
        f'<div class="time">{escape(time_text)}</div>',
    ]
    fbo = airport.fbo
    if fbo and visibility.show_fbo_name and fbo.name:
        lines.append(f'<div class="fbo">FBO: {escape(fbo.name)}</div>')
    if fbo and visibility.show_fbo_contact:
        for detail in (fbo.address, fbo.phone):
            if detail:
                lines.append(f'<div class="fbo muted">{escape(detail)}</div>')
    lines.append("</div>")
    return "".join(lines)


def _leg_section(leg: Leg, trip: Trip) -> str:
    metrics: List[str] = [f"Block {format_block_time(leg.metrics.block_time_minutes)}"]
    if leg.metrics.distance_nm is not None:
        metrics.append(f"{leg.metrics.distance_nm:g} nm")
    date_text = format_friendly_date(leg.date_local or leg.departure.datetime_local.split("T")[0])
    return (
        f'<section class="leg" id="{escape(leg.leg_id)}">'
        f'<header><h3>{escape(leg.label)}</h3><span class="muted">{escape(date_text)}</span></header>'
        f'<div class="airports">{_airport_block(leg.departure, trip, "Depart")}'
        f'{_airport_block(leg.arrival, trip, "Arrive")}</div>'
        f'<div class="metrics">{escape(" · ".join(metrics))}</div>'
        "</section>"
    )


def _people_section(trip: Trip) -> str:
    visibility = trip.visibility
    parts = []
    if trip.passengers:
        if visibility.show_passenger_names:
            names = "".join(f"<li>{escape(p.full_name)}</li>" for p in trip.passengers)
            parts.append(f"<h4>Passengers</h4><ul>{names}</ul>")
        else:
            parts.append(f"<h4>Passengers</h4><p>{len(trip.passengers)} passenger(s)</p>")
    if trip.crew:
        rows = []
        for member in trip.crew:
            row = f"{escape(member.role)} · {escape(member.name)}"
            if visibility.show_crew_contact and member.phone:
                row += f" · {escape(member.phone)}"
            rows.append(f"<li>{row}</li>")
        parts.append(f"<h4>Crew</h4><ul>{''.join(rows)}</ul>")
    return f'<section class="people">{"".join(parts)}</section>' if parts else ""


def _broker_footer(profile: BrokerProfile) -> str:
    contact = [profile.address, profile.phone, profile.email, profile.website]
    details = " · ".join(escape(c) for c in contact if c)
    return f'<footer><strong>{escape(profile.company_name)}</strong><div class="muted">{details}</div></footer>'


def render_itinerary_html(
    trip: Trip,
    profile: BrokerProfile,
    template_id: str = "classic",
    export_mode: bool = False,
) -> str:
    """Render the branded itinerary for ``template_id``.

    ``export_mode`` forces the static SVG map so the page can be captured
    as an image.
    """

    if template_id not in TEMPLATE_IDS:
        template_id = "classic"
    route_map = render_route_map(
        trip.legs,
        map_style=profile.map_style_for(template_id),
        export_mode=export_mode,
    )
    color = escape(profile.primary_color)

    header = [
        f'<header class="brand" style="border-color:{color}">',
        image_tag(profile.logo_dataurl, profile.company_name, "logo"),
        f"<div><h1>{escape(profile.company_name)}</h1>",
    ]
    if profile.tagline:
        header.append(f'<div class="muted">{escape(profile.tagline)}</div>')
    header.append("</div></header>")

    aircraft = escape(trip.aircraft.model)
    if trip.visibility.show_tail_number:
        aircraft += f" · {escape(trip.aircraft.tail_number)}"
    if trip.aircraft.category:
        aircraft += f" · {escape(trip.aircraft.category)}"

    summary = (
        '<section class="summary">'
        f"<h2>{escape(route_label(trip.legs))}</h2>"
        f'<div>Trip #{escape(trip.trip_id)} · Prepared for {escape(trip.client.name)}</div>'
        f'<div class="muted">{aircraft}</div>'
        "</section>"
    )

    gallery = ""
    if profile.uses_images(template_id):
        images = image_tag(profile.exterior_image_dataurl, "Aircraft exterior") + image_tag(
            profile.interior_image_dataurl, "Aircraft interior"
        )
        if images:
            gallery = f'<section class="gallery">{images}</section>'

    head = "<meta charset=\"utf-8\">" + ("" if route_map.mode == "svg" else LEAFLET_ASSETS)
    body = "".join(
        [
            f'<div id="pdf-content" class="template-{template_id}" style="--brand:{color}">',
            "".join(header),
            summary,
            gallery,
            f'<section class="map">{route_map.markup}</section>',
            "".join(_leg_section(leg, trip) for leg in trip.legs),
            _people_section(trip),
            _broker_footer(profile),
            "</div>",
        ]
    )
    return f"<!DOCTYPE html><html><head>{head}<title>{escape(export_filename(trip))}</title></head><body>{body}</body></html>"
