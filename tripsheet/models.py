"""Core data models for the trip sheet builder."""

import math
from dataclasses import dataclass, field, fields, asdict
from typing import List, Optional, Dict, Any


TEMPLATE_IDS = ("classic", "executive", "premium")
MAP_STYLES = ("leaflet", "svg")
SUGGESTION_TYPES = ("timezone", "timing", "block_time", "privacy", "other")

AIRPORT_TEXT_FIELDS = (
    "airport_code",
    "airport_name",
    "city",
    "state",
    "country",
    "timezone",
    "datetime_local",
)


@dataclass
class FBO:
    name: str
    address: Optional[str] = None
    phone: Optional[str] = None


@dataclass
class Airport:
    airport_code: str = ""
    airport_name: str = ""
    city: str = ""
    state: str = ""
    country: str = ""
    timezone: str = ""
    datetime_local: str = ""
    fbo: Optional[FBO] = None


@dataclass
class LegMetrics:
    distance_nm: Optional[float] = None
    block_time_minutes: Optional[int] = None


@dataclass
class Leg:
    leg_id: str
    label: str
    date_local: str
    departure: Airport
    arrival: Airport
    metrics: LegMetrics = field(default_factory=LegMetrics)
    notes: Optional[str] = None


@dataclass
class Client:
    name: str
    company: Optional[str] = None
    email: Optional[str] = None


@dataclass
class Aircraft:
    model: str
    tail_number: str
    category: Optional[str] = None


@dataclass
class Passenger:
    full_name: str
    notes: Optional[str] = None


@dataclass
class CrewMember:
    role: str
    name: str
    phone: Optional[str] = None


@dataclass
class Visibility:
    show_tail_number: bool = True
    show_fbo_name: bool = True
    show_fbo_contact: bool = True
    show_passenger_names: bool = True
    show_weather: bool = True
    show_crew_contact: bool = True


VISIBILITY_FLAGS = tuple(f.name for f in fields(Visibility))


@dataclass
class Trip:
    trip_id: str
    client: Client
    aircraft: Aircraft
    legs: List[Leg]
    passengers: List[Passenger] = field(default_factory=list)
    crew: List[CrewMember] = field(default_factory=list)
    visibility: Visibility = field(default_factory=Visibility)


@dataclass
class BrokerProfile:
    company_name: str
    primary_color: str = "#008080"
    tagline: Optional[str] = None
    logo_dataurl: Optional[str] = None
    exterior_image_dataurl: Optional[str] = None
    interior_image_dataurl: Optional[str] = None
    image_usage: Dict[str, bool] = field(
        default_factory=lambda: {"classic": True, "executive": False, "premium": False}
    )
    map_style: Dict[str, str] = field(
        default_factory=lambda: {t: "leaflet" for t in TEMPLATE_IDS}
    )
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None

    def uses_images(self, template_id: str) -> bool:
        return bool(self.image_usage.get(template_id, False))

    def map_style_for(self, template_id: str) -> str:
        style = self.map_style.get(template_id, "leaflet")
        return style if style in MAP_STYLES else "leaflet"


def default_broker_profile() -> BrokerProfile:
    return BrokerProfile(
        company_name="24|7 Jet",
        tagline="Private Charter",
        primary_color="#008080",
        address="7426 Hayvenhurst Ave., Van Nuys, CA 91406",
        phone="818-247-5387",
        email="charter@247jet.com",
    )


@dataclass
class SuggestedFix:
    field: str
    value: Any


@dataclass
class AISuggestion:
    id: str
    type: str
    message: str
    explanation: str
    affected_leg_id: Optional[str] = None
    suggested_fix: Optional[SuggestedFix] = None


# ---------------------------------------------------------------------------
# Dict conversion
# ---------------------------------------------------------------------------


def _str(value: Any, default: str = "") -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return default


def _opt_str(value: Any) -> Optional[str]:
    text = _str(value)
    return text or None


def _opt_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def _dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def fbo_from_dict(data: Any) -> Optional[FBO]:
    data = _dict(data)
    name, address, phone = _str(data.get("name")), _opt_str(data.get("address")), _opt_str(data.get("phone"))
    if not (name or address or phone):
        return None
    return FBO(name=name, address=address, phone=phone)


def airport_from_dict(data: Any) -> Airport:
    data = _dict(data)
    values = {name: _str(data.get(name)) for name in AIRPORT_TEXT_FIELDS}
    return Airport(**values, fbo=fbo_from_dict(data.get("fbo")))


def metrics_from_dict(data: Any) -> LegMetrics:
    data = _dict(data)
    distance = _opt_number(data.get("distance_nm"))
    block = _opt_number(data.get("block_time_minutes"))
    return LegMetrics(
        distance_nm=distance,
        block_time_minutes=int(round(block)) if block is not None else None,
    )


def leg_from_dict(data: Any, index: int = 0) -> Leg:
    data = _dict(data)
    return Leg(
        leg_id=_str(data.get("leg_id")) or f"leg-{index}",
        label=_str(data.get("label")),
        date_local=_str(data.get("date_local")),
        departure=airport_from_dict(data.get("departure")),
        arrival=airport_from_dict(data.get("arrival")),
        metrics=metrics_from_dict(data.get("metrics")),
        notes=_opt_str(data.get("notes")),
    )


def visibility_from_dict(data: Any) -> Visibility:
    data = _dict(data)
    flags = {name: data[name] for name in VISIBILITY_FLAGS if isinstance(data.get(name), bool)}
    return Visibility(**flags)


def _passenger(item: Any) -> Optional[Passenger]:
    if isinstance(item, str):
        return Passenger(full_name=item) if item.strip() else None
    item = _dict(item)
    name = _str(item.get("full_name")) or _str(item.get("name"))
    if not name:
        return None
    return Passenger(full_name=name, notes=_opt_str(item.get("notes")))


def _crew_member(item: Any) -> Optional[CrewMember]:
    item = _dict(item)
    role, name = _str(item.get("role")), _str(item.get("name"))
    if not (role or name):
        return None
    return CrewMember(role=role, name=name, phone=_opt_str(item.get("phone")))


def trip_from_dict(data: Any) -> Trip:
    """Build a Trip from a JSON-like dict without filling placeholders."""

    data = _dict(data)
    client = _dict(data.get("client"))
    aircraft = _dict(data.get("aircraft"))
    raw_legs = _list(data.get("legs"))
    passengers = [p for p in map(_passenger, _list(data.get("passengers"))) if p]
    crew = [c for c in map(_crew_member, _list(data.get("crew"))) if c]
    return Trip(
        trip_id=_str(data.get("trip_id")),
        client=Client(
            name=_str(client.get("name")),
            company=_opt_str(client.get("company")),
            email=_opt_str(client.get("email")),
        ),
        aircraft=Aircraft(
            model=_str(aircraft.get("model")),
            tail_number=_str(aircraft.get("tail_number")),
            category=_opt_str(aircraft.get("category")),
        ),
        legs=[leg_from_dict(leg, i) for i, leg in enumerate(raw_legs)],
        passengers=passengers,
        crew=crew,
        visibility=visibility_from_dict(data.get("visibility")),
    )


def trip_to_dict(trip: Trip) -> Dict[str, Any]:
    """Convenience helper for serializing trips in APIs."""

    return asdict(trip)


def broker_profile_from_dict(data: Any) -> BrokerProfile:
    data = _dict(data)
    profile = default_broker_profile()
    for name in (
        "company_name",
        "primary_color",
        "tagline",
        "logo_dataurl",
        "exterior_image_dataurl",
        "interior_image_dataurl",
        "address",
        "phone",
        "email",
        "website",
    ):
        if name in data:
            value = _str(data.get(name))
            setattr(profile, name, value if name in ("company_name", "primary_color") else value or None)
    image_usage = _dict(data.get("image_usage"))
    for template_id in TEMPLATE_IDS:
        if isinstance(image_usage.get(template_id), bool):
            profile.image_usage[template_id] = image_usage[template_id]
    map_style = _dict(data.get("map_style"))
    for template_id in TEMPLATE_IDS:
        if map_style.get(template_id) in MAP_STYLES:
            profile.map_style[template_id] = map_style[template_id]
    return profile


def broker_profile_to_dict(profile: BrokerProfile) -> Dict[str, Any]:
    return asdict(profile)


def suggestion_from_dict(data: Any) -> Optional[AISuggestion]:
    data = _dict(data)
    message = _str(data.get("message"))
    if not message:
        return None
    fix_data = data.get("suggested_fix")
    fix = None
    if isinstance(fix_data, dict) and _str(fix_data.get("field")):
        fix = SuggestedFix(field=_str(fix_data.get("field")), value=fix_data.get("value"))
    kind = _str(data.get("type"), "other")
    return AISuggestion(
        id=_str(data.get("id")),
        type=kind if kind in SUGGESTION_TYPES else "other",
        message=message,
        explanation=_str(data.get("explanation")),
        affected_leg_id=_opt_str(data.get("affected_leg_id")),
        suggested_fix=fix,
    )


def suggestion_to_dict(suggestion: AISuggestion) -> Dict[str, Any]:
    return asdict(suggestion)
