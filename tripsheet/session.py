"""Editing session: the one place a trip, its branding and its suggestions live.

Every change replaces a whole sub-object (trip, broker profile, template or
suggestion list) and then notifies subscribers, which is where persistence
hooks ("schedule a save") attach.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from .agent import run_upload_pipeline
from .field_paths import apply_suggestion, apply_suggestions
from .models import (
    AISuggestion,
    Aircraft,
    Airport,
    BrokerProfile,
    Client,
    CrewMember,
    FBO,
    Leg,
    LegMetrics,
    Passenger,
    SuggestedFix,
    TEMPLATE_IDS,
    Trip,
    Visibility,
    default_broker_profile,
    suggestion_from_dict,
    trip_from_dict,
)
from .preview import export_filename, render_itinerary_html
from .services.billing import Entitlement


logger = logging.getLogger(__name__)

Listener = Callable[[str, Any], None]
UploadPipeline = Callable[[bytes, str], Dict[str, Any]]
Rasterizer = Callable[[str], bytes]

EXPORT_OK = "ok"
EXPORT_PAYMENT_REQUIRED = "payment_required"
EXPORT_FAILED = "failed"


class UploadInProgressError(RuntimeError):
    """Raised when an upload starts while another is still running."""


@dataclass
class Notification:
    level: str
    message: str


@dataclass
class ExportResult:
    status: str
    filename: Optional[str] = None
    content: Optional[bytes] = None
    error: Optional[str] = None


class TripSession:
    def __init__(
        self,
        broker_profile: Optional[BrokerProfile] = None,
        template: str = "classic",
        pipeline: UploadPipeline = run_upload_pipeline,
    ) -> None:
        self.trip: Optional[Trip] = None
        self.broker_profile = broker_profile or default_broker_profile()
        self.template = template if template in TEMPLATE_IDS else "classic"
        self.suggestions: List[AISuggestion] = []
        self.notifications: List[Notification] = []
        self.is_processing = False
        self.is_exporting = False
        self._pipeline = pipeline
        self._listeners: List[Listener] = []

    # -- observers ---------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener(name, value)``; returns an unsubscribe function."""

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _replace(self, name: str, value: Any) -> None:
        setattr(self, name, value)
        for listener in list(self._listeners):
            listener(name, value)

    def notify(self, level: str, message: str) -> None:
        self.notifications.append(Notification(level, message))

    # -- whole-object updates ----------------------------------------------

    def update_trip(self, trip: Trip) -> None:
        if not trip.legs:
            raise ValueError("A trip must keep at least one leg.")
        self._replace("trip", trip)

    def update_broker_profile(self, profile: BrokerProfile) -> None:
        self._replace("broker_profile", profile)

    def select_template(self, template: str) -> None:
        if template not in TEMPLATE_IDS:
            raise ValueError(f"Unknown template '{template}'.")
        self._replace("template", template)

    # -- legs ----------------------------------------------------------------

    def add_leg(self) -> Optional[Leg]:
        """Append a blank leg that carries over the last leg's date and timezone."""

        if self.trip is None:
            return None
        legs = self.trip.legs
        taken = {leg.leg_id for leg in legs}
        index = len(legs)
        while f"leg-{index}" in taken:
            index += 1
        last = legs[-1] if legs else None
        timezone = last.arrival.timezone if last else ""
        leg = Leg(
            leg_id=f"leg-{index}",
            label=f"Leg {len(legs) + 1}",
            date_local=last.date_local if last else "",
            departure=Airport(timezone=timezone),
            arrival=Airport(timezone=timezone),
        )
        self._replace("trip", dataclasses.replace(self.trip, legs=[*legs, leg]))
        return leg

    def remove_leg(self, leg_id: str) -> None:
        """Drop a leg by id; the last remaining leg is never removed."""

        if self.trip is None or len(self.trip.legs) <= 1:
            return
        legs = [leg for leg in self.trip.legs if leg.leg_id != leg_id]
        if len(legs) == len(self.trip.legs):
            return
        self._replace("trip", dataclasses.replace(self.trip, legs=legs))

    # -- upload --------------------------------------------------------------

    def process_upload(self, file_bytes: bytes, mime_type: str) -> bool:
        """Run the upload pipeline; True when a trip was installed."""

        if self.is_processing:
            raise UploadInProgressError("An upload is already being processed.")
        self.is_processing = True
        try:
            try:
                state = self._pipeline(file_bytes, mime_type)
            except Exception as exc:  # noqa: BLE001
                logger.exception("Upload pipeline crashed")
                state = {"error": str(exc)}
            if state.get("error") or not state.get("trip"):
                self.notify("error", "Failed to extract trip data. Check your API key and try again.")
                return False
            self._replace("trip", trip_from_dict(state["trip"]))
            suggestions = [
                s for s in map(suggestion_from_dict, state.get("suggestions") or []) if s
            ]
            self._replace("suggestions", suggestions)
            return True
        finally:
            self.is_processing = False

    def load_sample_trip(self) -> None:
        self._replace("trip", sample_trip())
        self._replace("suggestions", sample_suggestions())

    # -- suggestions -----------------------------------------------------------

    def _find_suggestion(self, suggestion_id: str) -> Optional[AISuggestion]:
        return next((s for s in self.suggestions if s.id == suggestion_id), None)

    def apply_suggestion(self, suggestion_id: str) -> None:
        suggestion = self._find_suggestion(suggestion_id)
        if suggestion is None or self.trip is None or suggestion.suggested_fix is None:
            return
        self._replace("trip", apply_suggestion(self.trip, suggestion))
        self.dismiss_suggestion(suggestion_id)

    def dismiss_suggestion(self, suggestion_id: str) -> None:
        self._replace("suggestions", [s for s in self.suggestions if s.id != suggestion_id])

    def apply_all_suggestions(self) -> None:
        if self.trip is None or not self.suggestions:
            return
        self._replace("trip", apply_suggestions(self.trip, self.suggestions))
        self._replace("suggestions", [])
        self.notify("success", "All suggestions applied.")

    # -- export ------------------------------------------------------------------

    def export(self, entitlement: Entitlement, rasterize: Rasterizer) -> ExportResult:
        """Render the export view and hand it to ``rasterize``.

        The entitlement is checked before any rendering work.
        """

        if self.trip is None:
            return ExportResult(status=EXPORT_FAILED, error="No trip loaded.")
        if not entitlement.can_export:
            logger.info("Export blocked: no exports remaining")
            return ExportResult(status=EXPORT_PAYMENT_REQUIRED)

        self.is_exporting = True
        try:
            html = render_itinerary_html(
                self.trip, self.broker_profile, self.template, export_mode=True
            )
            content = rasterize(html)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Export failed: %s", exc)
            self.notify("error", "Failed to generate PDF. Please try again.")
            return ExportResult(status=EXPORT_FAILED, error=str(exc))
        finally:
            self.is_exporting = False

        self.notify("success", "PDF downloaded successfully.")
        return ExportResult(status=EXPORT_OK, filename=export_filename(self.trip), content=content)


def sample_trip() -> Trip:
    castle = FBO(
        name="Castle & Cooke Aviation (South)",
        address="7415 Hayvenhurst Place, Van Nuys, CA 91406",
        phone="818-988-8385",
    )
    signature = FBO(
        name="Signature Flight Support",
        address="323 Martin Ave, Santa Clara, CA 95050",
        phone="669-800-1992",
    )

    def vny(when: str) -> Airport:
        return Airport("VNY", "Van Nuys Airport", "Van Nuys", "CA", "USA", "PDT", when, castle)

    def sjc(when: str) -> Airport:
        return Airport("SJC", "San Jose Mineta Intl", "San Jose", "CA", "USA", "PDT", when, signature)

    return Trip(
        trip_id="HYXND2",
        client=Client(name="Calvin Yoon", company="Amalfi Capital", email="charter@amalfijets.com"),
        aircraft=Aircraft(model="Bombardier Challenger 601", tail_number="N116HL", category="Heavy Jet"),
        passengers=[Passenger("Arizechukwu Nwosu"), Passenger("Ikenna Guy Nwosu")],
        crew=[
            CrewMember("PIC", "Robert Temple", "760-801-8534"),
            CrewMember("SIC", "Khondker Nazmul Islam"),
            CrewMember("FA", "Laura Lopez", "661-305-0549"),
        ],
        legs=[
            Leg(
                "leg-0", "Outbound", "2023-06-25",
                vny("2023-06-25T12:58:00"), sjc("2023-06-25T14:00:00"),
                LegMetrics(distance_nm=290, block_time_minutes=62),
            ),
            Leg(
                "leg-1", "Return", "2023-06-27",
                sjc("2023-06-27T16:30:00"), vny("2023-06-27T17:30:00"),
                LegMetrics(distance_nm=290, block_time_minutes=60),
            ),
        ],
        visibility=Visibility(show_weather=False),
    )


def sample_suggestions() -> List[AISuggestion]:
    return [
        AISuggestion(
            id="s1",
            type="privacy",
            message="Consider hiding the tail number",
            explanation="For initial client presentations, hiding the tail number protects operator identity.",
            suggested_fix=SuggestedFix(field="visibility.show_tail_number", value="false"),
        ),
        AISuggestion(
            id="s2",
            type="other",
            message="Round trip detected",
            explanation="Leg 2 returns to the Leg 1 origin. Labels already set to Outbound / Return.",
        ),
    ]
