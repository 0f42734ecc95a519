"""In-memory trip history and share links."""

from __future__ import annotations

import copy
import dataclasses
import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional
from uuid import uuid4

from ..models import BrokerProfile, Trip
from .images import compress_data_url


logger = logging.getLogger(__name__)


@dataclass
class StoredTrip:
    id: str
    trip_id: str
    client_name: str
    route: str
    trip: Trip
    template: str
    created_at: datetime


@dataclass
class SharedTrip:
    trip: Trip
    broker_profile: BrokerProfile
    template: str
    user_id: str
    created_at: datetime


def build_route(trip: Trip) -> str:
    if not trip.legs:
        return "—"
    first = trip.legs[0].departure.airport_code or "?"
    last = trip.legs[-1].arrival.airport_code or "?"
    return f"{first} → {last}"


def compress_profile_images(profile: BrokerProfile) -> BrokerProfile:
    """Copy of ``profile`` with inline images downscaled for sharing."""

    updates = {}
    if profile.logo_dataurl:
        updates["logo_dataurl"] = compress_data_url(profile.logo_dataurl, fmt="PNG")
    if profile.exterior_image_dataurl:
        updates["exterior_image_dataurl"] = compress_data_url(profile.exterior_image_dataurl)
    if profile.interior_image_dataurl:
        updates["interior_image_dataurl"] = compress_data_url(profile.interior_image_dataurl)
    return dataclasses.replace(copy.deepcopy(profile), **updates)


class TripStore:
    """Saved trips per user plus public share records, keyed by opaque ids."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._trips: Dict[str, Dict[str, StoredTrip]] = {}
        self._shared: Dict[str, SharedTrip] = {}

    def save_trip(self, user_id: str, trip: Trip, template: str) -> str:
        doc_id = uuid4().hex
        record = StoredTrip(
            id=doc_id,
            trip_id=trip.trip_id,
            client_name=trip.client.name or "Unknown",
            route=build_route(trip),
            trip=copy.deepcopy(trip),
            template=template,
            created_at=datetime.now(timezone.utc),
        )
        with self._lock:
            self._trips.setdefault(user_id, {})[doc_id] = record
        return doc_id

    def load_trips(self, user_id: str) -> List[StoredTrip]:
        with self._lock:
            records = list(self._trips.get(user_id, {}).values())
        return sorted(records, key=lambda r: r.created_at, reverse=True)

    def delete_trip(self, user_id: str, doc_id: str) -> bool:
        with self._lock:
            return self._trips.get(user_id, {}).pop(doc_id, None) is not None

    def create_share_link(
        self, user_id: str, trip: Trip, profile: BrokerProfile, template: str
    ) -> str:
        share_id = uuid4().hex[:14]
        record = SharedTrip(
            trip=copy.deepcopy(trip),
            broker_profile=compress_profile_images(profile),
            template=template,
            user_id=user_id,
            created_at=datetime.now(timezone.utc),
        )
        with self._lock:
            self._shared[share_id] = record
        logger.info("Created share link %s for trip %s", share_id, trip.trip_id)
        return share_id

    def load_shared_trip(self, share_id: str) -> Optional[SharedTrip]:
        with self._lock:
            return self._shared.get(share_id)
