"""Trip persistence: CRUD over the stored trip list, activity log, reset."""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional, Sequence

from travel_days.config import ACTIVITY_LOG_LIMIT, TRACKER_KEY_PREFIX
from travel_days.models import ActivityEntry, SyncStatus, Traveler, Trip
from travel_days.normalize.records import trip_to_record, trips_from_records
from travel_days.storage.chain import StorageChain, StorageUnavailableError

logger = logging.getLogger(__name__)


class TripNotFoundError(LookupError):
    pass


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass
class LoadResult:
    trips: List[Trip] = field(default_factory=list)
    last_updated: str = ""
    status: SyncStatus = SyncStatus.CONNECTED
    backend: str = ""
    skipped: List[Any] = field(default_factory=list)  # raw records that did not parse


class TripStore:
    """Reads and writes the trip list through a ``StorageChain``.

    Storage outages never raise from here: they are logged and reported as
    ``SyncStatus.ERROR``.
    """

    def __init__(
        self,
        chain: StorageChain,
        key_prefix: str = TRACKER_KEY_PREFIX,
        activity_limit: int = ACTIVITY_LOG_LIMIT,
        admin_password: Optional[str] = None,
        default_traveler: Traveler = Traveler.PERSON_1,
        clock: Callable[[], str] = _utc_now_iso,
    ):
        self.chain = chain
        self.key_prefix = key_prefix
        self.activity_limit = activity_limit
        self.admin_password = admin_password
        self.default_traveler = default_traveler
        self.clock = clock

    def key(self, name: str) -> str:
        return f"{self.key_prefix}:{name}"

    # ------------------------------------------------------------------
    # Trip list
    # ------------------------------------------------------------------

    def load(self) -> LoadResult:
        try:
            trips_res = self.chain.read(self.key("trips"))
            updated_res = self.chain.read(self.key("lastUpdated"))
        except StorageUnavailableError as e:
            logger.error("Failed to load trips: %s", e)
            return LoadResult(last_updated=self.clock(), status=SyncStatus.ERROR)

        try:
            records = trips_res.json(default=[])
        except ValueError as e:
            logger.error("Stored trip list on %s is not valid JSON: %s", trips_res.backend, e)
            return LoadResult(last_updated=self.clock(), status=SyncStatus.ERROR,
                              backend=trips_res.backend)
        if not isinstance(records, list):
            logger.error("Stored trip list on %s is not a JSON array", trips_res.backend)
            return LoadResult(last_updated=self.clock(), status=SyncStatus.ERROR,
                              backend=trips_res.backend)

        skipped: List[Any] = []
        trips = trips_from_records(records, self.default_traveler, skipped)
        return LoadResult(
            trips=trips,
            last_updated=updated_res.value or self.clock(),
            status=trips_res.status,
            backend=trips_res.backend,
            skipped=skipped,
        )

    def save(self, trips: List[Trip], preserved: Sequence[Any] = ()) -> SyncStatus:
        """Replace the stored trip list.

        ``preserved`` raw records are written back unchanged after the trips.
        """
        records = [trip_to_record(t) for t in trips] + list(preserved)
        payload = json.dumps(records, ensure_ascii=False)
        try:
            result = self.chain.write_many({
                self.key("trips"): payload,
                self.key("lastUpdated"): self.clock(),
            })
        except StorageUnavailableError as e:
            logger.error("Failed to save trips: %s", e)
            return SyncStatus.ERROR
        return result.status

    def add_trip(self, trip: Trip) -> SyncStatus:
        loaded = self.load()
        if loaded.status == SyncStatus.ERROR:
            return SyncStatus.ERROR
        return self.save(loaded.trips + [trip], loaded.skipped)

    def update_trip(self, trip_id: str, updated: Trip) -> SyncStatus:
        loaded = self.load()
        if loaded.status == SyncStatus.ERROR:
            return SyncStatus.ERROR
        if not any(t.id == trip_id for t in loaded.trips):
            raise TripNotFoundError(trip_id)
        return self.save(
            [updated if t.id == trip_id else t for t in loaded.trips], loaded.skipped,
        )

    def delete_trip(self, trip_id: str) -> SyncStatus:
        loaded = self.load()
        if loaded.status == SyncStatus.ERROR:
            return SyncStatus.ERROR
        remaining = [t for t in loaded.trips if t.id != trip_id]
        if len(remaining) == len(loaded.trips):
            raise TripNotFoundError(trip_id)
        return self.save(remaining, loaded.skipped)

    def get_trip(self, trip_id: str) -> Trip:
        for trip in self.load().trips:
            if trip.id == trip_id:
                return trip
        raise TripNotFoundError(trip_id)

    # ------------------------------------------------------------------
    # Activity log
    # ------------------------------------------------------------------

    def activity(self) -> List[ActivityEntry]:
        try:
            entries = self.chain.read(self.key("activity")).json(default=[])
        except (StorageUnavailableError, ValueError) as e:
            logger.error("Failed to read activity log: %s", e)
            return []
        return [
            ActivityEntry(
                timestamp=e.get("timestamp", ""),
                action=e.get("action", ""),
                user=e.get("user", ""),
                details=e.get("details", ""),
            )
            for e in entries if isinstance(e, dict)
        ]

    def log_activity(self, action: str, user: str, details: str = "") -> SyncStatus:
        entries = [vars(e) for e in self.activity()]
        entries.append({
            "timestamp": self.clock(),
            "action": action,
            "user": user,
            "details": details,
        })
        if self.activity_limit > 0:
            entries = entries[-self.activity_limit:]
        try:
            return self.chain.write(self.key("activity"), json.dumps(entries, ensure_ascii=False)).status
        except StorageUnavailableError as e:
            logger.error("Failed to log activity: %s", e)
            return SyncStatus.ERROR

    # ------------------------------------------------------------------
    # Reset
    # ------------------------------------------------------------------

    def clear_all(self, admin_password: Optional[str] = None) -> SyncStatus:
        """Delete trips, timestamp and activity log.

        When an admin password is configured, a supplied password must match it.
        """
        if (admin_password is not None and self.admin_password is not None
                and admin_password != self.admin_password):
            raise PermissionError("Invalid admin password")
        try:
            result = self.chain.delete(
                self.key("trips"), self.key("lastUpdated"), self.key("activity"),
            )
        except StorageUnavailableError as e:
            logger.error("Failed to clear data: %s", e)
            return SyncStatus.ERROR
        return result.status
