"""Conversion between stored trip records (JSON dicts) and Trip values."""

import logging
import time
from typing import Any, Dict, Iterable, List, Optional

from travel_days.models import Country, Traveler, Trip
from travel_days.normalize.date_parser import parse_date

logger = logging.getLogger(__name__)


class InvalidTripError(ValueError):
    pass


def _field(raw: Dict[str, Any], *names: str) -> Any:
    for name in names:
        value = raw.get(name)
        if value not in (None, ""):
            return value
    return None


def new_trip_id(now: Optional[float] = None) -> str:
    """Millisecond timestamp id, the same shape older records use."""
    return str(int((time.time() if now is None else now) * 1000))


def trip_from_record(raw: Dict[str, Any], default_traveler: Traveler = Traveler.PERSON_1) -> Trip:
    """Build a Trip from a stored record.

    Accepts camelCase (stored format) or snake_case keys. Records written
    before travelers were tracked have no traveler and get ``default_traveler``.
    """
    if not isinstance(raw, dict):
        raise InvalidTripError(f"Trip record must be an object, got {type(raw).__name__}")

    trip_id = _field(raw, "id")
    if trip_id is None:
        raise InvalidTripError("Trip record has no id")

    traveler_raw = _field(raw, "traveler")
    try:
        traveler = Traveler(traveler_raw) if traveler_raw else Traveler(default_traveler)
    except ValueError:
        raise InvalidTripError(f"Unknown traveler {traveler_raw!r} in trip {trip_id}") from None

    country_raw = _field(raw, "country")
    try:
        country = Country(country_raw)
    except ValueError:
        raise InvalidTripError(f"Unknown country {country_raw!r} in trip {trip_id}") from None

    dep_raw = _field(raw, "departureDate", "departure_date")
    arr_raw = _field(raw, "arrivalDate", "arrival_date")
    departure = parse_date(str(dep_raw)) if dep_raw is not None else None
    arrival = parse_date(str(arr_raw)) if arr_raw is not None else None
    if departure is None or arrival is None:
        raise InvalidTripError(
            f"Trip {trip_id} has invalid dates (departure={dep_raw!r}, arrival={arr_raw!r})"
        )

    return Trip(
        id=str(trip_id),
        traveler=traveler,
        country=country,
        departure_date=departure,
        arrival_date=arrival,
        notes=str(raw.get("notes") or ""),
    )


def trip_to_record(trip: Trip) -> Dict[str, Any]:
    return {
        "id": trip.id,
        "traveler": trip.traveler.value,
        "country": trip.country.value,
        "departureDate": trip.departure_date.isoformat(),
        "arrivalDate": trip.arrival_date.isoformat(),
        "notes": trip.notes,
    }


def trips_from_records(
    records: Iterable[Dict[str, Any]],
    default_traveler: Traveler = Traveler.PERSON_1,
    skipped: Optional[List[Any]] = None,
) -> List[Trip]:
    """Convert stored records, skipping (and logging) any that are invalid.

    Skipped raw records are appended to ``skipped`` when it is given.
    Trips whose arrival precedes departure are kept; day counts treat them
    as the normalized range, but they are logged as suspect.
    """
    trips = []
    for raw in records:
        try:
            trip = trip_from_record(raw, default_traveler)
        except InvalidTripError as e:
            logger.warning("Skipping trip record: %s", e)
            if skipped is not None:
                skipped.append(raw)
            continue
        if trip.is_reversed:
            logger.warning(
                "Trip %s arrives (%s) before it departs (%s); counting the reversed range",
                trip.id, trip.arrival_date, trip.departure_date,
            )
        trips.append(trip)
    return trips


def validate_trip(trip: Trip) -> Trip:
    """Reject trips whose arrival precedes departure; used for new input."""
    if trip.is_reversed:
        raise ValueError("Trip arrival date cannot be before departure date")
    return trip
