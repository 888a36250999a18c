"""Day accounting: inclusive trip lengths, per-year overlaps and country totals.

Two counting conventions live here and must not be unified:

  - ``inclusive_day_count`` counts both the departure and the arrival day
    (a same-day trip is 1 day).
  - ``days_overlapping_year`` counts the whole days between the clamped
    start and end, without the +1, so a trip crossing New Year does not
    place the boundary day in both years.

Yearly totals are built from the second; lifetime trip lengths from the first.
"""

from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence

from travel_days.models import Country, Traveler, Trip
from travel_days.normalize.date_parser import DateLike, to_date


def _ordered(start: DateLike, end: DateLike) -> tuple[date, date]:
    a, b = to_date(start), to_date(end)
    return (a, b) if a <= b else (b, a)


def inclusive_day_count(start: DateLike, end: DateLike) -> int:
    """Number of calendar days from start to end, counting both ends.

    Order-independent: a reversed range yields the same count.
    """
    a, b = _ordered(start, end)
    return (b - a).days + 1


def days_overlapping_year(start: DateLike, end: DateLike, year: int) -> int:
    """Days of the trip [start, end] that fall within calendar ``year``.

    Returns 0 when the trip does not touch the year.
    """
    a, b = _ordered(start, end)
    overlap_start = max(a, date(year, 1, 1))
    overlap_end = min(b, date(year, 12, 31))
    if overlap_start > overlap_end:
        return 0
    return (overlap_end - overlap_start).days


def trip_days_in_year(trip: Trip, year: int) -> int:
    return days_overlapping_year(trip.departure_date, trip.arrival_date, year)


def aggregate_country_totals(
    trips: Iterable[Trip],
    traveler: Traveler,
    year: int,
    countries: Sequence[Country] = tuple(Country),
) -> Dict[Country, int]:
    """Sum each country's days in ``year`` over the traveler's trips.

    Every country in ``countries`` is present in the result, zero if unvisited.
    """
    totals: Dict[Country, int] = {c: 0 for c in countries}
    for trip in trips:
        if trip.traveler != traveler or trip.country not in totals:
            continue
        days = trip_days_in_year(trip, year)
        if days:
            totals[trip.country] += days
    return totals


def trip_years(trip: Trip) -> range:
    """Every calendar year from the trip's first year to its last."""
    a, b = _ordered(trip.departure_date, trip.arrival_date)
    return range(a.year, b.year + 1)


def enumerate_available_years(trips: Iterable[Trip], today: Optional[date] = None) -> List[int]:
    """Distinct years touched by any trip plus the current year, newest first."""
    today = today or date.today()
    years = {today.year}
    for trip in trips:
        years.update(trip_years(trip))
    return sorted(years, reverse=True)
