"""Per-year breakdowns and residency threshold checks."""

from datetime import date
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from travel_days.assemble.day_count import (
    aggregate_country_totals,
    trip_days_in_year,
    trip_years,
)
from travel_days.config import RESIDENCY_THRESHOLD_DAYS, WARNING_MARGIN_DAYS
from travel_days.models import (
    Country,
    ThresholdStatus,
    Traveler,
    TravelerYear,
    Trip,
    TripYearRow,
    YearSummary,
)


def summarize_by_year(
    trips: Sequence[Trip],
    travelers: Sequence[Traveler] = tuple(Traveler),
    countries: Sequence[Country] = tuple(Country),
) -> List[YearSummary]:
    """Group trip days by year and traveler, most recent year first.

    Only years touched by some trip are included. Every traveler appears in
    every year, with no rows and zero totals if they did not travel.
    """
    years = set()
    for trip in trips:
        years.update(trip_years(trip))

    summaries = []
    for year in sorted(years, reverse=True):
        summary = YearSummary(year=year)
        for traveler in travelers:
            ty = TravelerYear(traveler=traveler, totals={c: 0 for c in countries})
            for trip in trips:
                if trip.traveler != traveler or trip.country not in ty.totals:
                    continue
                days = trip_days_in_year(trip, year)
                if days > 0:
                    ty.rows.append(TripYearRow(trip=trip, days=days))
                    ty.totals[trip.country] += days
            ty.rows.sort(key=lambda r: r.trip.departure_date)
            summary.travelers.append(ty)
        summaries.append(summary)

    return summaries


def residency_status(
    totals: Mapping[Country, int],
    thresholds: Optional[Mapping[Country, int]] = None,
    warning_margin: int = WARNING_MARGIN_DAYS,
) -> Dict[Country, ThresholdStatus]:
    """Classify each country's day count against its residency threshold."""
    thresholds = thresholds or {}
    result = {}
    for country, days in totals.items():
        limit = thresholds.get(country, RESIDENCY_THRESHOLD_DAYS)
        if days >= limit:
            result[country] = ThresholdStatus.HIGH_RISK
        elif days >= limit - warning_margin:
            result[country] = ThresholdStatus.APPROACHING
        else:
            result[country] = ThresholdStatus.SAFE
    return result


def current_year_stats(
    trips: Iterable[Trip],
    traveler: Traveler,
    today: Optional[date] = None,
) -> Tuple[Dict[Country, int], int]:
    """Return (country totals for this calendar year, traveler's trip count)."""
    trips = list(trips)
    year = (today or date.today()).year
    totals = aggregate_country_totals(trips, traveler, year)
    trip_count = sum(1 for t in trips if t.traveler == traveler)
    return totals, trip_count
