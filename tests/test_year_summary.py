"""
Unit tests for per-year summaries and residency thresholds
"""

from datetime import date

from conftest import make_trip
from travel_days.assemble.year_summary import (
    current_year_stats,
    residency_status,
    summarize_by_year,
)
from travel_days.models import Country, ThresholdStatus, Traveler


class TestSummarizeByYear:
    def test_empty(self):
        assert summarize_by_year([]) == []

    def test_years_descending_with_all_travelers(self):
        trips = [
            make_trip("2023-12-25", "2024-01-05", Country.UK, trip_id="1"),
            make_trip("2022-03-01", "2022-03-05", Country.GREECE, trip_id="2"),
        ]
        summaries = summarize_by_year(trips)
        assert [s.year for s in summaries] == [2024, 2023, 2022]
        for s in summaries:
            assert [ty.traveler for ty in s.travelers] == [Traveler.PERSON_1, Traveler.PERSON_2]

    def test_rows_and_totals(self):
        trips = [
            make_trip("2024-07-01", "2024-07-03", Country.UK, trip_id="2"),
            make_trip("2024-06-01", "2024-06-10", Country.GREECE, trip_id="1"),
            make_trip("2024-08-01", "2024-08-05", Country.GREECE,
                      traveler=Traveler.PERSON_2, trip_id="3"),
        ]
        (summary,) = summarize_by_year(trips)
        p1 = summary.for_traveler(Traveler.PERSON_1)
        assert [r.trip.id for r in p1.rows] == ["1", "2"]  # sorted by departure
        assert [r.days for r in p1.rows] == [9, 2]
        assert p1.totals == {Country.GREECE: 9, Country.UK: 2}
        assert p1.total_days == 11

        p2 = summary.for_traveler(Traveler.PERSON_2)
        assert p2.totals == {Country.GREECE: 4, Country.UK: 0}

    def test_traveler_without_trips_has_empty_rows(self):
        (summary,) = summarize_by_year([make_trip("2024-06-01", "2024-06-10")])
        p2 = summary.for_traveler(Traveler.PERSON_2)
        assert p2.rows == []
        assert p2.total_days == 0

    def test_zero_day_shares_are_left_out(self):
        # Dec 31 -> Jan 1 contributes nothing to either year
        summaries = summarize_by_year([make_trip("2023-12-31", "2024-01-01")])
        assert [s.year for s in summaries] == [2024, 2023]
        assert all(s.for_traveler(Traveler.PERSON_1).rows == [] for s in summaries)


class TestResidencyStatus:
    def test_default_threshold_bands(self):
        totals = {Country.GREECE: 149, Country.UK: 150}
        assert residency_status(totals) == {
            Country.GREECE: ThresholdStatus.SAFE,
            Country.UK: ThresholdStatus.APPROACHING,
        }

    def test_at_threshold_is_high_risk(self):
        assert residency_status({Country.UK: 183})[Country.UK] == ThresholdStatus.HIGH_RISK

    def test_custom_threshold_and_margin(self):
        status = residency_status(
            {Country.GREECE: 85, Country.UK: 40},
            thresholds={Country.GREECE: 90, Country.UK: 90},
            warning_margin=10,
        )
        assert status == {
            Country.GREECE: ThresholdStatus.APPROACHING,
            Country.UK: ThresholdStatus.SAFE,
        }


class TestCurrentYearStats:
    def test_counts_current_year_and_all_trips(self):
        trips = [
            make_trip("2026-03-01", "2026-03-11", Country.GREECE, trip_id="1"),
            make_trip("2025-03-01", "2025-03-11", Country.UK, trip_id="2"),
            make_trip("2026-03-01", "2026-03-11", traveler=Traveler.PERSON_2, trip_id="3"),
        ]
        totals, count = current_year_stats(trips, Traveler.PERSON_1, today=date(2026, 10, 19))
        assert totals == {Country.GREECE: 10, Country.UK: 0}
        assert count == 2
