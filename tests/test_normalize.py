"""
Unit tests for date parsing and trip record conversion
"""

from datetime import date

import pytest

from conftest import make_trip
from travel_days.models import Country, Traveler
from travel_days.normalize.date_parser import parse_date, to_date
from travel_days.normalize.records import (
    InvalidTripError,
    new_trip_id,
    trip_from_record,
    trip_to_record,
    trips_from_records,
    validate_trip,
)


class TestParseDate:
    @pytest.mark.parametrize("raw, expected", [
        ("2024-06-01", date(2024, 6, 1)),
        ("2024-06-01T00:00:00.000Z", date(2024, 6, 1)),
        ("01/06/2024", date(2024, 6, 1)),
        ("1-6-2024", date(2024, 6, 1)),
        ("1 Jun 2024", date(2024, 6, 1)),
        ("June 1, 2024", date(2024, 6, 1)),
        ("2024/01/05", date(2024, 1, 5)),
        ("2024-1-5", date(2024, 1, 5)),
        ("2024.01.05", date(2024, 1, 5)),
        ("2024 1 5", date(2024, 1, 5)),
        ("05/01/2024", date(2024, 1, 5)),
        ("12/01/2024", date(2024, 1, 12)),
    ])
    def test_formats(self, raw, expected):
        assert parse_date(raw) == expected

    @pytest.mark.parametrize("raw", ["", "null", "None", "gibberish", "2024-02-30", "2024", "31/02/2024"])
    def test_invalid_returns_none(self, raw):
        assert parse_date(raw) is None

    def test_to_date_passes_dates_through(self):
        d = date(2024, 1, 1)
        assert to_date(d) is d

    def test_to_date_rejects_invalid(self):
        with pytest.raises(ValueError, match="Invalid date"):
            to_date("2024-13-01")


class TestTripRecords:
    def test_round_trip_uses_camel_case(self):
        trip = make_trip("2024-06-01", "2024-06-10", Country.UK, notes="work")
        record = trip_to_record(trip)
        assert record == {
            "id": "1",
            "traveler": "Person 1",
            "country": "UK",
            "departureDate": "2024-06-01",
            "arrivalDate": "2024-06-10",
            "notes": "work",
        }
        assert trip_from_record(record) == trip

    def test_snake_case_keys_accepted(self):
        trip = trip_from_record({
            "id": 7, "traveler": "Person 2", "country": "Greece",
            "departure_date": "2024-06-01", "arrival_date": "2024-06-02",
        })
        assert trip.id == "7"
        assert trip.traveler == Traveler.PERSON_2
        assert trip.notes == ""

    def test_missing_traveler_migrates_to_default(self):
        raw = {"id": "1", "country": "Greece", "departureDate": "2024-06-01", "arrivalDate": "2024-06-02"}
        assert trip_from_record(raw).traveler == Traveler.PERSON_1
        assert trip_from_record(raw, Traveler.PERSON_2).traveler == Traveler.PERSON_2

    @pytest.mark.parametrize("raw", [
        {"id": "1", "country": "France", "departureDate": "2024-06-01", "arrivalDate": "2024-06-02"},
        {"id": "1", "country": "UK", "traveler": "Nobody", "departureDate": "2024-06-01", "arrivalDate": "2024-06-02"},
        {"id": "1", "country": "UK", "departureDate": "soon", "arrivalDate": "2024-06-02"},
        {"id": "1", "country": "UK", "departureDate": "2024-06-01"},
        {"country": "UK", "departureDate": "2024-06-01", "arrivalDate": "2024-06-02"},
        ["not", "a", "dict"],
    ])
    def test_invalid_records_raise(self, raw):
        with pytest.raises(InvalidTripError):
            trip_from_record(raw)

    def test_bulk_conversion_skips_and_logs_invalid(self, caplog):
        records = [
            {"id": "1", "country": "UK", "departureDate": "2024-06-01", "arrivalDate": "2024-06-02"},
            {"id": "2", "country": "UK", "departureDate": "bad", "arrivalDate": "2024-06-02"},
        ]
        trips = trips_from_records(records)
        assert [t.id for t in trips] == ["1"]
        assert "Skipping trip record" in caplog.text

    def test_bulk_conversion_collects_skipped_records(self):
        bad = {"id": "2", "country": "France", "departureDate": "2024-06-01", "arrivalDate": "2024-06-02"}
        records = [
            {"id": "1", "country": "UK", "departureDate": "2024/06/01", "arrivalDate": "2024/06/02"},
            bad,
        ]
        skipped = []
        trips = trips_from_records(records, skipped=skipped)
        assert [t.departure_date for t in trips] == [date(2024, 6, 1)]
        assert skipped == [bad]

    def test_bulk_conversion_keeps_reversed_trips_with_warning(self, caplog):
        records = [{"id": "1", "country": "UK", "departureDate": "2024-06-10", "arrivalDate": "2024-06-01"}]
        trips = trips_from_records(records)
        assert len(trips) == 1 and trips[0].is_reversed
        assert "before it departs" in caplog.text

    def test_validate_trip_rejects_reversed(self):
        with pytest.raises(ValueError):
            validate_trip(make_trip("2024-06-10", "2024-06-01"))

    def test_new_trip_id_is_millis(self):
        assert new_trip_id(1717243200.5) == "1717243200500"
