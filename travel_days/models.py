"""Data models for the travel day tracker."""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, List


class Traveler(str, Enum):
    PERSON_1 = "Person 1"
    PERSON_2 = "Person 2"


class Country(str, Enum):
    GREECE = "Greece"
    UK = "UK"


class SyncStatus(str, Enum):
    CONNECTED = "connected"  # primary backend served the request
    FALLBACK = "fallback"  # a lower-ranked backend served it
    ERROR = "error"


class ThresholdStatus(str, Enum):
    SAFE = "safe"
    APPROACHING = "approaching"
    HIGH_RISK = "high_risk"


@dataclass(frozen=True)
class Trip:
    """A stay in one country, inclusive of both departure and arrival day."""

    id: str
    traveler: Traveler
    country: Country
    departure_date: date
    arrival_date: date
    notes: str = ""

    @property
    def is_reversed(self) -> bool:
        return self.arrival_date < self.departure_date


@dataclass
class AppData:
    trips: list[Trip] = field(default_factory=list)
    last_updated: str = ""


@dataclass
class ActivityEntry:
    timestamp: str
    action: str
    user: str
    details: str = ""


@dataclass
class TripYearRow:
    trip: Trip
    days: int  # days of the trip falling in the summary's year


@dataclass
class TravelerYear:
    traveler: Traveler
    rows: list[TripYearRow] = field(default_factory=list)
    totals: Dict[Country, int] = field(default_factory=dict)

    @property
    def total_days(self) -> int:
        return sum(self.totals.values())


@dataclass
class YearSummary:
    year: int
    travelers: List[TravelerYear] = field(default_factory=list)

    def for_traveler(self, traveler: Traveler) -> TravelerYear:
        for ty in self.travelers:
            if ty.traveler == traveler:
                return ty
        raise KeyError(traveler)
