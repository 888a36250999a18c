#!/usr/bin/env python3
"""CLI entry point for the travel day tracker.

Usage:
    python track_days.py add --traveler "Person 1" --country Greece --from 2024-06-01 --to 2024-06-10
    python track_days.py stats [--traveler NAME] [--year YEAR]
    python track_days.py report [--output-dir output/]

Global options:
    --redis-url URL     Remote store (default: $REDIS_URL; empty = local file only)
    --local-store PATH  Local fallback file (default: $LOCAL_STORE_PATH)
    --verbose           Log storage activity to stderr
"""

import argparse
import dataclasses
import logging
import sys
from datetime import date
from pathlib import Path
from typing import List, Optional

from travel_days.assemble.day_count import enumerate_available_years
from travel_days.assemble.year_summary import summarize_by_year
from travel_days.config import (
    ADMIN_DELETE_PASSWORD,
    DEFAULT_TRAVELER,
    LOCAL_STORE_PATH,
    OUTPUT_DIR,
    REDIS_URL,
)
from travel_days.models import Country, SyncStatus, Traveler, Trip
from travel_days.normalize.date_parser import to_date
from travel_days.normalize.records import new_trip_id, validate_trip
from travel_days.output import (
    default_export_name,
    format_report_html,
    format_stats,
    format_trip_list,
    format_year_summaries,
    load_app_data,
    to_json,
    trips_to_csv,
)
from travel_days.storage.backends import LocalFileBackend, RedisBackend
from travel_days.storage.chain import StorageChain
from travel_days.storage.trip_store import TripNotFoundError, TripStore

_TRAVELERS = [t.value for t in Traveler]
_COUNTRIES = [c.value for c in Country]


def build_store(redis_url: str, local_store: Path) -> TripStore:
    """Assemble the backend chain: Redis first (if configured), then the local file."""
    backends = []
    if redis_url:
        backends.append(RedisBackend.from_url(redis_url))
    backends.append(LocalFileBackend(local_store))
    return TripStore(
        StorageChain(backends),
        admin_password=ADMIN_DELETE_PASSWORD,
        default_traveler=Traveler(DEFAULT_TRAVELER),
    )


def _report_status(status: SyncStatus, action: str):
    if status == SyncStatus.ERROR:
        raise RuntimeError(f"Could not {action}: no storage backend available")
    if status == SyncStatus.FALLBACK:
        print("Warning: remote store unavailable, saved to local fallback.", file=sys.stderr)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def cmd_add(store: TripStore, args) -> int:
    trip = validate_trip(Trip(
        id=new_trip_id(),
        traveler=Traveler(args.traveler),
        country=Country(args.country),
        departure_date=to_date(args.departure),
        arrival_date=to_date(args.arrival),
        notes=args.notes or "",
    ))
    _report_status(store.add_trip(trip), "add trip")
    store.log_activity("add", trip.traveler.value,
                       f"{trip.country.value} {trip.departure_date} → {trip.arrival_date}")
    print(f"Added trip {trip.id}")
    return 0


def cmd_edit(store: TripStore, args) -> int:
    current = store.get_trip(args.id)
    changes = {}
    if args.traveler:
        changes["traveler"] = Traveler(args.traveler)
    if args.country:
        changes["country"] = Country(args.country)
    if args.departure:
        changes["departure_date"] = to_date(args.departure)
    if args.arrival:
        changes["arrival_date"] = to_date(args.arrival)
    if args.notes is not None:
        changes["notes"] = args.notes
    updated = validate_trip(dataclasses.replace(current, **changes))
    _report_status(store.update_trip(args.id, updated), "update trip")
    store.log_activity("edit", updated.traveler.value, f"trip {updated.id}")
    print(f"Updated trip {updated.id}")
    return 0


def cmd_delete(store: TripStore, args) -> int:
    trip = store.get_trip(args.id)
    _report_status(store.delete_trip(args.id), "delete trip")
    store.log_activity("delete", trip.traveler.value,
                       f"{trip.country.value} {trip.departure_date} → {trip.arrival_date}")
    print(f"Deleted trip {args.id}")
    return 0


def _traveler_trips(trips: List[Trip], traveler: Optional[str]) -> List[Trip]:
    if not traveler:
        return trips
    return [t for t in trips if t.traveler == Traveler(traveler)]


def cmd_list(store: TripStore, args) -> int:
    loaded = store.load()
    print(format_trip_list(_traveler_trips(loaded.trips, args.traveler)))
    return 0


def cmd_stats(store: TripStore, args) -> int:
    trips = store.load().trips
    year = args.year or date.today().year
    travelers = [Traveler(args.traveler)] if args.traveler else list(Traveler)
    print("\n\n".join(format_stats(trips, t, year) for t in travelers))
    return 0


def cmd_years(store: TripStore, args) -> int:
    for year in enumerate_available_years(store.load().trips):
        print(year)
    return 0


def cmd_summary(store: TripStore, args) -> int:
    print(format_year_summaries(summarize_by_year(store.load().trips)))
    return 0


def cmd_report(store: TripStore, args) -> int:
    trips = store.load().trips
    output_dir = Path(args.output_dir)

    if args.format in ("html", "all"):
        html_path = output_dir / default_export_name("travel-summary", "html")
        format_report_html(summarize_by_year(trips), html_path)
        print(f"HTML report written to: {html_path}")

    if args.format in ("csv", "all"):
        csv_path = output_dir / "trips.csv"
        trips_to_csv(trips, csv_path)
        print(f"CSV written to: {csv_path}")
    return 0


def cmd_export(store: TripStore, args) -> int:
    path = Path(args.path or default_export_name("country-tracker", "json"))
    trips = store.load().trips
    to_json(trips, path)
    print(f"Exported {len(trips)} trips to: {path}")
    return 0


def cmd_import(store: TripStore, args) -> int:
    trips = load_app_data(Path(args.path), store.default_traveler)
    _report_status(store.save(trips), "import trips")
    store.log_activity("import", args.user, f"{len(trips)} trips from {Path(args.path).name}")
    print(f"Imported {len(trips)} trips")
    return 0


def cmd_activity(store: TripStore, args) -> int:
    entries = store.activity()
    if not entries:
        print("No activity recorded.")
    for e in entries[-args.limit:]:
        print(f"{e.timestamp}  {e.user:<10} {e.action:<8} {e.details}")
    return 0


def cmd_reset(store: TripStore, args) -> int:
    if not args.yes:
        print("Refusing to delete all data without --yes", file=sys.stderr)
        return 1
    _report_status(store.clear_all(args.admin_password), "clear data")
    print("All trip data cleared.")
    return 0


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------

def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Track days spent per country per year.",
    )
    parser.add_argument("--redis-url", default=REDIS_URL, help="Redis URL for the remote store")
    parser.add_argument("--local-store", default=str(LOCAL_STORE_PATH), help="Local fallback file")
    parser.add_argument("--verbose", action="store_true", help="Log storage activity")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("add", help="Record a trip")
    p.add_argument("--traveler", choices=_TRAVELERS, default=DEFAULT_TRAVELER)
    p.add_argument("--country", choices=_COUNTRIES, required=True)
    p.add_argument("--from", dest="departure", required=True, help="Departure date")
    p.add_argument("--to", dest="arrival", required=True, help="Arrival (return) date")
    p.add_argument("--notes", default="")
    p.set_defaults(func=cmd_add)

    p = sub.add_parser("edit", help="Change fields of a trip")
    p.add_argument("id")
    p.add_argument("--traveler", choices=_TRAVELERS)
    p.add_argument("--country", choices=_COUNTRIES)
    p.add_argument("--from", dest="departure")
    p.add_argument("--to", dest="arrival")
    p.add_argument("--notes")
    p.set_defaults(func=cmd_edit)

    p = sub.add_parser("delete", help="Delete a trip")
    p.add_argument("id")
    p.set_defaults(func=cmd_delete)

    p = sub.add_parser("list", help="List trips")
    p.add_argument("--traveler", choices=_TRAVELERS)
    p.set_defaults(func=cmd_list)

    p = sub.add_parser("stats", help="Country day totals for a year")
    p.add_argument("--traveler", choices=_TRAVELERS)
    p.add_argument("--year", type=int)
    p.set_defaults(func=cmd_stats)

    p = sub.add_parser("years", help="Years with recorded trips")
    p.set_defaults(func=cmd_years)

    p = sub.add_parser("summary", help="Per-year breakdown for all travelers")
    p.set_defaults(func=cmd_summary)

    p = sub.add_parser("report", help="Write the printable report")
    p.add_argument("--output-dir", default=str(OUTPUT_DIR))
    p.add_argument("--format", choices=["html", "csv", "all"], default="all")
    p.set_defaults(func=cmd_report)

    p = sub.add_parser("export", help="Export trips as JSON")
    p.add_argument("path", nargs="?")
    p.set_defaults(func=cmd_export)

    p = sub.add_parser("import", help="Replace trips with a JSON export")
    p.add_argument("path")
    p.add_argument("--user", default=DEFAULT_TRAVELER)
    p.set_defaults(func=cmd_import)

    p = sub.add_parser("activity", help="Show recent changes")
    p.add_argument("--limit", type=_positive_int, default=20)
    p.set_defaults(func=cmd_activity)

    p = sub.add_parser("reset", help="Delete all trips and activity")
    p.add_argument("--yes", action="store_true")
    p.add_argument("--admin-password")
    p.set_defaults(func=cmd_reset)

    return parser


def main(argv: Optional[List[str]] = None, store: Optional[TripStore] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    owns_store = store is None
    store = store or build_store(args.redis_url, Path(args.local_store))
    try:
        return args.func(store, args)
    except TripNotFoundError as e:
        print(f"Error: no trip with id {e}", file=sys.stderr)
    except (ValueError, PermissionError, RuntimeError) as e:
        print(f"Error: {e}", file=sys.stderr)
    finally:
        if owns_store:
            store.chain.close()
    return 1


if __name__ == "__main__":
    sys.exit(main())
