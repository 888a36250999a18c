"""Output formatters: text statistics, CSV, JSON export and the HTML year report."""

import csv
import html
import json
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence

from travel_days.assemble.day_count import aggregate_country_totals, inclusive_day_count
from travel_days.assemble.year_summary import residency_status
from travel_days.models import Country, ThresholdStatus, Traveler, Trip, YearSummary
from travel_days.normalize.records import trip_to_record, trips_from_records


def _display_date(d: date) -> str:
    """'1 Jun 2024', the report's date style."""
    return f"{d.day} {d.strftime('%b %Y')}"


_STATUS_LABELS = {
    ThresholdStatus.SAFE: "safe",
    ThresholdStatus.APPROACHING: "APPROACHING threshold",
    ThresholdStatus.HIGH_RISK: "OVER threshold",
}


# ---------------------------------------------------------------------------
# Text output
# ---------------------------------------------------------------------------

def format_trip_list(trips: Sequence[Trip]) -> str:
    if not trips:
        return "  No trips recorded."
    lines = []
    for t in sorted(trips, key=lambda t: t.departure_date, reverse=True):
        days = inclusive_day_count(t.departure_date, t.arrival_date)
        flag = "  (arrival before departure!)" if t.is_reversed else ""
        lines.append(
            f"  [{t.id}]  {t.departure_date.isoformat()}  →  {t.arrival_date.isoformat()}"
            f"  |  {t.country.value:<8} {days:>4} days  |  {t.traveler.value}{flag}"
        )
        if t.notes:
            lines.append(f"      {t.notes}")
    return "\n".join(lines)


def format_stats(
    trips: Sequence[Trip],
    traveler: Traveler,
    year: int,
    thresholds: Optional[Mapping[Country, int]] = None,
) -> str:
    """Per-country day totals for one traveler and year, with threshold status."""
    totals = aggregate_country_totals(trips, traveler, year)
    status = residency_status(totals, thresholds)
    trip_count = sum(1 for t in trips if t.traveler == traveler)

    lines = [f"{traveler.value} — {year}"]
    for country, days in totals.items():
        lines.append(f"  {country.value:<10} {days:>4} days   [{_STATUS_LABELS[status[country]]}]")
    lines.append(f"  {'Trips':<10} {trip_count:>4} total")
    return "\n".join(lines)


def format_year_summaries(summaries: List[YearSummary]) -> str:
    """Human-readable per-year breakdown, most recent year first."""
    lines = []
    lines.append("=" * 72)
    lines.append("  TRAVEL DAY SUMMARY")
    lines.append("=" * 72)

    if not summaries:
        lines.append("\n  No trips recorded.")

    for summary in summaries:
        lines.append(f"\n--- {summary.year} {'─' * 63}")
        for ty in summary.travelers:
            lines.append(f"\n  {ty.traveler.value}")
            if not ty.rows:
                lines.append("    No trips")
            for row in ty.rows:
                lines.append(
                    f"    {row.trip.country.value:<8} {_display_date(row.trip.departure_date):>12}"
                    f"  →  {_display_date(row.trip.arrival_date):<12} {row.days:>4} days"
                )
            breakdown = ", ".join(f"{c.value}: {d}" for c, d in ty.totals.items())
            lines.append(f"    TOTALS: {breakdown}  (total {ty.total_days} days)")

    lines.append(f"\n{'=' * 72}")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# CSV output
# ---------------------------------------------------------------------------

def trips_to_csv(trips: Sequence[Trip], path: Path):
    """Write trips to CSV."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow([
            "id", "traveler", "country", "departure_date", "arrival_date", "days", "notes",
        ])
        for t in trips:
            writer.writerow([
                t.id, t.traveler.value, t.country.value,
                t.departure_date.isoformat(), t.arrival_date.isoformat(),
                inclusive_day_count(t.departure_date, t.arrival_date), t.notes,
            ])


# ---------------------------------------------------------------------------
# JSON export / import
# ---------------------------------------------------------------------------

def to_json(trips: Sequence[Trip], path: Path, now: Optional[datetime] = None):
    """Write the trip list as an AppData export file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    now = now or datetime.now(timezone.utc)
    data = {
        "trips": [trip_to_record(t) for t in trips],
        "lastUpdated": now.isoformat().replace("+00:00", "Z"),
    }
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")


def load_app_data(path: Path, default_traveler: Traveler = Traveler.PERSON_1) -> List[Trip]:
    """Read an AppData export file, migrating old records.

    Raises ValueError if the file is not an AppData JSON object.
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict) or not isinstance(data.get("trips", []), list):
        raise ValueError(f"{path} is not a trip export file")
    return trips_from_records(data.get("trips") or [], default_traveler)


def default_export_name(prefix: str, suffix: str, today: Optional[date] = None) -> str:
    return f"{prefix}-{(today or date.today()).isoformat()}.{suffix}"


# ---------------------------------------------------------------------------
# HTML year report
# ---------------------------------------------------------------------------

_TRAVELER_COLORS = ["#428bca", "#5cb85c", "#f0ad4e", "#d9534f"]


def _totals_text(totals: Dict[Country, int]) -> str:
    return "<br>".join(f"{html.escape(c.value)}: {d} days" for c, d in totals.items())


def _overall_summary_html(summaries: List[YearSummary]) -> str:
    travelers = [ty.traveler for ty in summaries[0].travelers]
    head = "".join(
        f"<th>{html.escape(t.value)}</th><th>{html.escape(t.value)} Total</th>" for t in travelers
    )
    body = ""
    for summary in summaries:
        cells = "".join(
            f'<td class="num">{_totals_text(ty.totals)}</td><td class="num">{ty.total_days} days</td>'
            for ty in summary.travelers
        )
        body += f"        <tr><td>{summary.year}</td>{cells}</tr>\n"
    return f"""  <h2>Overall Summary</h2>
  <table>
    <thead><tr><th>Year</th>{head}</tr></thead>
    <tbody>
{body}    </tbody>
  </table>
"""


def _year_table_html(summary: YearSummary) -> str:
    body = ""
    for i, ty in enumerate(summary.travelers):
        color = _TRAVELER_COLORS[i % len(_TRAVELER_COLORS)]
        body += (
            f'        <tr class="traveler"><td colspan="5" style="background: {color}">'
            f"{html.escape(ty.traveler.value)}</td></tr>\n"
        )
        if not ty.rows:
            body += "        <tr><td></td><td>No trips</td><td></td><td></td><td></td></tr>\n"
        for row in ty.rows:
            body += f"""        <tr>
          <td></td>
          <td>{html.escape(row.trip.country.value)}</td>
          <td>{_display_date(row.trip.departure_date)}</td>
          <td>{_display_date(row.trip.arrival_date)}</td>
          <td>{row.days} days</td>
        </tr>\n"""
        country_cells = "".join(
            f"<td>{html.escape(c.value)}: {d} days</td>" for c, d in ty.totals.items()
        )
        body += (
            f'        <tr class="totals"><td></td><td>TOTALS:</td>{country_cells}'
            f"<td>Total: {ty.total_days} days</td></tr>\n"
        )

    return f"""  <section class="year">
  <h2>{summary.year}</h2>
  <table>
    <thead>
      <tr>
        <th>Traveler</th>
        <th>Country</th>
        <th>Departure</th>
        <th>Arrival</th>
        <th>Days in {summary.year}</th>
      </tr>
    </thead>
    <tbody>
{body}    </tbody>
  </table>
  </section>
"""


def format_report_html(
    summaries: List[YearSummary],
    path: Path,
    generated_on: Optional[date] = None,
):
    """Write a printable HTML travel-day report, one table per year."""
    path.parent.mkdir(parents=True, exist_ok=True)
    generated_on = generated_on or date.today()

    sections = ""
    if len(summaries) > 1:
        sections += _overall_summary_html(summaries)
    for summary in summaries:
        sections += _year_table_html(summary)
    if not summaries:
        sections = '  <p class="subtitle">No trips recorded.</p>\n'

    doc = f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>Travel Day Summary Report</title>
<style>
  * {{ margin: 0; padding: 0; box-sizing: border-box; }}
  body {{
    font-family: "Helvetica Neue", Arial, sans-serif;
    color: #222;
    background: #fff;
    padding: 40px 60px;
    max-width: 900px;
    margin: 0 auto;
  }}
  h1 {{
    font-size: 22px;
    font-weight: 600;
    text-align: center;
    margin-bottom: 6px;
  }}
  h2 {{
    font-size: 18px;
    margin: 28px 0 10px;
  }}
  .subtitle {{
    font-size: 13px;
    color: #666;
    text-align: center;
    margin-bottom: 28px;
  }}
  table {{
    width: 100%;
    border-collapse: collapse;
    font-size: 14px;
  }}
  thead th {{
    text-align: left;
    font-weight: 600;
    padding: 8px 12px;
    background: #404040;
    color: #fff;
  }}
  tbody td {{
    padding: 6px 12px;
    border: 1px solid #ddd;
    vertical-align: top;
  }}
  td.num {{ text-align: right; }}
  tr.traveler td {{
    color: #fff;
    font-weight: 600;
    text-align: center;
  }}
  tr.totals td {{ font-weight: 600; }}
  @media print {{
    body {{ padding: 20px; }}
    section.year {{ page-break-before: always; }}
  }}
</style>
</head>
<body>
  <h1>Travel Day Summary Report</h1>
  <p class="subtitle">Generated on {_display_date(generated_on)}</p>
{sections}</body>
</html>"""

    path.write_text(doc, encoding="utf-8")
