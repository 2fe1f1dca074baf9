# metrics/periods.py
"""
Monthly progress records and their four-week breakdown.

A record covers one task for one calendar month. Its weekly breakdown is
stored as JSON text; older rows may hold it double-encoded.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta
from typing import Any, Iterable, List, Optional, Tuple

from dateutil import parser as date_parser

from metrics.snapshot import pick, as_float

WEEKS_PER_MONTH = 4


@dataclass(frozen=True)
class WeeklyEntry:
    week_number: int
    targeted_quantity: float = 0.0
    achieved_quantity: float = 0.0
    consumed_manhours: float = 0.0
    week_start_date: Optional[date] = None

    def as_dict(self) -> dict:
        return {
            "weekNumber": self.week_number,
            "weekStartDate": self.week_start_date.isoformat() if self.week_start_date else None,
            "targetedQty": self.targeted_quantity,
            "achievedQty": self.achieved_quantity,
            "consumedManhours": self.consumed_manhours,
        }


@dataclass(frozen=True)
class PeriodTotals:
    targeted_quantity: float = 0.0
    achieved_quantity: float = 0.0
    consumed_manhours: float = 0.0


@dataclass(frozen=True)
class Variances:
    variance_quantity: float
    expected_manhours: float
    variance_manhours: float


@dataclass(frozen=True)
class ProgressEntry:
    year: int
    month: int
    targeted_quantity: float = 0.0
    achieved_quantity: float = 0.0
    consumed_manhours: float = 0.0
    additional_lapsed_manhours: float = 0.0
    weekly_progress: Tuple[WeeklyEntry, ...] = field(default_factory=tuple)

    @property
    def key(self) -> str:
        return period_key(self.year, self.month)

    @classmethod
    def from_record(cls, record: Any) -> "ProgressEntry":
        weeks = parse_weekly_breakdown(
            pick(record, "weeklyProgress", "weekly_progress", "weeklyBreakdown", "weekly_breakdown"))
        # month totals missing from the record come from its weeks
        totals = summarize_weeks(weeks)
        return cls(
            year=int(as_float(pick(record, "year"))),
            month=int(as_float(pick(record, "month"))),
            targeted_quantity=as_float(pick(record, "targetedQuantity", "targeted_quantity",
                                            default=totals.targeted_quantity)),
            achieved_quantity=as_float(pick(record, "achievedQuantity", "achieved_quantity",
                                            default=totals.achieved_quantity)),
            consumed_manhours=as_float(pick(record, "consumedManhours", "consumed_manhours",
                                            default=totals.consumed_manhours)),
            additional_lapsed_manhours=as_float(
                pick(record, "additionalLapsedManhours", "additional_lapsed_manhours")),
            weekly_progress=tuple(weeks),
        )


def period_key(year: int, month: int) -> str:
    return f"{int(year):04d}-{int(month):02d}"


def week_start_dates(year: int, month: int) -> List[date]:
    """Mondays starting the four reporting weeks of a month.

    Week one starts on the Monday on or before the 1st.
    """
    first = date(int(year), int(month), 1)
    monday = first - timedelta(days=first.weekday())
    return [monday + timedelta(weeks=i) for i in range(WEEKS_PER_MONTH)]


def _parse_date(x) -> Optional[date]:
    if x is None or x == "":
        return None
    if isinstance(x, datetime):
        return x.date()
    if isinstance(x, date):
        return x
    try:
        return date_parser.parse(str(x)).date()
    except (ValueError, OverflowError):
        return None


def _decode(raw):
    # double-encoded rows decode to a str on the first pass
    for _ in range(2):
        if not isinstance(raw, (str, bytes)):
            break
        try:
            raw = json.loads(raw)
        except ValueError:
            return []
    return raw if isinstance(raw, list) else []


def parse_weekly_breakdown(raw) -> List[WeeklyEntry]:
    """Exactly four weeks, padded with empty weeks or truncated."""
    weeks = []
    for i, w in enumerate(_decode(raw)[:WEEKS_PER_MONTH]):
        weeks.append(WeeklyEntry(
            week_number=i + 1,
            targeted_quantity=as_float(pick(w, "targetedQty", "targetedQuantity", "targeted_quantity")),
            achieved_quantity=as_float(pick(w, "achievedQty", "achievedQuantity", "achieved_quantity")),
            consumed_manhours=as_float(pick(w, "consumedManhours", "consumed_manhours")),
            week_start_date=_parse_date(pick(w, "weekStartDate", "week_start_date")),
        ))
    while len(weeks) < WEEKS_PER_MONTH:
        weeks.append(WeeklyEntry(week_number=len(weeks) + 1))
    return weeks


def with_start_dates(weeks: Iterable[WeeklyEntry], year: int, month: int) -> List[WeeklyEntry]:
    starts = week_start_dates(year, month)
    return [w if w.week_start_date else replace(w, week_start_date=starts[i])
            for i, w in enumerate(weeks)]


def encode_weekly_breakdown(weeks: Iterable[WeeklyEntry]) -> str:
    return json.dumps([w.as_dict() for w in weeks])


def summarize_weeks(weeks: Iterable[WeeklyEntry]) -> PeriodTotals:
    weeks = list(weeks)
    return PeriodTotals(
        targeted_quantity=sum(w.targeted_quantity for w in weeks),
        achieved_quantity=sum(w.achieved_quantity for w in weeks),
        consumed_manhours=sum(w.consumed_manhours for w in weeks),
    )


def compute_variances(totals: PeriodTotals, productivity, additional_lapsed_manhours=0) -> Variances:
    expected = totals.achieved_quantity * as_float(productivity)
    consumed = totals.consumed_manhours + as_float(additional_lapsed_manhours)
    return Variances(
        variance_quantity=totals.achieved_quantity - totals.targeted_quantity,
        expected_manhours=expected,
        variance_manhours=consumed - expected,
    )


def sort_history(records: Iterable) -> List[ProgressEntry]:
    entries = [r if isinstance(r, ProgressEntry) else ProgressEntry.from_record(r) for r in records]
    return sorted(entries, key=lambda e: (e.year, e.month))


def rollup_task_totals(records: Iterable) -> Tuple[float, float]:
    """(installed quantity, consumed manhours) implied by a task's history."""
    installed = consumed = 0.0
    for e in sort_history(records):
        installed += e.achieved_quantity
        consumed += e.consumed_manhours + e.additional_lapsed_manhours
    return installed, consumed
