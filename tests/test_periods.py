# tests/test_periods.py
import json
from datetime import date, datetime

from metrics.periods import (
    PeriodTotals, ProgressEntry, WeeklyEntry, compute_variances, encode_weekly_breakdown,
    parse_weekly_breakdown, period_key, rollup_task_totals, sort_history, summarize_weeks,
    week_start_dates, with_start_dates,
)

WEEKS = [
    {"targetedQty": 10, "achievedQty": 8, "consumedManhours": 20},
    {"targetedQty": 10, "achievedQty": 12, "consumedManhours": 22, "weekStartDate": "2024-03-04"},
]


def test_parse_pads_to_four_weeks():
    weeks = parse_weekly_breakdown(WEEKS)
    assert [w.week_number for w in weeks] == [1, 2, 3, 4]
    assert weeks[1].week_start_date == date(2024, 3, 4)
    assert weeks[3] == WeeklyEntry(week_number=4)


def test_parse_datetime_start_is_a_date():
    weeks = parse_weekly_breakdown([{"achievedQty": 1, "weekStartDate": datetime(2024, 3, 4, 10, 30)}])
    assert weeks[0].week_start_date == date(2024, 3, 4)
    assert type(weeks[0].week_start_date) is date
    assert weeks[0].as_dict()["weekStartDate"] == "2024-03-04"


def test_parse_truncates():
    weeks = parse_weekly_breakdown([{"achievedQty": 1}] * 6)
    assert len(weeks) == 4


def test_parse_double_encoded_json():
    raw = json.dumps(json.dumps(WEEKS))
    weeks = parse_weekly_breakdown(raw)
    assert weeks[0].achieved_quantity == 8.0
    assert weeks[1].consumed_manhours == 22.0


def test_parse_garbage_gives_empty_weeks():
    for raw in ("{not json", None, 42, json.dumps({"a": 1})):
        weeks = parse_weekly_breakdown(raw)
        assert summarize_weeks(weeks) == PeriodTotals()


def test_summarize_and_variances():
    totals = summarize_weeks(parse_weekly_breakdown(WEEKS))
    assert totals == PeriodTotals(20.0, 20.0, 42.0)
    var = compute_variances(totals, productivity=2.0, additional_lapsed_manhours=3)
    assert var.variance_quantity == 0.0
    assert var.expected_manhours == 40.0
    assert var.variance_manhours == 5.0


def test_week_start_dates_are_mondays():
    starts = week_start_dates(2024, 3)
    assert starts[0] == date(2024, 2, 26)
    assert all(d.weekday() == 0 for d in starts)
    assert starts[3] == date(2024, 3, 18)


def test_with_start_dates_keeps_given_dates():
    weeks = with_start_dates(parse_weekly_breakdown(WEEKS), 2024, 3)
    assert weeks[0].week_start_date == date(2024, 2, 26)
    assert weeks[1].week_start_date == date(2024, 3, 4)


def test_encode_round_trip():
    weeks = with_start_dates(parse_weekly_breakdown(WEEKS), 2024, 3)
    assert parse_weekly_breakdown(encode_weekly_breakdown(weeks)) == weeks


def test_history_sorted_and_rolled_up():
    history = [
        {"year": 2024, "month": 2, "achievedQuantity": 5, "consumedManhours": 10},
        {"year": 2023, "month": 12, "achievedQuantity": 3, "consumedManhours": 4,
         "additionalLapsedManhours": 1},
        {"year": 2024, "month": 1, "weeklyBreakdown": json.dumps(WEEKS)},
    ]
    entries = sort_history(history)
    assert [e.key for e in entries] == ["2023-12", "2024-01", "2024-02"]
    assert entries[1].achieved_quantity == 20.0
    assert rollup_task_totals(history) == (28.0, 57.0)


def test_period_key_and_entry():
    assert period_key(2024, 3) == "2024-03"
    e = ProgressEntry.from_record({"year": "2024", "month": "7"})
    assert (e.year, e.month, e.key) == (2024, 7, "2024-07")
    assert len(e.weekly_progress) == 4
