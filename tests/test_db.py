# tests/test_db.py
import json

import pytest

import db
from metrics.aggregate import aggregate
from metrics.earned_value import compute_task_cpi


@pytest.fixture
def project():
    db.configure("sqlite://")
    db.init_db()
    pid = db.create_project("Tower B")
    el = db.add_category(pid, "EL", "Electrical")
    tray = db.add_task(pid, el, "Cable tray", quantity=200, unit="m", productivity=2.5)
    return pid, el, tray


def _week(target, achieved, hours):
    return {"targetedQty": target, "achievedQty": achieved, "consumedManhours": hours}


def test_add_task_budgets_manhours(project):
    pid, _, _ = project
    tasks = db.get_tasks_for_project(pid)
    assert len(tasks) == 1
    t = tasks[0]
    assert t["total_budgeted_manhours"] == 500.0
    assert t["category_name"] == "Electrical"
    assert t["category_code"] == "EL"


def test_add_task_rejects_unknown_category(project):
    pid, _, _ = project
    with pytest.raises(ValueError):
        db.add_task(pid, 9999, "Ghost")


def test_record_progress_updates_totals(project):
    pid, _, tray = project
    db.record_progress(tray, 2024, 3, [_week(40, 30, 80), _week(40, 45, 90)])
    db.record_progress(tray, 2024, 4, [_week(50, 75, 230)], additional_lapsed_manhours=0)

    t = db.get_tasks_for_project(pid)[0]
    assert t["total_installed_quantity"] == 150.0
    assert t["total_consumed_manhours"] == 400.0

    res = compute_task_cpi(t)
    assert res.earned_value == 375.0
    assert res.cpi == 0.9375
    assert res.interpretation == "Near Budget"


def test_record_progress_replaces_same_month(project):
    pid, _, tray = project
    db.record_progress(tray, 2024, 3, [_week(10, 10, 10)])
    db.record_progress(tray, 2024, 3, [_week(10, 20, 15)], additional_lapsed_manhours=5)

    history = db.get_progress_history(tray)
    assert len(history) == 1
    assert history[0]["achieved_quantity"] == 20.0
    t = db.get_tasks_for_project(pid)[0]
    assert t["total_installed_quantity"] == 20.0
    assert t["total_consumed_manhours"] == 20.0


def test_history_carries_justification_and_timestamp(project):
    _, _, tray = project
    db.record_progress(tray, 2024, 3, [_week(10, 10, 10)], justification="Crane downtime")
    first = db.get_progress_history(tray)[0]
    assert first["justification"] == "Crane downtime"
    assert first["updated_at"] is not None

    db.record_progress(tray, 2024, 3, [_week(10, 12, 10)])
    second = db.get_progress_history(tray)[0]
    assert second["justification"] is None
    assert second["updated_at"] >= first["updated_at"]


def test_history_is_ordered_with_four_weeks(project):
    _, _, tray = project
    db.record_progress(tray, 2024, 5, json.dumps([_week(1, 1, 1)]))
    db.record_progress(tray, 2023, 11, [_week(1, 2, 3)])
    history = db.get_progress_history(tray)
    assert [h["period"] for h in history] == ["2023-11", "2024-05"]
    assert len(history[1]["weeks"]) == 4
    assert history[1]["weeks"][0]["weekStartDate"] == "2024-04-29"


def test_record_progress_validation(project):
    _, _, tray = project
    with pytest.raises(ValueError):
        db.record_progress(tray, 2024, 13, [])
    with pytest.raises(ValueError):
        db.record_progress(9999, 2024, 1, [])


def test_update_task_quantities(project):
    pid, _, tray = project
    out = db.update_task_quantities(tray, quantity=100, productivity=3, unit="Nos")
    assert out["total_budgeted_manhours"] == 300.0
    with pytest.raises(ValueError):
        db.update_task_quantities(tray, unit="furlongs")
    assert aggregate(db.get_tasks_for_project(pid)).total_planned_value == 300.0


def test_filter_by_category(project):
    pid, _, _ = project
    pl = db.add_category(pid, "PL", "Plumbing")
    db.add_task(pid, pl, "Valves", quantity=10, unit="Nos", productivity=4)
    assert [t["name"] for t in db.get_tasks_for_project(pid, "Plumbing")] == ["Valves"]
    assert [c["code"] for c in db.get_categories_for_project(pid)] == ["EL", "PL"]
