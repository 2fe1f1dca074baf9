# tests/test_progress.py
import json

from metrics.progress import (
    clamp_progress, compute_budgeted_manhours, compute_remaining_manhours, compute_task_progress,
)
from metrics.snapshot import TaskSnapshot


def test_compute_task_progress():
    task = {"quantity": 200, "totalInstalledQuantity": 150}
    assert compute_task_progress(task) == 75.0


def test_zero_quantity_is_zero_progress():
    assert compute_task_progress({"quantity": 0, "totalInstalledQuantity": 0}) == 0.0
    assert compute_task_progress({"quantity": 0, "totalInstalledQuantity": 12}) == 0.0
    assert compute_task_progress({"quantity": -5, "totalInstalledQuantity": 3}) == 0.0


def test_progress_is_not_clamped():
    assert compute_task_progress({"quantity": 100, "totalInstalledQuantity": 120}) == 120.0
    assert clamp_progress(120.0) == 100.0
    assert clamp_progress(40.0) == 40.0


def test_progress_monotonic_in_installed():
    values = [compute_task_progress({"quantity": 37, "totalInstalledQuantity": q})
              for q in (0, 1, 5, 18.5, 37, 50)]
    assert values == sorted(values)


def test_missing_fields_mean_nothing_recorded():
    assert compute_task_progress({}) == 0.0
    assert compute_task_progress({"quantity": "abc", "totalInstalledQuantity": None}) == 0.0
    assert compute_task_progress({"quantity": "10", "totalInstalledQuantity": "2.5"}) == 25.0


def test_accepts_snapshots_and_objects():
    class Row:
        quantity = 40.0
        total_installed_quantity = 10.0

    assert compute_task_progress(Row()) == 25.0
    assert compute_task_progress(TaskSnapshot(quantity=8, total_installed_quantity=2)) == 25.0


def test_manhour_helpers():
    assert compute_budgeted_manhours(120, 0.5) == 60.0
    assert compute_budgeted_manhours(None, 2) == 0.0
    task = {"totalBudgetedManhours": 60, "totalConsumedManhours": 75}
    assert compute_remaining_manhours(task) == -15.0


def test_oversized_integer_quantity_is_unusable():
    task = json.loads('{"quantity": 1' + "0" * 400 + ', "totalInstalledQuantity": 5}')
    assert compute_task_progress(task) == 0.0
