# tests/test_snapshot.py
import math

from metrics.snapshot import CategorySnapshot, TaskSnapshot, as_float


def test_as_float():
    assert as_float(None) == 0.0
    assert as_float("") == 0.0
    assert as_float("junk") == 0.0
    assert as_float("1,250.5") == 1250.5
    assert as_float(math.nan) == 0.0
    assert as_float(math.inf) == 0.0
    assert as_float(True) == 0.0
    assert as_float(7) == 7.0
    assert as_float(10 ** 400) == 0.0
    assert as_float(-10 ** 400) == 0.0


def test_from_rest_json():
    t = TaskSnapshot.from_record({
        "id": "t1",
        "masterSubTask": {"name": "Cable tray"},
        "quantity": "200",
        "unit": "m",
        "totalInstalledQuantity": None,
        "totalBudgetedManhours": 500,
        "categoryName": "Electrical",
        "categoryCode": "EL",
    })
    assert t.id == "t1"
    assert t.name == "Cable tray"
    assert t.quantity == 200.0
    assert t.total_installed_quantity == 0.0
    assert t.total_consumed_manhours == 0.0
    assert t.group == "Electrical"


def test_defaults():
    t = TaskSnapshot.from_record({})
    assert t.name == "Unknown"
    assert t.unit == "No"
    assert t.group == "Uncategorized"


def test_snake_case_and_passthrough():
    t = TaskSnapshot.from_record({"name": "Pipe", "total_consumed_manhours": 12})
    assert t.total_consumed_manhours == 12.0
    assert TaskSnapshot.from_record(t) is t


def test_category_snapshot():
    assert CategorySnapshot.from_record("Civil").name == "Civil"
    c = CategorySnapshot.from_record({"id": 3, "code": "EL", "name": "Electrical"})
    assert (c.id, c.code, c.name) == (3, "EL", "Electrical")
