# metrics/snapshot.py
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional

UNITS = ("No", "m", "Sq.m", "Item", "Set", "Point", "Nos")

UNCATEGORIZED = "Uncategorized"


def as_float(x) -> float:
    """Coerce a loosely typed value to a finite float; anything unusable is 0."""
    if x is None or isinstance(x, bool):
        return 0.0
    if isinstance(x, (int, float)):
        try:
            v = float(x)
        except OverflowError:
            return 0.0
    else:
        s = str(x).strip().replace(",", "")
        if s == "":
            return 0.0
        try:
            v = float(s)
        except ValueError:
            return 0.0
    return v if math.isfinite(v) else 0.0


def _as_str(x) -> str:
    return "" if x is None else str(x).strip()


def pick(record: Any, *names: str, default=None):
    """First present, non-None value among `names` (camelCase or snake_case)."""
    for name in names:
        if isinstance(record, Mapping):
            value = record.get(name)
        else:
            value = getattr(record, name, None)
        if value is not None:
            return value
    return default


def _task_name(record: Any) -> str:
    name = _as_str(pick(record, "name", "title", "description"))
    if name:
        return name
    master = pick(record, "masterSubTask", "master_sub_task")
    if master is not None:
        name = _as_str(pick(master, "name"))
    return name or "Unknown"


@dataclass(frozen=True)
class TaskSnapshot:
    id: Optional[Any] = None
    name: str = "Unknown"
    quantity: float = 0.0
    unit: str = "No"
    total_installed_quantity: float = 0.0
    total_budgeted_manhours: float = 0.0
    total_consumed_manhours: float = 0.0
    category_name: str = ""
    category_code: str = ""
    productivity: float = 0.0

    @classmethod
    def from_record(cls, record: Any) -> "TaskSnapshot":
        if isinstance(record, TaskSnapshot):
            return record
        return cls(
            id=pick(record, "id", "_id"),
            name=_task_name(record),
            quantity=as_float(pick(record, "quantity")),
            unit=_as_str(pick(record, "unit")) or "No",
            total_installed_quantity=as_float(
                pick(record, "totalInstalledQuantity", "total_installed_quantity")),
            total_budgeted_manhours=as_float(
                pick(record, "totalBudgetedManhours", "total_budgeted_manhours")),
            total_consumed_manhours=as_float(
                pick(record, "totalConsumedManhours", "total_consumed_manhours")),
            category_name=_as_str(pick(record, "categoryName", "category_name")),
            category_code=_as_str(pick(record, "categoryCode", "category_code")),
            productivity=as_float(pick(record, "productivity")),
        )

    @property
    def group(self) -> str:
        return self.category_name or UNCATEGORIZED


@dataclass(frozen=True)
class CategorySnapshot:
    name: str
    code: str = ""
    id: Optional[Any] = None

    @classmethod
    def from_record(cls, record: Any) -> "CategorySnapshot":
        if isinstance(record, CategorySnapshot):
            return record
        if isinstance(record, str):
            return cls(name=record.strip() or UNCATEGORIZED)
        return cls(
            name=_as_str(pick(record, "name")) or UNCATEGORIZED,
            code=_as_str(pick(record, "code")),
            id=pick(record, "id", "_id"),
        )


def to_snapshots(tasks) -> list[TaskSnapshot]:
    return [TaskSnapshot.from_record(t) for t in (tasks or [])]
