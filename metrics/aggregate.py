# metrics/aggregate.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from metrics.classify import classify_budget_efficiency, classify_completion, COMPLETE, IN_PROGRESS
from metrics.earned_value import compute_earned_value, compute_task_cpi
from metrics.progress import compute_task_progress
from metrics.snapshot import CategorySnapshot, to_snapshots


@dataclass(frozen=True)
class ProjectSummary:
    total_planned_value: float = 0.0
    total_actual_cost: float = 0.0
    total_earned_value: float = 0.0
    cpi: Optional[float] = None
    progress_percentage: float = 0.0
    total_quantity: float = 0.0
    total_installed_quantity: float = 0.0
    quantity_progress: float = 0.0
    task_count: int = 0

    def as_dict(self) -> dict:
        return {
            "totalPlannedValue": self.total_planned_value,
            "totalActualCost": self.total_actual_cost,
            "totalEarnedValue": self.total_earned_value,
            "cpi": self.cpi,
            "progressPercentage": self.progress_percentage,
            "totalQuantity": self.total_quantity,
            "totalInstalledQuantity": self.total_installed_quantity,
            "quantityProgress": self.quantity_progress,
            "taskCount": self.task_count,
        }


@dataclass(frozen=True)
class TaskStatusCounts:
    total: int = 0
    completed: int = 0
    in_progress: int = 0
    not_started: int = 0
    over_budget: int = 0
    on_track: int = 0

    @property
    def completion_percentage(self) -> float:
        return self.completed / self.total * 100.0 if self.total else 0.0


def aggregate(tasks: Iterable) -> ProjectSummary:
    """Roll task metrics up to one summary.

    Earned value is summed task by task rather than derived from an averaged
    progress, so large and small tasks weigh by their budget.
    """
    snaps = to_snapshots(tasks)

    planned = sum(t.total_budgeted_manhours for t in snaps)
    actual = sum(t.total_consumed_manhours for t in snaps)
    earned = sum(compute_earned_value(t) for t in snaps)
    qty = sum(t.quantity for t in snaps)
    installed = sum(t.total_installed_quantity for t in snaps)

    return ProjectSummary(
        total_planned_value=planned,
        total_actual_cost=actual,
        total_earned_value=earned,
        cpi=earned / actual if actual > 0 else None,
        progress_percentage=min(earned / planned * 100.0, 100.0) if planned > 0 else 0.0,
        total_quantity=qty,
        total_installed_quantity=installed,
        quantity_progress=installed / qty * 100.0 if qty > 0 else 0.0,
        task_count=len(snaps),
    )


def group_by_category(tasks: Iterable, categories: Optional[Iterable] = None) -> Dict[str, list]:
    """Tasks keyed by category name.

    Listed categories come first, in the order given, even when empty; any
    other category a task names follows in first-seen order.
    """
    groups: Dict[str, list] = {}
    for c in categories or []:
        groups.setdefault(CategorySnapshot.from_record(c).name, [])
    for t in to_snapshots(tasks):
        groups.setdefault(t.group, []).append(t)
    return groups


def aggregate_by_category(tasks: Iterable, categories: Optional[Iterable] = None) -> Dict[str, ProjectSummary]:
    return {name: aggregate(group) for name, group in group_by_category(tasks, categories).items()}


def count_task_statuses(tasks: Iterable) -> TaskStatusCounts:
    counts = {"completed": 0, "in_progress": 0, "not_started": 0, "over_budget": 0, "on_track": 0}
    snaps = to_snapshots(tasks)
    for t in snaps:
        status = classify_completion(compute_task_progress(t))
        if status == COMPLETE:
            counts["completed"] += 1
        elif status == IN_PROGRESS:
            counts["in_progress"] += 1
        else:
            counts["not_started"] += 1

        # hours booked against no plan earn nothing, so the ratio is 0
        result = compute_task_cpi(t)
        ratio = result.earned_value / result.actual_cost if result.actual_cost > 0 else None
        if classify_budget_efficiency(ratio) == "overBudget":
            counts["over_budget"] += 1
        else:
            counts["on_track"] += 1
    return TaskStatusCounts(total=len(snaps), **counts)
