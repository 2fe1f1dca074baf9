# metrics/earned_value.py
from dataclasses import dataclass
from typing import Optional

from metrics.classify import classify_cpi
from metrics.progress import clamp_progress, compute_task_progress
from metrics.snapshot import TaskSnapshot

NO_PROGRESS = "No Progress"
NO_PLAN = "No Plan"


@dataclass(frozen=True)
class CPIResult:
    earned_value: float
    actual_cost: float
    cpi: Optional[float]
    interpretation: str

    @property
    def cost_variance(self) -> float:
        return self.earned_value - self.actual_cost

    def as_dict(self) -> dict:
        return {
            "earnedValue": self.earned_value,
            "actualCost": self.actual_cost,
            "cpi": self.cpi,
            "interpretation": self.interpretation,
        }


def compute_earned_value(task) -> float:
    """Budgeted manhours scaled by quantity progress, capped at 100%."""
    t = TaskSnapshot.from_record(task)
    return t.total_budgeted_manhours * (clamp_progress(compute_task_progress(t)) / 100.0)


def compute_task_cpi(task) -> CPIResult:
    t = TaskSnapshot.from_record(task)
    earned_value = compute_earned_value(t)
    actual_cost = t.total_consumed_manhours

    # order matters: no actual cost wins over no plan
    if actual_cost == 0:
        return CPIResult(earned_value, actual_cost, None, NO_PROGRESS)
    if t.total_budgeted_manhours == 0:
        return CPIResult(earned_value, actual_cost, None, NO_PLAN)

    cpi = earned_value / actual_cost
    return CPIResult(earned_value, actual_cost, cpi, classify_cpi(cpi))
