# metrics/classify.py
from typing import Optional

# Fixed CPI bands. Not configurable.
UNDER_BUDGET_CPI = 1.0
NEAR_BUDGET_CPI = 0.9

# Single cutoff used for the report's over-budget bucket count.
BUDGET_RISK_CPI = 0.9

NEAR_COMPLETE_PROGRESS = 75.0

UNDER_BUDGET = "Under Budget"
NEAR_BUDGET = "Near Budget"
OVER_BUDGET = "Over Budget"
NO_DATA = "No Data"

COMPLETE = "Complete"
NEAR_COMPLETE = "Near Complete"
IN_PROGRESS = "In Progress"
NOT_STARTED = "Not Started"


def classify_cpi(cpi: Optional[float]) -> str:
    if cpi is None:
        return NO_DATA
    if cpi >= UNDER_BUDGET_CPI:
        return UNDER_BUDGET
    if cpi >= NEAR_BUDGET_CPI:
        return NEAR_BUDGET
    return OVER_BUDGET


def classify_completion(progress_percentage: float, detailed: bool = False) -> str:
    """Quantity-based completion status.

    The 75-100% band reads "Near Complete" in the tracker (``detailed=True``)
    and "In Progress" in reports and exports.
    """
    if progress_percentage >= 100:
        return COMPLETE
    if progress_percentage >= NEAR_COMPLETE_PROGRESS:
        return NEAR_COMPLETE if detailed else IN_PROGRESS
    if progress_percentage > 0:
        return IN_PROGRESS
    return NOT_STARTED


def classify_budget_efficiency(cpi: Optional[float]) -> str:
    """Two-way bucket for report counts: "overBudget" or "onTrack".

    A task with no actual cost yet (``cpi is None``) counts as on track.
    """
    if cpi is not None and cpi < BUDGET_RISK_CPI:
        return "overBudget"
    return "onTrack"


def cpi_color(cpi: Optional[float]) -> str:
    return {
        UNDER_BUDGET: "green",
        NEAR_BUDGET: "orange",
        OVER_BUDGET: "red",
    }.get(classify_cpi(cpi), "gray")


def progress_color(progress_percentage: float) -> str:
    if progress_percentage >= 80:
        return "green"
    if progress_percentage >= 60:
        return "orange"
    return "red"
