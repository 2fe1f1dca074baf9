# metrics/progress.py
from metrics.snapshot import TaskSnapshot, as_float


def compute_task_progress(task) -> float:
    """Installed quantity as a percentage of planned quantity.

    A task with no planned quantity reports 0. Over-installed tasks report
    more than 100; callers clamp where earned value needs it.
    """
    t = TaskSnapshot.from_record(task)
    if t.quantity <= 0:
        return 0.0
    return t.total_installed_quantity / t.quantity * 100.0


def clamp_progress(progress_percentage: float) -> float:
    return min(as_float(progress_percentage), 100.0)


def compute_budgeted_manhours(quantity, productivity) -> float:
    return as_float(quantity) * as_float(productivity)


def compute_remaining_manhours(task) -> float:
    # negative when the task has overspent its budget
    t = TaskSnapshot.from_record(task)
    return t.total_budgeted_manhours - t.total_consumed_manhours
