# metrics/__init__.py
from .snapshot import TaskSnapshot, CategorySnapshot, UNITS, as_float
from .progress import compute_task_progress, compute_budgeted_manhours, compute_remaining_manhours
from .earned_value import CPIResult, compute_earned_value, compute_task_cpi
from .aggregate import ProjectSummary, TaskStatusCounts, aggregate, aggregate_by_category, count_task_statuses
from .classify import classify_cpi, classify_completion, classify_budget_efficiency
from .export import export_csv, read_task_table
