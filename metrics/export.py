# metrics/export.py
from __future__ import annotations

import io
from datetime import datetime
from typing import Iterable, Optional

import pandas as pd

from metrics.aggregate import ProjectSummary, aggregate, group_by_category
from metrics.classify import classify_completion
from metrics.earned_value import compute_task_cpi
from metrics.progress import compute_task_progress

REPORT_TITLE = "Project Manpower Budget Report (Quantity-Based)"
TASK_SECTION = "TASK DETAILS (QUANTITY-BASED PROGRESS)"
TASK_COLUMNS = [
    "Task", "Category", "Total Quantity", "Installed Quantity", "Unit",
    "Quantity Progress %", "Budgeted Hours", "Consumed Hours", "CPI", "Status",
]


def _task_rows(tasks, categories) -> list[dict]:
    rows = []
    for category, group in group_by_category(tasks, categories).items():
        for t in group:
            progress = compute_task_progress(t)
            cpi = compute_task_cpi(t).cpi
            rows.append({
                "Task": t.name,
                "Category": t.category_name or "Unknown",
                "Total Quantity": t.quantity,
                "Installed Quantity": t.total_installed_quantity,
                "Unit": t.unit,
                "Quantity Progress %": f"{progress:.1f}",
                "Budgeted Hours": t.total_budgeted_manhours,
                "Consumed Hours": t.total_consumed_manhours,
                "CPI": f"{cpi:.2f}" if cpi is not None else "N/A",
                "Status": classify_completion(progress),
            })
    return rows


def _summary_rows(summary: ProjectSummary, category_count: int) -> list[list]:
    return [
        ["SUMMARY", ""],
        ["Total Categories", category_count],
        ["Total Tasks", summary.task_count],
        ["Total Budgeted Manhours", summary.total_planned_value],
        ["Total Consumed Manhours", summary.total_actual_cost],
        ["Total Earned Value", round(summary.total_earned_value, 2)],
        ["Project CPI", f"{summary.cpi:.2f}" if summary.cpi is not None else "N/A"],
        ["Progress Percentage (Quantity-Based)", f"{summary.progress_percentage:.1f}%"],
    ]


def export_csv(tasks: Iterable, categories: Optional[Iterable] = None,
               summary: Optional[ProjectSummary] = None, project_name: Optional[str] = None,
               generated_at: Optional[datetime] = None) -> str:
    """
    Render the project report as CSV text.

    The report opens with a title block and, when ``summary`` is given, a
    SUMMARY block; then a section line, the task table header, and one row
    per task grouped by category.
    """
    tasks = list(tasks or [])
    categories = list(categories or [])
    out = io.StringIO()

    preamble = [[REPORT_TITLE]]
    if project_name is not None:
        preamble.append([f"Project: {project_name}"])
    if generated_at is not None:
        preamble.append([f"Generated: {generated_at:%Y-%m-%d %H:%M}"])
    pd.DataFrame(preamble).to_csv(out, header=False, index=False, lineterminator="\n")
    out.write("\n")

    if summary is not None:
        category_count = len(group_by_category(tasks, categories))
        block = pd.DataFrame(_summary_rows(summary, category_count))
        block.to_csv(out, header=False, index=False, lineterminator="\n")
        out.write("\n")

    out.write(TASK_SECTION + "\n")
    table = pd.DataFrame(_task_rows(tasks, categories), columns=TASK_COLUMNS)
    table.to_csv(out, index=False, lineterminator="\n")
    return out.getvalue()


def read_task_table(text: str) -> pd.DataFrame:
    """Parse the task table of an exported report back into a DataFrame."""
    header = ",".join(TASK_COLUMNS)
    start = text.find(TASK_SECTION + "\n" + header)
    if start < 0:
        raise ValueError("no task table in report")
    body = text[start + len(TASK_SECTION) + 1:]
    return pd.read_csv(io.StringIO(body), dtype={"Task": str, "Category": str, "Unit": str},
                       keep_default_na=False, na_values={"CPI": ["N/A"]})


def project_report(tasks: Iterable, categories: Optional[Iterable] = None,
                   project_name: Optional[str] = None) -> str:
    tasks = list(tasks or [])
    return export_csv(tasks, categories, aggregate(tasks), project_name=project_name,
                      generated_at=datetime.now())
