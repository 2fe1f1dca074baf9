# ui/quantity_panel.py
import logging

import pandas as pd
import streamlit as st

import db
from metrics.aggregate import aggregate_by_category, group_by_category
from metrics.classify import progress_color
from metrics.progress import compute_remaining_manhours, compute_task_progress
from metrics.snapshot import UNITS

logger = logging.getLogger(__name__)


def _editor_frame(tasks) -> pd.DataFrame:
    return pd.DataFrame([
        {
            "id": t.id,
            "Task": t.name,
            "Quantity": t.quantity,
            "Unit": t.unit if t.unit in UNITS else "No",
            "Installed": t.total_installed_quantity,
            "Productivity": t.productivity,
            "Total Manhours": t.total_budgeted_manhours,
            "Consumed": t.total_consumed_manhours,
            "Remaining": compute_remaining_manhours(t),
            "Qty Progress %": round(compute_task_progress(t), 1),
        }
        for t in tasks
    ])


def _changes(before: pd.DataFrame, after: pd.DataFrame) -> list[dict]:
    out = []
    for (_, old), (_, new) in zip(before.iterrows(), after.iterrows()):
        if (old["Quantity"], old["Productivity"], old["Unit"]) != \
                (new["Quantity"], new["Productivity"], new["Unit"]):
            out.append({"id": int(old["id"]), "quantity": new["Quantity"],
                        "productivity": new["Productivity"], "unit": new["Unit"]})
    return out


def render_quantity_manager(project_id: int):
    st.subheader("Task Quantities")
    tasks = db.get_tasks_for_project(project_id)
    if not tasks:
        st.info("No tasks yet.")
        return

    summaries = aggregate_by_category(tasks)
    for category, group in group_by_category(tasks).items():
        s = summaries[category]
        header = (f"{category} · {len(group)} tasks · {s.total_planned_value:,.2f} hrs budgeted · "
                  f"{s.quantity_progress:.1f}% quantity progress")
        with st.expander(header):
            st.markdown(f":{progress_color(s.quantity_progress)}[Qty: {s.quantity_progress:.1f}%] "
                        f"· Hrs: {s.total_actual_cost:,.2f} / {s.total_planned_value:,.2f}")
            before = _editor_frame(group)
            after = st.data_editor(
                before,
                key=f"qty_{category}",
                hide_index=True,
                use_container_width=True,
                disabled=["id", "Task", "Installed", "Total Manhours", "Consumed",
                          "Remaining", "Qty Progress %"],
                column_config={"Unit": st.column_config.SelectboxColumn(options=list(UNITS))},
            )
            changes = _changes(before, after)
            if changes and st.button(f"Save {len(changes)} change(s)", key=f"save_{category}"):
                try:
                    n = db.update_many_task_quantities(changes)
                    st.success(f"Updated {n} tasks")
                except ValueError as e:
                    logger.warning("quantity update failed: %s", e)
                    st.error(f"Update failed: {e}")
