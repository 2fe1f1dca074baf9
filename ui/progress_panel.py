# ui/progress_panel.py
import logging
from datetime import date

import pandas as pd
import streamlit as st

import db
from metrics.aggregate import aggregate, group_by_category
from metrics.classify import classify_completion, classify_cpi, cpi_color
from metrics.earned_value import compute_task_cpi
from metrics.periods import (
    compute_variances, parse_weekly_breakdown, summarize_weeks, week_start_dates, WEEKS_PER_MONTH,
)
from metrics.progress import compute_task_progress

logger = logging.getLogger(__name__)


def render_project_cpi_card(tasks):
    summary = aggregate(tasks)
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Project CPI", f"{summary.cpi:.2f}" if summary.cpi is not None else "N/A")
    c2.metric("Earned Value (hrs)", f"{summary.total_earned_value:,.1f}")
    c3.metric("Actual Cost (hrs)", f"{summary.total_actual_cost:,.1f}")
    c4.metric("Progress", f"{summary.progress_percentage:.1f}%")
    st.markdown(f":{cpi_color(summary.cpi)}[**{classify_cpi(summary.cpi)}**]")


def _task_table(tasks) -> pd.DataFrame:
    rows = []
    for t in tasks:
        progress = compute_task_progress(t)
        res = compute_task_cpi(t)
        rows.append({
            "Task": t.name,
            "Quantity": f"{t.quantity:,.2f} {t.unit}",
            "Installed": f"{t.total_installed_quantity:,.2f} {t.unit}",
            "Progress %": round(progress, 1),
            "Status": classify_completion(progress, detailed=True),
            "EV (hrs)": round(res.earned_value, 2),
            "AC (hrs)": round(res.actual_cost, 2),
            "CPI": f"{res.cpi:.2f}" if res.cpi is not None else "—",
            "CPI Status": res.interpretation,
        })
    return pd.DataFrame(rows)


def _record_form(task):
    today = date.today()
    with st.form(f"progress_{task.id}", clear_on_submit=False):
        c1, c2 = st.columns(2)
        year = c1.number_input("Year", min_value=2000, max_value=2100, value=today.year,
                               key=f"y_{task.id}")
        month = c2.selectbox("Month", list(range(1, 13)), index=today.month - 1,
                             key=f"m_{task.id}")
        starts = week_start_dates(year, month)
        weekly = []
        for i in range(WEEKS_PER_MONTH):
            w1, w2, w3 = st.columns(3)
            weekly.append({
                "weekStartDate": starts[i].isoformat(),
                "targetedQty": w1.number_input(f"Week {i + 1} ({starts[i]:%d %b}) target",
                                               min_value=0.0, key=f"t_{task.id}_{i}"),
                "achievedQty": w2.number_input("Achieved", min_value=0.0, key=f"a_{task.id}_{i}"),
                "consumedManhours": w3.number_input("Manhours", min_value=0.0,
                                                    key=f"h_{task.id}_{i}"),
            })
        lapsed = st.number_input("Additional lapsed manhours", min_value=0.0, key=f"l_{task.id}")
        justification = st.text_area("Justification", key=f"j_{task.id}")

        totals = summarize_weeks(parse_weekly_breakdown(weekly))
        var = compute_variances(totals, task.productivity, lapsed)
        st.caption(f"Quantity variance {var.variance_quantity:+.2f} {task.unit} · "
                   f"Manhour variance {var.variance_manhours:+.2f} hrs")
        submitted = st.form_submit_button("Save progress")

    if submitted:
        try:
            db.record_progress(task.id, year, month, weekly, lapsed, justification or None)
            st.success("Progress saved")
        except ValueError as e:
            logger.warning("progress for task %s rejected: %s", task.id, e)
            st.error(f"Save failed: {e}")


def render_progress_tracker(project_id: int):
    st.subheader("Progress Tracker")
    tasks = db.get_tasks_for_project(project_id)
    if not tasks:
        st.info("Initialize categories and tasks to start tracking progress.")
        return

    render_project_cpi_card(tasks)
    for category, group in group_by_category(tasks).items():
        with st.expander(f"📁 {category} ({len(group)} tasks)"):
            st.dataframe(_task_table(group), use_container_width=True, hide_index=True)
            labels = {f"{t.name} (#{t.id})": t for t in group}
            pick = st.selectbox("Record progress for", ["—"] + list(labels), key=f"pick_{category}")
            if pick in labels:
                task = labels[pick]
                _record_form(task)
                history = db.get_progress_history(task.id)
                if history:
                    st.dataframe(pd.DataFrame(history).drop(columns=["weeks"]),
                                 use_container_width=True, hide_index=True)
