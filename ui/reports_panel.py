# ui/reports_panel.py
from datetime import date

import pandas as pd
import plotly.express as px
import streamlit as st

import db
from metrics.aggregate import aggregate, aggregate_by_category, count_task_statuses
from metrics.classify import classify_cpi
from metrics.export import project_report, read_task_table


def category_report_df(tasks, categories) -> pd.DataFrame:
    rows = []
    for name, s in aggregate_by_category(tasks, categories).items():
        rows.append({
            "Category": name,
            "Tasks": s.task_count,
            "Budgeted (hrs)": s.total_planned_value,
            "Consumed (hrs)": s.total_actual_cost,
            "Qty Progress %": round(s.quantity_progress, 1),
            "CPI": round(s.cpi, 2) if s.cpi is not None else None,
            "Status": classify_cpi(s.cpi),
        })
    return pd.DataFrame(rows)


def render_reports(project_id: int, project_name: str):
    st.subheader("Reports & Analytics")
    tasks = db.get_tasks_for_project(project_id)
    categories = db.get_categories_for_project(project_id)
    if not tasks:
        st.info("Configure task quantities and record progress to generate reports.")
        return

    summary = aggregate(tasks)
    counts = count_task_statuses(tasks)
    c1, c2, c3, c4, c5 = st.columns(5)
    c1.metric("Tasks", counts.total)
    c2.metric("Complete", counts.completed, f"{counts.completion_percentage:.1f}%")
    c3.metric("In Progress", counts.in_progress)
    c4.metric("Not Started", counts.not_started)
    c5.metric("Over Budget (CPI)", counts.over_budget)
    st.progress(min(int(summary.progress_percentage), 100),
                text=f"{summary.progress_percentage:.1f}% earned (quantity-based)")

    df = category_report_df(tasks, categories)
    st.dataframe(df, use_container_width=True, hide_index=True)
    if not df.empty:
        fig = px.bar(df, x="Category", y=["Budgeted (hrs)", "Consumed (hrs)"], barmode="group")
        st.plotly_chart(fig, use_container_width=True)

    csv_text = project_report(tasks, categories, project_name=project_name)
    with st.expander("Preview task table"):
        st.dataframe(read_task_table(csv_text), use_container_width=True, hide_index=True)
    st.download_button(
        "⬇️ Export CSV", data=csv_text,
        file_name=f"{project_name or 'Project'}_Quantity_Progress_Report_{date.today():%Y-%m-%d}.csv",
        mime="text/csv",
    )
