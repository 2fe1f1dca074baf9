# ui/projects_panel.py

import streamlit as st

import db
from metrics.progress import compute_budgeted_manhours
from metrics.snapshot import UNITS

__all__ = ["render_projects", "render_new_project", "render_setup"]


def render_projects():
    """Display a dropdown of projects and return (project_id, name) or None."""
    projects = db.get_projects()
    if not projects:
        st.info("No projects yet.")
        return None

    proj_options = {f"{p['name']} (#{p['id']})": p for p in projects}
    selected_label = st.selectbox("Select a project", ["—"] + list(proj_options.keys()))
    p = proj_options.get(selected_label)
    return (p["id"], p["name"]) if p else None


def render_new_project():
    """Form to create a new project."""
    with st.form("new_project"):
        p_name = st.text_input("Project name", placeholder="Tower B fit-out")
        p_desc = st.text_area("Description", placeholder="Short project description…")
        submitted = st.form_submit_button("Create project")

        if submitted and p_name:
            pid = db.create_project(p_name, p_desc or None)
            st.success(f"Created project #{pid}")


def render_setup(project_id: int):
    st.subheader("Categories & Tasks")
    with st.form("new_category", clear_on_submit=True):
        c1, c2 = st.columns([1, 3])
        code = c1.text_input("Code", placeholder="EL")
        name = c2.text_input("Category", placeholder="Electrical")
        if st.form_submit_button("Add category") and code and name:
            db.add_category(project_id, code, name)
            st.success(f"Added {code} - {name}")

    categories = db.get_categories_for_project(project_id)
    if not categories:
        return

    by_label = {f"{c['code']} - {c['name']}": c["id"] for c in categories}
    with st.form("new_task", clear_on_submit=True):
        cat = st.selectbox("Category", list(by_label))
        t_name = st.text_input("Task")
        c1, c2, c3 = st.columns(3)
        qty = c1.number_input("Quantity", min_value=0.0)
        unit = c2.selectbox("Unit", UNITS)
        prod = c3.number_input("Productivity (hrs/unit)", min_value=0.0)
        st.caption(f"Budgeted manhours: {compute_budgeted_manhours(qty, prod):,.2f}")
        if st.form_submit_button("Add task") and t_name:
            db.add_task(project_id, by_label[cat], t_name, qty, unit, prod)
            st.success("Task added")
