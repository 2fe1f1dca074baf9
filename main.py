# main.py

#============================================================#
#                      Manpower Tracker                      #
#============================================================#
# Purpose     : Quantity-based progress and earned-value     #
#               tracking for construction manpower budgets   #
#============================================================#

import logging

import streamlit as st

import db
from ui.progress_panel import render_progress_tracker
from ui.projects_panel import render_new_project, render_projects, render_setup
from ui.quantity_panel import render_quantity_manager
from ui.reports_panel import render_reports

logging.basicConfig(level=logging.INFO,
                    format="%(asctime)s %(levelname)s %(name)s: %(message)s")

st.set_page_config(
    page_title="Manpower Tracker",
    page_icon="🏗️",
    layout="wide",
    initial_sidebar_state="expanded",
)


@st.cache_resource
def _init_db_once():
    db.init_db()
    return True


_init_db_once()

# ======================  PROJECT GATE  ======================
with st.sidebar:
    st.title("🏗️ Manpower Tracker")
    selected = render_projects()
    with st.expander("New project"):
        render_new_project()

if not selected:
    st.info("Select or create a project in the sidebar.")
    st.stop()

project_id, project_name = selected
st.header(project_name)

tab1, tab2, tab3, tab4 = st.tabs(["Progress Tracker", "Quantities", "Reports", "Setup"])

with tab1:
    render_progress_tracker(project_id)

with tab2:
    render_quantity_manager(project_id)

with tab3:
    render_reports(project_id, project_name)

with tab4:
    render_setup(project_id)
