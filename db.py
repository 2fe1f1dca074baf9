# db.py

#============================================================#
#                      Manpower Tracker                      #
#============================================================#
# Purpose     : Quantity-based progress and earned-value     #
#               tracking for construction manpower budgets   #
#               (SQLite/Postgres via SQLModel)               #
#============================================================#


from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from typing import Optional, List, Dict, Iterable

from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine, select

from models import Project, Category, ProjectTask, ProgressRecord
from models.progress_record import utcnow
from metrics.periods import (
    encode_weekly_breakdown, parse_weekly_breakdown, rollup_task_totals,
    ProgressEntry, summarize_weeks, with_start_dates,
)
from metrics.progress import compute_budgeted_manhours
from metrics.snapshot import UNITS, as_float

logger = logging.getLogger(__name__)

# ---- Engine / Session ----
try:
    import streamlit as st
    _secrets = getattr(st, "secrets", {})
except Exception:
    _secrets = {}


def _secret(name: str) -> Optional[str]:
    # st.secrets raises when no secrets.toml exists
    try:
        return _secrets.get(name)
    except Exception:
        return None


DATABASE_URL = (_secret("DATABASE_URL")
                or os.getenv("DATABASE_URL")
                or "sqlite:///manpower.db")


def _make_engine(url: str):
    if url in ("sqlite://", "sqlite:///:memory:"):
        # one shared connection so every session sees the same in-memory db
        return create_engine(url, connect_args={"check_same_thread": False},
                             poolclass=StaticPool)
    return create_engine(url, pool_pre_ping=True)


engine = _make_engine(DATABASE_URL)


def configure(url: str) -> None:
    """Point the module at another database (tests use ``sqlite://``)."""
    global engine, DATABASE_URL
    DATABASE_URL = url
    engine = _make_engine(url)
    logger.info("database configured: %s", url.split("@")[-1])


def init_db():
    SQLModel.metadata.create_all(engine)


@contextmanager
def get_session():
    with Session(engine) as s:
        yield s


# ---- helpers ----
def create_project(name: str, description: Optional[str] = None) -> int:
    with get_session() as s:
        p = Project(name=name.strip(), description=description)
        s.add(p); s.commit(); s.refresh(p)
        return p.id


def add_category(project_id: int, code: str, name: str) -> int:
    with get_session() as s:
        c = Category(project_id=project_id, code=code.strip(), name=name.strip())
        s.add(c); s.commit(); s.refresh(c)
        return c.id


def add_task(project_id: int, category_id: int, name: str, quantity: float = 0.0,
             unit: str = "No", productivity: float = 0.0) -> int:
    with get_session() as s:
        c = s.get(Category, category_id)
        if not c or c.project_id != project_id:
            raise ValueError("Category not found")
        t = ProjectTask(project_id=project_id, category_id=c.id, name=name.strip(),
                        unit=unit, quantity=as_float(quantity),
                        productivity=as_float(productivity),
                        total_budgeted_manhours=compute_budgeted_manhours(quantity, productivity),
                        category_name=c.name, category_code=c.code)
        s.add(t); s.commit(); s.refresh(t)
        return t.id


def get_projects() -> List[Dict]:
    with get_session() as s:
        rows = s.exec(select(Project).order_by(Project.id)).all()
        return [{"id": p.id, "name": p.name, "description": p.description} for p in rows]


def get_categories_for_project(project_id: int) -> List[Dict]:
    """Return plain dicts to avoid detached lazy loads."""
    with get_session() as s:
        rows = s.exec(
            select(Category).where(Category.project_id == project_id).order_by(Category.code)
        ).all()
        return [{"id": c.id, "code": c.code, "name": c.name} for c in rows]


def get_tasks_for_project(project_id: int, category_name: Optional[str] = None) -> List[Dict]:
    """Return plain dicts to avoid detached lazy loads."""
    with get_session() as s:
        q = select(ProjectTask).where(ProjectTask.project_id == project_id)
        if category_name:
            q = q.where(ProjectTask.category_name == category_name)
        rows = s.exec(q.order_by(ProjectTask.category_code, ProjectTask.id)).all()
        return [
            {
                "id": t.id,
                "name": t.name,
                "unit": t.unit,
                "quantity": t.quantity,
                "productivity": t.productivity,
                "total_installed_quantity": t.total_installed_quantity,
                "total_budgeted_manhours": t.total_budgeted_manhours,
                "total_consumed_manhours": t.total_consumed_manhours,
                "category_name": t.category_name,
                "category_code": t.category_code,
            }
            for t in rows
        ]


def update_task_quantities(task_id: int, quantity=None, productivity=None,
                           unit: Optional[str] = None) -> Dict:
    """Edit planned quantity/productivity/unit; budgeted manhours follow."""
    if unit is not None and unit not in UNITS:
        raise ValueError(f"Unknown unit: {unit}")
    with get_session() as s:
        t = s.get(ProjectTask, task_id)
        if not t:
            raise ValueError("Task not found")
        if quantity is not None:
            t.quantity = as_float(quantity)
        if productivity is not None:
            t.productivity = as_float(productivity)
        if unit is not None:
            t.unit = unit
        t.total_budgeted_manhours = compute_budgeted_manhours(t.quantity, t.productivity)
        s.add(t); s.commit(); s.refresh(t)
        logger.info("task %s quantities updated: qty=%s prod=%s",
                    task_id, t.quantity, t.productivity)
        return {"id": t.id, "quantity": t.quantity, "productivity": t.productivity,
                "unit": t.unit, "total_budgeted_manhours": t.total_budgeted_manhours}


def update_many_task_quantities(changes: Iterable[Dict]) -> int:
    n = 0
    for c in changes:
        update_task_quantities(c["id"], c.get("quantity"), c.get("productivity"), c.get("unit"))
        n += 1
    return n


def _history_rows(s: Session, task_id: int) -> List[ProgressRecord]:
    return s.exec(select(ProgressRecord).where(ProgressRecord.task_id == task_id)).all()


def record_progress(task_id: int, year: int, month: int, weekly,
                    additional_lapsed_manhours: float = 0.0,
                    justification: Optional[str] = None) -> Dict:
    """
    Save one month of progress for a task and refresh the task's totals.

    An existing record for the same (year, month) is replaced. The task's
    installed quantity and consumed manhours are recomputed from its whole
    history afterwards.
    """
    if not 1 <= int(month) <= 12:
        raise ValueError(f"Invalid month: {month}")
    weeks = with_start_dates(parse_weekly_breakdown(weekly), year, month)
    totals = summarize_weeks(weeks)

    with get_session() as s:
        t = s.get(ProjectTask, task_id)
        if not t:
            raise ValueError("Task not found")
        rec = s.exec(
            select(ProgressRecord).where(
                ProgressRecord.task_id == task_id,
                ProgressRecord.year == int(year),
                ProgressRecord.month == int(month),
            )
        ).one_or_none()
        if rec is None:
            rec = ProgressRecord(task_id=task_id, year=int(year), month=int(month))
        rec.targeted_quantity = totals.targeted_quantity
        rec.achieved_quantity = totals.achieved_quantity
        rec.consumed_manhours = totals.consumed_manhours
        rec.additional_lapsed_manhours = as_float(additional_lapsed_manhours)
        rec.justification = justification
        rec.weekly_breakdown = encode_weekly_breakdown(weeks)
        rec.updated_at = utcnow()
        s.add(rec); s.flush()

        installed, consumed = rollup_task_totals(_history_rows(s, task_id))
        t.total_installed_quantity = installed
        t.total_consumed_manhours = consumed
        s.add(t); s.commit()
        logger.info("progress recorded for task %s %04d-%02d: achieved=%s consumed=%s",
                    task_id, int(year), int(month), totals.achieved_quantity, totals.consumed_manhours)
        return {"task_id": task_id, "year": int(year), "month": int(month),
                "total_installed_quantity": installed, "total_consumed_manhours": consumed}


def get_progress_history(task_id: int) -> List[Dict]:
    with get_session() as s:
        rows = sorted(_history_rows(s, task_id), key=lambda r: (r.year, r.month))
        pairs = [(r, ProgressEntry.from_record(r)) for r in rows]
    return [
        {
            "period": e.key,
            "year": e.year,
            "month": e.month,
            "targeted_quantity": e.targeted_quantity,
            "achieved_quantity": e.achieved_quantity,
            "consumed_manhours": e.consumed_manhours,
            "additional_lapsed_manhours": e.additional_lapsed_manhours,
            "justification": r.justification,
            "updated_at": r.updated_at,
            "weeks": [w.as_dict() for w in e.weekly_progress],
        }
        for r, e in pairs
    ]
