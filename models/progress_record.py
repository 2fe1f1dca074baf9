# models/progress_record.py
from sqlmodel import SQLModel, Field, Relationship, UniqueConstraint, DateTime
from typing import Optional, TYPE_CHECKING
from datetime import datetime, timezone

if TYPE_CHECKING:
    from models.task import ProjectTask

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

class ProgressRecord(SQLModel, table=True):
    __tablename__ = "progress_records"
    __table_args__ = (
        UniqueConstraint("task_id", "year", "month", name="uq_task_period"),
        {"extend_existing": True},
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    task_id: int = Field(foreign_key="project_tasks.id", index=True)
    year: int
    month: int
    targeted_quantity: float = Field(default=0.0)
    achieved_quantity: float = Field(default=0.0)
    consumed_manhours: float = Field(default=0.0)
    additional_lapsed_manhours: float = Field(default=0.0)
    justification: Optional[str] = None
    weekly_breakdown: Optional[str] = None  # JSON list of four weeks
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))

    task: "ProjectTask" = Relationship(back_populates="progress_records")
