# models/task.py
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, List, TYPE_CHECKING

if TYPE_CHECKING:
    from models.project import Project
    from models.category import Category
    from models.progress_record import ProgressRecord

class ProjectTask(SQLModel, table=True):
    __tablename__ = "project_tasks"
    __table_args__ = {"extend_existing": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="projects.id", index=True)
    category_id: Optional[int] = Field(default=None, foreign_key="categories.id")
    name: str
    unit: str = Field(default="No")
    quantity: float = Field(default=0.0)
    productivity: float = Field(default=0.0)  # manhours per unit
    total_installed_quantity: float = Field(default=0.0)
    total_budgeted_manhours: float = Field(default=0.0)
    total_consumed_manhours: float = Field(default=0.0)

    # denormalized from the category
    category_name: Optional[str] = None
    category_code: Optional[str] = None

    project: "Project" = Relationship(back_populates="tasks")
    category: Optional["Category"] = Relationship(back_populates="tasks")
    progress_records: List["ProgressRecord"] = Relationship(back_populates="task")
