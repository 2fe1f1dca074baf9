# models/project.py
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, List, TYPE_CHECKING

if TYPE_CHECKING:
    from models.category import Category
    from models.task import ProjectTask

class Project(SQLModel, table=True):
    __tablename__ = "projects"
    __table_args__ = {"extend_existing": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    description: Optional[str] = None

    categories: List["Category"] = Relationship(back_populates="project")
    tasks: List["ProjectTask"] = Relationship(back_populates="project")
