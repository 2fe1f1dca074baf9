# models/category.py
from sqlmodel import SQLModel, Field, Relationship, UniqueConstraint
from typing import Optional, List, TYPE_CHECKING

if TYPE_CHECKING:
    from models.project import Project
    from models.task import ProjectTask

class Category(SQLModel, table=True):
    __tablename__ = "categories"
    __table_args__ = (
        UniqueConstraint("project_id", "code", name="uq_project_category_code"),
        {"extend_existing": True},
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="projects.id", index=True)
    code: str
    name: str

    project: "Project" = Relationship(back_populates="categories")
    tasks: List["ProjectTask"] = Relationship(back_populates="category")
