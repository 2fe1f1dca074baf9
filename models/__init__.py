# models/__init__.py
from .project import Project
from .category import Category
from .task import ProjectTask
from .progress_record import ProgressRecord
