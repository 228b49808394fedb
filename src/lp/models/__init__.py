"""SQLAlchemy models for learning plans and the resource catalog."""

from .category import Category
from .learning_plan import LearningPlan
from .resource import Resource
from .segment import Segment
from .task import Task, TaskPriority
from .user import User, UserRole

__all__ = [
    "Category",
    "LearningPlan",
    "Resource",
    "Segment",
    "Task",
    "TaskPriority",
    "User",
    "UserRole",
]
