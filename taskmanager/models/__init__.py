from .task import Priority, Task, TaskStatus, is_overdue
from .user import User

# Export all models for easy importing
__all__ = ["Task", "User", "Priority", "TaskStatus", "is_overdue"]
