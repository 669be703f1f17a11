"""Task tracking module for bloggernetes.

This module provides a simple task tracking service that allows
the controller and server to track and cancel asynchronous tasks.
"""

from .context import get_task_service
from .service import TaskService

__all__ = ["get_task_service", "TaskService"]
