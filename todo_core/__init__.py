"""
Todo Core Module
================

Entity, persistence, service and HTTP layers of the todo list API.
"""

__version__ = "1.0.0"
__all__ = [
    "Todo",
    "DatabaseConfig",
    "DatabaseManager",
    "TodoRepository",
    "TodoService",
    "Found",
    "NotFound",
    "TodoError",
    "TodoValidationError",
    "InvalidArgumentError",
]

from todo_core.database import Todo, DatabaseConfig, DatabaseManager
from todo_core.exceptions import TodoError, TodoValidationError, InvalidArgumentError
from todo_core.repository import TodoRepository
from todo_core.results import Found, NotFound
from todo_core.service import TodoService
