"""
Todo Service
============

Business operations over todos. Mostly delegates to the repository; adds
null-argument checks, forces inserts on create, and applies the field-by-field
update contract inside a single transaction.
"""

import logging
from typing import List

from todo_core.database import Todo
from todo_core.exceptions import InvalidArgumentError
from todo_core.repository import TodoRepository
from todo_core.results import LookupResult

logger = logging.getLogger(__name__)

# Fields a client may replace through update; id and timestamps are never copied
UPDATABLE_FIELDS = ("title", "description", "completed")


def apply_todo_changes(target: Todo, source: Todo) -> Todo:
    """
    Copy the updatable fields of ``source`` onto ``target``.

    Args:
        target: The persisted todo to modify
        source: The incoming todo carrying the new values

    Returns:
        ``target``, modified in place
    """
    target.title = source.title
    target.description = source.description
    target.completed = source.completed
    return target


class TodoService:
    """Service layer for todo management."""

    def __init__(self, repository: TodoRepository):
        self.repository = repository

    def list_all(self) -> List[Todo]:
        logger.info("Listing all todos")
        return self.repository.get_all()

    def get_by_id(self, todo_id: int) -> LookupResult[Todo]:
        logger.info(f"Fetching todo {todo_id}")
        return self.repository.get_by_id(todo_id)

    def create(self, todo: Todo) -> Todo:
        """
        Persist a new todo.

        Any id set by the caller is discarded so the store always inserts.

        Raises:
            InvalidArgumentError: If ``todo`` is None
        """
        if todo is None:
            logger.error("Attempted to create a null todo")
            raise InvalidArgumentError("Todo cannot be null")

        logger.info(f"Creating todo: {todo.title}")
        # A fresh entity, so a previously persisted todo never turns into an update
        new_todo = Todo(
            title=todo.title,
            description=todo.description,
            completed=todo.completed,
        )
        return self.repository.save(new_todo)

    def update(self, todo_id: int, changes: Todo) -> LookupResult[Todo]:
        """
        Replace title, description and completed on an existing todo.

        Args:
            todo_id: Id of the todo to modify
            changes: Todo carrying the new field values

        Returns:
            Found(updated todo) or NotFound(todo_id)

        Raises:
            InvalidArgumentError: If ``changes`` is None
        """
        if changes is None:
            logger.error("Attempted to update with a null todo")
            raise InvalidArgumentError("Todo cannot be null")

        logger.info(f"Updating todo {todo_id}")

        with self.repository.transaction() as repo:
            result = repo.get_by_id(todo_id, for_update=True).map(
                lambda existing: repo.save(apply_todo_changes(existing, changes))
            )

        if result.is_found:
            logger.info(f"Todo {todo_id} updated")
        else:
            logger.warning(f"Cannot update, todo {todo_id} not found")
        return result

    def delete(self, todo_id: int) -> bool:
        """
        Delete a todo.

        Returns:
            True if the todo existed and was deleted, False otherwise
        """
        logger.info(f"Deleting todo {todo_id}")

        if self.repository.exists_by_id(todo_id):
            self.repository.delete_by_id(todo_id)
            logger.info(f"Todo {todo_id} deleted")
            return True

        logger.warning(f"Attempted to delete missing todo {todo_id}")
        return False

    def list_by_status(self, completed: bool) -> List[Todo]:
        logger.info(f"Listing todos with completed={completed}")
        return self.repository.find_by_completed(completed)

    def search_by_title(self, substring: str) -> List[Todo]:
        logger.info(f"Searching todos with title containing '{substring}'")
        return self.repository.find_by_title_containing_ignore_case(substring)

    def set_status(self, todo_id: int, completed: bool) -> LookupResult[Todo]:
        """
        Mark a todo completed or not completed.

        Returns:
            Found(updated todo) or NotFound(todo_id)
        """
        logger.info(f"Setting todo {todo_id} completed={completed}")

        def mark(todo: Todo) -> Todo:
            todo.completed = completed
            return todo

        with self.repository.transaction() as repo:
            result = repo.get_by_id(todo_id, for_update=True).map(
                lambda existing: repo.save(mark(existing))
            )

        if not result.is_found:
            logger.warning(f"Cannot change status, todo {todo_id} not found")
        return result

    def count_by_status(self, completed: bool) -> int:
        logger.info(f"Counting todos with completed={completed}")
        return self.repository.count_by_completed(completed)
