"""
Todo Repository
===============

Persistence gateway for ``Todo`` records. Each call runs in its own session
obtained from the store handle, unless the repository was produced by
``transaction()``, in which case every call shares that one session.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from todo_core.database import (
    DatabaseManager,
    LIKE_ESCAPE_CHAR,
    Todo,
    escape_like_pattern,
)
from todo_core.results import Found, LookupResult, NotFound

logger = logging.getLogger(__name__)


class TodoRepository:
    """CRUD and derived queries over the ``todos`` table."""

    def __init__(self, db_manager: DatabaseManager, session: Optional[Session] = None):
        self.db_manager = db_manager
        self._session = session

    @contextmanager
    def _session_scope(self) -> Iterator[Session]:
        if self._session is not None:
            yield self._session
        else:
            with self.db_manager.get_session() as session:
                yield session

    @contextmanager
    def transaction(self) -> Iterator["TodoRepository"]:
        """
        Run several repository calls in a single transaction.

        Usage:
            with repository.transaction() as repo:
                result = repo.get_by_id(1, for_update=True)
                ...
                repo.save(todo)
        """
        if self._session is not None:
            yield self
            return

        with self.db_manager.get_session() as session:
            yield TodoRepository(self.db_manager, session=session)

    def get_all(self) -> List[Todo]:
        with self._session_scope() as session:
            return session.query(Todo).order_by(Todo.id).all()

    def get_by_id(self, todo_id: int, for_update: bool = False) -> LookupResult[Todo]:
        """
        Fetch a todo by id.

        Args:
            todo_id: Identifier to look up
            for_update: Lock the row until the enclosing transaction ends

        Returns:
            Found(todo) or NotFound(todo_id)
        """
        with self._session_scope() as session:
            query = session.query(Todo).filter(Todo.id == todo_id)
            if for_update:
                query = query.with_for_update()
            todo = query.one_or_none()

        if todo is None:
            return NotFound(todo_id)
        return Found(todo)

    def save(self, todo: Todo) -> Todo:
        """
        Insert a todo without an id, otherwise update the stored row.

        Returns:
            The persisted todo with id and timestamps populated
        """
        with self._session_scope() as session:
            if todo.id is None:
                session.add(todo)
                persisted = todo
            else:
                persisted = session.merge(todo)
            session.flush()

        logger.debug(f"Saved todo {persisted.id}")
        return persisted

    def exists_by_id(self, todo_id: int) -> bool:
        with self._session_scope() as session:
            count = session.query(func.count(Todo.id)).filter(Todo.id == todo_id).scalar()
        return count > 0

    def delete_by_id(self, todo_id: int) -> None:
        """Hard delete; callers check existence first"""
        with self._session_scope() as session:
            session.query(Todo).filter(Todo.id == todo_id).delete(synchronize_session=False)

    def find_by_completed(self, completed: bool) -> List[Todo]:
        with self._session_scope() as session:
            return (
                session.query(Todo)
                .filter(Todo.completed == completed)
                .order_by(Todo.id)
                .all()
            )

    def find_by_title_containing_ignore_case(self, substring: str) -> List[Todo]:
        """
        Search todos by title, case-insensitively.

        Wildcards in ``substring`` are matched literally and an empty
        substring matches every todo.
        """
        safe_pattern = escape_like_pattern(substring)
        with self._session_scope() as session:
            return (
                session.query(Todo)
                .filter(Todo.title.ilike(f'%{safe_pattern}%', escape=LIKE_ESCAPE_CHAR))
                .order_by(Todo.id)
                .all()
            )

    def count_by_completed(self, completed: bool) -> int:
        with self._session_scope() as session:
            return session.query(func.count(Todo.id)).filter(Todo.completed == completed).scalar()
