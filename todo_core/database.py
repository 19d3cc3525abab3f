"""
Todo Core Database Module
=========================

Persistence layer for the todo list: the ``Todo`` ORM entity, the store
handle that owns the engine and connection pool, and session management with
automatic rollback.

Features:
- SQLAlchemy ORM entity mapped to the ``todos`` table
- Field constraints enforced on assignment
- Lifecycle timestamps assigned by mapper events
- Connection pooling with configurable limits
- Transaction management with automatic rollback
- LIKE pattern escaping
- Query logging for monitoring
"""

import logging
from datetime import datetime
from contextlib import contextmanager
from typing import Any, Dict

from sqlalchemy import (
    create_engine,
    Column,
    Integer,
    String,
    Boolean,
    DateTime,
    Index,
    event,
)
from sqlalchemy.engine import make_url
from sqlalchemy.orm import (
    declarative_base,
    sessionmaker,
    validates,
    Session,
)
from sqlalchemy.pool import QueuePool, StaticPool
from sqlalchemy.sql import text
from sqlalchemy.exc import SQLAlchemyError

from todo_core.exceptions import TodoValidationError

logger = logging.getLogger(__name__)

# SQL statement log, enabled by setting this logger to DEBUG
sql_logger = logging.getLogger('todo_core.sql')

# Create base class for declarative models
Base = declarative_base()


# ============================================================================
# CONSTANTS
# ============================================================================

TITLE_MIN_LENGTH = 1
TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500

LIKE_ESCAPE_CHAR = '\\'


def escape_like_pattern(pattern: str, escape_char: str = LIKE_ESCAPE_CHAR) -> str:
    """
    Escape LIKE wildcards so the pattern is matched literally.

    Args:
        pattern: The user-supplied substring
        escape_char: The escape character to use

    Returns:
        Pattern safe to embed in a LIKE expression
    """
    if not isinstance(pattern, str):
        raise ValueError("Pattern must be a string")

    pattern = pattern.replace(escape_char, escape_char + escape_char)
    pattern = pattern.replace('%', escape_char + '%')
    pattern = pattern.replace('_', escape_char + '_')
    return pattern


# ============================================================================
# DATABASE MODELS
# ============================================================================

class Todo(Base):
    """
    A single to-do item.

    ``id`` and both timestamps belong to the store: the id is generated on
    insert and the timestamps are maintained by the mapper events below.
    """
    __tablename__ = 'todos'

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(TITLE_MAX_LENGTH), nullable=False)
    description = Column(String(DESCRIPTION_MAX_LENGTH), nullable=True)
    completed = Column(Boolean, default=False, nullable=False, index=True)

    # Timestamps
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)

    __table_args__ = (
        Index('idx_todo_title', 'title'),
    )

    def __init__(self, **kwargs):
        # Run the title validator even when no title is given
        kwargs.setdefault('title', None)
        kwargs.setdefault('completed', False)
        super().__init__(**kwargs)

    @validates('title')
    def validate_title(self, key, value):
        """Reject missing, blank or oversized titles"""
        if value is None or not value.strip():
            raise TodoValidationError("Title cannot be empty")
        if not TITLE_MIN_LENGTH <= len(value) <= TITLE_MAX_LENGTH:
            raise TodoValidationError(
                f"Title must be between {TITLE_MIN_LENGTH} and "
                f"{TITLE_MAX_LENGTH} characters"
            )
        return value

    @validates('description')
    def validate_description(self, key, value):
        """Reject oversized descriptions"""
        if value is not None and len(value) > DESCRIPTION_MAX_LENGTH:
            raise TodoValidationError(
                f"Description cannot exceed {DESCRIPTION_MAX_LENGTH} characters"
            )
        return value

    @validates('completed')
    def validate_completed(self, key, value):
        if value is None:
            raise TodoValidationError("Completed flag cannot be null")
        return bool(value)

    def __repr__(self):
        return f"<Todo(id={self.id}, title='{self.title}', completed={self.completed})>"


@event.listens_for(Todo, 'before_insert')
def _stamp_created(mapper, connection, target):
    """Set both timestamps from a single clock reading"""
    now = datetime.utcnow()
    target.created_at = now
    target.updated_at = now


@event.listens_for(Todo, 'before_update')
def _stamp_updated(mapper, connection, target):
    target.updated_at = datetime.utcnow()


# ============================================================================
# DATABASE CONNECTION AND POOLING
# ============================================================================

class DatabaseConfig:
    """Database configuration with pooling defaults"""

    def __init__(
        self,
        database_url: str,
        pool_size: int = 5,
        max_overflow: int = 10,
        pool_timeout: int = 30,
        pool_recycle: int = 3600,
        echo: bool = False,
    ):
        self.database_url = database_url
        self.pool_size = pool_size
        self.max_overflow = max_overflow
        self.pool_timeout = pool_timeout
        self.pool_recycle = pool_recycle
        self.echo = echo


class DatabaseManager:
    """
    Store handle owning the engine, connection pool and session factory.

    Create one per process, call ``initialize()`` at startup and ``close()``
    at shutdown. Sessions obtained from ``get_session()`` commit on success
    and roll back on any error.
    """

    def __init__(self, config: DatabaseConfig):
        self.config = config
        self.engine = None
        self.session_factory = None
        self._initialized = False

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def _engine_options(self) -> Dict[str, Any]:
        """Pool and driver options for the configured URL"""
        url = make_url(self.config.database_url)
        options: Dict[str, Any] = {'echo': self.config.echo}

        if url.get_backend_name() == 'sqlite':
            # Requests are served from a thread pool
            options['connect_args'] = {'check_same_thread': False}
            if url.database in (None, '', ':memory:'):
                # One shared connection, otherwise each connection sees its own empty database
                options['poolclass'] = StaticPool
                return options

        options.update(
            poolclass=QueuePool,
            pool_size=self.config.pool_size,
            max_overflow=self.config.max_overflow,
            pool_timeout=self.config.pool_timeout,
            pool_recycle=self.config.pool_recycle,
        )
        return options

    def initialize(self):
        """Initialize database engine and session factory"""
        if self._initialized:
            logger.warning("DatabaseManager already initialized")
            return

        try:
            # Create engine with connection pooling
            self.engine = create_engine(
                self.config.database_url,
                **self._engine_options()
            )

            # Create session factory
            self.session_factory = sessionmaker(
                bind=self.engine,
                expire_on_commit=False,
            )

            # Create tables
            Base.metadata.create_all(self.engine)

            # Set up event listeners for query logging
            self._setup_event_listeners()

            self._initialized = True
            logger.info(f"Database initialized: {make_url(self.config.database_url).render_as_string(hide_password=True)}")

        except Exception as e:
            logger.error(f"Failed to initialize database: {e}")
            raise

    def _setup_event_listeners(self):
        """Set up SQLAlchemy event listeners for query logging"""

        @event.listens_for(self.engine, "before_cursor_execute")
        def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
            """Log queries before execution"""
            sql_logger.debug(f"Query: {statement}")
            sql_logger.debug(f"Parameters: {parameters}")

        @event.listens_for(self.engine, "handle_error")
        def handle_error(exception_context):
            """Log database errors"""
            sql_logger.error(
                f"Database error: {exception_context.original_exception}"
            )

    @contextmanager
    def get_session(self) -> Session:
        """
        Context manager for database sessions with automatic rollback.

        Usage:
            with db_manager.get_session() as session:
                todo = session.get(Todo, 1)
        """
        if not self._initialized:
            raise RuntimeError("DatabaseManager not initialized. Call initialize() first.")

        session = self.session_factory()
        try:
            yield session
            session.commit()
            logger.debug("Session committed successfully")
        except Exception as e:
            session.rollback()
            logger.error(f"Session rollback due to error: {e}")
            raise
        finally:
            session.close()

    def ping(self) -> bool:
        """Return True when the store answers a trivial query"""
        if not self._initialized:
            return False

        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.error(f"Database ping failed: {e}")
            return False

    def close(self):
        """Close database connections"""
        if self.engine:
            self.engine.dispose()
            logger.info("Database engine disposed")
        self.engine = None
        self.session_factory = None
        self._initialized = False
