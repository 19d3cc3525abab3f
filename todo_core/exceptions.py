"""
Todo Core Exceptions
====================

Error types raised by the entity and service layers. Absence of a record is
not an error and is reported through ``todo_core.results`` instead.
"""


class TodoError(Exception):
    """Base class for todo errors."""
    pass


class TodoValidationError(TodoError, ValueError):
    """Exception raised when a todo field violates its constraints."""
    pass


class InvalidArgumentError(TodoValidationError):
    """Exception raised when a service operation receives a null argument."""
    pass
