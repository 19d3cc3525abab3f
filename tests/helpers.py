"""Shared fixtures for the todo test suite."""

from datetime import datetime, timedelta

from todo_core.database import DatabaseConfig, DatabaseManager

IN_MEMORY_URL = "sqlite://"


def make_db_manager() -> DatabaseManager:
    """Initialized store handle on a fresh in-memory database"""
    manager = DatabaseManager(DatabaseConfig(database_url=IN_MEMORY_URL))
    manager.initialize()
    return manager


class FakeClock:
    """Stand-in for ``datetime`` that advances one second per reading."""

    def __init__(self, start: datetime = datetime(2025, 11, 16, 9, 0, 0)):
        self.now = start
        self.readings = []

    def utcnow(self) -> datetime:
        self.now = self.now + timedelta(seconds=1)
        self.readings.append(self.now)
        return self.now
