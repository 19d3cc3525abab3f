"""
Todo Service Test Suite

Tests for TodoService on top of a real repository and in-memory store.
"""

import unittest
from unittest.mock import MagicMock, patch

from todo_core.database import Todo
from todo_core.exceptions import InvalidArgumentError, TodoValidationError
from todo_core.repository import TodoRepository
from todo_core.results import Found, NotFound
from todo_core.service import TodoService

from tests.helpers import FakeClock, make_db_manager


class TestTodoService(unittest.TestCase):
    """Test suite for TodoService."""

    def setUp(self):
        """Set up test fixtures."""
        self.db_manager = make_db_manager()
        self.repository = TodoRepository(self.db_manager)
        self.service = TodoService(self.repository)

    def tearDown(self):
        self.db_manager.close()

    def test_create_assigns_id_and_timestamps(self):
        todo = self.service.create(Todo(title="Buy milk"))

        self.assertIsNotNone(todo.id)
        self.assertFalse(todo.completed)
        self.assertEqual(todo.created_at, todo.updated_at)

    def test_create_ignores_caller_id(self):
        """A caller-supplied id never turns create into an update."""
        existing = self.service.create(Todo(title="Existing"))

        incoming = Todo(title="New")
        incoming.id = existing.id
        created = self.service.create(incoming)

        self.assertNotEqual(created.id, existing.id)
        self.assertEqual(self.service.get_by_id(existing.id).value.title, "Existing")
        self.assertEqual(len(self.service.list_all()), 2)

    def test_create_from_persisted_todo_inserts(self):
        """Creating from an already stored todo adds a second row."""
        first = self.service.create(Todo(title="first"))

        second = self.service.create(first)

        self.assertNotEqual(second.id, first.id)
        self.assertEqual([t.title for t in self.service.list_all()], ["first", "first"])

    def test_create_without_title_raises(self):
        with self.assertRaises(TodoValidationError):
            self.service.create(Todo(description="x"))

        self.assertEqual(self.service.list_all(), [])

    def test_create_null_raises(self):
        with self.assertRaises(InvalidArgumentError):
            self.service.create(None)

    def test_round_trip(self):
        """A created todo reads back with the same field values."""
        created = self.service.create(
            Todo(title="Read book", description="Chapter 4", completed=True)
        )

        fetched = self.service.get_by_id(created.id)

        self.assertIsInstance(fetched, Found)
        fields = ("id", "title", "description", "completed", "created_at", "updated_at")
        for field in fields:
            with self.subTest(field=field):
                self.assertEqual(getattr(fetched.value, field), getattr(created, field))

    def test_get_missing_returns_not_found(self):
        self.assertEqual(self.service.get_by_id(12), NotFound(12))

    def test_update_replaces_fields(self):
        clock = FakeClock()
        with patch("todo_core.database.datetime", clock):
            created = self.service.create(Todo(title="Old", description="old"))
            result = self.service.update(
                created.id, Todo(title="New", description=None, completed=True)
            )

        self.assertTrue(result.is_found)
        updated = result.value
        self.assertEqual(updated.id, created.id)
        self.assertEqual(updated.title, "New")
        self.assertIsNone(updated.description)
        self.assertTrue(updated.completed)
        self.assertEqual(updated.created_at, created.created_at)
        self.assertGreater(updated.updated_at, updated.created_at)

        stored = self.service.get_by_id(created.id).value
        self.assertEqual(stored.title, "New")
        self.assertEqual(stored.created_at, created.created_at)

    def test_update_missing_returns_not_found(self):
        """Updating an unknown id changes nothing."""
        kept = self.service.create(Todo(title="Kept"))

        result = self.service.update(kept.id + 100, Todo(title="Ghost"))

        self.assertEqual(result, NotFound(kept.id + 100))
        self.assertEqual([t.title for t in self.service.list_all()], ["Kept"])

    def test_update_null_raises(self):
        created = self.service.create(Todo(title="Task"))

        with self.assertRaises(InvalidArgumentError):
            self.service.update(created.id, None)

    def test_update_with_invalid_title_leaves_row_untouched(self):
        created = self.service.create(Todo(title="Valid"))
        changes = Todo(title="placeholder")
        # Bypass the validator to simulate a corrupted patch
        changes.__dict__["title"] = ""

        with self.assertRaises(TodoValidationError):
            self.service.update(created.id, changes)

        self.assertEqual(self.service.get_by_id(created.id).value.title, "Valid")

    def test_delete_existing(self):
        created = self.service.create(Todo(title="Trash"))

        self.assertTrue(self.service.delete(created.id))
        self.assertFalse(self.service.get_by_id(created.id).is_found)

    def test_delete_missing_returns_false(self):
        self.assertFalse(self.service.delete(999))

    def test_list_by_status_is_exact(self):
        done_ids = {
            self.service.create(Todo(title=f"Done {i}", completed=True)).id
            for i in range(3)
        }
        for i in range(2):
            self.service.create(Todo(title=f"Pending {i}"))

        self.assertEqual({t.id for t in self.service.list_by_status(True)}, done_ids)
        self.assertTrue(all(not t.completed for t in self.service.list_by_status(False)))

    def test_count_matches_list(self):
        self.service.create(Todo(title="A", completed=True))
        self.service.create(Todo(title="B"))
        self.service.create(Todo(title="C"))

        for flag in (True, False):
            with self.subTest(completed=flag):
                self.assertEqual(
                    self.service.count_by_status(flag),
                    len(self.service.list_by_status(flag))
                )

    def test_search_by_title(self):
        self.service.create(Todo(title="ABCdef"))
        self.service.create(Todo(title="Other"))

        self.assertEqual([t.title for t in self.service.search_by_title("abc")], ["ABCdef"])

    def test_set_status(self):
        clock = FakeClock()
        with patch("todo_core.database.datetime", clock):
            created = self.service.create(Todo(title="Buy milk"))
            result = self.service.set_status(created.id, True)

        self.assertTrue(result.is_found)
        self.assertTrue(result.value.completed)
        self.assertEqual(result.value.title, "Buy milk")
        self.assertEqual(result.value.created_at, created.created_at)
        self.assertGreater(result.value.updated_at, created.updated_at)
        self.assertEqual(self.service.count_by_status(True), 1)

    def test_set_status_missing(self):
        self.assertEqual(self.service.set_status(3, True), NotFound(3))


class TestTodoServiceDelegation(unittest.TestCase):
    """Test that query operations are pure delegations."""

    def setUp(self):
        self.repository = MagicMock(spec=TodoRepository)
        self.service = TodoService(self.repository)

    def test_list_all(self):
        self.repository.get_all.return_value = ["a"]
        self.assertEqual(self.service.list_all(), ["a"])

    def test_list_by_status(self):
        self.service.list_by_status(False)
        self.repository.find_by_completed.assert_called_once_with(False)

    def test_search_by_title(self):
        self.service.search_by_title("milk")
        self.repository.find_by_title_containing_ignore_case.assert_called_once_with("milk")

    def test_count_by_status(self):
        self.repository.count_by_completed.return_value = 4
        self.assertEqual(self.service.count_by_status(True), 4)

    def test_delete_checks_existence_first(self):
        self.repository.exists_by_id.return_value = False

        self.assertFalse(self.service.delete(8))
        self.repository.delete_by_id.assert_not_called()


if __name__ == "__main__":
    unittest.main(verbosity=2)
