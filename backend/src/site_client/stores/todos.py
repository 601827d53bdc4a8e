"""Todo list store with optimistic updates."""
import logging
from typing import Any

from ..api_client import ApiResponseError, api_delete, api_get, api_post, api_put, error_message
from ..reconcile import RECOVERABLE_ERRORS
from ..versions import derive_list_version
from .base import ResourceStore

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = ("Work", "Study", "Life", "Leisure", "Other")
PRIORITIES = ("high", "medium", "low")

Todo = dict[str, Any]


class TodoStore(ResourceStore[list[Todo]]):
    """
    Cached todo list.

    add/toggle/update/remove apply to the in-memory list first, then call the
    API. A failed call rolls the change back and shows an error that clears
    itself after error_display_seconds. A successful call persists the list with
    a version stamp of "now".
    """

    resource = "todos"

    def default_data(self) -> list[Todo]:
        return []

    async def fetch_remote(self) -> tuple[list[Todo], str]:
        todos = await api_get(self.client, "todos")
        if not isinstance(todos, list):
            raise ApiResponseError("Todo list response is not a list")
        return todos, derive_list_version(todos)

    @property
    def todos(self) -> list[Todo]:
        return self.cache.data

    @property
    def categories(self) -> list[str]:
        """Default categories followed by any other category in use."""
        result = list(DEFAULT_CATEGORIES)
        for todo in self.todos:
            category = todo.get("category")
            if category and category not in result:
                result.append(category)
        return result

    @property
    def priorities(self) -> list[str]:
        return list(PRIORITIES)

    def find(self, todo_id: int) -> Todo | None:
        """The todo with the given id, if present."""
        for todo in self.todos:
            if todo.get("id") == todo_id:
                return todo
        return None

    def _remove_identical(self, item: Todo) -> int | None:
        """Remove the exact item object from the list. Returns its former index."""
        for index, todo in enumerate(self.todos):
            if todo is item:
                del self.todos[index]
                return index
        return None

    async def add_todo(
        self, text: str, priority: str = "medium", category: str = "",
    ) -> Todo | None:
        """Add a todo at the top of the list. Returns the created todo, None on failure."""
        payload = {"text": text, "completed": False, "priority": priority, "category": category}
        # Shown immediately; replaced by the server's copy (with id) on success
        pending = {"id": None, **payload}
        self.todos.insert(0, pending)

        try:
            created = await api_post(self.client, "todos", json=payload)
        except RECOVERABLE_ERRORS as e:
            logger.warning("Adding todo failed: %s", e)
            self._remove_identical(pending)
            self.show_transient_error(error_message(e, "Failed to add todo"))
            return None

        index = self._remove_identical(pending)
        self.todos.insert(index if index is not None else 0, created)
        self.commit_local_change(self.todos)
        return created

    async def toggle_todo(self, todo_id: int) -> bool:
        """Flip a todo's completed flag. Returns False (flag restored) on failure."""
        todo = self.find(todo_id)
        if todo is None:
            return False

        previous = bool(todo.get("completed"))
        todo["completed"] = not previous

        try:
            updated = await api_put(
                self.client, f"todos/{todo_id}", json={"completed": not previous},
            )
        except RECOVERABLE_ERRORS as e:
            logger.warning("Toggling todo %s failed: %s", todo_id, e)
            todo["completed"] = previous
            self.show_transient_error("Failed to update todo status")
            return False

        if isinstance(updated, dict):
            todo.update(updated)
        self.commit_local_change(self.todos)
        return True

    async def update_todo(self, todo_id: int, **updates: Any) -> bool:
        """Change todo fields. Returns False (todo restored) on failure."""
        todo = self.find(todo_id)
        if todo is None:
            return False

        original = dict(todo)
        todo.update(updates)

        try:
            updated = await api_put(self.client, f"todos/{todo_id}", json=updates)
        except RECOVERABLE_ERRORS as e:
            logger.warning("Updating todo %s failed: %s", todo_id, e)
            todo.clear()
            todo.update(original)
            self.show_transient_error("Failed to update todo")
            return False

        if isinstance(updated, dict):
            todo.update(updated)
        self.commit_local_change(self.todos)
        return True

    async def remove_todo(self, todo_id: int) -> bool:
        """Delete a todo. Returns False (todo restored in place) on failure."""
        todo = self.find(todo_id)
        if todo is None:
            return False

        index = self._remove_identical(todo)

        try:
            await api_delete(self.client, f"todos/{todo_id}")
        except RECOVERABLE_ERRORS as e:
            logger.warning("Deleting todo %s failed: %s", todo_id, e)
            position = index if index is not None else 0
            self.todos.insert(min(position, len(self.todos)), todo)
            self.show_transient_error("Failed to delete todo")
            return False

        self.commit_local_change(self.todos)
        return True

    async def delete_completed_todos(self) -> int:
        """
        Delete every completed todo with one request.

        Not optimistic: the list only changes once the server confirms. On failure
        error holds the server's message and the exception propagates.
        """
        self.is_loading = True
        self.error = None
        try:
            result = await api_delete(self.client, "todos/completed")
        except RECOVERABLE_ERRORS as e:
            logger.warning("Deleting completed todos failed: %s", e)
            self.error = error_message(e, "Failed to delete completed todos")
            raise
        finally:
            self.is_loading = False

        remaining = [todo for todo in self.todos if not todo.get("completed")]
        self.commit_local_change(remaining)
        self.last_fetch_time = self._clock()
        return int((result or {}).get("deleted_count", 0))
