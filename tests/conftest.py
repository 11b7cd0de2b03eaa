"""Shared fixtures and a fake task repository."""

import threading
import time

import pytest

from focusflow.core.tasks import Priority, Task, TaskDraft
from focusflow.task_list import TaskListStore


class FakeTaskRepository:
    """
    In-memory TaskRepository.

    - Assigns ids and created_at like the store does
    - Lists newest first
    - Records calls and the peak number of concurrent list_tasks calls
    - `fail_with` makes calls raise the given error
    """

    def __init__(self, delay: float = 0.0):
        self.delay = delay
        self.rows: list[Task] = []
        self.created: list[TaskDraft] = []
        self.list_calls: list[str] = []
        self.fail_with: Exception | None = None
        self.max_concurrent = 0
        self._active = 0
        self._guard = threading.Lock()

    def _insert(self, draft: TaskDraft) -> Task:
        task = Task(
            id=len(self.rows) + 1,
            created_at=f"2024-09-14T00:00:{len(self.rows):02d}+00:00",
            title=draft.title,
            description=draft.description,
            priority=draft.priority,
            due_date=draft.due_date,
            owner_id=draft.owner_id,
        )
        self.rows.append(task)
        return task

    def add(self, owner_id: str, title: str, priority: Priority = Priority.UNSET) -> Task:
        """Seed a row without going through create_task."""
        return self._insert(TaskDraft(title=title, owner_id=owner_id, priority=priority))

    def create_task(self, draft: TaskDraft) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.created.append(draft)
        self._insert(draft)

    def list_tasks(self, owner_id: str) -> list[Task]:
        with self._guard:
            self.list_calls.append(owner_id)
            self._active += 1
            self.max_concurrent = max(self.max_concurrent, self._active)
        try:
            if self.delay:
                time.sleep(self.delay)
            if self.fail_with is not None:
                raise self.fail_with
            owned = [t for t in self.rows if t.owner_id == owner_id]
            return sorted(owned, key=lambda t: t.created_at, reverse=True)
        finally:
            with self._guard:
                self._active -= 1


@pytest.fixture
def repo():
    return FakeTaskRepository()


@pytest.fixture
def slow_repo():
    """Repository whose list call takes long enough for callers to overlap."""
    return FakeTaskRepository(delay=0.05)


@pytest.fixture
def store(repo):
    return TaskListStore(repo)
