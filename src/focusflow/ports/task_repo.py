"""Task repository interface."""

from typing import Protocol

from focusflow.core.tasks import Task, TaskDraft


class RepositoryError(Exception):
    """Base class for task store failures."""

    pass


class NetworkUnavailable(RepositoryError):
    """The task store could not be reached."""

    pass


class Unauthorized(RepositoryError):
    """The store rejected our credentials, or there is no session."""

    pass


class MalformedResponse(RepositoryError):
    """The store answered with something that does not decode into tasks."""

    pass


class ServerRejected(RepositoryError):
    """The store refused the request."""

    def __init__(self, status_code: int, detail: str = ""):
        self.status_code = status_code
        self.detail = detail
        message = f"Server rejected request ({status_code})"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class TaskRepository(Protocol):
    """Interface for storing and fetching tasks from any backend."""

    def create_task(self, draft: TaskDraft) -> None:
        """Insert a new task. Raises RepositoryError."""
        ...

    def list_tasks(self, owner_id: str) -> list[Task]:
        """All tasks for an owner, newest first. Raises RepositoryError."""
        ...
