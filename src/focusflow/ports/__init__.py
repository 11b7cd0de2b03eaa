"""Ports - interfaces/protocols for external dependencies."""

from .task_repo import (
    MalformedResponse,
    NetworkUnavailable,
    RepositoryError,
    ServerRejected,
    TaskRepository,
    Unauthorized,
)
from .session_provider import SessionProvider

__all__ = [
    "TaskRepository",
    "SessionProvider",
    "RepositoryError",
    "NetworkUnavailable",
    "Unauthorized",
    "MalformedResponse",
    "ServerRejected",
]
