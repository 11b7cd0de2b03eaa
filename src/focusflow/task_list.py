"""Task list state for the signed-in user.

TaskListStore is the only writer of TaskListState. Presentation code reads
`store.state` and sends intents through create/load/refresh/reset.

Lifecycle: empty -> loading -> loaded, with loaded -> loading again on
refresh. A failed fetch leaves the previous tasks in place and records the
error in `state.last_error`.
"""

import asyncio
import logging
from dataclasses import dataclass, field

from .core.tasks import Task, TaskDraft
from .ports.task_repo import RepositoryError, TaskRepository

logger = logging.getLogger(__name__)


@dataclass
class TaskListState:
    """Observable task list for one owner."""

    tasks: list[Task] = field(default_factory=list)
    is_loading: bool = False
    is_loaded: bool = False
    owner_id: str | None = None
    last_error: RepositoryError | None = None


class TaskListStore:
    """
    Owns TaskListState and sequences fetches against the repository.

    Repository calls are blocking and run in a worker thread. At most one
    fetch is in flight at a time; later fetches queue behind the lock.
    A load() that finds a fetch queued or running for its owner waits for
    that fetch instead of issuing its own.
    """

    def __init__(self, repository: TaskRepository):
        self.repository = repository
        self._state = TaskListState()
        self._lock = asyncio.Lock()
        # Bumped on every reset so in-flight fetches for an old owner are dropped
        self._generation = 0
        # Latest fetch queued for the current generation; load() joins it
        self._pending: asyncio.Task | None = None

    @property
    def state(self) -> TaskListState:
        return self._state

    async def create(self, draft: TaskDraft) -> None:
        """
        Store a new task.

        Does not refresh the list; call refresh() afterwards. Raises
        RepositoryError and leaves the state untouched on failure.
        """
        await asyncio.to_thread(self.repository.create_task, draft)

    async def load(self, owner_id: str) -> None:
        """Fetch the owner's tasks unless they are already loaded or being fetched."""
        self._bind_owner(owner_id)

        pending = self._pending
        if pending is not None and not pending.done():
            # Join the fetch already queued or in flight for this owner
            await asyncio.wait({pending})
            return

        if self._state.is_loaded:
            logger.debug(f"Tasks for {owner_id} already loaded, skipping fetch")
            return

        await self._start_fetch()

    async def refresh(self, owner_id: str) -> None:
        """Fetch the owner's tasks, even if they are already loaded."""
        self._bind_owner(owner_id)
        await self._start_fetch()

    def reset(self) -> None:
        """Drop all state, e.g. on sign-out."""
        self._generation += 1
        self._pending = None
        self._state.tasks = []
        self._state.is_loading = False
        self._state.is_loaded = False
        self._state.owner_id = None
        self._state.last_error = None

    def _bind_owner(self, owner_id: str) -> None:
        if not owner_id:
            raise ValueError("owner_id must not be empty")
        if self._state.owner_id is not None and self._state.owner_id != owner_id:
            logger.info(f"Task list owner changed from {self._state.owner_id} to {owner_id}")
            self.reset()
        self._state.owner_id = owner_id

    def _start_fetch(self) -> "asyncio.Task[None]":
        """Queue a fetch for the current owner and remember it as the pending one."""
        self._pending = asyncio.create_task(self._fetch(self._generation, self._state.owner_id))
        return self._pending

    async def _fetch(self, generation: int, owner_id: str) -> None:
        async with self._lock:
            if generation != self._generation:
                return

            self._state.is_loading = True
            try:
                tasks = await asyncio.to_thread(self.repository.list_tasks, owner_id)
            except RepositoryError as e:
                logger.warning(f"Unable to fetch tasks for {owner_id}: {e}")
                if generation == self._generation:
                    self._state.last_error = e
                return
            finally:
                if generation == self._generation:
                    self._state.is_loading = False

            if generation != self._generation:
                logger.debug(f"Discarding tasks fetched for previous owner {owner_id}")
                return

            self._state.tasks = tasks
            self._state.is_loaded = True
            self._state.last_error = None
