"""Supabase task adapter - PostgREST client for the `todos` table."""

import logging

import requests

from focusflow.config import Config, load_config
from focusflow.core.tasks import Task, TaskDraft
from focusflow.ports.session_provider import SessionProvider
from focusflow.ports.task_repo import (
    MalformedResponse,
    NetworkUnavailable,
    ServerRejected,
    Unauthorized,
)

from .supabase_auth import AuthenticationError, SupabaseAuthAdapter

logger = logging.getLogger(__name__)


class SupabaseTaskAdapter:
    """
    Supabase task adapter.

    Implements TaskRepository protocol. Maps drafts and rows to the `todos`
    table and HTTP failures to RepositoryError. No retries, no business logic.

    The requests session holds no per-user state, so one adapter can serve
    any number of task lists.
    """

    def __init__(self, config: Config | None = None, auth: SessionProvider | None = None):
        self.config = config or load_config()
        self.auth = auth or SupabaseAuthAdapter(self.config)
        self._http = requests.Session()

    @property
    def _table_url(self) -> str:
        return f"{self.config.supabase_url}/rest/v1/{self.config.todos_table}"

    def _api_request(
        self,
        method: str,
        params: dict | None = None,
        payload: dict | None = None,
        prefer: str | None = None,
    ) -> requests.Response:
        """Make authenticated API request."""
        try:
            token = self.auth.access_token()
        except AuthenticationError as e:
            raise Unauthorized(str(e)) from e

        headers = {
            "apikey": self.config.supabase_anon_key,
            "Authorization": f"Bearer {token}",
        }
        if prefer:
            headers["Prefer"] = prefer

        try:
            resp = self._http.request(
                method,
                self._table_url,
                params=params,
                json=payload,
                headers=headers,
                timeout=self.config.request_timeout,
            )
        except requests.RequestException as e:
            raise NetworkUnavailable(f"Could not reach task store: {e}") from e

        if resp.status_code in (401, 403):
            raise Unauthorized(f"Task store refused credentials ({resp.status_code}): {resp.text}")
        if not resp.ok:
            raise ServerRejected(resp.status_code, resp.text)
        return resp

    def create_task(self, draft: TaskDraft) -> None:
        """Insert a task row."""
        self._api_request("POST", payload=draft.to_api(), prefer="return=minimal")
        logger.info(f"Created task {draft.title!r} for {draft.owner_id}")

    def list_tasks(self, owner_id: str) -> list[Task]:
        """Fetch all tasks for an owner, newest first."""
        resp = self._api_request(
            "GET",
            params={
                "select": "*",
                "user_uid": f"eq.{owner_id}",
                "order": "created_at.desc",
            },
        )

        try:
            rows = resp.json()
        except ValueError as e:
            raise MalformedResponse(f"Task list is not JSON: {e}") from e

        if not isinstance(rows, list):
            raise MalformedResponse(f"Expected a list of tasks, got {type(rows).__name__}")

        try:
            tasks = [Task.from_api(row) for row in rows]
        except ValueError as e:
            raise MalformedResponse(str(e)) from e

        logger.debug(f"Fetched {len(tasks)} tasks for {owner_id}")
        return tasks
