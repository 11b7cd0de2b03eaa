"""Tests for the command-line front end."""

import json
from datetime import date
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from focusflow.adapters.supabase_auth import AuthenticationError
from focusflow.cli import main
from focusflow.config import Config
from focusflow.core.tasks import Priority
from focusflow.core.user import AppUser
from focusflow.ports.task_repo import NetworkUnavailable


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def auth():
    adapter = MagicMock()
    adapter.current_user.return_value = AppUser(id="u1", email="me@example.com")
    return adapter


@pytest.fixture(autouse=True)
def wiring(auth, repo):
    """Route the CLI to the fake repository and a mocked session."""
    with (
        patch("focusflow.cli.load_config", return_value=Config()),
        patch("focusflow.cli.SupabaseAuthAdapter", return_value=auth),
        patch("focusflow.cli.SupabaseTaskAdapter", return_value=repo),
    ):
        yield


class TestTasksCommand:
    def test_lists_tasks(self, runner, repo):
        repo.add("u1", "Read", Priority.P3)
        repo.add("u1", "Gym", Priority.P1)
        repo.rows[1].due_date = 1726358400

        result = runner.invoke(main, ["tasks"])

        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert lines == ["[P1] Gym (due 15-09)", "[P3] Read"]

    def test_empty(self, runner):
        result = runner.invoke(main, ["tasks"])
        assert result.exit_code == 0
        assert "No tasks." in result.output

    def test_json(self, runner, repo):
        repo.add("u1", "Gym", Priority.P2)

        result = runner.invoke(main, ["tasks", "--json"])

        data = json.loads(result.output)
        assert data == [
            {
                "id": 1,
                "created_at": "2024-09-14T00:00:00+00:00",
                "title": "Gym",
                "description": "",
                "priority": "Priority 2",
                "due_date": None,
            }
        ]

    def test_filter_by_priority(self, runner, repo):
        repo.add("u1", "Read", Priority.P3)
        repo.add("u1", "Gym", Priority.P1)

        result = runner.invoke(main, ["tasks", "-p", "3"])

        assert result.output.splitlines() == ["[P3] Read"]

    def test_fetch_failure(self, runner, repo):
        repo.fail_with = NetworkUnavailable("offline")

        result = runner.invoke(main, ["tasks"])

        assert result.exit_code == 1
        assert "Error: offline" in result.output

    def test_not_signed_in(self, runner, auth, repo):
        auth.current_user.return_value = None

        result = runner.invoke(main, ["tasks"])

        assert result.exit_code == 1
        assert "Not signed in" in result.output
        assert repo.list_calls == []


class TestShowCommand:
    def test_shows_details(self, runner, repo):
        task = repo.add("u1", "Gym", Priority.P2)
        task.description = "Leg day"
        task.due_date = 1726358400
        task.created_at = "2024-09-14T18:22:31.123456+00:00"

        result = runner.invoke(main, ["show", "1"])

        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "Gym",
            "Priority: P2",
            "Created:  14-09",
            "Due:      15-09",
            "",
            "Leg day",
        ]

    def test_unparseable_created_at(self, runner, repo):
        task = repo.add("u1", "Read")
        task.created_at = "sometime last week"

        result = runner.invoke(main, ["show", "1"])

        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "Read",
            "Priority: none",
            "Created:  -",
            "Due:      -",
        ]

    def test_unknown_id(self, runner, repo):
        repo.add("u1", "Gym")

        result = runner.invoke(main, ["show", "42"])

        assert result.exit_code == 1
        assert "No task with id 42" in result.output

    def test_other_owners_task_not_shown(self, runner, repo):
        repo.add("u2", "Not mine")

        result = runner.invoke(main, ["show", "1"])

        assert result.exit_code == 1
        assert repo.list_calls == ["u1"]


class TestAddCommand:
    def test_creates_then_refreshes(self, runner, repo):
        result = runner.invoke(main, ["add", "Gym", "-p", "2", "--due", "2024-09-15"])

        assert result.exit_code == 0
        assert "Created: Gym" in result.output
        assert "1 tasks in your list." in result.output

        draft = repo.created[0]
        assert draft.owner_id == "u1"
        assert draft.priority is Priority.P2
        assert draft.due_date == 1726358400
        assert repo.list_calls == ["u1"]

    def test_without_priority_or_due(self, runner, repo):
        result = runner.invoke(main, ["add", "Read", "-d", "Two chapters"])

        assert result.exit_code == 0
        draft = repo.created[0]
        assert draft.priority is Priority.UNSET
        assert draft.due_date is None
        assert draft.description == "Two chapters"

    def test_blank_title(self, runner, repo):
        result = runner.invoke(main, ["add", "  "])

        assert result.exit_code == 1
        assert "title" in result.output
        assert repo.created == []

    def test_create_failure(self, runner, repo):
        repo.fail_with = NetworkUnavailable("offline")

        result = runner.invoke(main, ["add", "Gym"])

        assert result.exit_code == 1
        assert "Error: offline" in result.output
        assert repo.list_calls == []

    def test_priority_out_of_range(self, runner):
        result = runner.invoke(main, ["add", "Gym", "-p", "5"])
        assert result.exit_code == 2


class TestSessionCommands:
    def test_signin(self, runner, auth):
        auth.sign_in_with_id_token.return_value = AppUser(id="u1", email="me@example.com")

        result = runner.invoke(main, ["signin", "--id-token", "apple-token", "--nonce", "n1"])

        assert result.exit_code == 0
        auth.sign_in_with_id_token.assert_called_once_with("apple-token", "n1", "apple")
        assert "Signed in as me@example.com" in result.output

    def test_signin_failure(self, runner, auth):
        auth.sign_in_with_id_token.side_effect = AuthenticationError("invalid id token")

        result = runner.invoke(main, ["signin", "--id-token", "bad"])

        assert result.exit_code == 1
        assert "invalid id token" in result.output

    def test_signout(self, runner, auth):
        result = runner.invoke(main, ["signout"])
        assert result.exit_code == 0
        auth.sign_out.assert_called_once()

    def test_whoami(self, runner):
        result = runner.invoke(main, ["whoami"])
        assert result.output.splitlines() == ["u1", "me@example.com"]

    def test_delete_account(self, runner, auth):
        result = runner.invoke(main, ["delete-account", "--yes"])

        assert result.exit_code == 0
        auth.delete_user.assert_called_once_with("u1")

    def test_delete_account_failure(self, runner, auth):
        auth.delete_user.side_effect = AuthenticationError("Deleting user failed (500)")

        result = runner.invoke(main, ["delete-account", "--yes"])

        assert result.exit_code == 1
        assert "500" in result.output


class TestDaysCommand:
    def test_other_month(self, runner):
        year = date.today().year
        month = 2 if date.today().month != 2 else 3

        result = runner.invoke(main, ["days", "--month", str(month)])

        assert result.exit_code == 0
        first = date(year, month, 1)
        assert f"### {first.strftime('%B %Y')}" in result.output
        assert f"* {first.strftime('%a')}  1" in result.output

    def test_current_month_marks_today(self, runner):
        today = date.today()

        result = runner.invoke(main, ["days"])

        assert result.exit_code == 0
        assert f"* {today.strftime('%a')} {today.day:2}" in result.output
