"""FocusFlow CLI - to-do lists backed by Supabase."""

import asyncio
import json
import logging
import sys
from datetime import date, datetime

import click

from .adapters.supabase_auth import AuthenticationError, SupabaseAuthAdapter
from .adapters.supabase_tasks import SupabaseTaskAdapter
from .config import Config, load_config
from .core.calendar import day_brief, select_month, weekday_label
from .core.tasks import (
    ALL_PRIORITIES,
    NO_COLOR,
    Priority,
    Task,
    TaskDraft,
    filter_by_priority,
    filter_due_on,
)
from .core.user import AppUser
from .ports.task_repo import RepositoryError
from .task_list import TaskListStore


@click.group()
@click.version_option()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """FocusFlow - to-do lists from the command line."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def _require_user(auth: SupabaseAuthAdapter) -> AppUser:
    user = auth.current_user()
    if user is None:
        _fail("Not signed in. Run 'focusflow signin' first.")
    return user


def _task_store(config: Config, auth: SupabaseAuthAdapter) -> TaskListStore:
    return TaskListStore(SupabaseTaskAdapter(config, auth))


def _format_task(task: Task, config: Config) -> str:
    """One display line: priority tag, title, due date."""
    tag = f"[{task.shorthand:2}]"
    if task.color != NO_COLOR:
        tag = click.style(tag, fg=task.color)
    due = task.due_label(config.tzinfo)
    due = f" (due {due})" if due else ""
    return f"{tag} {task.title}{due}"


def _task_json(task: Task) -> dict:
    return {
        "id": task.id,
        "created_at": task.created_at,
        "title": task.title,
        "description": task.description,
        "priority": task.priority.to_wire(),
        "due_date": task.due_date,
    }


# ============== Session ==============


@main.command()
@click.option("--id-token", prompt=True, hide_input=True, help="Identity token from Sign in with Apple")
@click.option("--nonce", default=None, help="Nonce used when requesting the identity token")
@click.option("--provider", default="apple", show_default=True, help="Identity provider")
def signin(id_token: str, nonce: str | None, provider: str):
    """Sign in with an identity provider token."""
    config = load_config()
    try:
        user = SupabaseAuthAdapter(config).sign_in_with_id_token(id_token, nonce, provider)
    except AuthenticationError as e:
        _fail(str(e))

    click.echo(f"Signed in as {user.email or user.id}")


@main.command()
def signout():
    """Sign out and forget the stored session."""
    SupabaseAuthAdapter(load_config()).sign_out()
    click.echo("Signed out.")


@main.command()
def whoami():
    """Show the signed-in user."""
    user = _require_user(SupabaseAuthAdapter(load_config()))
    click.echo(user.id)
    if user.email:
        click.echo(user.email)


@main.command("delete-account")
@click.confirmation_option(prompt="Delete your account and all its data?")
def delete_account():
    """Delete the signed-in account."""
    auth = SupabaseAuthAdapter(load_config())
    user = _require_user(auth)
    try:
        auth.delete_user(user.id)
    except AuthenticationError as e:
        _fail(str(e))

    click.echo("Account deleted.")


# ============== Tasks ==============


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option(
    "--priority",
    "-p",
    type=click.IntRange(1, len(ALL_PRIORITIES)),
    default=None,
    help="Only show this priority",
)
@click.option(
    "--due",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Only show tasks due on this date (YYYY-MM-DD)",
)
def tasks(as_json: bool, priority: int | None, due: datetime | None):
    """List your tasks, newest first."""
    config = load_config()
    auth = SupabaseAuthAdapter(config)
    user = _require_user(auth)

    store = _task_store(config, auth)
    asyncio.run(store.load(user.id))
    state = store.state

    if state.last_error is not None:
        _fail(str(state.last_error))

    items = state.tasks
    if priority is not None:
        items = filter_by_priority(items, Priority.from_level(priority))
    if due is not None:
        items = filter_due_on(items, due.date(), config.tzinfo)

    if as_json:
        click.echo(json.dumps([_task_json(t) for t in items], indent=2))
        return

    if not items:
        click.echo("No tasks.")
        return

    for task in items:
        click.echo(_format_task(task, config))


@main.command()
@click.argument("task_id", type=int)
def show(task_id: int):
    """Show one task with its dates, priority and description."""
    config = load_config()
    auth = SupabaseAuthAdapter(config)
    user = _require_user(auth)

    store = _task_store(config, auth)
    asyncio.run(store.load(user.id))

    if store.state.last_error is not None:
        _fail(str(store.state.last_error))

    task = next((t for t in store.state.tasks if t.id == task_id), None)
    if task is None:
        _fail(f"No task with id {task_id}.")

    tz = config.tzinfo
    priority = task.shorthand
    if priority and task.color != NO_COLOR:
        priority = click.style(priority, fg=task.color)

    click.echo(task.title)
    click.echo(f"Priority: {priority or 'none'}")
    click.echo(f"Created:  {task.created_label(tz) or '-'}")
    click.echo(f"Due:      {task.due_label(tz) or '-'}")
    if task.description:
        click.echo()
        click.echo(task.description)


@main.command()
@click.argument("title")
@click.option("--description", "-d", default="", help="Longer description")
@click.option(
    "--priority",
    "-p",
    type=click.IntRange(1, len(ALL_PRIORITIES)),
    default=None,
    help="Priority 1-4",
)
@click.option(
    "--due",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Due date (YYYY-MM-DD)",
)
def add(title: str, description: str, priority: int | None, due: datetime | None):
    """Create a task."""
    config = load_config()
    auth = SupabaseAuthAdapter(config)
    user = _require_user(auth)

    due_date = None
    if due is not None:
        due_date = int(due.replace(tzinfo=config.tzinfo).timestamp())

    try:
        draft = TaskDraft(
            title=title,
            description=description,
            owner_id=user.id,
            priority=Priority.from_level(priority),
            due_date=due_date,
        )
    except ValueError as e:
        _fail(str(e))

    store = _task_store(config, auth)

    async def create_then_refresh() -> None:
        await store.create(draft)
        await store.refresh(user.id)

    try:
        asyncio.run(create_then_refresh())
    except RepositoryError as e:
        _fail(str(e))

    click.echo(f"Created: {draft.title}")
    if store.state.last_error is None:
        click.echo(f"{len(store.state.tasks)} tasks in your list.")


# ============== Calendar ==============


@main.command()
@click.option("--month", "-m", type=click.IntRange(1, 12), default=None, help="Month (1-12)")
def days(month: int | None):
    """Show the day strip for a month of this year."""
    today = date.today()
    strip, selected = select_month(month or today.month, today, today)

    weekday, day = day_brief(today)
    click.echo(f"Today: {weekday} {day}")
    click.echo(f"### {selected.strftime('%B %Y')}")

    for d in strip:
        marker = "*" if d == selected else " "
        click.echo(f"{marker} {weekday_label(d)} {d.day:2}")
