"""
podinbox CLI

Command-line interface for notification inboxes on a pod.

Usage:
    podinbox inbox create <location>     Create an inbox owned by you
    podinbox inbox delete <location>     Delete an inbox and its notifications
    podinbox discover <document>         Find the inbox a document points to
    podinbox send <target> -t <title>    Send a notification
    podinbox list [inbox ...]            List notifications
    podinbox read <location>             Mark a notification read
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from podinbox import __version__
from podinbox.core.config import get_config, get_settings
from podinbox.core.errors import PodInboxError
from podinbox.core.models import CustomTriple, NotificationOptions
from podinbox.graph.client import PodClient
from podinbox.inbox.shape import load_shape
from podinbox.inbox.state import NotificationState, PodSession

# Create the main app
app = typer.Typer(
    name="podinbox",
    help="podinbox - Notification inboxes for personal data stores",
    add_completion=False,
)

inbox_app = typer.Typer(help="Inbox container commands")
app.add_typer(inbox_app, name="inbox")

console = Console()


@asynccontextmanager
async def open_state(owner: str | None = None) -> AsyncIterator[NotificationState]:
    """Open a pod client and a notification session bound to the owner."""
    config = get_config()
    async with PodClient(config.pod) as pod:
        shape = None
        if config.notification_shape:
            shape = await load_shape(config.notification_shape, pod)

        state = NotificationState(PodSession(pod, shape=shape))
        owner = owner or config.owner_webid
        if owner:
            state.set_owner(owner)
        yield state


def run(coro) -> None:
    """Run a command coroutine, turning inbox errors into exit code 1."""
    try:
        asyncio.run(coro)
    except PodInboxError as e:
        console.print(f"[red]Error ({e.kind}):[/red] {e}")
        raise typer.Exit(code=1)


def _parse_custom(values: list[str]) -> list[CustomTriple]:
    custom = []
    for item in values:
        predicate, sep, value = item.partition("=")
        if not sep:
            raise typer.BadParameter(f"Expected PREDICATE=VALUE, got {item!r}")
        custom.append(CustomTriple(predicate=predicate.strip(), value=value))
    return custom


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", "-v", help="Show version"),
) -> None:
    """podinbox - Notification inboxes for personal data stores."""
    try:
        settings = get_settings()
    except ValidationError as e:
        console.print(f"[red]Invalid configuration:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)
    logging.basicConfig(level=settings.log_level)

    if version:
        console.print(f"podinbox version {__version__}")
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(
            Panel.fit(
                "[bold blue]podinbox[/bold blue]\n"
                "[dim]Notification inboxes for personal data stores[/dim]\n\n"
                f"Version {__version__}",
                border_style="blue",
            )
        )
        console.print("Use [cyan]podinbox --help[/cyan] for available commands.")


# =============================================================================
# Inbox Commands
# =============================================================================


@inbox_app.command("create")
def inbox_create(
    location: str = typer.Argument(..., help="Inbox container location"),
    owner: Optional[str] = typer.Option(None, "--owner", "-o", help="Owner WebID"),
    declare_in: Optional[str] = typer.Option(
        None, "--declare-in", help="WebID or document that should link to the inbox"
    ),
) -> None:
    """Create an inbox anyone can append to and only the owner can read."""

    async def do_create():
        async with open_state(owner) as state:
            ack = await state.create_inbox(location, declare_in=declare_in)
            console.print(f"[green]✓[/green] {ack.message}: {location}")

    run(do_create())


@inbox_app.command("delete")
def inbox_delete(
    location: str = typer.Argument(..., help="Inbox container location"),
    owner: Optional[str] = typer.Option(None, "--owner", "-o", help="Owner WebID"),
) -> None:
    """Delete an inbox together with every notification in it."""

    async def do_delete():
        async with open_state(owner) as state:
            ack = await state.delete_inbox(location)
            console.print(f"[green]✓[/green] {ack.message}: {location}")

    run(do_delete())


@inbox_app.command("exists")
def inbox_exists(
    location: str = typer.Argument(..., help="Inbox container location"),
) -> None:
    """Check whether an inbox exists."""

    async def do_exists():
        async with PodClient(get_config().pod) as pod:
            if await pod.exists(location):
                console.print(f"[green]✓[/green] {location} exists")
            else:
                console.print(f"[yellow]✗[/yellow] {location} does not exist")
                raise typer.Exit(code=1)

    run(do_exists())


# =============================================================================
# Notification Commands
# =============================================================================


@app.command()
def discover(
    document: str = typer.Argument(..., help="Document or WebID to read"),
) -> None:
    """Find the inbox a document points to."""

    async def do_discover():
        async with open_state() as state:
            inbox = await state.discover_inbox(document)
            console.print(inbox)

    run(do_discover())


@app.command()
def send(
    target: str = typer.Argument(..., help="Recipient WebID/document, or an inbox with --direct"),
    title: str = typer.Option(..., "--title", "-t", help="Notification title"),
    content: str = typer.Option("", "--content", "-c", help="Notification body"),
    custom: list[str] = typer.Option([], "--custom", help="Extra PREDICATE=VALUE triple"),
    direct: bool = typer.Option(False, "--direct", "-d", help="Target is the inbox itself"),
    owner: Optional[str] = typer.Option(None, "--owner", "-o", help="Sender WebID"),
) -> None:
    """Send a notification."""
    options = NotificationOptions(custom=_parse_custom(custom))

    async def do_send():
        async with open_state(owner) as state:
            if direct:
                notification = await state.create_notification(target, title, content, options)
            else:
                notification = await state.send_notification(target, title, content, options)
            console.print(f"[green]✓[/green] Sent {notification.location}")

    run(do_send())


@app.command("list")
def list_notifications(
    inboxes: Optional[list[str]] = typer.Argument(None, help="Inbox locations"),
    inbox_filter: Optional[str] = typer.Option(None, "--filter", "-f", help="Only this inbox name"),
    owner: Optional[str] = typer.Option(None, "--owner", "-o", help="Owner WebID"),
) -> None:
    """List notifications, newest first."""
    locations = inboxes or [i for i in [get_config().default_inbox] if i]
    if not locations:
        console.print("[red]No inbox given and PODINBOX_DEFAULT_INBOX is not set[/red]")
        raise typer.Exit(code=2)

    async def do_list():
        async with open_state(owner) as state:
            await state.fetch_notification(locations)
            notifications = state.filter_notification(inbox_filter)

            if not notifications:
                console.print("[dim]No notifications[/dim]")
                return

            table = Table(title=f"Notifications ({state.unread} unread)")
            table.add_column("", width=1)
            table.add_column("Published", style="cyan")
            table.add_column("Inbox", style="green")
            table.add_column("Title")
            table.add_column("Location", style="dim")

            for n in notifications:
                table.add_row(
                    " " if n.read else "[bold]•[/bold]",
                    n.published.strftime("%Y-%m-%d %H:%M"),
                    n.inbox_name,
                    n.title,
                    n.location,
                )
            console.print(table)

    run(do_list())


def _mark(location: str, status: bool, owner: str | None) -> None:
    async def do_mark():
        async with open_state(owner) as state:
            ack = await state.mark_as_read_notification(location, status=status)
            console.print(f"[green]✓[/green] {ack.message}")

    run(do_mark())


@app.command()
def read(
    location: str = typer.Argument(..., help="Notification location"),
    owner: Optional[str] = typer.Option(None, "--owner", "-o", help="Owner WebID"),
) -> None:
    """Mark a notification as read."""
    _mark(location, True, owner)


@app.command()
def unread(
    location: str = typer.Argument(..., help="Notification location"),
    owner: Optional[str] = typer.Option(None, "--owner", "-o", help="Owner WebID"),
) -> None:
    """Mark a notification as unread."""
    _mark(location, False, owner)


@app.command()
def delete(
    location: str = typer.Argument(..., help="Notification location"),
    owner: Optional[str] = typer.Option(None, "--owner", "-o", help="Owner WebID"),
) -> None:
    """Delete a notification."""

    async def do_delete():
        async with open_state(owner) as state:
            ack = await state.delete_notification(location)
            console.print(f"[green]✓[/green] {ack.message}")

    run(do_delete())


if __name__ == "__main__":
    app()
