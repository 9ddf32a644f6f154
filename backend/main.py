"""
AuthSync demo.

Drives an AuthStateManager through a scripted session against the
in-memory provider and prints the auth state after every step, followed
by the analytics events that were emitted.

Usage:
    python main.py
    python main.py --email someone@example.com --show-properties
"""

import argparse
import asyncio
import logging
from contextlib import aclosing

from rich.console import Console
from rich.table import Table

from shared.config import get_settings
from shared.models import AuthenticatedUser
from modules.analytics.service import CompositeEventSink, InMemoryEventSink, LoggingEventSink
from modules.auth.service import AuthStateManager
from providers.memory import InMemoryAuthProvider

console = Console()


def describe_user(user: AuthenticatedUser | None) -> str:
    """One-line summary of the auth state."""
    if user is None:
        return "[yellow]signed out[/yellow]"
    providers = ", ".join(sorted(p.value for p in user.auth_providers)) or "-"
    return f"[green]{user.uid[:8]}[/green] email={user.email or '-'} providers={providers}"


def render_events(sink: InMemoryEventSink, show_properties: bool) -> Table:
    """Build a table of the recorded events."""
    table = Table(title="Analytics events")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Event")
    table.add_column("Severity")
    if show_properties:
        table.add_column("Parameters", overflow="fold")

    styles = {"info": "white", "warning": "yellow", "severe": "red"}
    for index, event in enumerate(sink.events, start=1):
        row = [str(index), event.name, f"[{styles[event.severity.value]}]{event.severity.value}[/]"]
        if show_properties:
            row.append(", ".join(f"{k}={v}" for k, v in sorted((event.parameters or {}).items())))
        table.add_row(*row)
    return table


async def run_session(email: str, password: str, show_properties: bool) -> InMemoryEventSink:
    """Run the scripted session and return the recorded events."""
    settings = get_settings()
    recorder = InMemoryEventSink()
    sink = CompositeEventSink([recorder, LoggingEventSink(settings.event_logger_name)])
    provider = InMemoryAuthProvider()

    async with AuthStateManager(provider, sink) as manager:
        manager.add_observer(lambda user: console.print(f"  state -> {describe_user(user)}"))

        console.print("[bold]Sign in anonymously[/bold]")
        await manager.sign_in_anonymously()

        console.print("[bold]Sign out[/bold]")
        manager.sign_out()

        console.print(f"[bold]Create account[/bold] {email}")
        await manager.create_user_with_email(email, password)

        new_email = f"updated.{email}"
        console.print(f"[bold]Update email[/bold] -> {new_email}")
        await manager.update_email(new_email)
        # Wait for the listener to deliver the new snapshot.
        async with aclosing(manager.watch()) as changes:
            async for user in changes:
                if user is not None and user.email == new_email:
                    break

        console.print("[bold]Delete account[/bold]")
        await manager.delete_account()

    console.print()
    console.print(render_events(recorder, show_properties))
    return recorder


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="Run a scripted auth session against the in-memory provider"
    )
    parser.add_argument("--email", default="demo@example.com", help="Email for the demo account")
    parser.add_argument("--password", default="correct-horse", help="Password for the demo account")
    parser.add_argument(
        "--show-properties",
        action="store_true",
        help="Show event parameters in the output table",
    )
    args = parser.parse_args()

    logging.basicConfig(level=get_settings().log_level.upper())
    asyncio.run(run_session(args.email, args.password, args.show_properties))
