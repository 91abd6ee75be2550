"""
BizDesk CRM - Command Line Interface.

This module provides the operator CLI using Typer, with:
- serve: run the REST API
- read-only views of the bootstrap data (users, dataset, dashboard, feed)
- the overdue-invoice reconciliation job
- Proper error handling with user-friendly messages

Every command builds its own storage engine from the settings. With the
default in-memory database, that means each command sees a freshly
bootstrapped dataset.
"""

from contextlib import contextmanager
from datetime import date
from typing import Optional

import typer

from .config import configure_logging, settings
from .db import Database
from .security import configure_hashing
from .seeds import bootstrap
from .sentry_init import init_sentry
from .services import (
    get_dashboard_metrics,
    list_activities,
    list_clients,
    list_invoices,
    list_leads,
    list_quotations,
    list_tickets,
    list_users,
    mark_overdue_invoices,
)
from .ui import (
    console,
    print_activities_table,
    print_clients_table,
    print_dashboard,
    print_invoices_table,
    print_leads_table,
    print_quotations_table,
    print_tickets_table,
    print_users_table,
)
from .exceptions import (
    CRMException,
    AuthenticationError,
    AuthorizationError,
    EntityNotFoundError,
    BusinessRuleError,
    ValidationError,
    format_exception_for_cli,
)

# Root Typer app for the whole CRM command line interface.
app = typer.Typer(help="BizDesk CRM - operator command line")


# =============================================================================
# ERROR HANDLING UTILITIES
# =============================================================================

def _handle_error(exc: Exception) -> None:
    """
    Handle an exception and display a user-friendly message.

    Args:
        exc: The exception to handle.
    """
    if isinstance(exc, ValidationError):
        console.print(f"[red]Validation error:[/red] {exc}")
    elif isinstance(exc, AuthenticationError):
        console.print(f"[red]Authentication error:[/red] {exc}")
    elif isinstance(exc, AuthorizationError):
        console.print(f"[red]Permission denied:[/red] {exc}")
    elif isinstance(exc, EntityNotFoundError):
        console.print(f"[yellow]Not found:[/yellow] {exc}")
    elif isinstance(exc, BusinessRuleError):
        console.print(f"[red]Business rule:[/red] {exc}")
    elif isinstance(exc, CRMException):
        console.print(f"[red]Error:[/red] {format_exception_for_cli(exc)}")
    else:
        # Unexpected error - log to Sentry
        import sentry_sdk
        sentry_sdk.capture_exception(exc)
        console.print(f"[red]Unexpected error:[/red] {format_exception_for_cli(exc)}")


@contextmanager
def _storage(sample_data: Optional[bool] = None):
    """
    Open a bootstrapped storage engine for one command.

    Yields a session; errors are reported and turned into exit code 1.
    """
    configure_hashing(settings.BCRYPT_ROUNDS)
    database = Database(settings.DATABASE_URL)
    database.create_all()

    try:
        with database.get_db() as db:
            bootstrap(
                db,
                sample_data=settings.SEED_SAMPLE_DATA if sample_data is None else sample_data,
            )
            yield db
    except CRMException as exc:
        _handle_error(exc)
        raise typer.Exit(1)
    finally:
        database.dispose()


@app.callback()
def _setup() -> None:
    configure_logging(settings.LOG_LEVEL)
    init_sentry(settings)


# =============================================================================
# SERVER
# =============================================================================

@app.command("serve")
def serve_cmd(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address"),
    port: Optional[int] = typer.Option(None, "--port", help="Bind port"),
):
    """Run the REST API server."""
    from .web import create_app

    database = Database(settings.DATABASE_URL)
    flask_app = create_app(settings, database)

    bind_host = host or settings.HOST
    bind_port = port or settings.PORT
    console.print(f"[green]Serving BizDesk API on http://{bind_host}:{bind_port}[/green]")

    # The in-memory database is a single shared connection.
    flask_app.run(host=bind_host, port=bind_port, threaded=not database.is_memory)


# =============================================================================
# READ COMMANDS
# =============================================================================

@app.command("users")
def users_cmd():
    """List the user accounts."""
    with _storage(sample_data=False) as db:
        print_users_table(list_users(db))


@app.command("seed")
def seed_cmd():
    """Load the sample dataset and show it."""
    with _storage(sample_data=True) as db:
        print_leads_table(list_leads(db))
        print_clients_table(list_clients(db))
        print_quotations_table(list_quotations(db))
        print_invoices_table(list_invoices(db))
        print_tickets_table(list_tickets(db))
        console.print("[green]✓ Sample data loaded[/green]")


@app.command("dashboard")
def dashboard_cmd():
    """Print the dashboard metrics."""
    with _storage() as db:
        print_dashboard(get_dashboard_metrics(db))


@app.command("activities")
def activities_cmd():
    """Print the 50 most recent activities."""
    with _storage() as db:
        activities = list_activities(db)
        if not activities:
            console.print("[yellow]No activity yet.[/yellow]")
            return
        print_activities_table(activities)


# =============================================================================
# JOBS
# =============================================================================

@app.command("reconcile-overdue")
def reconcile_overdue_cmd(
    today: Optional[str] = typer.Option(
        None, "--today", help="Reference date (YYYY-MM-DD), defaults to today"
    ),
):
    """Mark unpaid invoices past their due date as Overdue."""
    try:
        reference = date.fromisoformat(today) if today else date.today()
    except ValueError:
        console.print(f"[red]Invalid date:[/red] {today}")
        raise typer.Exit(1)

    with _storage() as db:
        changed = mark_overdue_invoices(db, today=reference)
        if not changed:
            console.print("[green]No overdue invoices.[/green]")
            return
        print_invoices_table(changed, title="Now overdue")


def main():
    """Entry point for: python -m bizdesk.cli"""
    app()


if __name__ == "__main__":
    main()
