"""
Main CLI application using Typer.
"""

from pathlib import Path
from typing import Annotated, Optional

import pendulum
import typer
from rich.console import Console
from rich.table import Table

from ..adapters.http_transport import HttpTransport
from ..adapters.mock_transport import MockTransport
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import AstuteError
from ..domain.models import (
    QueryTimesheetParams,
    QueryUserParams,
    SaveTimesheetParams,
    SubmitTimesheetParams,
    UserParams,
)
from ..domain.responses import QueryTimesheetResponse
from ..services.astute_client import AstuteClient
from ..timesheet_file import TimesheetFile

app = typer.Typer(
    name="astute",
    help="Query and submit timesheets through the Astute Payroll web service",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")]
MockOption = Annotated[bool, typer.Option("--mock", help="Use canned responses instead of calling the web service.")]


def _build_client(config_file: Optional[Path], mock: bool) -> tuple[AstuteClient, AppConfig]:
    """Load the configuration and build a client with the matching transport."""
    config_path = config_file or get_default_config_path()
    config = AppConfig.load_from_yaml(config_path)

    if mock:
        console.print("[yellow]⚠  MOCK MODE: using canned responses[/yellow]\n")
        transport = MockTransport()
    else:
        transport = HttpTransport(timeout=config.timeout_seconds)

    client = AstuteClient(
        config.auth_params(),
        transport,
        clock=lambda: pendulum.now(config.timezone),
    )
    return client, config


def _fail(error: Exception) -> None:
    console.print(f"[bold red]Error:[/bold red] {error}")
    raise typer.Exit(1)


def _print_timesheets(result: QueryTimesheetResponse) -> None:
    if not result.timesheets:
        console.print("[yellow]No timesheets found.[/yellow]")
        return

    table = Table(title="Timesheets", show_header=True, header_style="bold cyan")
    table.add_column("TSID", style="bold yellow")
    table.add_column("UID")
    table.add_column("User ID")
    table.add_column("Date")
    table.add_column("Status", style="dim")

    for timesheet in result.timesheets:
        table.add_row(timesheet.tsid, timesheet.uid, timesheet.user_id, timesheet.date, timesheet.status)

    console.print(table)


@app.command()
def users(
    job_code: Annotated[str, typer.Option("--job-code", "-j", help="Match users whose job code contains this text")] = "",
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """
    List users, optionally filtered by job code.
    """
    try:
        client, _ = _build_client(config_file, mock)
        result = client.query_user(QueryUserParams(job_code=job_code))
    except (AstuteError, FileNotFoundError, ValueError) as e:
        _fail(e)

    if not result.users:
        console.print("[yellow]No users found.[/yellow]")
        return

    table = Table(title="Users", show_header=True, header_style="bold cyan")
    table.add_column("UID", style="bold yellow")
    table.add_column("User ID")
    table.add_column("Job code")
    table.add_column("E-mail", style="dim")

    for user in result.users:
        table.add_row(user.uid, user.user_id, user.job_code, user.email)

    console.print(table)


@app.command()
def timesheets(
    uid: Annotated[Optional[str], typer.Option("--uid", help="List the timesheets of this user")] = None,
    tsid: Annotated[Optional[str], typer.Option("--tsid", help="Fetch the timesheet with this identifier")] = None,
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """
    List timesheets of a user, or fetch a single timesheet.
    """
    if (uid is None) == (tsid is None):
        console.print("[red]Error: pass exactly one of --uid or --tsid.[/red]")
        raise typer.Exit(1)

    try:
        client, _ = _build_client(config_file, mock)
        if uid is not None:
            result = client.query_timesheet_by_job(QueryTimesheetParams(uid=uid))
        else:
            result = client.query_timesheet_by_id(tsid)
    except (AstuteError, FileNotFoundError, ValueError) as e:
        _fail(e)

    _print_timesheets(result)


@app.command()
def did_not_work(
    uid: Annotated[str, typer.Argument(help="Astute UID of the user")],
    user_id: Annotated[str, typer.Argument(help="User ID of the user")],
    tsid: Annotated[str, typer.Argument(help="Timesheet identifier")],
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """
    Mark a timesheet as "did not work".
    """
    params = SaveTimesheetParams(
        user=UserParams(uid=uid, user_id=user_id),
        tsid=tsid,
        did_not_work=True,
    )
    try:
        client, _ = _build_client(config_file, mock)
        result = client.save_timesheet(params)
    except (AstuteError, FileNotFoundError, ValueError) as e:
        _fail(e)

    console.print(f"[green]✓ Timesheet {result.timesheet_id} saved as did not work.[/green]")


@app.command()
def save(
    timesheet_file: Annotated[Path, typer.Argument(help="YAML file with the timesheet and its days")],
    submit: Annotated[bool, typer.Option("--submit", help="Submit the timesheet in the same call")] = False,
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """
    Save a worked timesheet described in a YAML file.

    Times without an offset are read in the configured timezone.
    """
    try:
        client, config = _build_client(config_file, mock)
        params = TimesheetFile.load_from_yaml(timesheet_file).to_params(config.timezone, submit=submit)
        result = client.save_timesheet(params)
    except (AstuteError, FileNotFoundError, ValueError) as e:
        _fail(e)

    action = "saved and submitted" if submit else "saved"
    console.print(f"[green]✓ Timesheet {result.timesheet_id} {action} with {len(params.days)} day(s).[/green]")


@app.command()
def submit(
    uid: Annotated[str, typer.Argument(help="Astute UID of the user")],
    user_id: Annotated[str, typer.Argument(help="User ID of the user")],
    tsid: Annotated[str, typer.Argument(help="Timesheet identifier")],
    start: Annotated[str, typer.Option("--start", help="Timesheet start date (YYYY-MM-DD)")],
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """
    Submit a previously saved timesheet.
    """
    try:
        client, config = _build_client(config_file, mock)
        start_date = pendulum.from_format(start, "YYYY-MM-DD", tz=config.timezone)
        params = SubmitTimesheetParams(
            user=UserParams(uid=uid, user_id=user_id),
            tsid=tsid,
            start_time=start_date,
        )
        result = client.submit_timesheet(params)
    except (AstuteError, FileNotFoundError, ValueError) as e:
        _fail(e)

    console.print(f"[green]✓ Timesheet {result.timesheet_id} submitted.[/green]")


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]astute[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
