"""Command-line interface for the Priority Tracker.

Provides commands for:
- Creating the database and the first administrator
- Managing users and strategic initiatives
- Viewing priorities, weeks and analytics
- Configuration management and the API server
"""

import secrets
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from priority_tracker import __version__
from priority_tracker.exceptions import TrackerError
from priority_tracker.models import PriorityStatus, StrategicInitiative, UserRole, init_db
from priority_tracker.models.database import get_db_session
from priority_tracker.services import AnalyticsService, InitiativeService, PriorityService, UserService
from priority_tracker.services.authorization import SYSTEM_PRINCIPAL
from priority_tracker.utils.config import get_config, load_config, set_config
from priority_tracker.utils.logging_setup import configure_logging
from priority_tracker.utils.weeks import format_date, get_week_dates, shift_week

console = Console()

DATE_FORMATS = ["%Y-%m-%d"]


# --- Utility Functions ---


def get_status_style(status: PriorityStatus) -> str:
    """Get rich style for priority status."""
    styles = {
        PriorityStatus.EN_TIEMPO: "green",
        PriorityStatus.EN_RIESGO: "yellow",
        PriorityStatus.BLOQUEADO: "red",
        PriorityStatus.COMPLETADO: "cyan",
    }
    return styles.get(status, "white")


def fail(error: TrackerError) -> None:
    """Print a domain error and exit with a non-zero status."""
    console.print(f"[red]Error: {error.message}[/red]")
    sys.exit(1)


# --- Main CLI Group ---


@click.group()
@click.version_option(version=__version__, prog_name="Priority Tracker")
@click.option("--config", "-c", type=click.Path(exists=True), help="Path to config file")
@click.pass_context
def cli(ctx, config):
    """Priority Tracker - weekly priorities aligned to strategic initiatives.

    Use 'pt <command> --help' for more information about a command.
    """
    ctx.ensure_object(dict)

    # Load configuration
    config_path = config if config else None
    ctx.obj["config"] = load_config(config_path)
    set_config(ctx.obj["config"])
    configure_logging(ctx.obj["config"])

    # Initialize database
    init_db()


@cli.command("init-db")
def init_database():
    """Create the first administrator and the default initiatives.

    Safe to run repeatedly: existing data is left alone.
    """
    cfg = get_config()
    with get_db_session() as db:
        users = UserService(db, cfg)
        if users.count_active_admins() == 0:
            password = cfg.bootstrap.admin_password or secrets.token_urlsafe(12)
            try:
                admin = users.create_user(
                    SYSTEM_PRINCIPAL,
                    name=cfg.bootstrap.admin_name,
                    email=cfg.bootstrap.admin_email,
                    password=password,
                    role=UserRole.ADMIN,
                )
            except TrackerError as e:
                fail(e)
            console.print(f"[green]✓[/green] Created administrator {admin.email}")
            if not cfg.bootstrap.admin_password:
                console.print(f"  Generated password: [bold]{password}[/bold]")
                console.print("[dim]Change it after the first login.[/dim]")
        else:
            console.print("[dim]An active administrator already exists.[/dim]")

        initiatives = InitiativeService(db)
        if db.query(StrategicInitiative.id).first() is None:
            for seed in cfg.bootstrap.initiatives:
                initiatives.create_initiative(
                    SYSTEM_PRINCIPAL,
                    name=seed.name,
                    description=seed.description,
                    color=seed.color,
                )
            console.print(f"[green]✓[/green] Created {len(cfg.bootstrap.initiatives)} initiatives")
        else:
            console.print("[dim]Initiatives already exist.[/dim]")


# --- User Commands ---


@cli.group()
def users():
    """User management commands."""
    pass


@users.command("list")
@click.option("--active", "-a", "active_only", is_flag=True, help="Only active users")
def users_list(active_only):
    """List users."""
    with get_db_session() as db:
        service = UserService(db)
        items = service.list_users(SYSTEM_PRINCIPAL, active_only=active_only)

        if not items:
            console.print("[dim]No users found.[/dim]")
            return

        table = Table(title=f"Users ({len(items)})")
        table.add_column("ID", style="dim", width=4)
        table.add_column("Name", style="white", min_width=20)
        table.add_column("Email", style="cyan")
        table.add_column("Role", width=6)
        table.add_column("Active", width=6)

        for user in items:
            table.add_row(
                str(user.id),
                user.name,
                user.email,
                user.role.value,
                "yes" if user.is_active else "[dim]no[/dim]",
            )

        console.print(table)


@users.command("add")
@click.argument("name")
@click.argument("email")
@click.option("--password", "-p", prompt=True, hide_input=True, confirmation_prompt=True,
              help="Initial password")
@click.option("--admin", is_flag=True, help="Create an administrator")
def users_add(name, email, password, admin):
    """Add a new user."""
    with get_db_session() as db:
        service = UserService(db)
        try:
            user = service.create_user(
                SYSTEM_PRINCIPAL,
                name=name,
                email=email,
                password=password,
                role=UserRole.ADMIN if admin else UserRole.USER,
            )
        except TrackerError as e:
            fail(e)

        console.print(f"[green]✓[/green] Created user #{user.id}: {user.name} <{user.email}>")


@users.command("reset-password")
@click.argument("email")
@click.option("--password", "-p", prompt=True, hide_input=True, confirmation_prompt=True,
              help="New password")
def users_reset_password(email, password):
    """Set a new password for the user with EMAIL."""
    with get_db_session() as db:
        service = UserService(db)
        user = service.get_user_by_email(email)

        if not user:
            console.print(f"[red]User {email} not found.[/red]")
            sys.exit(1)

        try:
            service.reset_password(SYSTEM_PRINCIPAL, user.id, password)
        except TrackerError as e:
            fail(e)

        console.print(f"[green]✓[/green] Password updated for {user.email}")


# --- Initiative Commands ---


@cli.group()
def initiatives():
    """Strategic initiative commands."""
    pass


@initiatives.command("list")
@click.option("--active", "-a", "active_only", is_flag=True, help="Only active initiatives")
def initiatives_list(active_only):
    """List initiatives in display order."""
    with get_db_session() as db:
        service = InitiativeService(db)
        items = service.get_initiatives(SYSTEM_PRINCIPAL, active_only=active_only)

        if not items:
            console.print("[dim]No initiatives found. Run 'pt init-db' to create the defaults.[/dim]")
            return

        table = Table(title=f"Initiatives ({len(items)})")
        table.add_column("Order", style="dim", width=5)
        table.add_column("ID", style="dim", width=4)
        table.add_column("Name", min_width=20, max_width=40)
        table.add_column("Color", width=8)
        table.add_column("Active", width=6)

        for initiative in items:
            table.add_row(
                str(initiative.order),
                str(initiative.id),
                initiative.name,
                initiative.color,
                "yes" if initiative.is_active else "[dim]no[/dim]",
            )

        console.print(table)


@initiatives.command("add")
@click.argument("name")
@click.option("--description", "-d", help="Initiative description")
@click.option("--color", help="Hex color, e.g. #10b981")
def initiatives_add(name, description, color):
    """Add a new initiative at the end of the list."""
    with get_db_session() as db:
        service = InitiativeService(db)
        try:
            initiative = service.create_initiative(
                SYSTEM_PRINCIPAL,
                name=name,
                description=description,
                color=color,
            )
        except TrackerError as e:
            fail(e)

        console.print(
            f"[green]✓[/green] Created initiative #{initiative.id}: {initiative.name} "
            f"(position {initiative.order})"
        )


@initiatives.command("reorder")
@click.argument("initiative_ids", type=int, nargs=-1, required=True)
def initiatives_reorder(initiative_ids):
    """Renumber initiatives to follow INITIATIVE_IDS."""
    with get_db_session() as db:
        service = InitiativeService(db)
        try:
            ordered = service.reorder_initiatives(SYSTEM_PRINCIPAL, list(initiative_ids))
        except TrackerError as e:
            fail(e)

        for initiative in ordered:
            console.print(f"  {initiative.order}. {initiative.name}")
        console.print(f"[green]✓[/green] Reordered {len(ordered)} initiatives")


# --- Priority Commands ---


@cli.group()
def priorities():
    """Weekly priority commands."""
    pass


@priorities.command("list")
@click.option("--user", "-u", "user_id", type=int, help="Filter by user ID")
@click.option("--week", "-w", type=click.DateTime(formats=DATE_FORMATS),
              help="Any day of the week to show (YYYY-MM-DD)")
def priorities_list(user_id, week):
    """List priorities, most recent week first."""
    with get_db_session() as db:
        service = PriorityService(db)
        if week:
            items = service.get_week_priorities(SYSTEM_PRINCIPAL, get_week_dates(week), user_id=user_id)
            title = f"Priorities - {get_week_dates(week).label}"
        else:
            items = service.get_priorities(SYSTEM_PRINCIPAL, user_id=user_id)
            title = "Priorities"

        if not items:
            console.print("[dim]No priorities found.[/dim]")
            return

        table = Table(title=f"{title} ({len(items)})")
        table.add_column("ID", style="dim", width=4)
        table.add_column("Week", width=12)
        table.add_column("User", style="cyan")
        table.add_column("Title", min_width=20, max_width=40)
        table.add_column("Initiative")
        table.add_column("%", justify="right", width=4)
        table.add_column("Status", width=12)

        for priority in items:
            style = get_status_style(priority.status)
            table.add_row(
                str(priority.id),
                format_date(priority.week_start),
                priority.user.name,
                priority.title + (" [dim](edited)[/dim]" if priority.was_edited else ""),
                priority.initiative.name,
                str(priority.completion_percentage),
                f"[{style}]{priority.status.label}[/{style}]",
            )

        console.print(table)


# --- Week and Analytics Commands ---


@cli.command()
@click.argument("day", required=False, type=click.DateTime(formats=DATE_FORMATS))
@click.option("--offset", "-o", default=0, type=int, help="Weeks before (negative) or after DAY")
def week(day, offset):
    """Show the Monday-Friday week containing DAY (default: today)."""
    zone = get_config().dashboard.zone
    current = shift_week(day, offset, zone) if offset else get_week_dates(day, zone)
    console.print(Panel(
        f"Start: [cyan]{current.monday.isoformat(timespec='milliseconds')}[/cyan]\n"
        f"End:   [cyan]{current.friday.isoformat(timespec='milliseconds')}[/cyan]",
        title=current.label,
    ))


@cli.command()
def analytics():
    """Show completion statistics per user and per initiative."""
    with get_db_session() as db:
        service = AnalyticsService(db)
        stats = service.get_analytics(SYSTEM_PRINCIPAL)

        console.print(f"\n[bold]Total priorities:[/bold] {stats['total_priorities']}")

        table = Table(title="By User")
        table.add_column("User", style="cyan")
        table.add_column("Total", justify="right")
        table.add_column("Completed", justify="right")
        table.add_column("Rate", justify="right")
        table.add_column("Avg %", justify="right")
        for row in stats["users"]:
            table.add_row(
                row["user"].name,
                str(row["total"]),
                str(row["completed"]),
                f"{row['completion_rate']}%",
                f"{row['avg_completion']}%",
            )
        console.print(table)

        table = Table(title="By Initiative")
        table.add_column("Initiative", style="cyan")
        table.add_column("Priorities", justify="right")
        table.add_column("Share", justify="right")
        for row in stats["initiatives"]:
            table.add_row(row["initiative"].name, str(row["count"]), f"{row['percentage']}%")
        console.print(table)


# --- Config Commands ---


@cli.group()
def config():
    """Configuration commands."""
    pass


@config.command("show")
@click.pass_context
def config_show(ctx):
    """Show current configuration."""
    cfg = ctx.obj["config"]

    sections = [
        ("Database", [
            f"URL: {cfg.database.url}",
            f"Echo: {cfg.database.echo}",
        ]),
        ("Auth", [
            f"Secret Key: {'*' * 8 if cfg.auth.secret_key else '[not set]'}",
            f"Algorithm: {cfg.auth.algorithm}",
            f"Session Lifetime: {cfg.auth.token_expire_minutes} minutes",
            f"Cookie: {cfg.auth.cookie_name} (secure: {cfg.auth.cookie_secure})",
            f"Min Password Length: {cfg.auth.min_password_length}",
        ]),
        ("Dashboard", [
            f"Max Weekly Priorities: {cfg.dashboard.max_weekly_priorities}",
            f"Timezone: {cfg.dashboard.timezone}",
        ]),
        ("Logging", [
            f"Level: {cfg.logging.level}",
        ]),
    ]

    for title, items in sections:
        console.print(f"\n[bold]{title}[/bold]")
        for item in items:
            console.print(f"  {item}")


@config.command("path")
def config_path():
    """Show config file path."""
    default_path = Path("config.yaml")
    if default_path.exists():
        console.print(f"Config file: [cyan]{default_path.absolute()}[/cyan]")
    else:
        console.print("[dim]No config.yaml found. Using defaults.[/dim]")
        console.print("[dim]Create config.yaml to customize settings.[/dim]")


@config.command("init")
@click.option("--force", "-f", is_flag=True, help="Overwrite existing config")
def config_init(force):
    """Create a default config file."""
    config_path = Path("config.yaml")

    if config_path.exists() and not force:
        console.print("[yellow]config.yaml already exists. Use --force to overwrite.[/yellow]")
        return

    default_config = f"""# Priority Tracker Configuration
# Any value can be overridden with PT_<SECTION>__<KEY> environment variables

# Database settings
database:
  url: sqlite:///priority_tracker.db

# Session settings
auth:
  secret_key: "{secrets.token_urlsafe(32)}"
  token_expire_minutes: 480
  cookie_secure: false  # set to true behind HTTPS
  min_password_length: 6

# First administrator created by 'pt init-db'
bootstrap:
  admin_name: Administrador
  admin_email: admin@empresa.com
  admin_password: ""  # generated and printed when empty

# Dashboard settings
dashboard:
  max_weekly_priorities: 5
  timezone: UTC  # IANA zone that weeks are computed in, e.g. America/Mexico_City

# Logging settings
logging:
  level: INFO
"""

    config_path.write_text(default_config)
    console.print(f"[green]✓[/green] Created {config_path}")
    console.print("[dim]Edit the file to configure your settings.[/dim]")


# --- Server Command ---


@cli.command()
@click.option("--host", default="127.0.0.1", help="Host to bind to")
@click.option("--port", "-p", default=8000, help="Port to bind to")
@click.option("--reload", is_flag=True, help="Enable auto-reload (dev mode)")
def server(host, port, reload):
    """Start the API server."""
    import uvicorn

    console.print(Panel(
        f"Starting API server at [cyan]http://{host}:{port}[/cyan]\n"
        f"API docs at [cyan]http://{host}:{port}/docs[/cyan]",
        title="Priority Tracker API",
    ))

    uvicorn.run(
        "priority_tracker.api.main:app",
        host=host,
        port=port,
        reload=reload,
    )


# --- Entry Point ---


def main():
    """Main entry point for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
