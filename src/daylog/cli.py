"""Daylog CLI - daily task tracker."""

import logging
import sys
from datetime import date

import click

from .adapters.file_state import StateIOError
from .app import TaskLogController, get_calendar, local_today
from .config import Config, load_config
from .core.views import format_task_line, format_today_view

date_option = click.option(
    "--date", "-d", "target_date", default=None,
    help="Date to work on (YYYY-MM-DD), defaults to today",
)


def _resolve_date(target_date: str | None, config: Config) -> str:
    if not target_date:
        return local_today(config.timezone)
    try:
        return date.fromisoformat(target_date).isoformat()
    except ValueError:
        raise click.BadParameter(f"Invalid date: {target_date}", param_hint="--date")


def _open_controller(target_date: str | None) -> TaskLogController:
    """Build a controller for the configured state file and load it."""
    config = load_config()
    controller = TaskLogController.from_config(config, current_date=_resolve_date(target_date, config))
    try:
        controller.load()
    except StateIOError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    return controller


def _save(controller: TaskLogController, carry: bool = False) -> None:
    """Write the state file; only an explicit save runs carry-forward."""
    try:
        if carry:
            controller.save()
        else:
            controller.persist()
    except StateIOError as e:
        click.echo(f"Error: {e}", err=True)
        if e.fallback_path is None and e.content:
            # Nothing could be written; hand the text to the user instead.
            click.echo(e.content, nl=False)
        sys.exit(1)


def _run_action(controller: TaskLogController, action, index: int):
    try:
        task = action(index)
    except IndexError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    _save(controller)
    click.echo(format_task_line(index, task))


@click.group()
@click.version_option()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """Daylog - daily task tracker."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )


@main.command()
@date_option
def today(target_date: str | None):
    """Show the Today view."""
    controller = _open_controller(target_date)
    click.echo(format_today_view(controller.today_view()))


@main.command()
@date_option
@click.argument("title", nargs=-1, required=True)
def add(target_date: str | None, title: tuple[str, ...]):
    """Add a task."""
    controller = _open_controller(target_date)
    task = controller.add_task(" ".join(title))
    if task is None:
        return
    _save(controller)
    index = len(controller.current_bucket.tasks) - 1
    click.echo(f"Added {format_task_line(index, task)}")


@main.command()
@date_option
@click.argument("index", type=int)
@click.argument("text", nargs=-1)
def detail(target_date: str | None, index: int, text: tuple[str, ...]):
    """Set the detail of task INDEX."""
    controller = _open_controller(target_date)
    _run_action(controller, lambda i: controller.edit_detail(i, " ".join(text)), index)


@main.command()
@date_option
@click.argument("index", type=int)
def done(target_date: str | None, index: int):
    """Mark task INDEX as done."""
    controller = _open_controller(target_date)
    _run_action(controller, controller.mark_done, index)


@main.command()
@date_option
@click.argument("index", type=int)
def carry(target_date: str | None, index: int):
    """Carry task INDEX to the next business day."""
    controller = _open_controller(target_date)
    _run_action(controller, controller.mark_carry, index)


@main.command()
@date_option
def save(target_date: str | None):
    """Run carry-forward and rewrite the state file."""
    controller = _open_controller(target_date)
    _save(controller, carry=True)
    click.echo(f"✓ Saved to {controller.state.current_path}")


@main.command()
def show():
    """Print the state file as it would be saved."""
    controller = _open_controller(None)
    click.echo(controller.prepare_save(), nl=False)


@main.command("next-day")
@date_option
def next_day(target_date: str | None):
    """Print the next business day."""
    config = load_config()
    calendar = get_calendar(config)
    click.echo(calendar.next_business_day(_resolve_date(target_date, config)))


@main.command("prev-day")
@date_option
def prev_day(target_date: str | None):
    """Print the previous business day."""
    config = load_config()
    calendar = get_calendar(config)
    click.echo(calendar.previous_business_day(_resolve_date(target_date, config)))


@main.command()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def bot(debug: bool):
    """Run the Telegram bot."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )

    try:
        from .telegram_bot import run_bot
        click.echo("Starting Daylog Telegram bot...")
        click.echo("Press Ctrl+C to stop")
        run_bot()
    except ImportError as e:
        click.echo("Error: Missing dependencies. Run 'pip install python-telegram-bot apscheduler'", err=True)
        click.echo(f"Details: {e}", err=True)
        sys.exit(1)
    except ValueError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        click.echo("\nBot stopped.")


if __name__ == "__main__":
    main()
