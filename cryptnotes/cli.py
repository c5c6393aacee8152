"""CLI entry point for cryptnotes."""

import logging
from pathlib import Path

import click

from . import __version__
from . import crypto
from . import db
from .convert import format_date, parse_date
from .logging_setup import setup_logging
from .store import NoteStore, Session

_LOG = logging.getLogger(__name__)


class DateParamType(click.ParamType):
    """A DD.MM.YYYY date entered at a prompt."""

    name = "date"

    def convert(self, value, param, ctx):
        try:
            return parse_date(value.strip())
        except ValueError:
            self.fail("Date format: DD.MM.YYYY", param, ctx)


DATE = DateParamType()


def prompt_position() -> int:
    """Ask for a 1-based note number and return the 0-based position."""
    return click.prompt("Enter note number", type=int) - 1


def show_list(session: Session) -> None:
    """List dates and titles of all notes."""
    entries = session.store.list(session.password)
    if not entries:
        click.echo("No notes found.")
        return

    click.echo(f"{'#':<5} {'Date':<12} {'Title'}")
    click.echo("-" * 60)
    for number, (date, title) in enumerate(entries, start=1):
        click.echo(f"{number:<5} {format_date(date):<12} {title}")
    click.echo(f"\nTotal: {len(entries)} notes")


def show_details(session: Session) -> None:
    """Show one note with its body."""
    position = prompt_position()
    date, title, body = session.store.get(position, session.password)
    click.echo(f"Date:  {format_date(date)}")
    click.echo(f"Title: {title}")
    click.echo(f"Body:  {body}")


def add_note(session: Session) -> None:
    date = click.prompt("Enter date (required)", type=DATE)
    title = click.prompt("Enter title (required)")
    body = click.prompt("Enter body (required)")
    position = session.store.add(date, title, body, session.password)
    click.echo(f"Added note {position + 1}.")


def edit_note(session: Session) -> None:
    """Replace the date, title or body of one note."""
    position = prompt_position()
    date, title, body = session.store.get(position, session.password)
    click.echo(f"1. Date:  {format_date(date)}")
    click.echo(f"2. Title: {title}")
    click.echo(f"3. Body:  {body}")
    click.echo("0. Exit")

    choice = click.prompt("Enter number of value to edit", type=int)
    if choice == 1:
        new_date = click.prompt("Enter date (required)", type=DATE)
        new_position = session.store.update_date(position, new_date)
        click.echo(f"Date updated, note is now number {new_position + 1}.")
    elif choice == 2:
        new_title = click.prompt("Enter title (required)")
        session.store.update_title(position, new_title, session.password)
        click.echo("Title updated.")
    elif choice == 3:
        new_body = click.prompt("Enter body (required)")
        session.store.update_body(position, new_body, session.password)
        click.echo("Body updated.")


def delete_note(session: Session) -> None:
    position = prompt_position()
    session.store.remove(position)
    click.echo("Note removed.")


ACTIONS = {
    1: ("List of notes", show_list),
    2: ("Details of note", show_details),
    3: ("Add new note", add_note),
    4: ("Edit note", edit_note),
    5: ("Delete note", delete_note),
}


def print_menu() -> None:
    for number, (label, _) in ACTIONS.items():
        click.echo(f"{number}. {label}")
    click.echo("0. Exit")
    click.echo()


def dispatch(session: Session, choice: int) -> bool:
    """Run one menu action. Returns False when the user chose to exit.

    Errors from a single action are reported and the menu continues.
    """
    entry = ACTIONS.get(choice)
    if entry is None:
        return False

    label, action = entry
    click.clear()
    try:
        action(session)
    except IndexError:
        click.echo("Wrong note number!")
    except crypto.DecryptionError:
        click.echo("Cannot decrypt note: wrong password or corrupted data.")
    except crypto.InternalCryptoError as e:
        _LOG.error("%s failed: %s", label, e)
        click.echo(f"Internal error: {e}")
    except db.MalformedDataError as e:
        click.echo(f"Data error: {e}")
    except ValueError as e:
        click.echo(f"Invalid input: {e}")

    click.echo()
    click.pause()
    return True


def load_session(password: str | None, data_file: Path) -> Session:
    """Read the notes file and obtain the password.

    A corrupt notes file is reported and replaced by an empty store;
    an unreadable one is fatal.
    """
    try:
        store = db.read_store(data_file)
    except db.MalformedDataError as e:
        _LOG.info("Discarding malformed notes file %s", data_file)
        click.echo(f"Warning: {e}. Starting with no notes.", err=True)
        store = NoteStore()
    except db.StorageIOError as e:
        raise click.ClickException(str(e))

    while not password:
        password = click.prompt(
            "Enter password", hide_input=True, default="", show_default=False
        )

    return Session(password=password, path=data_file, store=store)


@click.command()
@click.version_option(version=__version__, prog_name="cryptnotes")
@click.option("--password", "-p", help="Password (prompted if omitted)")
@click.option(
    "--file",
    "-f",
    "data_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=db.DATA_FILE_NAME,
    envvar="CRYPTNOTES_FILE",
    show_default=True,
    help="Notes file",
)
@click.option("--verbose", "-v", is_flag=True, help="Log diagnostics to stderr")
def cli(password: str | None, data_file: Path, verbose: bool):
    """cryptnotes - password-encrypted notes sorted by date."""
    setup_logging(verbose)
    session = load_session(password, data_file)

    while True:
        click.clear()
        print_menu()
        choice = click.prompt("Action", type=int)
        if not dispatch(session, choice):
            break

    try:
        db.write_store(session.path, session.store)
    except db.StorageIOError as e:
        raise click.ClickException(str(e))


if __name__ == "__main__":
    cli()
