import json
import logging
import re
import shlex
import sys
from typing import Optional

import click
import typer
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from lms.config import settings
from lms.library import Library
from lms.result import Status
from lms.ui_helpers import print_message, print_result, set_output_mode

APP_NAME = settings.app_name

logging.basicConfig(
    level=logging.DEBUG if settings.debug else getattr(logging, settings.log_level.upper(), logging.WARNING),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

console = Console()

_LEADING_INT = re.compile(r"\s*[+-]?\d+")


# One Library per process; the shell and every command share it
class LibraryManager:
    _instance: Optional[Library] = None

    @classmethod
    def get_instance(cls) -> Library:
        """Get or create the Library singleton."""
        if cls._instance is None:
            cls._instance = Library()
            logger.info("Library instance created")
        return cls._instance

    @classmethod
    def reset(cls, library: Optional[Library] = None) -> Optional[Library]:
        """Replace the singleton, e.g. with a fresh Library between tests."""
        cls._instance = library
        return library


# --- Typer CLI application ---
app = typer.Typer(help=APP_NAME, add_completion=False)


@app.callback()
def _global_options(
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    )
):
    """Library Management System commands."""
    if output:
        set_output_mode(output)


@app.command("register")
def cli_register(
    role: str = typer.Argument(..., help="admin or user"),
    name: str = typer.Argument(...),
    password: str = typer.Argument(...),
):
    """Register a new user with role (admin/user), name and password."""
    print_result(LibraryManager.get_instance().register(role, name, password))


@app.command("login")
def cli_login(name: str, password: str):
    """Login with name and password."""
    print_result(LibraryManager.get_instance().login(name, password))


@app.command("logout")
def cli_logout():
    """Logout."""
    print_result(LibraryManager.get_instance().logout())


@app.command("list")
def cli_list():
    """List all books."""
    print_result(LibraryManager.get_instance().list_books())


@app.command("search")
def cli_search(book_name: str, author: str):
    """Search book by book name and author."""
    print_result(LibraryManager.get_instance().search_book(book_name, author))


@app.command("add")
def cli_add(book_name: str, author: str, amount: str):
    """Add book inventory by book name and author."""
    print_result(LibraryManager.get_instance().add_book(book_name, author, _parse_amount(amount)))


@app.command("delete")
def cli_delete(book_name: str, author: str):
    """Delete book by name and author."""
    print_result(LibraryManager.get_instance().delete_book(book_name, author))


@app.command("borrow")
def cli_borrow(book_name: str, author: str):
    """Borrow book by book name and author."""
    print_result(LibraryManager.get_instance().borrow_book(book_name, author))


@app.command("return")
def cli_return(book_name: str, author: str):
    """Return book by book name and author."""
    print_result(LibraryManager.get_instance().return_book(book_name, author))


@app.command("whoami")
def cli_whoami():
    """Show the logged-in user."""
    lib = LibraryManager.get_instance()
    user = lib.get_current_user()
    if user is None:
        print_message(lib.messages.get(Status.NO_ACTIVE_SESSION), "yellow")
        return
    print_message(f"{user.name} ({user.role.value})", "cyan")


@app.command("profile")
def cli_profile(name: Optional[str] = typer.Argument(None, help="User to show (default: yourself)")):
    """Show a user's profile and borrowed books."""
    print_result(LibraryManager.get_instance().view_profile(name))


@app.command("users")
def cli_users():
    """List all users (admin only)."""
    print_result(LibraryManager.get_instance().list_users())


@app.command("stats")
def cli_stats():
    """Show library statistics."""
    print_result(LibraryManager.get_instance().get_system_stats())


@app.command("config")
def cli_config():
    """Show system configuration (admin only)."""
    print_result(LibraryManager.get_instance().get_system_config())


@app.command("health")
def cli_health():
    """Show service health."""
    print(json.dumps(LibraryManager.get_instance().health_check(), ensure_ascii=False))


@app.command("shell")
def cli_shell():
    """Start the interactive shell."""
    run_shell()


def _parse_amount(raw: str):
    # Leading digits are the amount ("5.5" -> 5, "3abc" -> 3); anything else
    # is passed through so validation reports it
    match = _LEADING_INT.match(raw)
    return int(match.group(0)) if match else raw


# --- Interactive shell ---
SHELL_COMMANDS = [
    ("register <role> <name> <password>", "Register as admin or user"),
    ("login <name> <password>", "Login"),
    ("logout", "Logout"),
    ("list", "List all books"),
    ("search <book> <author>", "Search a book"),
    ("add <book> <author> <amount>", "Add copies (admin)"),
    ("delete <book> <author>", "Delete a book (admin)"),
    ("borrow <book> <author>", "Borrow a book (user)"),
    ("return <book> <author>", "Return a book (user)"),
    ("profile [name]", "Show a profile"),
    ("users", "List users (admin)"),
    ("stats", "Show statistics"),
    ("help", "Show all commands"),
    ("exit", "Quit"),
]


def render_banner() -> None:
    lib = LibraryManager.get_instance()
    table = Table.grid(padding=(0, 2))
    table.add_column(justify="left", style="bold cyan")
    table.add_column(justify="left", style="white")
    for usage, label in SHELL_COMMANDS:
        table.add_row(escape(usage), label)

    console.print(Panel(
        table,
        title=f"{APP_NAME}",
        subtitle=escape(lib.messages.get("welcome")),
        border_style="cyan",
        box=box.HEAVY,
        padding=(1, 2),
    ))


def dispatch(line: str) -> bool:
    """Run one shell line through the command app. Returns False on exit."""
    lib = LibraryManager.get_instance()
    line = line.strip()
    if not line:
        return True
    if line == "exit":
        print_message(lib.messages.get("goodbye"), "green")
        return False

    try:
        args = shlex.split(line)
    except ValueError:
        # unbalanced quotes
        print_message(lib.messages.get("invalid_command"), "red")
        return True

    if args[0] == "help":
        args = ["--help"]
    elif args[0] == "shell":
        print_message(lib.messages.get("invalid_command"), "red")
        return True

    try:
        app(args=args, prog_name="lms", standalone_mode=False)
    except click.ClickException as exc:
        logger.debug(f"Rejected shell input {line!r}: {exc}")
        print_message(lib.messages.get("invalid_command"), "red")
    except click.exceptions.Abort:
        pass
    return True


def run_shell() -> None:
    """Read-eval loop: one command at a time until 'exit' or end of input."""
    lib = LibraryManager.get_instance()
    render_banner()
    while True:
        try:
            line = console.input(escape(settings.prompt))
        except (EOFError, KeyboardInterrupt):
            print_message(lib.messages.get("goodbye"), "green")
            break
        if not dispatch(line):
            break
        print()  # blank line between commands


def main() -> None:
    if len(sys.argv) > 1:
        app()
    else:
        run_shell()


if __name__ == "__main__":
    main()
