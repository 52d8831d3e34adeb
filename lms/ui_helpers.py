import json
import os
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.markup import escape

from lms.config import settings
from lms.result import Result, Status

# Environment variable to control CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "LMS_OUTPUT"
OUTPUT_MODES = {"plain", "json", "rich"}

_console = Console()


def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in OUTPUT_MODES:
        os.environ[OUTPUT_MODE_ENV] = mode


def get_output_mode() -> str:
    mode = os.environ.get(OUTPUT_MODE_ENV, settings.output_mode).lower()
    return mode if mode in OUTPUT_MODES else "plain"


def print_result(result: Result) -> None:
    """Print a library result in the current output mode.
    - plain: the message text, then any record rows
    - json: the whole result as a JSON object
    - rich: green or red by outcome, records as tables
    """
    mode = get_output_mode()

    if mode == "json":
        print(json.dumps(result.to_dict(), ensure_ascii=False))
        return

    if result.ok and result.status in _RECORD_PRINTERS:
        _RECORD_PRINTERS[result.status](result, mode)
        return

    if mode == "rich":
        style = "green" if result.ok else "red"
        _console.print(f"[{style}]{escape(result.message)}[/]")
    else:
        print(result.message)


def print_message(message: str, style: Optional[str] = None) -> None:
    if get_output_mode() == "rich" and style:
        _console.print(f"[{style}]{escape(message)}[/]")
    else:
        print(message)


def print_book_list(result: Result, mode: str) -> None:
    books: List[Dict[str, Any]] = result.data or []
    if mode != "rich":
        print(result.message)
        return
    table = Table(title="📚 Books", show_lines=True, header_style="bold cyan")
    table.add_column("Name", style="white")
    table.add_column("Author", style="white")
    table.add_column("Inventory", style="magenta", justify="right")
    table.add_column("On Loan", style="yellow", justify="right")
    for b in books:
        table.add_row(escape(b["name"]), escape(b["author"]), str(b["inventory"]), str(len(b["borrowed_by"])))
    _console.print(table)


def print_profile(result: Result, mode: str) -> None:
    profile = result.data
    books = [f"{name} - {author}" for name, author in profile["borrowed_books"]]
    if mode == "rich":
        content = (
            f"[bold]Role:[/] {profile['role']}\n"
            f"[bold]Borrowed:[/] {escape(', '.join(books)) or '-'}\n"
            f"[bold]Currently Borrowed:[/] {profile['stats']['currently_borrowed']}"
        )
        _console.print(Panel.fit(content, title=f"👤 {escape(profile['name'])}", border_style="blue"))
        return
    print(result.message)
    print(f"Role: {profile['role']}")
    print(f"Borrowed Books: {', '.join(books) if books else '-'}")
    print(f"Currently Borrowed: {profile['stats']['currently_borrowed']}")


def print_user_list(result: Result, mode: str) -> None:
    users: List[Dict[str, Any]] = result.data or []
    if mode == "rich":
        table = Table(title="👥 Users", show_lines=True, header_style="bold cyan")
        table.add_column("Name", style="white")
        table.add_column("Role", style="magenta")
        table.add_column("Borrowed", justify="right")
        for u in users:
            table.add_row(escape(u["name"]), u["role"], str(u["borrowed_books_count"]))
        _console.print(table)
        return
    print(result.message)
    for u in users:
        print(f"{u['name']} - {u['role']} - Borrowed: {u['borrowed_books_count']}")


def print_stats_result(result: Result, mode: str) -> None:
    """Print system statistics.
    - plain: one 'Label: value' line per figure
    - rich: Panel with the main figures
    """
    stats = result.data
    lines = [
        ("Total Books", stats["total_books"]),
        ("Total Users", stats["total_users"]),
        ("Current User", f"{stats['current_user']} ({stats['current_user_role']})"),
        ("Admins", stats["user_stats"]["admin"]),
        ("Users", stats["user_stats"]["user"]),
    ]
    if mode == "rich":
        content = "\n".join(f"[bold]{label}:[/] {escape(str(value))}" for label, value in lines)
        _console.print(Panel.fit(content, title="📊 Stats", border_style="blue"))
        return
    print(result.message)
    for label, value in lines:
        print(f"{label}: {value}")


def print_config_result(result: Result, mode: str) -> None:
    config = result.data
    if mode == "rich":
        from rich.tree import Tree

        tree = Tree(f"⚙️ {escape(config['app_name'])} {config['version']}", style="bold blue")
        for key, value in config.items():
            if isinstance(value, dict):
                branch = tree.add(f"[bold cyan]{key}[/]")
                for sub_key, sub_value in value.items():
                    branch.add(f"[yellow]{sub_key}[/]: [white]{sub_value}[/]")
            else:
                tree.add(f"[yellow]{key}[/]: [white]{escape(str(value))}[/]")
        _console.print(tree)
        return
    print(result.message)
    for key, value in config.items():
        if isinstance(value, dict):
            for sub_key, sub_value in value.items():
                print(f"{key}.{sub_key}: {sub_value}")
        else:
            print(f"{key}: {value}")


_RECORD_PRINTERS = {
    Status.BOOK_LIST: print_book_list,
    Status.PROFILE: print_profile,
    Status.USER_LIST: print_user_list,
    Status.STATS: print_stats_result,
    Status.CONFIG: print_config_result,
}
