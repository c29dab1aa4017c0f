import os
import json
from typing import List, Any, Dict
from rich.console import Console
from rich.table import Table
from rich.panel import Panel

from library_catalog.config import settings

# Environment variable to control CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "LIB_CLI_OUTPUT"
OUTPUT_MODES = {"plain", "json", "rich"}

_console = Console()

def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in OUTPUT_MODES:
        os.environ[OUTPUT_MODE_ENV] = mode

def get_output_mode() -> str:
    mode = os.environ.get(OUTPUT_MODE_ENV, settings.output_mode).lower()
    return mode if mode in OUTPUT_MODES else "plain"

def print_list_result(books: List[Any]) -> None:
    """Print books in the current output mode.
    - plain: 'ISBN - Title by Author (N available)' lines, or 'No books in library.'
    - json: JSON array of isbn, title, author, quantity
    - rich: Rich table
    """
    mode = get_output_mode()

    if not books:
        print("No books in library.")
        return

    if mode == "json":
        print(json.dumps([b.to_dict() for b in books], ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="📚 Books", show_lines=True, header_style="bold cyan")
        table.add_column("ISBN", style="magenta", no_wrap=True)
        table.add_column("Title", style="white")
        table.add_column("Author", style="white")
        table.add_column("Available", style="green", justify="right")
        for b in books:
            table.add_row(b.isbn, b.title, b.author, str(b.quantity))
        _console.print(table)
    else:
        for b in books:
            print(f"{b.isbn} - {b.title} by {b.author} ({b.quantity} available)")

def print_book_detail(book: Any) -> None:
    mode = get_output_mode()
    if mode == "json":
        print(json.dumps(book.to_dict(), ensure_ascii=False))
    elif mode == "rich":
        content = (
            f"[bold]Title:[/] {book.title}\n[bold]Author:[/] {book.author}\n"
            f"[bold]ISBN:[/] {book.isbn}\n[bold]Available:[/] {book.quantity}"
        )
        _console.print(Panel.fit(content, title="📖 Book Found", border_style="green"))
    else:
        print("Book Found")
        print(f"Title: {book.title}")
        print(f"Author: {book.author}")
        print(f"ISBN: {book.isbn}")
        print(f"Available: {book.quantity}")

def print_user_list(users: List[Any]) -> None:
    """Print users and their borrowed ISBNs in the current output mode."""
    mode = get_output_mode()

    if not users:
        print("No users registered.")
        return

    if mode == "json":
        print(json.dumps([u.to_dict() for u in users], ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="👤 Users", show_lines=True, header_style="bold cyan")
        table.add_column("ID", style="magenta", no_wrap=True)
        table.add_column("Name", style="white")
        table.add_column("Borrowed", style="white")
        for u in users:
            table.add_row(u.id, u.name, ", ".join(u.borrowed_isbns) or "-")
        _console.print(table)
    else:
        for u in users:
            borrowed = ", ".join(u.borrowed_isbns) if u.borrowed_isbns else "nothing borrowed"
            print(f"{u.id} - {u.name}: {borrowed}")

def print_stats_result(stats: Dict[str, Any]) -> None:
    """Print statistics in the current output mode."""
    mode = get_output_mode()

    if not stats:
        print("No statistics available.")
        return

    labels = {
        "total_titles": "Total Titles",
        "total_available_copies": "Available Copies",
        "unique_authors": "Unique Authors",
        "total_users": "Total Users",
        "outstanding_loans": "Outstanding Loans",
    }

    if mode == "json":
        print(json.dumps({key: stats.get(key, 0) for key in labels}, ensure_ascii=False))
    elif mode == "rich":
        content = "\n".join(f"[bold]{label}:[/] {stats.get(key, 0)}" for key, label in labels.items())
        _console.print(Panel.fit(content, title="📊 Stats", border_style="blue"))
    else:
        for key, label in labels.items():
            print(f"{label}: {stats.get(key, 0)}")
