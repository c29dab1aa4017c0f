import logging
import os
from contextlib import contextmanager
from typing import Iterator, Optional

import typer

from library_catalog.book import Book
from library_catalog.config import settings
from library_catalog.library import BorrowStatus, Library
from library_catalog.ui_helpers import (
    set_output_mode,
    print_book_detail,
    print_list_result,
    print_stats_result,
    print_user_list,
)
from library_catalog.user import User
from library_catalog.validators import FieldValidator

logger = logging.getLogger(__name__)

# Data file paths for the current invocation; overridden by global options
_state = {"books_file": settings.books_file, "users_file": settings.users_file}

_BORROW_FAILURES = {
    BorrowStatus.USER_NOT_FOUND: "User with ID {user_id} not found.",
    BorrowStatus.BOOK_NOT_FOUND: "Book with ISBN {isbn} not found.",
    BorrowStatus.UNAVAILABLE: "No copies of ISBN {isbn} are available.",
}


def _load_library() -> Library:
    """Load the catalog from the data files. Missing files mean an empty catalog."""
    lib = Library()
    books_file, users_file = _state["books_file"], _state["users_file"]
    if not os.path.exists(books_file) and not os.path.exists(users_file):
        logger.info(f"No data files at {books_file} / {users_file}, starting empty")
        return lib
    if not lib.load_from_files(books_file, users_file):
        print(f"Could not load catalog from {books_file} and {users_file}.")
        raise typer.Exit(code=1)
    return lib


@contextmanager
def catalog_session(save: bool = True) -> Iterator[Library]:
    """Yield the loaded catalog and write it back afterwards when ``save`` is set."""
    lib = _load_library()
    yield lib
    if save and not lib.save_to_files(_state["books_file"], _state["users_file"]):
        print("Could not save catalog.")
        raise typer.Exit(code=1)


def _reject_unstorable(**fields: Optional[str]) -> bool:
    bad = FieldValidator.invalid_fields(**fields)
    if bad:
        print(f"Invalid value for {', '.join(bad)}: ';', ',' and line breaks are not allowed.")
        return True
    return False


# --- Typer CLI Application ---
app = typer.Typer(help=f"{settings.app_name} CLI")


@app.callback()
def _global_options(
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    ),
    books_file: Optional[str] = typer.Option(None, "--books-file", help="Path of the books data file"),
    users_file: Optional[str] = typer.Option(None, "--users-file", help="Path of the users data file"),
):
    """Global CLI options (output mode, data files)."""
    logging.basicConfig(level=settings.effective_log_level)
    if output:
        set_output_mode(output)
    _state["books_file"] = books_file or settings.books_file
    _state["users_file"] = users_file or settings.users_file


@app.command("list")
def cli_list():
    """List all books."""
    with catalog_session(save=False) as lib:
        lib.display_books()


@app.command("users")
def cli_users():
    """List all users and what they have borrowed."""
    with catalog_session(save=False) as lib:
        print_user_list(lib.list_users())


@app.command("add-book")
def cli_add_book(
    title: str,
    author: str,
    isbn: str,
    quantity: int = typer.Option(1, "--quantity", "-q", min=0, help="Number of copies"),
):
    """Add a book to the catalog."""
    if _reject_unstorable(title=title, author=author, isbn=isbn):
        return
    if not FieldValidator.validate_identifier(isbn):
        print("ISBN cannot be empty.")
        return
    with catalog_session() as lib:
        if lib.add_book(Book(title, author, isbn, quantity)):
            print(f"Successfully added: {title} by {author}")
        else:
            print(f"Book with ISBN {isbn} already exists.")


@app.command("remove-book")
def cli_remove_book(isbn: str):
    """Remove a book by ISBN."""
    with catalog_session() as lib:
        if lib.remove_book(isbn):
            print(f"Book with ISBN {isbn} has been removed.")
        else:
            print(f"Book with ISBN {isbn} not found.")


@app.command("add-user")
def cli_add_user(name: str, user_id: str):
    """Register a user."""
    if _reject_unstorable(name=name, user_id=user_id):
        return
    if not FieldValidator.validate_identifier(user_id):
        print("User ID cannot be empty.")
        return
    with catalog_session() as lib:
        if lib.add_user(User(name, user_id)):
            print(f"Successfully added user: {name} ({user_id})")
        else:
            print(f"User with ID {user_id} already exists.")


@app.command("remove-user")
def cli_remove_user(user_id: str):
    """Remove a user by ID."""
    with catalog_session() as lib:
        if lib.remove_user(user_id):
            print(f"User with ID {user_id} has been removed.")
        else:
            print(f"User with ID {user_id} not found.")


@app.command("find")
def cli_find(isbn: str):
    """Find a book by ISBN and show its details."""
    with catalog_session(save=False) as lib:
        book = lib.search_by_isbn(isbn)
        if book:
            print_book_detail(book)
        else:
            print(f"Book with ISBN {isbn} not found.")


@app.command("search")
def cli_search(
    title: Optional[str] = typer.Option(None, "--title", "-t", help="Exact title"),
    author: Optional[str] = typer.Option(None, "--author", "-a", help="Exact author"),
):
    """Search books by exact title and/or author."""
    if title is None and author is None:
        print("Give --title and/or --author.")
        return
    with catalog_session(save=False) as lib:
        if title is not None and author is not None:
            by_author = {b.isbn for b in lib.search_by_author(author)}
            books = [b for b in lib.search_by_title(title) if b.isbn in by_author]
        elif title is not None:
            books = lib.search_by_title(title)
        else:
            books = lib.search_by_author(author)

        if not books:
            print("No books match the criteria.")
            return
        print_list_result(books)


@app.command("borrow")
def cli_borrow(user_id: str, isbn: str):
    """Lend one copy of a book to a user."""
    with catalog_session() as lib:
        status = lib.check_borrow(user_id, isbn)
        if lib.borrow_book(user_id, isbn):
            print(f"User {user_id} borrowed {isbn}.")
        else:
            print(_BORROW_FAILURES.get(status, "Borrow failed.").format(user_id=user_id, isbn=isbn))


@app.command("return")
def cli_return(user_id: str, isbn: str):
    """Take a book back from a user."""
    with catalog_session() as lib:
        if lib.return_book(user_id, isbn):
            print(f"User {user_id} returned {isbn}.")
        else:
            print(f"Unknown user {user_id} or book {isbn}.")


@app.command("stats")
def cli_stats():
    """Show catalog statistics."""
    with catalog_session(save=False) as lib:
        print_stats_result(lib.get_statistics())


if __name__ == "__main__":
    app()
