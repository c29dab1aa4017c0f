"""
Plain-text persistence for the catalog.

Books and users live in two separate files, one record per line, fields
separated by ``;``:

    title;author;isbn;quantity
    name;id;isbn1,isbn2,...

Parsing and formatting are pure functions; only ``read_catalog_files`` and
``write_catalog_files`` touch the filesystem. Field values containing ``;``,
``,`` or newlines cannot be represented (there is no escaping).
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Tuple

from library_catalog.book import Book
from library_catalog.user import User

logger = logging.getLogger(__name__)

FIELD_SEPARATOR = ";"
ISBN_SEPARATOR = ","
ENCODING = "utf-8"


# ------------------------- Line codec ------------------------- #
def parse_book_line(line: str) -> Optional[Book]:
    """Parse ``title;author;isbn;quantity``. Returns None for malformed lines."""
    parts = line.rstrip("\r\n").split(FIELD_SEPARATOR, 3)
    if len(parts) < 4:
        return None
    title, author, isbn, raw_quantity = parts
    try:
        quantity = int(raw_quantity.strip())
    except ValueError:
        return None
    if quantity < 0:
        return None
    return Book(title, author, isbn, quantity)


def parse_user_line(line: str) -> Optional[User]:
    """Parse ``name;id;isbn1,isbn2,...``. The ISBN field may be empty or missing."""
    line = line.rstrip("\r\n")
    parts = line.split(FIELD_SEPARATOR, 2)
    if len(parts) < 2:
        return None
    name, user_id = parts[0], parts[1]
    borrowed = parts[2] if len(parts) == 3 else ""
    return User(name, user_id, borrowed.split(ISBN_SEPARATOR) if borrowed else [])


def format_book_line(book: Book) -> str:
    return FIELD_SEPARATOR.join([book.title, book.author, book.isbn, str(book.quantity)])


def format_user_line(user: User) -> str:
    return FIELD_SEPARATOR.join([user.name, user.id, ISBN_SEPARATOR.join(user.borrowed_isbns)])


def parse_books(lines: Iterable[str]) -> List[Book]:
    """Parse every well-formed book line, silently skipping the rest."""
    books: List[Book] = []
    skipped = 0
    for line in lines:
        book = parse_book_line(line)
        if book is None:
            skipped += 1
            continue
        books.append(book)
    if skipped:
        logger.debug(f"Skipped {skipped} malformed book line(s)")
    return books


def parse_users(lines: Iterable[str]) -> List[User]:
    """Parse every well-formed user line, silently skipping the rest."""
    users: List[User] = []
    skipped = 0
    for line in lines:
        user = parse_user_line(line)
        if user is None:
            skipped += 1
            continue
        users.append(user)
    if skipped:
        logger.debug(f"Skipped {skipped} malformed user line(s)")
    return users


# ------------------------- File I/O ------------------------- #
def read_catalog_files(book_path: str, user_path: str) -> Optional[Tuple[List[Book], List[User]]]:
    """Read both data files.

    Returns the parsed ``(books, users)`` or None when either file cannot be
    opened or decoded. Nothing is parsed unless both files were read.
    """
    try:
        with open(book_path, "r", encoding=ENCODING) as bf, open(user_path, "r", encoding=ENCODING) as uf:
            book_lines = bf.readlines()
            user_lines = uf.readlines()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Could not read catalog files ({book_path}, {user_path}): {e}")
        return None

    books = parse_books(book_lines)
    users = parse_users(user_lines)
    logger.info(f"Read {len(books)} book(s) from {book_path} and {len(users)} user(s) from {user_path}")
    return books, users


def write_catalog_files(book_path: str, user_path: str, books: Iterable[Book], users: Iterable[User]) -> bool:
    """Rewrite both data files. Both are opened before anything is written."""
    try:
        with open(book_path, "w", encoding=ENCODING, newline="\n") as bf, \
                open(user_path, "w", encoding=ENCODING, newline="\n") as uf:
            for book in books:
                bf.write(format_book_line(book) + "\n")
            for user in users:
                uf.write(format_user_line(user) + "\n")
    except OSError as e:
        logger.warning(f"Could not write catalog files ({book_path}, {user_path}): {e}")
        return False
    logger.info(f"Saved catalog to {book_path} and {user_path}")
    return True
