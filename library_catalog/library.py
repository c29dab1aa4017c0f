from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from library_catalog import codec
from library_catalog.book import Book, BookUnavailableError
from library_catalog.ui_helpers import print_list_result
from library_catalog.user import User

logger = logging.getLogger(__name__)


class BorrowStatus(str, Enum):
    """Why a borrow would succeed or fail."""

    OK = "ok"
    USER_NOT_FOUND = "user_not_found"
    BOOK_NOT_FOUND = "book_not_found"
    UNAVAILABLE = "unavailable"


class Library:
    """Owns the book and user records and the borrow/return bookkeeping.

    Books are keyed by ISBN and users by id. Operations report failure with
    ``False`` / ``None`` instead of raising.
    """

    def __init__(self) -> None:
        self._books: Dict[str, Book] = {}
        self._users: Dict[str, User] = {}

    # ------------------------- Book operations ------------------------- #
    def add_book(self, book: Book) -> bool:
        """Add a book unless its ISBN is already in the catalog."""
        if book.isbn in self._books:
            logger.debug(f"Book with ISBN {book.isbn} already exists")
            return False
        self._books[book.isbn] = book.copy()
        return True

    def remove_book(self, isbn: str) -> bool:
        # Users keep the ISBN in their borrowed lists.
        return self._books.pop(isbn, None) is not None

    def search_by_title(self, title: str) -> List[Book]:
        """Exact title match. Returns copies in no guaranteed order."""
        return [book.copy() for book in self._books.values() if book.title == title]

    def search_by_author(self, author: str) -> List[Book]:
        """Exact author match. Returns copies in no guaranteed order."""
        return [book.copy() for book in self._books.values() if book.author == author]

    def search_by_isbn(self, isbn: str) -> Optional[Book]:
        """Return the catalog's own record for ``isbn``, or None.

        The returned object is live: changes made through it are visible in
        the catalog. Once the ISBN is removed (or the catalog is reloaded) the
        object is no longer part of the catalog.
        """
        return self._books.get(isbn)

    def list_books(self) -> List[Book]:
        return [book.copy() for book in self._books.values()]

    def display_books(self) -> None:
        """Print every book using the current CLI output mode."""
        print_list_result(self.list_books())

    # ------------------------- User operations ------------------------- #
    def add_user(self, user: User) -> bool:
        """Add a user unless the id is already registered."""
        if user.id in self._users:
            logger.debug(f"User with id {user.id} already exists")
            return False
        self._users[user.id] = user.copy()
        return True

    def remove_user(self, user_id: str) -> bool:
        return self._users.pop(user_id, None) is not None

    def find_user(self, user_id: str) -> Optional[User]:
        """Return a copy of the user record, or None."""
        user = self._users.get(user_id)
        return user.copy() if user is not None else None

    def list_users(self) -> List[User]:
        return [user.copy() for user in self._users.values()]

    # ------------------------- Borrow / return ------------------------- #
    def check_borrow(self, user_id: str, isbn: str) -> BorrowStatus:
        """Report whether ``borrow_book`` would succeed, without mutating anything."""
        if user_id not in self._users:
            return BorrowStatus.USER_NOT_FOUND
        book = self._books.get(isbn)
        if book is None:
            return BorrowStatus.BOOK_NOT_FOUND
        if book.quantity <= 0:
            return BorrowStatus.UNAVAILABLE
        return BorrowStatus.OK

    def borrow_book(self, user_id: str, isbn: str) -> bool:
        """Lend one copy of ``isbn`` to ``user_id``.

        Returns False when the user or book is unknown or no copy is left; in
        that case neither record is touched. On success the book loses one
        copy and the ISBN is appended to the user's borrowed list.
        """
        user = self._users.get(user_id)
        book = self._books.get(isbn)
        if user is None or book is None:
            logger.debug(f"Borrow rejected: {self.check_borrow(user_id, isbn).value} ({user_id}, {isbn})")
            return False

        try:
            book.borrow()
        except BookUnavailableError as e:
            logger.debug(f"Borrow rejected: {e}")
            return False
        user.borrow_book(isbn)
        return True

    def return_book(self, user_id: str, isbn: str) -> bool:
        """Take back ``isbn`` from ``user_id``.

        Every occurrence of the ISBN leaves the user's list but the book only
        gains a single copy, whatever the number of occurrences removed.
        """
        user = self._users.get(user_id)
        book = self._books.get(isbn)
        if user is None or book is None:
            logger.debug(f"Return rejected: unknown user or book ({user_id}, {isbn})")
            return False

        user.return_book(isbn)
        book.return_copy()
        return True

    # ------------------------- Statistics ------------------------- #
    def get_statistics(self) -> Dict[str, Any]:
        """Get catalog statistics."""
        return {
            "total_titles": len(self._books),
            "total_available_copies": sum(book.quantity for book in self._books.values()),
            "unique_authors": len({book.author for book in self._books.values()}),
            "total_users": len(self._users),
            "outstanding_loans": sum(len(user.borrowed_isbns) for user in self._users.values()),
        }

    # ------------------------- Persistence ------------------------- #
    def load_from_files(self, book_path: str, user_path: str) -> bool:
        """Replace the whole catalog with the contents of the two data files.

        Returns False and leaves the catalog untouched if either file cannot
        be read. Malformed lines are skipped; when an ISBN or user id appears
        more than once the first line wins.
        """
        result = codec.read_catalog_files(book_path, user_path)
        if result is None:
            return False

        books, users = result
        self._books.clear()
        self._users.clear()
        for book in books:
            self._books.setdefault(book.isbn, book)
        for user in users:
            self._users.setdefault(user.id, user)
        return True

    def save_to_files(self, book_path: str, user_path: str) -> bool:
        """Write every book, then every user, to the two data files."""
        return codec.write_catalog_files(book_path, user_path, self._books.values(), self._users.values())
