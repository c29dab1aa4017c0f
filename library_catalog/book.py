from __future__ import annotations


class BookUnavailableError(Exception):
    """Raised when a book with no available copies is borrowed."""


class Book:
    """Represents a single title in the catalog and its available copies."""

    def __init__(self, title: str, author: str, isbn: str, quantity: int = 1) -> None:
        if quantity < 0:
            raise ValueError(f"Quantity for ISBN {isbn} cannot be negative.")
        self.title = title
        self.author = author
        self.isbn = isbn
        self.quantity = quantity

    def borrow(self) -> None:
        """Take one copy off the shelf."""
        if self.quantity <= 0:
            raise BookUnavailableError(f"Book with ISBN {self.isbn} is not available.")
        self.quantity -= 1

    def return_copy(self) -> None:
        # No upper bound: returns without a matching borrow still count.
        self.quantity += 1

    def copy(self) -> "Book":
        return Book(self.title, self.author, self.isbn, self.quantity)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Book):
            return NotImplemented
        return (self.title, self.author, self.isbn, self.quantity) == (
            other.title, other.author, other.isbn, other.quantity
        )

    def __repr__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"Book({self.title!r}, {self.author!r}, {self.isbn!r}, {self.quantity})"

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"{self.title} by {self.author} (ISBN: {self.isbn}, available: {self.quantity})"

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "author": self.author,
            "isbn": self.isbn,
            "quantity": self.quantity,
        }

    @staticmethod
    def from_dict(data: dict) -> "Book":
        return Book(
            title=data["title"],
            author=data["author"],
            isbn=data["isbn"],
            quantity=int(data.get("quantity", 1)),
        )
