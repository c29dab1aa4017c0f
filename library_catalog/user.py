from __future__ import annotations

from typing import List, Optional


class User:
    """A library patron and the ISBNs they currently have checked out."""

    def __init__(self, name: str, id: str, borrowed_isbns: Optional[List[str]] = None) -> None:
        self.name = name
        self.id = id
        self.borrowed_isbns: List[str] = list(borrowed_isbns or [])

    def borrow_book(self, isbn: str) -> None:
        """Record a borrowed ISBN. Duplicates are kept in borrow order."""
        self.borrowed_isbns.append(isbn)

    def return_book(self, isbn: str) -> None:
        """Drop every occurrence of the ISBN from the borrowed list."""
        self.borrowed_isbns = [b for b in self.borrowed_isbns if b != isbn]

    def copy(self) -> "User":
        return User(self.name, self.id, self.borrowed_isbns)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, User):
            return NotImplemented
        return (self.name, self.id, self.borrowed_isbns) == (other.name, other.id, other.borrowed_isbns)

    def __repr__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"User({self.name!r}, {self.id!r}, {self.borrowed_isbns!r})"

    def to_dict(self) -> dict:
        return {"name": self.name, "id": self.id, "borrowed_isbns": list(self.borrowed_isbns)}

    @staticmethod
    def from_dict(data: dict) -> "User":
        return User(name=data["name"], id=data["id"], borrowed_isbns=data.get("borrowed_isbns") or [])
