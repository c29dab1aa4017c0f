import pytest

from library_catalog.book import Book
from library_catalog.library import Library
from library_catalog.ui_helpers import OUTPUT_MODE_ENV
from library_catalog.user import User


@pytest.fixture(autouse=True)
def plain_output(monkeypatch):
    # The CLI writes the chosen mode into the environment; undo it after every test
    monkeypatch.setenv(OUTPUT_MODE_ENV, "plain")


@pytest.fixture
def lib():
    return Library()


@pytest.fixture
def stocked_lib(lib):
    lib.add_book(Book("Dune", "Frank Herbert", "B001", 5))
    lib.add_book(Book("Dune Messiah", "Frank Herbert", "B002", 2))
    lib.add_book(Book("Foundation", "Isaac Asimov", "B003", 3))
    lib.add_user(User("Alice", "U001"))
    lib.add_user(User("Bob", "U002"))
    return lib


@pytest.fixture
def data_files(tmp_path):
    # Separate book and user files, one pair per test
    return str(tmp_path / "books.txt"), str(tmp_path / "users.txt")
