import json

import pytest
from typer.testing import CliRunner

from library_catalog.book import Book
from library_catalog.library import Library
from library_catalog.main import app
from library_catalog.user import User

runner = CliRunner()


@pytest.fixture
def invoke(data_files):
    books_file, users_file = data_files

    def _invoke(*args):
        return runner.invoke(app, ["--books-file", books_file, "--users-file", users_file, *args])

    return _invoke

@pytest.fixture
def seeded(data_files):
    lib = Library()
    lib.add_book(Book("Dune", "Frank Herbert", "B001", 1))
    lib.add_book(Book("Foundation", "Isaac Asimov", "B003", 3))
    lib.add_user(User("Alice", "U001"))
    assert lib.save_to_files(*data_files)
    return data_files

def _reload(data_files) -> Library:
    lib = Library()
    assert lib.load_from_files(*data_files)
    return lib


def test_list_no_books(invoke):
    result = invoke("list")
    assert result.exit_code == 0
    assert "No books in library." in result.stdout

def test_add_book_success(invoke, data_files):
    result = invoke("add-book", "Dune", "Frank Herbert", "B001", "--quantity", "5")
    assert result.exit_code == 0
    assert "Successfully added: Dune by Frank Herbert" in result.stdout
    assert _reload(data_files).search_by_isbn("B001").quantity == 5

def test_add_book_duplicate(invoke, seeded):
    result = invoke("add-book", "Other", "Someone", "B001")
    assert result.exit_code == 0
    assert "Book with ISBN B001 already exists." in result.stdout
    assert _reload(seeded).search_by_isbn("B001").title == "Dune"

def test_add_book_rejects_delimiters(invoke, data_files):
    result = invoke("add-book", "Dune; Part One", "Frank Herbert", "B001")
    assert result.exit_code == 0
    assert "Invalid value for title" in result.stdout
    assert invoke("list").stdout.strip() == "No books in library."

def test_remove_book(invoke, seeded):
    result = invoke("remove-book", "B003")
    assert "Book with ISBN B003 has been removed." in result.stdout
    result = invoke("remove-book", "B003")
    assert "Book with ISBN B003 not found." in result.stdout

def test_add_and_remove_user(invoke, data_files):
    assert "Successfully added user: Bob (U002)" in invoke("add-user", "Bob", "U002").stdout
    assert "User with ID U002 already exists." in invoke("add-user", "Robert", "U002").stdout
    assert "User with ID U002 has been removed." in invoke("remove-user", "U002").stdout
    assert "User with ID U002 not found." in invoke("remove-user", "U002").stdout

def test_find_book(invoke, seeded):
    result = invoke("find", "B003")
    assert result.exit_code == 0
    assert "Book Found" in result.stdout
    assert "Title: Foundation" in result.stdout
    assert "Author: Isaac Asimov" in result.stdout
    assert "Available: 3" in result.stdout

def test_find_book_not_found(invoke, seeded):
    result = invoke("find", "nonexistent")
    assert "Book with ISBN nonexistent not found." in result.stdout

def test_search(invoke, seeded):
    result = invoke("search", "--author", "Frank Herbert")
    assert "B001 - Dune by Frank Herbert" in result.stdout
    assert "Foundation" not in result.stdout

    result = invoke("search", "--title", "Nope")
    assert "No books match the criteria." in result.stdout

def test_borrow_and_return(invoke, seeded):
    result = invoke("borrow", "U001", "B001")
    assert "User U001 borrowed B001." in result.stdout
    lib = _reload(seeded)
    assert lib.search_by_isbn("B001").quantity == 0
    assert lib.find_user("U001").borrowed_isbns == ["B001"]

    result = invoke("borrow", "U001", "B001")
    assert "No copies of ISBN B001 are available." in result.stdout

    result = invoke("return", "U001", "B001")
    assert "User U001 returned B001." in result.stdout
    lib = _reload(seeded)
    assert lib.search_by_isbn("B001").quantity == 1
    assert lib.find_user("U001").borrowed_isbns == []

def test_borrow_failure_reasons(invoke, seeded):
    assert "User with ID U404 not found." in invoke("borrow", "U404", "B001").stdout
    assert "Book with ISBN B404 not found." in invoke("borrow", "U001", "B404").stdout
    assert "Unknown user U001 or book B404." in invoke("return", "U001", "B404").stdout

def test_users_listing(invoke, seeded):
    invoke("borrow", "U001", "B003")
    result = invoke("users")
    assert "U001 - Alice: B003" in result.stdout

def test_stats_json(invoke, seeded):
    invoke("borrow", "U001", "B003")
    result = invoke("--output", "json", "stats")
    assert result.exit_code == 0
    stats = json.loads(result.stdout.strip().splitlines()[-1])
    assert stats["total_titles"] == 2
    assert stats["total_available_copies"] == 3
    assert stats["outstanding_loans"] == 1

def test_list_json(invoke, seeded):
    result = invoke("-o", "json", "list")
    payload = json.loads(result.stdout.strip().splitlines()[-1])
    assert {b["isbn"]: b["quantity"] for b in payload} == {"B001": 1, "B003": 3}

def test_unreadable_catalog_exits_with_error(invoke, data_files):
    books_file, _ = data_files
    with open(books_file, "w", encoding="utf-8") as f:
        f.write("Dune;Frank Herbert;B001;1\n")
    # Only one of the two files exists
    result = invoke("list")
    assert result.exit_code == 1
    assert "Could not load catalog" in result.stdout
