import pytest

from lms.book_store import BookStore
from lms.result import ErrorKind, Status

NAME, AUTHOR = "Clean Code", "Robert C. Martin"


@pytest.fixture
def store():
    return BookStore()


def test_add_new_book(store):
    result = store.add_book(NAME, AUTHOR, 5)
    assert result.status == Status.BOOK_ADDED
    assert result.message == 'Book "Clean Code" by Robert C. Martin added successfully, inventory: 5.'
    assert store.get_book(NAME, AUTHOR).inventory == 5


def test_add_existing_book_updates_inventory(store):
    store.add_book(NAME, AUTHOR, 5)
    result = store.add_book(NAME, AUTHOR, 3)
    assert result.status == Status.BOOK_UPDATED
    assert result.message == 'Book "Clean Code" inventory successfully updated, new inventory: 8.'
    assert store.total_books() == 1


def test_same_title_by_different_authors_are_distinct(store):
    store.add_book("Poems", "A", 1)
    store.add_book("Poems", "B", 1)
    assert store.total_books() == 2


def test_add_book_validation(store):
    assert store.add_book("", AUTHOR, 1).message == "Invalid parameters provided."
    assert store.add_book(NAME, AUTHOR, 0).message == "Amount must be positive."
    assert store.add_book(NAME, AUTHOR, -2).kind == ErrorKind.VALIDATION
    assert store.total_books() == 0


def test_list_books_empty_and_ordered(store):
    empty = store.list_books()
    assert empty.ok
    assert empty.status == Status.NO_BOOKS
    assert empty.message == "No books in the library."

    store.add_book("B Book", "Author B", 2)
    store.add_book("A Book", "Author A", 1)
    assert store.list_books().message == (
        "Book List:\n"
        "B Book - Author B - Inventory: 2\n"
        "A Book - Author A - Inventory: 1"
    )


def test_search_book(store):
    store.add_book(NAME, AUTHOR, 5)
    assert store.search_book(NAME, AUTHOR).message == "Clean Code - Robert C. Martin - Inventory: 5"
    missing = store.search_book("Missing", "Nobody")
    assert missing.message == 'Book "Missing" by Nobody not found.'
    assert missing.kind == ErrorKind.NOT_FOUND
    assert store.search_book(" ", AUTHOR).status == Status.INVALID_PARAMETERS


def test_borrow_and_return_conserve_copies(store):
    store.add_book(NAME, AUTHOR, 2)
    assert store.borrow(NAME, AUTHOR, "Bob").data == (NAME, AUTHOR)
    store.borrow(NAME, AUTHOR, "Carol")
    book = store.get_book(NAME, AUTHOR)
    assert book.inventory == 0
    assert book.borrowed_by == ["Bob", "Carol"]
    assert book.total_copies == 2

    out = store.borrow(NAME, AUTHOR, "Dave")
    assert out.status == Status.OUT_OF_STOCK
    assert out.message == 'Book "Clean Code" is not available for borrowing.'
    assert out.kind == ErrorKind.CAPACITY

    assert store.return_book(NAME, AUTHOR, "Bob").message == 'Book "Clean Code" successfully returned.'
    assert book.borrowed_by == ["Carol"]
    assert book.inventory == 1
    assert book.total_copies == 2


def test_return_by_non_borrower(store):
    store.add_book(NAME, AUTHOR, 1)
    result = store.return_book(NAME, AUTHOR, "Bob")
    assert result.message == 'You have not borrowed "Clean Code" by Robert C. Martin.'
    assert store.get_book(NAME, AUTHOR).inventory == 1


def test_borrow_unknown_book(store):
    assert store.borrow("Nope", "Nobody", "Bob").status == Status.BOOK_NOT_FOUND
    assert store.return_book("Nope", "Nobody", "Bob").status == Status.BOOK_NOT_FOUND


def test_delete_book(store):
    store.add_book(NAME, AUTHOR, 1)
    result = store.delete_book(NAME, AUTHOR)
    assert result.message == 'Book "Clean Code" by Robert C. Martin successfully deleted.'
    assert not store.book_exists(NAME, AUTHOR)
    assert store.delete_book(NAME, AUTHOR).message == 'Book "Clean Code" by Robert C. Martin not found.'


@pytest.mark.parametrize("borrowers", [["Bob"], ["Bob", "Carol", "Dave"]])
def test_delete_guard_ignores_how_many_copies_are_out(store, borrowers):
    store.add_book(NAME, AUTHOR, 5)
    for user in borrowers:
        store.borrow(NAME, AUTHOR, user)
    result = store.delete_book(NAME, AUTHOR)
    assert result.status == Status.BOOK_CURRENTLY_BORROWED
    assert result.message == 'Cannot delete book "Clean Code" because it is currently borrowed.'
    assert store.book_exists(NAME, AUTHOR)


def test_undo_helpers_restore_state(store):
    store.add_book(NAME, AUTHOR, 2)
    store.borrow(NAME, AUTHOR, "Bob")
    store.undo_borrow(NAME, AUTHOR, "Bob")
    book = store.get_book(NAME, AUTHOR)
    assert (book.inventory, book.borrowed_by) == (2, [])

    store.borrow(NAME, AUTHOR, "Bob")
    store.return_book(NAME, AUTHOR, "Bob")
    store.undo_return(NAME, AUTHOR, "Bob")
    assert (book.inventory, book.borrowed_by) == (1, ["Bob"])


def test_availability(store):
    store.add_book(NAME, AUTHOR, 1)
    assert store.is_available(NAME, AUTHOR)
    store.borrow(NAME, AUTHOR, "Bob")
    assert not store.is_available(NAME, AUTHOR)
    assert not store.is_available("Nope", "Nobody")
