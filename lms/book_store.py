import logging
from typing import Dict, List, Optional

from lms.book import Book, BookKey
from lms.messages import MessageCatalog
from lms.result import Result, Status
from lms.validators import Validators

logger = logging.getLogger(__name__)


class BookStore:
    """Owns the book table, keyed by (name, author) in insertion order."""

    def __init__(self, messages: Optional[MessageCatalog] = None) -> None:
        self.messages = messages or MessageCatalog()
        self._books: Dict[BookKey, Book] = {}

    @staticmethod
    def get_book_key(name: str, author: str) -> BookKey:
        return (name, author)

    # ------------------------- Catalog ------------------------- #
    def add_book(self, name, author, amount) -> Result:
        """Create a title or add copies to an existing one."""
        error = Validators.validate_add_book(name, author, amount)
        if error is not None:
            return Result(error, self.messages.get(error))

        key = self.get_book_key(name, author)
        book = self._books.get(key)
        if book is not None:
            book.inventory += amount
            logger.info(f"Restocked {key}: +{amount}, inventory now {book.inventory}")
            return Result(
                Status.BOOK_UPDATED,
                self.messages.get(Status.BOOK_UPDATED, name=name, inventory=book.inventory),
                book.to_dict(),
            )

        book = Book(name=name, author=author, inventory=amount)
        self._books[key] = book
        logger.info(f"Added {key} with inventory {amount}")
        return Result(
            Status.BOOK_ADDED,
            self.messages.get(Status.BOOK_ADDED, name=name, author=author, amount=amount),
            book.to_dict(),
        )

    def delete_book(self, name, author) -> Result:
        error = Validators.validate_book_operation(name, author)
        if error is not None:
            return Result(error, self.messages.get(error))

        key = self.get_book_key(name, author)
        book = self._books.get(key)
        if book is None:
            return self._not_found(name, author)
        if book.is_borrowed:
            logger.info(f"Refused to delete {key}: {len(book.borrowed_by)} copies out")
            return Result(
                Status.BOOK_CURRENTLY_BORROWED,
                self.messages.get(Status.BOOK_CURRENTLY_BORROWED, name=name),
            )

        del self._books[key]
        logger.info(f"Deleted {key}")
        return Result(Status.BOOK_DELETED, self.messages.get(Status.BOOK_DELETED, name=name, author=author))

    def search_book(self, name, author) -> Result:
        error = Validators.validate_book_operation(name, author)
        if error is not None:
            return Result(error, self.messages.get(error))

        book = self._books.get(self.get_book_key(name, author))
        if book is None:
            return self._not_found(name, author)
        return Result(Status.BOOK_FOUND, self._describe(book), book.to_dict())

    def list_books(self) -> Result:
        if not self._books:
            return Result(Status.NO_BOOKS, self.messages.get(Status.NO_BOOKS), [])

        lines = [self.messages.get(Status.BOOK_LIST)]
        lines.extend(self._describe(book) for book in self._books.values())
        return Result(
            Status.BOOK_LIST,
            "\n".join(lines),
            [book.to_dict() for book in self._books.values()],
        )

    # ------------------------- Loans ------------------------- #
    def borrow(self, name, author, user: str) -> Result:
        """Hand one copy to ``user``. The result data carries the book key."""
        key = self.get_book_key(name, author)
        book = self._books.get(key)
        if book is None:
            return self._not_found(name, author)
        if book.inventory <= 0:
            return Result(Status.OUT_OF_STOCK, self.messages.get(Status.OUT_OF_STOCK, name=name))

        book.inventory -= 1
        book.borrowed_by.append(user)
        logger.info(f"{user} borrowed {key}, inventory now {book.inventory}")
        return Result(Status.BOOK_BORROWED, self.messages.get(Status.BOOK_BORROWED, name=name), key)

    def return_book(self, name, author, user: str) -> Result:
        key = self.get_book_key(name, author)
        book = self._books.get(key)
        if book is None:
            return self._not_found(name, author)
        if user not in book.borrowed_by:
            return Result(
                Status.NOT_BORROWED,
                self.messages.get(Status.NOT_BORROWED, name=name, author=author),
            )

        book.inventory += 1
        book.borrowed_by.remove(user)  # first occurrence only
        logger.info(f"{user} returned {key}, inventory now {book.inventory}")
        return Result(Status.BOOK_RETURNED, self.messages.get(Status.BOOK_RETURNED, name=name), key)

    def undo_borrow(self, name: str, author: str, user: str) -> None:
        """Undo a borrow by ``user``: put the copy back on the shelf."""
        book = self._books.get(self.get_book_key(name, author))
        if book is None or user not in book.borrowed_by:
            return
        # the copy being undone is the most recent one appended
        last = len(book.borrowed_by) - 1 - book.borrowed_by[::-1].index(user)
        del book.borrowed_by[last]
        book.inventory += 1

    def undo_return(self, name: str, author: str, user: str) -> None:
        """Undo a return by ``user``: take the copy off the shelf again."""
        book = self._books.get(self.get_book_key(name, author))
        if book is None:
            return
        book.inventory -= 1
        book.borrowed_by.append(user)

    # ------------------------- Lookups ------------------------- #
    def get_book(self, name: str, author: str) -> Optional[Book]:
        return self._books.get(self.get_book_key(name, author))

    def book_exists(self, name: str, author: str) -> bool:
        return self.get_book_key(name, author) in self._books

    def is_available(self, name: str, author: str) -> bool:
        book = self.get_book(name, author)
        return book is not None and book.inventory > 0

    def books(self) -> List[Book]:
        return list(self._books.values())

    def total_books(self) -> int:
        return len(self._books)

    # ------------------------- Helpers ------------------------- #
    def _describe(self, book: Book) -> str:
        return self.messages.get(Status.BOOK_FOUND, name=book.name, author=book.author, inventory=book.inventory)

    def _not_found(self, name, author) -> Result:
        return Result(Status.BOOK_NOT_FOUND, self.messages.get(Status.BOOK_NOT_FOUND, name=name, author=author))
