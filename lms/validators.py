from typing import Optional

from lms.result import Status
from lms.user import Role


class Validators:
    """Input checks for accounts and catalog operations.

    The ``is_valid_*`` checks return booleans. The ``validate_*`` checks return
    the failing :class:`Status`, or None when the input is acceptable.
    """

    @staticmethod
    def _is_non_empty(value, min_length: int = 1) -> bool:
        if not isinstance(value, str):
            return False
        return len(value.strip()) >= min_length

    @staticmethod
    def is_valid_role(role) -> bool:
        return Role.parse(role) is not None

    @staticmethod
    def is_valid_name(name) -> bool:
        return Validators._is_non_empty(name)

    @staticmethod
    def is_valid_password(password) -> bool:
        return Validators._is_non_empty(password)

    @staticmethod
    def is_valid_book_name(book_name) -> bool:
        return Validators._is_non_empty(book_name)

    @staticmethod
    def is_valid_author(author) -> bool:
        return Validators._is_non_empty(author)

    @staticmethod
    def is_valid_amount(amount) -> bool:
        # bool is an int subclass; True is not a quantity
        if isinstance(amount, bool) or not isinstance(amount, int):
            return False
        return amount >= 1

    @staticmethod
    def validate_registration(role, name, password) -> Optional[Status]:
        if not Validators.is_valid_role(role):
            return Status.INVALID_ROLE
        if not Validators.is_valid_name(name) or not Validators.is_valid_password(password):
            return Status.INVALID_PARAMETERS
        return None

    @staticmethod
    def validate_login(name, password) -> Optional[Status]:
        if not Validators.is_valid_name(name) or not Validators.is_valid_password(password):
            return Status.INVALID_PARAMETERS
        return None

    @staticmethod
    def validate_book_operation(book_name, author) -> Optional[Status]:
        if not Validators.is_valid_book_name(book_name) or not Validators.is_valid_author(author):
            return Status.INVALID_PARAMETERS
        return None

    @staticmethod
    def validate_add_book(book_name, author, amount) -> Optional[Status]:
        error = Validators.validate_book_operation(book_name, author)
        if error is not None:
            return error
        if not Validators.is_valid_amount(amount):
            return Status.INVALID_AMOUNT
        return None
