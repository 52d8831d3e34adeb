"""Outcome types returned by every library operation.

Operations never raise for expected failures. They return a :class:`Result`
whose ``status`` names what happened; callers branch on ``result.ok`` or
``result.status`` and print ``result.message``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from lms.user import SessionUser


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    PERMISSION = "permission"
    CAPACITY = "capacity"


class Status(str, Enum):
    # Successful outcomes
    REGISTERED = "registered"
    LOGGED_IN = "logged_in"
    LOGGED_OUT = "logged_out"
    BOOK_LIST = "book_list"
    NO_BOOKS = "no_books"
    BOOK_FOUND = "book_found"
    BOOK_ADDED = "book_added"
    BOOK_UPDATED = "book_updated"
    BOOK_DELETED = "book_deleted"
    BOOK_BORROWED = "book_borrowed"
    BOOK_RETURNED = "book_returned"
    PROFILE = "profile"
    USER_LIST = "user_list"
    STATS = "stats"
    CONFIG = "config"

    # Validation
    INVALID_ROLE = "invalid_role"
    INVALID_PARAMETERS = "invalid_parameters"
    INVALID_AMOUNT = "invalid_amount"
    # Not found
    USER_NOT_FOUND = "user_not_found"
    BOOK_NOT_FOUND = "book_not_found"
    # Conflict
    USER_ALREADY_EXISTS = "user_already_exists"
    ALREADY_BORROWED = "already_borrowed"
    NOT_BORROWED = "not_borrowed"
    BOOK_CURRENTLY_BORROWED = "book_currently_borrowed"
    # Permission
    NOT_LOGGED_IN = "not_logged_in"
    NO_ACTIVE_SESSION = "no_active_session"
    WRONG_PASSWORD = "wrong_password"
    ADMIN_REQUIRED = "admin_required"
    USER_REQUIRED = "user_required"
    NOT_OWN_PROFILE = "not_own_profile"
    UNKNOWN_ACTION = "unknown_action"
    UNKNOWN_RESOURCE = "unknown_resource"
    # Capacity
    OUT_OF_STOCK = "out_of_stock"

    @property
    def kind(self) -> Optional[ErrorKind]:
        """Error category, or None for a successful status."""
        return _ERROR_KINDS.get(self)

    @property
    def is_success(self) -> bool:
        return self not in _ERROR_KINDS


_ERROR_KINDS: Dict[Status, ErrorKind] = {
    Status.INVALID_ROLE: ErrorKind.VALIDATION,
    Status.INVALID_PARAMETERS: ErrorKind.VALIDATION,
    Status.INVALID_AMOUNT: ErrorKind.VALIDATION,
    Status.USER_NOT_FOUND: ErrorKind.NOT_FOUND,
    Status.BOOK_NOT_FOUND: ErrorKind.NOT_FOUND,
    Status.USER_ALREADY_EXISTS: ErrorKind.CONFLICT,
    Status.WRONG_PASSWORD: ErrorKind.PERMISSION,
    Status.NO_ACTIVE_SESSION: ErrorKind.PERMISSION,
    Status.ALREADY_BORROWED: ErrorKind.CONFLICT,
    Status.NOT_BORROWED: ErrorKind.CONFLICT,
    Status.BOOK_CURRENTLY_BORROWED: ErrorKind.CONFLICT,
    Status.NOT_LOGGED_IN: ErrorKind.PERMISSION,
    Status.ADMIN_REQUIRED: ErrorKind.PERMISSION,
    Status.USER_REQUIRED: ErrorKind.PERMISSION,
    Status.NOT_OWN_PROFILE: ErrorKind.PERMISSION,
    Status.UNKNOWN_ACTION: ErrorKind.PERMISSION,
    Status.UNKNOWN_RESOURCE: ErrorKind.PERMISSION,
    Status.OUT_OF_STOCK: ErrorKind.CAPACITY,
}


@dataclass(frozen=True)
class Result:
    """Outcome of a library operation: a status tag, its message and optional data."""

    status: Status
    message: str
    data: Any = None

    @property
    def ok(self) -> bool:
        return self.status.is_success

    @property
    def kind(self) -> Optional[ErrorKind]:
        return self.status.kind

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "status": self.status.value,
            "message": self.message,
            "data": self.data,
        }

    def __str__(self) -> str:
        return self.message


class DenialReason(str, Enum):
    NOT_LOGGED_IN = "not_logged_in"
    WRONG_ROLE = "wrong_role"
    NOT_OWN_PROFILE = "not_own_profile"
    UNKNOWN_ACTION = "unknown_action"
    UNKNOWN_RESOURCE = "unknown_resource"


@dataclass(frozen=True)
class AuthResult:
    """Either ``authorized`` with the acting user, or denied with a reason."""

    authorized: bool
    user: Optional["SessionUser"] = None
    reason: Optional[DenialReason] = None
    denial: Optional[Result] = field(default=None, compare=False)

    @property
    def message(self) -> Optional[str]:
        return self.denial.message if self.denial else None
