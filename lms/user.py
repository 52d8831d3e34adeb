from __future__ import annotations

from enum import Enum
from typing import List, Optional

from lms.book import BookKey


class Role(str, Enum):
    ADMIN = "admin"
    USER = "user"

    @classmethod
    def parse(cls, value) -> Optional["Role"]:
        """Return the Role for ``value`` ('admin' / 'user' or a Role), else None."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value)
        except ValueError:
            return None


class User:
    """A registered library account."""

    def __init__(self, name: str, role: Role, password: str,
                 borrowed_books: Optional[List[BookKey]] = None) -> None:
        self.name = name
        self.role = role
        self.password = password
        # ordered set of (book name, author) keys currently held
        self.borrowed_books: List[BookKey] = list(borrowed_books or [])

    def check_password(self, password: str) -> bool:
        return self.password == password

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "role": self.role.value,
            "borrowed_books": [list(key) for key in self.borrowed_books],
        }


class SessionUser:
    """Snapshot of the logged-in user's identity, taken at login time."""

    __slots__ = ("name", "role")

    def __init__(self, name: str, role: Role) -> None:
        self.name = name
        self.role = role

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    @property
    def is_regular(self) -> bool:
        return self.role is Role.USER

    def __eq__(self, other) -> bool:
        if not isinstance(other, SessionUser):
            return NotImplemented
        return self.name == other.name and self.role == other.role

    def __hash__(self) -> int:
        return hash((self.name, self.role))

    def __repr__(self) -> str:
        return f"SessionUser(name={self.name!r}, role={self.role.value!r})"

    def to_dict(self) -> dict:
        return {"name": self.name, "role": self.role.value}


class Session:
    """Identity of the current actor; empty until a successful login."""

    def __init__(self) -> None:
        self.user: Optional[SessionUser] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def start(self, user: User) -> SessionUser:
        # Re-login replaces whoever was logged in before
        self.user = SessionUser(user.name, user.role)
        return self.user

    def clear(self) -> None:
        self.user = None
