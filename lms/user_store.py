import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from lms.book import BookKey
from lms.messages import MessageCatalog
from lms.result import AuthResult, DenialReason, Result, Status
from lms.user import Role, Session, SessionUser, User
from lms.validators import Validators

logger = logging.getLogger(__name__)


class BorrowOp(str, Enum):
    ADD = "add"
    REMOVE = "remove"


class UserStore:
    """Owns the user table and the default session."""

    def __init__(self, messages: Optional[MessageCatalog] = None) -> None:
        self.messages = messages or MessageCatalog()
        self.users: Dict[str, User] = {}
        self.session = Session()

    # ------------------------- Accounts ------------------------- #
    def register(self, role, name, password) -> Result:
        error = Validators.validate_registration(role, name, password)
        if error is not None:
            return Result(error, self.messages.get(error))

        role = Role.parse(role)
        if name in self.users:
            logger.info(f"Registration rejected, user already exists: {name}")
            return Result(
                Status.USER_ALREADY_EXISTS,
                self.messages.get(Status.USER_ALREADY_EXISTS, role=self.messages.role_label(role), name=name),
            )

        self.users[name] = User(name=name, role=role, password=password)
        logger.info(f"Registered {role.value} {name}")
        return Result(
            Status.REGISTERED,
            self.messages.get(Status.REGISTERED, role=self.messages.role_label(role), name=name),
            {"name": name, "role": role.value},
        )

    def login(self, name, password, session: Optional[Session] = None) -> Result:
        session = session or self.session
        error = Validators.validate_login(name, password)
        if error is not None:
            return Result(error, self.messages.get(error))

        user = self.users.get(name)
        if user is None:
            return Result(Status.USER_NOT_FOUND, self.messages.get(Status.USER_NOT_FOUND, name=name))
        if not user.check_password(password):
            logger.info(f"Failed login for {name}: wrong password")
            return Result(Status.WRONG_PASSWORD, self.messages.get(Status.WRONG_PASSWORD))

        previous = session.user
        current = session.start(user)
        if previous is not None and previous.name != name:
            logger.info(f"Session switched from {previous.name} to {name}")
        else:
            logger.info(f"{name} logged in")
        return Result(
            Status.LOGGED_IN,
            self.messages.get(Status.LOGGED_IN, role=self.messages.role_label(user.role), name=name),
            current.to_dict(),
        )

    def logout(self, session: Optional[Session] = None) -> Result:
        session = session or self.session
        if not session.is_authenticated:
            return Result(Status.NO_ACTIVE_SESSION, self.messages.get(Status.NO_ACTIVE_SESSION))
        logger.info(f"{session.user.name} logged out")
        session.clear()
        return Result(Status.LOGGED_OUT, self.messages.get(Status.LOGGED_OUT))

    def get_current_user(self, session: Optional[Session] = None) -> Optional[SessionUser]:
        return (session or self.session).user

    # ------------------------- Guards ------------------------- #
    def check_login(self, session: Optional[Session] = None) -> AuthResult:
        current = self.get_current_user(session)
        if current is None:
            return AuthResult(
                authorized=False,
                reason=DenialReason.NOT_LOGGED_IN,
                denial=Result(Status.NOT_LOGGED_IN, self.messages.get(Status.NOT_LOGGED_IN)),
            )
        return AuthResult(authorized=True, user=current)

    def check_admin_permission(self, session: Optional[Session] = None) -> AuthResult:
        return self._check_role(Role.ADMIN, Status.ADMIN_REQUIRED, session)

    def check_user_permission(self, session: Optional[Session] = None) -> AuthResult:
        return self._check_role(Role.USER, Status.USER_REQUIRED, session)

    def _check_role(self, role: Role, denied: Status, session: Optional[Session]) -> AuthResult:
        result = self.check_login(session)
        if not result.authorized:
            return result
        if result.user.role is not role:
            return AuthResult(
                authorized=False,
                reason=DenialReason.WRONG_ROLE,
                denial=Result(denied, self.messages.get(denied)),
            )
        return result

    # ------------------------- Loans ------------------------- #
    def update_borrowed_books(self, name: str, book_key: BookKey, op) -> None:
        """Add or remove ``book_key`` from a user's loans. Repeats are no-ops."""
        op = BorrowOp(op)
        user = self.users.get(name)
        if user is None:
            return
        if op is BorrowOp.ADD:
            if book_key not in user.borrowed_books:
                user.borrowed_books.append(book_key)
        elif book_key in user.borrowed_books:
            user.borrowed_books.remove(book_key)

    def has_borrowed(self, name: str, book_key: BookKey) -> bool:
        user = self.users.get(name)
        return user is not None and book_key in user.borrowed_books

    def get_borrowed_books(self, name: str) -> List[BookKey]:
        user = self.users.get(name)
        return list(user.borrowed_books) if user else []

    def get_borrowing_stats(self, name: str) -> Dict[str, int]:
        # Loan history is not kept, so both figures count current loans
        count = len(self.get_borrowed_books(name))
        return {"total_borrowed": count, "currently_borrowed": count}

    # ------------------------- Lookups ------------------------- #
    def get_user(self, name: str) -> Optional[User]:
        return self.users.get(name)

    def user_exists(self, name: str) -> bool:
        return name in self.users

    def list_users(self) -> List[Dict[str, Any]]:
        return [
            {"name": user.name, "role": user.role.value, "borrowed_books_count": len(user.borrowed_books)}
            for user in self.users.values()
        ]

    def total_users(self) -> int:
        return len(self.users)

    def get_role_stats(self) -> Dict[str, int]:
        admins = sum(1 for user in self.users.values() if user.role is Role.ADMIN)
        regular = sum(1 for user in self.users.values() if user.role is Role.USER)
        return {"admin": admins, "user": regular, "total": len(self.users)}
