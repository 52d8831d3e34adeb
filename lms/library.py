import logging
import threading
from datetime import datetime, timezone
from typing import Optional

from lms.auth import Authorizer, BookAction, Resource, UserAction
from lms.book_store import BookStore
from lms.config import settings
from lms.messages import MessageCatalog
from lms.result import Result, Status
from lms.user import Session, SessionUser
from lms.user_store import BorrowOp, UserStore

logger = logging.getLogger(__name__)


class Library:
    """Front door for the shell: every command maps to one method here.

    Methods return a :class:`~lms.result.Result` and never raise for expected
    failures. Each accepts an optional ``session``; without one the user
    store's default session is used.
    """

    def __init__(self, user_store: Optional[UserStore] = None, book_store: Optional[BookStore] = None,
                 language: Optional[str] = None) -> None:
        self.messages = MessageCatalog(language)
        self.user_store = user_store or UserStore(self.messages)
        self.book_store = book_store or BookStore(self.messages)
        self.authorizer = Authorizer(self.user_store)
        # Held by every write to the catalog or the loan lists
        self._lock = threading.RLock()

    # ------------------------- Accounts ------------------------- #
    def register(self, role, name, password) -> Result:
        return self.user_store.register(role, name, password)

    def login(self, name, password, session: Optional[Session] = None) -> Result:
        return self.user_store.login(name, password, session)

    def logout(self, session: Optional[Session] = None) -> Result:
        return self.user_store.logout(session)

    def get_current_user(self, session: Optional[Session] = None) -> Optional[SessionUser]:
        return self.authorizer.current_user(session)

    # ------------------------- Catalog ------------------------- #
    def list_books(self, session: Optional[Session] = None) -> Result:
        auth = self.authorizer.check(Resource.BOOK, BookAction.LIST, session=session)
        if not auth.authorized:
            return auth.denial
        return self.book_store.list_books()

    def search_book(self, name, author, session: Optional[Session] = None) -> Result:
        auth = self.authorizer.check(Resource.BOOK, BookAction.SEARCH, session=session)
        if not auth.authorized:
            return auth.denial
        return self.book_store.search_book(name, author)

    def add_book(self, name, author, amount, session: Optional[Session] = None) -> Result:
        auth = self.authorizer.check(Resource.BOOK, BookAction.ADD, session=session)
        if not auth.authorized:
            return auth.denial
        with self._lock:
            return self.book_store.add_book(name, author, amount)

    def delete_book(self, name, author, session: Optional[Session] = None) -> Result:
        auth = self.authorizer.check(Resource.BOOK, BookAction.DELETE, session=session)
        if not auth.authorized:
            return auth.denial
        # the on-loan check and the removal must see the same borrowers
        with self._lock:
            return self.book_store.delete_book(name, author)

    # ------------------------- Loans ------------------------- #
    def borrow_book(self, name, author, session: Optional[Session] = None) -> Result:
        auth = self.authorizer.check(Resource.BOOK, BookAction.BORROW, session=session)
        if not auth.authorized:
            return auth.denial
        user = auth.user.name
        key = self.book_store.get_book_key(name, author)

        with self._lock:
            # One loan per title per user, whatever the shelf holds
            if self.user_store.has_borrowed(user, key):
                return Result(
                    Status.ALREADY_BORROWED,
                    self.messages.get(Status.ALREADY_BORROWED, name=name, author=author),
                )

            result = self.book_store.borrow(name, author, user)
            if result.ok:
                try:
                    self.user_store.update_borrowed_books(user, key, BorrowOp.ADD)
                except Exception:
                    logger.error(f"Rolling back borrow of {key} by {user}")
                    self.book_store.undo_borrow(name, author, user)
                    raise
            return result

    def return_book(self, name, author, session: Optional[Session] = None) -> Result:
        auth = self.authorizer.check(Resource.BOOK, BookAction.RETURN, session=session)
        if not auth.authorized:
            return auth.denial
        user = auth.user.name
        key = self.book_store.get_book_key(name, author)

        with self._lock:
            # The user's own loan list decides whether there is anything to return
            if not self.user_store.has_borrowed(user, key):
                return Result(
                    Status.NOT_BORROWED,
                    self.messages.get(Status.NOT_BORROWED, name=name, author=author),
                )

            result = self.book_store.return_book(name, author, user)
            if result.ok:
                try:
                    self.user_store.update_borrowed_books(user, key, BorrowOp.REMOVE)
                except Exception:
                    logger.error(f"Rolling back return of {key} by {user}")
                    self.book_store.undo_return(name, author, user)
                    raise
            return result

    # ------------------------- Users ------------------------- #
    def view_profile(self, target: Optional[str] = None, session: Optional[Session] = None) -> Result:
        """Show a user's role and loans. Defaults to the logged-in user."""
        current = self.get_current_user(session)
        target = target or (current.name if current else None)
        auth = self.authorizer.check(Resource.USER, UserAction.VIEW_PROFILE, {"target_user": target}, session)
        if not auth.authorized:
            return auth.denial

        user = self.user_store.get_user(target)
        if user is None:
            return Result(Status.USER_NOT_FOUND, self.messages.get(Status.USER_NOT_FOUND, name=target))

        return Result(
            Status.PROFILE,
            self.messages.get(Status.PROFILE, name=target),
            {
                "name": user.name,
                "role": user.role.value,
                "borrowed_books": [list(key) for key in self.user_store.get_borrowed_books(target)],
                "stats": self.user_store.get_borrowing_stats(target),
            },
        )

    def list_users(self, session: Optional[Session] = None) -> Result:
        auth = self.authorizer.check(Resource.USER, UserAction.MANAGE, session=session)
        if not auth.authorized:
            return auth.denial
        return Result(Status.USER_LIST, self.messages.get(Status.USER_LIST), self.user_store.list_users())

    # ------------------------- System ------------------------- #
    def get_system_stats(self, session: Optional[Session] = None) -> Result:
        auth = self.user_store.check_login(session)
        if not auth.authorized:
            return auth.denial
        return Result(
            Status.STATS,
            self.messages.get(Status.STATS),
            {
                "total_books": self.book_store.total_books(),
                "total_users": self.user_store.total_users(),
                "current_user": auth.user.name,
                "current_user_role": auth.user.role.value,
                "user_stats": self.user_store.get_role_stats(),
            },
        )

    def get_system_config(self, session: Optional[Session] = None) -> Result:
        auth = self.user_store.check_admin_permission(session)
        if not auth.authorized:
            return auth.denial
        return Result(
            Status.CONFIG,
            self.messages.get(Status.CONFIG),
            {
                "app_name": settings.app_name,
                "version": settings.app_version,
                "environment": settings.environment,
                "language": self.messages.language,
                "features": {
                    "user_registration": True,
                    "book_management": True,
                    "borrowing_system": True,
                    "user_profiles": True,
                },
            },
        )

    def health_check(self) -> dict:
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "services": {
                "user_store": "active" if self.user_store is not None else "inactive",
                "book_store": "active" if self.book_store is not None else "inactive",
                "authorizer": "active" if self.authorizer is not None else "inactive",
            },
        }
