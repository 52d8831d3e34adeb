"""Permission checks for catalog and account operations.

The :data:`PERMISSIONS` table maps each (resource, action) pair to the role
allowed to perform it; ``None`` means any logged-in user. Viewing a profile is
the one rule that also depends on the target: regular users may only view
their own.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, Optional, Tuple, Type

from lms.result import AuthResult, DenialReason, Result, Status
from lms.user import Role, Session, SessionUser
from lms.user_store import UserStore

logger = logging.getLogger(__name__)


class Resource(str, Enum):
    BOOK = "book"
    USER = "user"


class BookAction(str, Enum):
    LIST = "list"
    SEARCH = "search"
    ADD = "add"
    DELETE = "delete"
    BORROW = "borrow"
    RETURN = "return"


class UserAction(str, Enum):
    VIEW_PROFILE = "view_profile"
    MANAGE = "manage"


ACTIONS: Dict[Resource, Type[Enum]] = {
    Resource.BOOK: BookAction,
    Resource.USER: UserAction,
}

PERMISSIONS: Dict[Tuple[Resource, Enum], Optional[Role]] = {
    (Resource.BOOK, BookAction.LIST): None,
    (Resource.BOOK, BookAction.SEARCH): None,
    (Resource.BOOK, BookAction.ADD): Role.ADMIN,
    (Resource.BOOK, BookAction.DELETE): Role.ADMIN,
    (Resource.BOOK, BookAction.BORROW): Role.USER,
    (Resource.BOOK, BookAction.RETURN): Role.USER,
    (Resource.USER, UserAction.VIEW_PROFILE): None,
    (Resource.USER, UserAction.MANAGE): Role.ADMIN,
}

_ROLE_DENIALS = {
    Role.ADMIN: Status.ADMIN_REQUIRED,
    Role.USER: Status.USER_REQUIRED,
}


class Authorizer:
    """Gates operations on the session held by a :class:`UserStore`."""

    def __init__(self, user_store: UserStore) -> None:
        self.user_store = user_store
        self.messages = user_store.messages

    def check(self, resource, action, context: Optional[dict] = None,
              session: Optional[Session] = None) -> AuthResult:
        login = self.user_store.check_login(session)
        if not login.authorized:
            return login
        user = login.user

        try:
            resource = Resource(resource)
        except ValueError:
            return self._deny(DenialReason.UNKNOWN_RESOURCE, Status.UNKNOWN_RESOURCE)
        try:
            action = ACTIONS[resource](action)
        except ValueError:
            return self._deny(DenialReason.UNKNOWN_ACTION, Status.UNKNOWN_ACTION, resource=resource.value)

        required = PERMISSIONS[(resource, action)]
        if required is not None and user.role is not required:
            logger.info(f"{user.name} ({user.role.value}) denied {resource.value}:{action.value}")
            return self._deny(DenialReason.WRONG_ROLE, _ROLE_DENIALS[required])

        if action is UserAction.VIEW_PROFILE and not user.is_admin:
            target = (context or {}).get("target_user")
            if target and target != user.name:
                logger.info(f"{user.name} denied profile of {target}")
                return self._deny(DenialReason.NOT_OWN_PROFILE, Status.NOT_OWN_PROFILE)

        return AuthResult(authorized=True, user=user)

    def current_user(self, session: Optional[Session] = None) -> Optional[SessionUser]:
        return self.user_store.get_current_user(session)

    def is_admin(self, session: Optional[Session] = None) -> bool:
        user = self.current_user(session)
        return user is not None and user.is_admin

    def is_regular(self, session: Optional[Session] = None) -> bool:
        user = self.current_user(session)
        return user is not None and user.is_regular

    def _deny(self, reason: DenialReason, status: Status, **kwargs) -> AuthResult:
        return AuthResult(
            authorized=False,
            reason=reason,
            denial=Result(status, self.messages.get(status, **kwargs)),
        )
