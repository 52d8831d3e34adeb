import logging

import pytest

from lms.result import DenialReason, Status
from lms.user import Role, Session
from lms.user_store import BorrowOp, UserStore


@pytest.fixture
def store():
    store = UserStore()
    store.register("admin", "Alice", "password1")
    store.register("user", "Bob", "password2")
    return store


def test_register_success_messages():
    store = UserStore()
    assert store.register("admin", "Alice", "password1").message == "Admin Alice successfully registered."
    result = store.register("user", "Bob", "password2")
    assert result.message == "User Bob successfully registered."
    assert result.status == Status.REGISTERED
    assert result.data == {"name": "Bob", "role": "user"}


def test_register_twice_is_rejected(store):
    result = store.register("user", "Alice", "other")
    assert result.status == Status.USER_ALREADY_EXISTS
    # the message names the role that was requested
    assert result.message == "User Alice already exists."
    assert store.get_user("Alice").role is Role.ADMIN


def test_register_rejects_bad_input():
    store = UserStore()
    assert store.register("root", "Eve", "pw").message == 'Invalid role. Role must be "admin" or "user".'
    assert store.register("user", "", "pw").message == "Invalid parameters provided."
    assert store.total_users() == 0


def test_login_outcomes(store):
    assert store.login("Nobody", "x").message == "User Nobody does not exist."
    assert store.login("Alice", "wrong").message == "Incorrect password."
    assert store.login("", "x").status == Status.INVALID_PARAMETERS
    assert store.get_current_user() is None

    result = store.login("Alice", "password1")
    assert result.message == "Admin Alice successfully logged in."
    assert store.get_current_user().name == "Alice"


def test_login_replaces_existing_session(store):
    store.login("Alice", "password1")
    result = store.login("Bob", "password2")
    assert result.ok
    current = store.get_current_user()
    assert current.name == "Bob"
    assert current.role is Role.USER


def test_logout(store):
    assert store.logout().message == "No user is currently logged in."
    store.login("Bob", "password2")
    assert store.logout().message == "Successfully logged out."
    assert store.get_current_user() is None


def test_sessions_are_independent(store):
    other = Session()
    store.login("Alice", "password1")
    store.login("Bob", "password2", session=other)
    assert store.get_current_user().name == "Alice"
    assert store.get_current_user(other).name == "Bob"
    store.logout(other)
    assert store.get_current_user().name == "Alice"


def test_guards_report_reason(store):
    result = store.check_login()
    assert not result.authorized
    assert result.reason == DenialReason.NOT_LOGGED_IN
    assert result.message == "Please login first."

    store.login("Bob", "password2")
    assert store.check_login().authorized
    assert store.check_user_permission().authorized
    denied = store.check_admin_permission()
    assert denied.reason == DenialReason.WRONG_ROLE
    assert denied.message == "Permission denied. Admin role required."

    store.login("Alice", "password1")
    denied = store.check_user_permission()
    assert denied.message == "Permission denied. Only users can perform this action."


def test_update_borrowed_books_is_idempotent(store):
    key = ("Clean Code", "Robert C. Martin")
    store.update_borrowed_books("Bob", key, BorrowOp.ADD)
    store.update_borrowed_books("Bob", key, BorrowOp.ADD)
    assert store.get_borrowed_books("Bob") == [key]
    assert store.has_borrowed("Bob", key)

    store.update_borrowed_books("Bob", key, "remove")
    store.update_borrowed_books("Bob", key, "remove")
    assert store.get_borrowed_books("Bob") == []
    assert not store.has_borrowed("Bob", key)


def test_update_borrowed_books_ignores_unknown_user(store):
    store.update_borrowed_books("Ghost", ("A", "B"), BorrowOp.ADD)
    assert not store.has_borrowed("Ghost", ("A", "B"))


def test_update_borrowed_books_rejects_unknown_op(store):
    with pytest.raises(ValueError):
        store.update_borrowed_books("Bob", ("A", "B"), "lend")


def test_user_listing_and_stats(store):
    store.update_borrowed_books("Bob", ("A", "B"), BorrowOp.ADD)
    assert store.list_users() == [
        {"name": "Alice", "role": "admin", "borrowed_books_count": 0},
        {"name": "Bob", "role": "user", "borrowed_books_count": 1},
    ]
    assert store.get_role_stats() == {"admin": 1, "user": 1, "total": 2}
    assert store.get_borrowing_stats("Bob") == {"total_borrowed": 1, "currently_borrowed": 1}
    assert store.get_borrowing_stats("Ghost") == {"total_borrowed": 0, "currently_borrowed": 0}


def test_expected_failures_are_not_logged_as_warnings(store, caplog):
    with caplog.at_level(logging.WARNING):
        store.login("Alice", "wrong")
        store.register("user", "Alice", "other")
    assert caplog.records == []
