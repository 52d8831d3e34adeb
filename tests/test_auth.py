import pytest

from lms.auth import Authorizer, BookAction, PERMISSIONS, Resource, UserAction
from lms.result import DenialReason, Status
from lms.user import Role
from lms.user_store import UserStore

CREDENTIALS = {Role.ADMIN: ("Alice", "password1"), Role.USER: ("Bob", "password2")}


@pytest.fixture
def store():
    store = UserStore()
    store.register("admin", "Alice", "password1")
    store.register("user", "Bob", "password2")
    return store


@pytest.fixture
def auth(store):
    return Authorizer(store)


@pytest.mark.parametrize("resource, action", list(PERMISSIONS))
def test_anonymous_is_always_asked_to_login(auth, resource, action):
    result = auth.check(resource, action)
    assert not result.authorized
    assert result.reason == DenialReason.NOT_LOGGED_IN
    assert result.message == "Please login first."


@pytest.mark.parametrize("resource, action", list(PERMISSIONS))
@pytest.mark.parametrize("role", [Role.ADMIN, Role.USER])
def test_matrix_is_enforced_for_every_role(store, auth, resource, action, role):
    store.login(*CREDENTIALS[role])
    required = PERMISSIONS[(resource, action)]
    result = auth.check(resource, action)
    if required is None or required is role:
        assert result.authorized
        assert result.user.role is role
    else:
        assert not result.authorized
        assert result.reason == DenialReason.WRONG_ROLE


def test_denial_messages(store, auth):
    store.login("Bob", "password2")
    assert auth.check(Resource.BOOK, BookAction.ADD).message == "Permission denied. Admin role required."
    store.login("Alice", "password1")
    assert auth.check(Resource.BOOK, BookAction.BORROW).message == (
        "Permission denied. Only users can perform this action."
    )


def test_actions_accept_plain_strings(store, auth):
    store.login("Bob", "password2")
    assert auth.check("book", "borrow").authorized
    assert not auth.check("book", "delete").authorized


def test_regular_user_may_only_view_own_profile(store, auth):
    store.login("Bob", "password2")
    assert auth.check(Resource.USER, UserAction.VIEW_PROFILE, {"target_user": "Bob"}).authorized
    denied = auth.check(Resource.USER, UserAction.VIEW_PROFILE, {"target_user": "Alice"})
    assert denied.reason == DenialReason.NOT_OWN_PROFILE
    assert denied.message == "Permission denied. Can only view your own profile."


def test_admin_may_view_any_profile(store, auth):
    store.login("Alice", "password1")
    assert auth.check(Resource.USER, UserAction.VIEW_PROFILE, {"target_user": "Bob"}).authorized


def test_unknown_action_and_resource(store, auth):
    store.login("Alice", "password1")
    unknown = auth.check(Resource.BOOK, "burn")
    assert unknown.reason == DenialReason.UNKNOWN_ACTION
    assert unknown.denial.status == Status.UNKNOWN_ACTION
    assert unknown.message == "Unknown book action"
    # actions are scoped to their resource
    assert auth.check(Resource.USER, BookAction.LIST).reason == DenialReason.UNKNOWN_ACTION
    assert auth.check("shelf", "list").reason == DenialReason.UNKNOWN_RESOURCE


def test_role_helpers(store, auth):
    assert not auth.is_admin() and not auth.is_regular()
    store.login("Alice", "password1")
    assert auth.is_admin()
    store.login("Bob", "password2")
    assert auth.is_regular()
    assert auth.current_user().name == "Bob"
