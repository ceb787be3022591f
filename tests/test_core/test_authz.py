import pytest

from storefront.core.authz import RULES, Action, Rule, authorize, enforce
from storefront.core.errors import AuthenticationError, AuthorizationError, ErrorKind
from storefront.core.security import Identity

USER = Identity(id=1, email="user@example.com", role="user")
OTHER = Identity(id=2, email="other@example.com", role="user")
ADMIN = Identity(id=99, email="admin@example.com", role="admin")


def test_every_action_has_a_rule():
    assert set(RULES) == set(Action)


def test_public_actions_need_no_identity():
    assert authorize(None, Action.read_catalog).allowed
    assert authorize(USER, Action.read_catalog).allowed


def test_anonymous_caller_gets_authentication_denial():
    decision = authorize(None, Action.checkout)
    assert not decision.allowed
    assert decision.kind == ErrorKind.authentication


@pytest.mark.parametrize("action", [a for a, rule in RULES.items() if rule == Rule.admin])
def test_admin_actions(action):
    assert authorize(ADMIN, action).allowed
    decision = authorize(USER, action)
    assert not decision.allowed
    assert decision.kind == ErrorKind.authorization
    assert decision.reason == "Access denied: Insufficient privileges."


def test_owner_or_admin():
    assert authorize(USER, Action.read_order, owner_id=USER.id).allowed
    assert authorize(ADMIN, Action.read_order, owner_id=USER.id).allowed

    decision = authorize(OTHER, Action.read_order, owner_id=USER.id)
    assert not decision.allowed
    assert decision.reason.startswith("Access denied: You can only access your own resources")


def test_enforce_raises_by_kind():
    enforce(USER, Action.read_cart, owner_id=USER.id)
    with pytest.raises(AuthenticationError):
        enforce(None, Action.read_cart, owner_id=USER.id)
    with pytest.raises(AuthorizationError):
        enforce(OTHER, Action.read_cart, owner_id=USER.id)
