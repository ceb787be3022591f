"""
Authorization policy.

One table maps every protected action to the rule that guards it, and
``authorize`` is a pure function of (identity, action, owner). Routes never
compare roles themselves; they call ``enforce`` or depend on
``require(action)``.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Optional

from storefront.core.errors import ErrorKind, error_for
from storefront.core.security import Identity

logger = logging.getLogger(__name__)


class Rule(str, enum.Enum):
    public = "public"
    authenticated = "authenticated"
    owner_or_admin = "owner_or_admin"
    admin = "admin"


class Action(str, enum.Enum):
    # catalog
    read_catalog = "read_catalog"
    manage_categories = "manage_categories"
    manage_products = "manage_products"
    # accounts
    read_own_identity = "read_own_identity"
    read_profile = "read_profile"
    update_profile = "update_profile"
    list_users = "list_users"
    change_role = "change_role"
    delete_user = "delete_user"
    # cart
    create_cart = "create_cart"
    read_cart = "read_cart"
    modify_cart = "modify_cart"
    add_to_own_cart = "add_to_own_cart"
    delete_cart = "delete_cart"
    # orders
    create_order = "create_order"
    checkout = "checkout"
    read_order = "read_order"
    list_all_orders = "list_all_orders"
    delete_order = "delete_order"
    # payments
    create_payment = "create_payment"
    read_payment = "read_payment"
    # admin
    read_dashboard = "read_dashboard"


RULES = {
    Action.read_catalog: Rule.public,
    Action.manage_categories: Rule.admin,
    Action.manage_products: Rule.admin,
    Action.read_own_identity: Rule.authenticated,
    Action.read_profile: Rule.owner_or_admin,
    Action.update_profile: Rule.owner_or_admin,
    Action.list_users: Rule.admin,
    Action.change_role: Rule.admin,
    Action.delete_user: Rule.admin,
    Action.create_cart: Rule.owner_or_admin,
    Action.read_cart: Rule.owner_or_admin,
    Action.modify_cart: Rule.owner_or_admin,
    Action.add_to_own_cart: Rule.authenticated,
    Action.delete_cart: Rule.admin,
    Action.create_order: Rule.owner_or_admin,
    Action.checkout: Rule.authenticated,
    Action.read_order: Rule.owner_or_admin,
    Action.list_all_orders: Rule.admin,
    Action.delete_order: Rule.admin,
    Action.create_payment: Rule.owner_or_admin,
    Action.read_payment: Rule.owner_or_admin,
    Action.read_dashboard: Rule.admin,
}


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: Optional[str] = None
    kind: Optional[ErrorKind] = None


ALLOW = Decision(allowed=True)


def authorize(identity: Optional[Identity], action: Action, owner_id: Optional[int] = None) -> Decision:
    rule = RULES[action]

    if rule == Rule.public:
        return ALLOW

    if identity is None:
        return Decision(False, "Authentication required.", ErrorKind.authentication)

    if rule == Rule.authenticated:
        return ALLOW

    is_admin = identity.is_admin

    if rule == Rule.admin:
        if is_admin:
            return ALLOW
        return Decision(False, "Access denied: Insufficient privileges.", ErrorKind.authorization)

    # owner_or_admin
    if is_admin:
        return ALLOW
    if owner_id is not None and int(owner_id) == identity.id:
        return ALLOW
    return Decision(
        False,
        "Access denied: You can only access your own resources unless you are an admin.",
        ErrorKind.authorization,
    )


def enforce(identity: Optional[Identity], action: Action, owner_id: Optional[int] = None) -> None:
    decision = authorize(identity, action, owner_id)
    if decision.allowed:
        return
    if identity is not None:
        logger.warning(
            "Access denied for user %s (role %s) on %s", identity.id, identity.role, action.value
        )
    raise error_for(decision.kind, decision.reason)
