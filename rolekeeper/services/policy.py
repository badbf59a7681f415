"""Authorization policy: a single default-deny table of action -> permitted actor roles.

Every sensitive read and every mutation consults ``authorize`` before touching
storage, so a denied caller never learns whether the target exists.
"""

import logging
from enum import Enum

from rolekeeper.core.errors import Forbidden
from rolekeeper.schemas.auth import Actor

logger = logging.getLogger(__name__)

SUPERADMIN = "superadmin"
ADMIN = "admin"

# Privilege tiers: lower number = more privilege. Unlisted roles share the bottom tier.
ROLE_TIERS: dict[str, int] = {SUPERADMIN: 0, ADMIN: 1}
BOTTOM_TIER = 2
TOP_TIER = 0


class Action(str, Enum):
    LIST_ROLES = "list_roles"
    GET_ROLE = "get_role"
    CREATE_ROLE = "create_role"
    UPDATE_ROLE = "update_role"
    DELETE_ROLE = "delete_role"
    GET_USER_ROLE = "get_user_role"
    ASSIGN_ROLE = "assign_role"
    DELETE_USER = "delete_user"


POLICY: dict[Action, frozenset[str]] = {
    Action.LIST_ROLES: frozenset({SUPERADMIN, ADMIN}),
    Action.GET_ROLE: frozenset({SUPERADMIN, ADMIN}),
    Action.CREATE_ROLE: frozenset({SUPERADMIN}),
    Action.UPDATE_ROLE: frozenset({SUPERADMIN}),
    Action.DELETE_ROLE: frozenset({SUPERADMIN}),
    Action.GET_USER_ROLE: frozenset({SUPERADMIN, ADMIN}),
    Action.ASSIGN_ROLE: frozenset({SUPERADMIN}),
    Action.DELETE_USER: frozenset({SUPERADMIN}),
}


def is_allowed(role: str, action: Action) -> bool:
    """True if ``role`` is in the permitted set for ``action``; unknown actions deny."""
    return role in POLICY.get(action, frozenset())


def authorize(actor: Actor, action: Action) -> Actor:
    """Raise Forbidden unless the actor's role may perform the action."""
    if not is_allowed(actor.role, action):
        logger.warning(
            "Denied %s for user %s with role %r", action.value, actor.id, actor.role
        )
        raise Forbidden("Forbidden")
    return actor


def tier_of(role: str) -> int:
    return ROLE_TIERS.get(role, BOTTOM_TIER)


def can_grant(actor_role: str, role: str) -> bool:
    """
    Whether an actor may hand ``role`` to someone.

    The top tier may grant any role. Anyone else must hold ASSIGN_ROLE
    themselves and may only grant roles strictly below their own tier.
    """
    actor_tier = tier_of(actor_role)
    if actor_tier == TOP_TIER:
        return True
    if not is_allowed(actor_role, Action.ASSIGN_ROLE):
        return False
    return tier_of(role) > actor_tier
