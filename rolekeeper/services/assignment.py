"""Role assignment: validated, authorized reassignment of a user's role.

Checks run in a fixed order: actor permission, payload shape, existence of the
target user and the desired role, then the escalation guard. The first failure
ends the operation; nothing is written unless every check passes.
"""

import logging
from collections.abc import Mapping
from typing import Any

from rolekeeper.core.errors import Forbidden, NotFound
from rolekeeper.core.store import Record
from rolekeeper.schemas.auth import Actor
from rolekeeper.schemas.roles import RolePayload
from rolekeeper.services.policy import Action, authorize, can_grant
from rolekeeper.services.roles import RoleDirectory
from rolekeeper.services.users import UserDirectory

logger = logging.getLogger(__name__)


def assign_role(
    actor: Actor,
    user_id: int,
    payload: Mapping[str, Any] | RolePayload,
    users: UserDirectory,
    roles: RoleDirectory,
) -> Record:
    """Set ``user_id``'s role to ``payload['role']``; return the updated user record."""
    authorize(actor, Action.ASSIGN_ROLE)
    body = RolePayload.parse(payload)

    users.get_by_id(user_id)
    if roles.get_by_name(body.role) is None:
        raise NotFound(f"Role '{body.role}' not found")

    if not can_grant(actor.role, body.role):
        logger.warning(
            "User %s (%s) may not grant role %r", actor.id, actor.role, body.role
        )
        raise Forbidden(f"Not permitted to assign role '{body.role}'")

    updated = users.set_role(user_id, body.role)
    logger.info(
        "User %s assigned role %r to user %s", actor.id, body.role, user_id
    )
    return updated
