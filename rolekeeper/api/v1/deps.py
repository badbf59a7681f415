"""Shared FastAPI dependencies: storage, directories, current actor and policy guards."""

from collections.abc import Callable
from typing import Annotated

from fastapi import Depends, Header

from rolekeeper.core.config import Settings, get_settings
from rolekeeper.core.errors import NotFound, Unauthorized
from rolekeeper.core.security import verify_bearer
from rolekeeper.core.store import RecordStore, get_record_store
from rolekeeper.schemas.auth import Actor
from rolekeeper.services.policy import Action, authorize
from rolekeeper.services.roles import RoleDirectory
from rolekeeper.services.users import UserDirectory


SettingsDep = Annotated[Settings, Depends(get_settings)]


def get_store(settings: SettingsDep) -> RecordStore:
    return get_record_store(settings.DATA_DIR)


def get_user_directory(
    store: Annotated[RecordStore, Depends(get_store)],
    settings: SettingsDep,
) -> UserDirectory:
    return UserDirectory(store, settings)


def get_role_directory(
    store: Annotated[RecordStore, Depends(get_store)],
    settings: SettingsDep,
) -> RoleDirectory:
    return RoleDirectory(store, settings)


UsersDep = Annotated[UserDirectory, Depends(get_user_directory)]
RolesDep = Annotated[RoleDirectory, Depends(get_role_directory)]


def get_current_actor(
    settings: SettingsDep,
    users: UsersDep,
    authorization: Annotated[str | None, Header()] = None,
) -> Actor:
    """
    Dependency: require a valid Bearer JWT and return the actor it carries.

    With RESOLVE_ROLE_PER_REQUEST the role is replaced by the one currently
    stored for the user; otherwise the role at issuance is trusted.
    """
    actor = verify_bearer(authorization, settings)
    if not settings.RESOLVE_ROLE_PER_REQUEST:
        return actor
    try:
        user = users.get_by_id(actor.id)
    except NotFound as e:
        raise Unauthorized("User not found") from e
    return actor.model_copy(update={"role": user.get("role", "")})


ActorDep = Annotated[Actor, Depends(get_current_actor)]


def require(action: Action) -> Callable[[Actor], Actor]:
    """Dependency factory: authenticated actor whose role the policy permits for ``action``."""

    def _require(actor: ActorDep) -> Actor:
        return authorize(actor, action)

    _require.__name__ = f"require_{action.value}"
    return _require
