"""User endpoints: registration, lookup, self-update and administrative delete."""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, status

from rolekeeper.api.v1.deps import ActorDep, UsersDep, require
from rolekeeper.core.errors import Forbidden
from rolekeeper.schemas.auth import Actor
from rolekeeper.schemas.base import Envelope
from rolekeeper.schemas.users import RegisteredUser, UserView
from rolekeeper.services.policy import Action

router = APIRouter()


@router.get("", response_model=Envelope[list[UserView]])
def list_users(_actor: ActorDep, users: UsersDep) -> Envelope[list[UserView]]:
    """List all users (any authenticated caller). Passwords are never returned."""
    return Envelope(data=[UserView.model_validate(u) for u in users.list_users()])


@router.post("", response_model=Envelope[RegisteredUser], status_code=status.HTTP_201_CREATED)
def register_user(
    body: Annotated[dict[str, Any], Body()],
    users: UsersDep,
) -> Envelope[RegisteredUser]:
    """
    Register with exactly name, email and password.

    The new user always gets the default role; id and role cannot be supplied.
    Responds 409 if the email is already registered.
    """
    return Envelope(data=users.register(body))


@router.get("/{user_id}", response_model=Envelope[UserView])
def get_user(user_id: int, _actor: ActorDep, users: UsersDep) -> Envelope[UserView]:
    return Envelope(data=UserView.model_validate(users.get_by_id(user_id)))


@router.put("/{user_id}", response_model=Envelope[UserView])
def update_user(
    user_id: int,
    body: Annotated[dict[str, Any], Body()],
    actor: ActorDep,
    users: UsersDep,
) -> Envelope[UserView]:
    """Replace name, email and password of the caller's own account."""
    if actor.id != user_id:
        raise Forbidden("Users may only update their own account")
    return Envelope(data=UserView.model_validate(users.update(user_id, body)))


@router.delete("/{user_id}", response_model=Envelope[None])
def delete_user(
    user_id: int,
    _actor: Annotated[Actor, Depends(require(Action.DELETE_USER))],
    users: UsersDep,
) -> Envelope[None]:
    users.delete(user_id)
    return Envelope()
