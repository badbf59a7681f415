"""Role endpoints: role CRUD, a user's current role, and role assignment.

Each route resolves its policy guard as a dependency, so authorization runs
before the body is read and before any record is looked up.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, status

from rolekeeper.api.v1.deps import RolesDep, UsersDep, require
from rolekeeper.schemas.auth import Actor
from rolekeeper.schemas.base import Envelope
from rolekeeper.schemas.roles import RoleView
from rolekeeper.schemas.users import UserRoleView
from rolekeeper.services.assignment import assign_role
from rolekeeper.services.policy import Action

router = APIRouter()


ListRolesActor = Annotated[Actor, Depends(require(Action.LIST_ROLES))]
GetRoleActor = Annotated[Actor, Depends(require(Action.GET_ROLE))]
CreateRoleActor = Annotated[Actor, Depends(require(Action.CREATE_ROLE))]
UpdateRoleActor = Annotated[Actor, Depends(require(Action.UPDATE_ROLE))]
DeleteRoleActor = Annotated[Actor, Depends(require(Action.DELETE_ROLE))]
GetUserRoleActor = Annotated[Actor, Depends(require(Action.GET_USER_ROLE))]
AssignRoleActor = Annotated[Actor, Depends(require(Action.ASSIGN_ROLE))]


@router.get("", response_model=Envelope[list[RoleView]])
def list_roles(
    _actor: ListRolesActor,
    roles: RolesDep,
) -> Envelope[list[RoleView]]:
    return Envelope(data=[RoleView.model_validate(r) for r in roles.list_roles()])


@router.get("/user/{user_id}", response_model=Envelope[UserRoleView])
def get_user_role(
    user_id: int,
    _actor: GetUserRoleActor,
    users: UsersDep,
) -> Envelope[UserRoleView]:
    """Return the role currently stored for a user."""
    user = users.get_by_id(user_id)
    return Envelope(data=UserRoleView(id=user["id"], role=user["role"]))


@router.post("/assign/{user_id}", response_model=Envelope[UserRoleView])
def post_assign_role(
    user_id: int,
    body: Annotated[dict[str, Any], Body()],
    actor: AssignRoleActor,
    users: UsersDep,
    roles: RolesDep,
) -> Envelope[UserRoleView]:
    """
    Assign an existing role to an existing user. Body must be exactly {"role": "<name>"}.

    403 if the caller may not assign roles (or may not grant this one), 400 for a
    malformed body, 404 if the user or role does not exist.
    """
    updated = assign_role(actor, user_id, body, users, roles)
    return Envelope(data=UserRoleView(id=updated["id"], role=updated["role"]))


@router.get("/{role_id}", response_model=Envelope[RoleView])
def get_role(
    role_id: int,
    _actor: GetRoleActor,
    roles: RolesDep,
) -> Envelope[RoleView]:
    return Envelope(data=RoleView.model_validate(roles.get_by_id(role_id)))


@router.post("", response_model=Envelope[RoleView], status_code=status.HTTP_201_CREATED)
def create_role(
    body: Annotated[dict[str, Any], Body()],
    _actor: CreateRoleActor,
    roles: RolesDep,
) -> Envelope[RoleView]:
    return Envelope(data=RoleView.model_validate(roles.create(body)))


@router.put("/{role_id}", response_model=Envelope[RoleView])
def update_role(
    role_id: int,
    body: Annotated[dict[str, Any], Body()],
    _actor: UpdateRoleActor,
    roles: RolesDep,
    users: UsersDep,
) -> Envelope[RoleView]:
    """Rename a role; 409 if the name is taken or users still hold the old name."""
    updated = roles.update(role_id, body, holders=users.count_with_role)
    return Envelope(data=RoleView.model_validate(updated))


@router.delete("/{role_id}", response_model=Envelope[None])
def delete_role(
    role_id: int,
    _actor: DeleteRoleActor,
    roles: RolesDep,
    users: UsersDep,
) -> Envelope[None]:
    """Delete a role; 409 while any user still holds it."""
    roles.delete(role_id, holders=users.count_with_role)
    return Envelope()
