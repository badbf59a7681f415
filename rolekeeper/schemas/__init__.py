"""Pydantic request/response schemas."""

from rolekeeper.schemas.auth import Actor, SignInRequest, SignInResponse
from rolekeeper.schemas.base import Envelope, StrictPayload
from rolekeeper.schemas.health import HealthResponse
from rolekeeper.schemas.roles import RolePayload, RoleView
from rolekeeper.schemas.users import (
    RegisteredUser,
    UserRegistration,
    UserRoleView,
    UserUpdate,
    UserView,
)

__all__ = [
    "Actor",
    "Envelope",
    "HealthResponse",
    "RegisteredUser",
    "RolePayload",
    "RoleView",
    "SignInRequest",
    "SignInResponse",
    "StrictPayload",
    "UserRegistration",
    "UserRoleView",
    "UserUpdate",
    "UserView",
]
