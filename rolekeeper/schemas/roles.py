"""Schemas for role records and role mutations."""

from pydantic import BaseModel, Field

from rolekeeper.schemas.base import StoredRecord, StrictPayload

ROLE_NAME_MAX_LENGTH = 64


class RolePayload(StrictPayload):
    """Body of POST /roles, PUT /roles/{id} and POST /roles/assign/{userId}: exactly ``role``."""

    role: str = Field(..., min_length=1, max_length=ROLE_NAME_MAX_LENGTH)


class RoleView(BaseModel):
    id: int
    role: str


class StoredRole(StoredRecord):
    role: str
