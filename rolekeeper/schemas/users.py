"""Schemas for user registration, update and user views."""

from pydantic import BaseModel, ConfigDict, Field

from rolekeeper.schemas.base import StoredRecord, StrictPayload

NAME_MAX_LENGTH = 255
EMAIL_MAX_LENGTH = 255
PASSWORD_MAX_LENGTH = 128


class UserRegistration(StrictPayload):
    """Body of POST /users: exactly name, email and password."""

    name: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH)
    email: str = Field(..., min_length=1, max_length=EMAIL_MAX_LENGTH)
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LENGTH)


class UserUpdate(UserRegistration):
    """Body of PUT /users/{id}: the same three fields, all required."""


class RegisteredUser(BaseModel):
    """Echo of a successful registration (no id, no password)."""

    email: str
    name: str


class UserView(BaseModel):
    """Stored user without the password field."""

    model_config = ConfigDict(extra="ignore")

    id: int
    name: str
    email: str
    role: str


class UserRoleView(BaseModel):
    """Role currently held by a user."""

    id: int
    role: str


class StoredUser(StoredRecord):
    name: str
    email: str
    password: str
    role: str
