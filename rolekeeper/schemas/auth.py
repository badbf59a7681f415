"""Request/response schemas for auth endpoints."""

from pydantic import BaseModel, Field

from rolekeeper.schemas.base import StrictPayload


class SignInRequest(StrictPayload):
    """Credentials for sign-in."""

    email: str = Field(..., min_length=1, max_length=255, description="Email")
    password: str = Field(..., min_length=1, max_length=128, description="Password")


class SignInResponse(BaseModel):
    """Identity and JWT access token returned after successful sign-in."""

    id: int
    email: str
    token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")


class Actor(BaseModel):
    """Identity making the current request, as carried by its verified token."""

    id: int
    email: str
    role: str
