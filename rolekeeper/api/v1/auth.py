"""Sign-in: exchange email and password for a JWT access token."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body

from rolekeeper.api.v1.deps import SettingsDep, UsersDep
from rolekeeper.core.errors import Unauthorized
from rolekeeper.core.security import create_access_token, verify_password
from rolekeeper.schemas.auth import SignInRequest, SignInResponse
from rolekeeper.schemas.base import Envelope

logger = logging.getLogger(__name__)
router = APIRouter()

INVALID_SIGNIN = "Invalid email or password."


@router.post("/signin", response_model=Envelope[SignInResponse])
def signin(
    body: Annotated[dict[str, Any], Body()],
    users: UsersDep,
    settings: SettingsDep,
) -> Envelope[SignInResponse]:
    """
    Authenticate with email and password; returns a JWT access token.
    Include the token in the Authorization header as: Bearer <token>
    """
    credentials = SignInRequest.parse(body)
    user = users.get_by_email(credentials.email)
    if user is None or not verify_password(credentials.password, user.get("password", "")):
        logger.warning("Rejected sign-in attempt")
        raise Unauthorized(INVALID_SIGNIN)

    token = create_access_token(
        user_id=user["id"],
        email=user["email"],
        role=user.get("role", settings.DEFAULT_ROLE),
        settings=settings,
    )
    return Envelope(data=SignInResponse(id=user["id"], email=user["email"], token=token))
