"""Authentication API endpoints."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends

from accounts.api.dependencies import (
    get_auth_service,
    get_bearer_token,
    get_credential_validator,
    get_current_user,
    get_submitted_fields,
    get_user_repository,
)
from accounts.errors import InvalidCredentials
from accounts.models.user import User
from accounts.schemas.auth import (
    ErrorResponse,
    LoginResponse,
    LoginSuccess,
    RegisterResponse,
    RegisterSuccess,
)
from accounts.schemas.user import MessageResponse, UserResponse
from accounts.services.auth import AuthService
from accounts.services.users import UserRepository
from accounts.services.validation import CredentialValidator, ValidationMode

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/register", response_model=RegisterResponse)
async def register(
    fields: Annotated[dict[str, Any], Depends(get_submitted_fields)],
    validator: Annotated[CredentialValidator, Depends(get_credential_validator)],
    users: Annotated[UserRepository, Depends(get_user_repository)],
    auth: Annotated[AuthService, Depends(get_auth_service)],
):
    """Register a new user and issue a token for them."""
    data = validator.validate(fields, ValidationMode.REGISTER)
    # The user and its first token are committed together
    user = users.create(**data, commit=False)
    token = auth.issue_token(user)
    logger.info(f"Registered user {user.id}")

    return RegisterResponse(success=RegisterSuccess(token=token, name=user.name))


@router.post("/login", response_model=LoginResponse, responses={401: {"model": ErrorResponse}})
async def login(
    fields: Annotated[dict[str, Any], Depends(get_submitted_fields)],
    validator: Annotated[CredentialValidator, Depends(get_credential_validator)],
    auth: Annotated[AuthService, Depends(get_auth_service)],
):
    """Login with email and password."""
    credentials = validator.validate(fields, ValidationMode.LOGIN)
    user = auth.attempt(credentials["email"], credentials["password"])
    if user is None:
        raise InvalidCredentials()

    token = auth.issue_token(user)
    return LoginResponse(
        success=LoginSuccess(token=token, user=UserResponse.model_validate(user)),
    )


@router.post(
    "/logout",
    response_model=MessageResponse,
    dependencies=[Depends(get_current_user)],
)
async def logout(
    token: Annotated[str, Depends(get_bearer_token)],
    auth: Annotated[AuthService, Depends(get_auth_service)],
):
    """Revoke the token used for this request."""
    auth.revoke(token)
    return MessageResponse(message="Logged out successfully")


@router.get("/user", response_model=UserResponse)
async def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Get current user information."""
    return current_user
