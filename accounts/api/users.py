"""User CRUD endpoints. Every route requires a bearer token."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, status

from accounts.api.dependencies import (
    get_credential_validator,
    get_current_user,
    get_submitted_fields,
    get_user_repository,
)
from accounts.errors import NotFound
from accounts.models.user import User
from accounts.schemas.user import MessageResponse, UserResponse
from accounts.services.users import UserRepository
from accounts.services.validation import CredentialValidator, ValidationMode

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/users",
    tags=["users"],
    dependencies=[Depends(get_current_user)],
)


def get_user_or_404(users: UserRepository, user_id: int) -> User:
    """Get a user by id or fail with 404."""
    user = users.find(user_id)
    if user is None:
        raise NotFound("User not found")
    return user


@router.get("", response_model=list[UserResponse])
async def list_users(
    users: Annotated[UserRepository, Depends(get_user_repository)],
):
    """Get all users."""
    return users.all()


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    fields: Annotated[dict[str, Any], Depends(get_submitted_fields)],
    validator: Annotated[CredentialValidator, Depends(get_credential_validator)],
    users: Annotated[UserRepository, Depends(get_user_repository)],
):
    """Create a user on behalf of an authenticated caller. No token is issued."""
    data = validator.validate(fields, ValidationMode.CREATE)
    users.create(**data)
    return MessageResponse(message="A New User successfully created")


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    users: Annotated[UserRepository, Depends(get_user_repository)],
):
    """Get a specific user."""
    return get_user_or_404(users, user_id)


@router.api_route("/{user_id}", methods=["PUT", "PATCH"], response_model=MessageResponse)
async def update_user(
    user_id: int,
    fields: Annotated[dict[str, Any], Depends(get_submitted_fields)],
    validator: Annotated[CredentialValidator, Depends(get_credential_validator)],
    users: Annotated[UserRepository, Depends(get_user_repository)],
):
    """Replace a user's name, email and password."""
    user = get_user_or_404(users, user_id)
    data = validator.validate(fields, ValidationMode.UPDATE, ignore_user_id=user.id)
    users.update(user, data)
    return MessageResponse(message="A User data updated successfully")


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: int,
    users: Annotated[UserRepository, Depends(get_user_repository)],
):
    """Delete a user and every token issued to them."""
    user = get_user_or_404(users, user_id)
    users.delete(user)
    return MessageResponse(message="User data deleted successfully")
