"""FastAPI dependencies for authentication, services and request bodies."""

from typing import Annotated, Any

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from accounts.database import get_db
from accounts.errors import BadRequest, Unauthenticated
from accounts.models.user import User
from accounts.services.auth import AuthService
from accounts.services.users import UserRepository
from accounts.services.validation import CredentialValidator

security = HTTPBearer(auto_error=False, description="Token from /api/login or /api/register")

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


async def get_submitted_fields(request: Request) -> dict[str, Any]:
    """Read the submitted fields from a JSON object body or from form data."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        return {key: value for key, value in form.items() if isinstance(value, str)}

    if not await request.body():
        return {}
    try:
        payload = await request.json()
    except ValueError as e:
        raise BadRequest("Malformed JSON body") from e
    if not isinstance(payload, dict):
        raise BadRequest("Request body must be a JSON object")
    return payload


def get_user_repository(db: Annotated[Session, Depends(get_db)]) -> UserRepository:
    """Get user repository bound to the request's session."""
    return UserRepository(db)


def get_auth_service(db: Annotated[Session, Depends(get_db)]) -> AuthService:
    """Get authentication service bound to the request's session."""
    return AuthService(db)


def get_credential_validator(
    users: Annotated[UserRepository, Depends(get_user_repository)],
) -> CredentialValidator:
    return CredentialValidator(users)


def get_bearer_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> str:
    """Get the raw bearer token from the Authorization header."""
    if credentials is None or not credentials.credentials:
        raise Unauthenticated()
    return credentials.credentials


def get_current_user(
    token: Annotated[str, Depends(get_bearer_token)],
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> User:
    """Get the current authenticated user from the bearer token."""
    user = auth.authenticate(token)
    if user is None:
        raise Unauthenticated()
    return user
