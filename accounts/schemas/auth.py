"""Authentication schemas."""

from pydantic import BaseModel

from accounts.schemas.user import UserResponse


class RegisterSuccess(BaseModel):
    """Token and display name returned after registration."""

    token: str
    name: str


class RegisterResponse(BaseModel):
    success: RegisterSuccess


class LoginSuccess(BaseModel):
    """Token and user record returned after login."""

    token: str
    user: UserResponse


class LoginResponse(BaseModel):
    success: LoginSuccess


class ErrorResponse(BaseModel):
    error: str
