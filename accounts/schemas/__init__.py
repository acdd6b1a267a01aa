"""Pydantic schemas for API requests and responses."""

from accounts.schemas.auth import (
    ErrorResponse,
    LoginResponse,
    LoginSuccess,
    RegisterResponse,
    RegisterSuccess,
)
from accounts.schemas.user import (
    MessageResponse,
    UserCreate,
    UserLogin,
    UserRegister,
    UserResponse,
    UserUpdate,
)

__all__ = [
    "UserCreate",
    "UserRegister",
    "UserUpdate",
    "UserLogin",
    "UserResponse",
    "MessageResponse",
    "RegisterSuccess",
    "RegisterResponse",
    "LoginSuccess",
    "LoginResponse",
    "ErrorResponse",
]
