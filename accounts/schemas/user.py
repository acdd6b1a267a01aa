"""User schemas."""

from datetime import datetime
from typing import Annotated, Any

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    EmailStr,
    Field,
    StringConstraints,
)
from pydantic_core import PydanticCustomError


def _strip(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


# Emails are compared and stored lower-cased, so lookups are case-insensitive
NormalizedEmail = Annotated[EmailStr, BeforeValidator(_strip), AfterValidator(str.lower)]
DisplayName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
# bcrypt only looks at the first 72 bytes of a password
PASSWORD_MAX_BYTES = 72


def _check_password_bytes(value: str) -> str:
    if len(value.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise PydanticCustomError(
            "password_too_long",
            "Password may not be longer than {max_bytes} bytes",
            {"max_bytes": PASSWORD_MAX_BYTES},
        )
    return value


Password = Annotated[str, Field(min_length=1), AfterValidator(_check_password_bytes)]


class UserFields(BaseModel):
    """Fields shared by every form that creates or changes a user."""

    name: DisplayName
    email: NormalizedEmail
    password: Password


class UserCreate(UserFields):
    """Administrative creation of a user."""


class UserRegister(UserFields):
    """Public self-registration; the password must be confirmed."""

    password_confirmation: str | None = Field(None, max_length=128)


class UserUpdate(UserRegister):
    """Replacement of a user's name, email and password."""


class UserLogin(BaseModel):
    """User login request."""

    email: NormalizedEmail
    password: Password


class UserResponse(BaseModel):
    """User information response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    created_at: datetime
    updated_at: datetime


class MessageResponse(BaseModel):
    message: str
