"""Validation of submitted user fields before they reach the store."""

from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from accounts.errors import ValidationFailed
from accounts.schemas.user import UserCreate, UserLogin, UserRegister, UserUpdate
from accounts.services.users import EMAIL_TAKEN, UserRepository, normalize_email


class ValidationMode(str, Enum):
    """Which form is being validated."""

    REGISTER = "register"
    LOGIN = "login"
    CREATE = "create"
    UPDATE = "update"


SCHEMAS: dict[ValidationMode, type[BaseModel]] = {
    ValidationMode.REGISTER: UserRegister,
    ValidationMode.LOGIN: UserLogin,
    ValidationMode.CREATE: UserCreate,
    ValidationMode.UPDATE: UserUpdate,
}

# Modes that require password == password_confirmation
CONFIRMED_MODES = {ValidationMode.REGISTER, ValidationMode.UPDATE}

# Modes where the email must not belong to another user
UNIQUE_EMAIL_MODES = {ValidationMode.REGISTER, ValidationMode.CREATE, ValidationMode.UPDATE}


def _error_message(field: str, error: dict) -> str:
    """Turn a pydantic error into a human readable message for one field."""
    label = field.replace("_", " ")
    error_type = error.get("type")
    if error_type in ("missing", "string_too_short"):
        return f"The {label} field is required."
    if error_type == "string_type":
        return f"The {label} must be a string."
    if error_type == "string_too_long":
        max_length = error.get("ctx", {}).get("max_length")
        return f"The {label} may not be greater than {max_length} characters."
    if error_type == "password_too_long":
        max_bytes = error.get("ctx", {}).get("max_bytes")
        return f"The {label} may not be greater than {max_bytes} bytes."
    if field == "email":
        return "The email must be a valid email address."
    return error.get("msg", f"The {label} is invalid.")


class CredentialValidator:
    """Checks submitted user fields for one of the account forms.

    Only reads the store (for the email uniqueness check). Either returns the
    normalized fields or raises ValidationFailed listing every failing field.
    """

    def __init__(self, users: UserRepository):
        self.users = users

    def validate(
        self,
        fields: Mapping[str, Any],
        mode: ValidationMode | str,
        ignore_user_id: int | None = None,
    ) -> dict[str, Any]:
        mode = ValidationMode(mode)
        errors: dict[str, list[str]] = {}

        validated: BaseModel | None = None
        try:
            validated = SCHEMAS[mode].model_validate(dict(fields))
        except PydanticValidationError as exc:
            for error in exc.errors():
                loc = error.get("loc") or ("request",)
                field = str(loc[0])
                errors.setdefault(field, []).append(_error_message(field, error))

        if mode in CONFIRMED_MODES and "password" not in errors:
            if fields.get("password_confirmation") != fields.get("password"):
                errors.setdefault("password", []).append(
                    "The password confirmation does not match."
                )

        if mode in UNIQUE_EMAIL_MODES and "email" not in errors:
            email = normalize_email(str(fields["email"]))
            if self.users.email_taken(email, ignore_user_id=ignore_user_id):
                errors.setdefault("email", []).append(EMAIL_TAKEN)

        if errors or validated is None:
            raise ValidationFailed(errors)

        return validated.model_dump(exclude={"password_confirmation"})
