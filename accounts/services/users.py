"""User repository: persistence of user records."""

import logging
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from accounts.errors import ValidationFailed
from accounts.models.user import User
from accounts.services.passwords import get_password_hash

logger = logging.getLogger(__name__)

EMAIL_TAKEN = "The email has already been taken."


def normalize_email(email: str) -> str:
    """Canonical stored form of an email address."""
    return email.strip().lower()


class UserRepository:
    """Create, find, update and delete users on a database session."""

    def __init__(self, db: Session):
        self.db = db

    def all(self) -> list[User]:
        return self.db.query(User).order_by(User.id).all()

    def find(self, user_id: int) -> User | None:
        return self.db.get(User, user_id)

    def find_by_email(self, email: str) -> User | None:
        return self.db.query(User).filter(User.email == normalize_email(email)).first()

    def email_taken(self, email: str, ignore_user_id: int | None = None) -> bool:
        """Check whether another user already has this email."""
        query = self.db.query(User.id).filter(User.email == normalize_email(email))
        if ignore_user_id is not None:
            query = query.filter(User.id != ignore_user_id)
        return query.first() is not None

    def create(self, name: str, email: str, password: str, commit: bool = True) -> User:
        """Create a user, storing only the hash of the password.

        With ``commit=False`` the row is only flushed, so the caller can commit
        it together with other rows.
        """
        user = User(
            name=name,
            email=normalize_email(email),
            password_hash=get_password_hash(password),
        )
        self.db.add(user)
        self._save(commit)
        self.db.refresh(user)
        logger.info(f"Created user {user.id}")
        return user

    def update(self, user: User, fields: dict[str, Any]) -> User:
        """Apply name, email and password changes. id and created_at are never touched."""
        if "name" in fields:
            user.name = fields["name"]
        if "email" in fields:
            user.email = normalize_email(fields["email"])
        if fields.get("password"):
            user.password_hash = get_password_hash(fields["password"])
        self._save()
        self.db.refresh(user)
        logger.info(f"Updated user {user.id}")
        return user

    def delete(self, user: User) -> None:
        user_id = user.id
        self.db.delete(user)
        self.db.commit()
        logger.info(f"Deleted user {user_id}")

    def _save(self, commit: bool = True) -> None:
        # The unique index on users.email catches concurrent registrations
        try:
            if commit:
                self.db.commit()
            else:
                self.db.flush()
        except IntegrityError as e:
            self.db.rollback()
            raise ValidationFailed({"email": [EMAIL_TAKEN]}) from e
