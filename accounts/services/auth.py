"""Authentication service: credential checks and bearer tokens."""

import logging
import uuid
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from sqlalchemy import or_
from sqlalchemy.orm import Session

from accounts.config import get_settings
from accounts.models.access_token import AccessToken
from accounts.models.user import User
from accounts.services.passwords import verify_password
from accounts.services.users import UserRepository

logger = logging.getLogger(__name__)

settings = get_settings()

DEFAULT_TOKEN_NAME = "authToken"  # noqa: S105


def create_access_token(user_id: int, token_id: str, expires_at: datetime) -> str:
    """Create a signed JWT for a persisted access token."""
    to_encode = {
        "sub": str(user_id),
        "jti": token_id,
        "iat": datetime.now(UTC),
        "exp": expires_at,
    }
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict | None:
    """Decode and validate a JWT token."""
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


class AuthService:
    """Checks credentials and issues, resolves and revokes bearer tokens."""

    def __init__(self, db: Session):
        self.db = db
        self.users = UserRepository(db)

    def attempt(self, email: str, password: str) -> User | None:
        """Return the user owning these credentials, or None."""
        user = self.users.find_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            logger.warning(f"Failed login attempt for {email}")
            return None
        return user

    def issue_token(self, user: User, name: str = DEFAULT_TOKEN_NAME) -> str:
        """Issue a new bearer token for the user.

        Every call creates a separate access token; tokens issued earlier
        remain valid. Revoked and expired tokens of the user are purged, and
        anything pending in the session (such as a just-created user) is
        committed together with the new token.
        """
        self._purge_stale_tokens(user)
        token_id = str(uuid.uuid4())
        expires_at = datetime.now(UTC) + timedelta(minutes=settings.jwt_expiration_minutes)
        self.db.add(AccessToken(id=token_id, user_id=user.id, name=name, expires_at=expires_at))
        self.db.commit()
        return create_access_token(user.id, token_id, expires_at)

    def _purge_stale_tokens(self, user: User) -> None:
        now = datetime.now(UTC)
        purged = (
            self.db.query(AccessToken)
            .filter(
                AccessToken.user_id == user.id,
                or_(
                    AccessToken.revoked == True,  # noqa: E712
                    AccessToken.expires_at <= now,
                ),
            )
            .delete(synchronize_session="fetch")
        )
        if purged:
            logger.info(f"Purged {purged} stale access tokens of user {user.id}")

    def _find_access_token(self, token: str) -> AccessToken | None:
        payload = decode_access_token(token)
        if payload is None:
            logger.warning("Rejected bearer token: invalid signature or expired")
            return None

        token_id = payload.get("jti")
        if token_id is None:
            return None

        access_token = self.db.get(AccessToken, token_id)
        if access_token is None or str(access_token.user_id) != payload.get("sub"):
            logger.warning(f"Rejected bearer token {token_id}: unknown token")
            return None
        return access_token

    def authenticate(self, token: str) -> User | None:
        """Resolve a bearer token to its user."""
        access_token = self._find_access_token(token)
        if access_token is None:
            return None
        if access_token.revoked:
            logger.warning(f"Rejected bearer token {access_token.id}: revoked")
            return None
        return access_token.user

    def revoke(self, token: str) -> bool:
        """Revoke a bearer token. Returns False if the token is not recognised."""
        access_token = self._find_access_token(token)
        if access_token is None:
            return False
        access_token.revoked = True
        self.db.commit()
        logger.info(f"Revoked access token {access_token.id} of user {access_token.user_id}")
        return True
