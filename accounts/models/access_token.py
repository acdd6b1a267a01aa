"""Access token model."""

import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from accounts.database import Base
from accounts.models.mixins import TimestampMixin


class AccessToken(Base, TimestampMixin):
    """A bearer token issued to a user.

    The row id travels inside the signed token as its ``jti`` claim, so a
    token can be revoked without touching any other token of the same user.
    """

    __tablename__ = "access_tokens"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String(255), nullable=False, default="authToken")
    revoked = Column(Boolean, nullable=False, default=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)

    user = relationship("User", back_populates="tokens")
