"""User model."""

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from accounts.database import Base
from accounts.models.mixins import TimestampMixin


class User(Base, TimestampMixin):
    """A registered account. Email is unique across all users."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)

    tokens = relationship(
        "AccessToken",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r}>"
