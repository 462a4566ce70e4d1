"""ORM model for registered users (credentials and access token)."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from happythoughts.database import Base, UTCDateTime

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 20
PASSWORD_MIN_LENGTH = 5


class User(Base):
    """
    A registered author.

    Only the bcrypt hash of the password is stored. `access_token` is an
    opaque random string issued at registration and returned on login.
    Both `username` and `access_token` carry unique indexes; the username
    index is what turns a concurrent duplicate registration into an
    IntegrityError.
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    username: Mapped[str] = mapped_column(
        String(USERNAME_MAX_LENGTH), nullable=False, unique=True, index=True
    )
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    access_token: Mapped[str] = mapped_column(
        String(256), nullable=False, unique=True, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"
