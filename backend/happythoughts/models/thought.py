"""
Happy Thoughts API: Thought SQLAlchemy Model
============================================

What:  ORM model for the `thoughts` table.
Who:   Read and written by `SqlThoughtStore`; tracked by Alembic.

Table design:
    - UUID primary key, generated in Python so every backend gets the same ids
    - message: 5..140 characters (enforced by ThoughtService before insert)
    - hearts: non-negative counter, only ever changed by an atomic increment
    - category: free text up to 50 characters, "General" when omitted
    - created_by: username of the author; NULL for anonymous thoughts
    - created_at: UTC, set once at insert

Indexes:
    created_at DESC for `sortBy=date`, hearts DESC for `sortBy=hearts`.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import CheckConstraint, Index, Integer, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from happythoughts.database import Base, UTCDateTime

MESSAGE_MIN_LENGTH = 5
MESSAGE_MAX_LENGTH = 140
CATEGORY_MAX_LENGTH = 50
DEFAULT_CATEGORY = "General"


class Thought(Base):
    """
    A short user-authored post with a hearts counter and category.

    Lifecycle:
        1. Created by POST /thoughts (hearts = 0)
        2. Liked by anyone (hearts += 1, atomically)
        3. Edited or deleted only by the user named in `created_by`
    """

    __tablename__ = "thoughts"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    message: Mapped[str] = mapped_column(
        String(MESSAGE_MAX_LENGTH),
        nullable=False,
    )

    hearts: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default=text("0"),
    )

    category: Mapped[str] = mapped_column(
        String(CATEGORY_MAX_LENGTH),
        nullable=False,
        default=DEFAULT_CATEGORY,
        server_default=text(f"'{DEFAULT_CATEGORY}'"),
    )

    # Plain username reference, no foreign key: deleting or renaming users is
    # out of scope and thoughts must never cascade.
    created_by: Mapped[Optional[str]] = mapped_column(
        String(20),
        nullable=True,
        default=None,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        CheckConstraint("hearts >= 0", name="ck_thoughts_hearts_non_negative"),
        Index("idx_thoughts_created_at", created_at.desc()),
        Index("idx_thoughts_hearts", hearts.desc()),
    )

    def __repr__(self) -> str:
        return (
            f"<Thought(id={self.id}, hearts={self.hearts}, "
            f"created_by='{self.created_by}')>"
        )
