"""
Happy Thoughts API: SQLAlchemy Store Implementation
===================================================

What:  Async SQLAlchemy implementations of ThoughtStore and UserStore.
How:   Each store wraps the request's AsyncSession. Writes are flushed, not
       committed; `get_db_session` commits once the route returns.

Query plans (PostgreSQL):
    List, sortBy=date:
        SELECT ... WHERE hearts >= :min AND lower(category) = :cat
        ORDER BY created_at DESC OFFSET :skip LIMIT :limit
        → idx_thoughts_created_at
    Like:
        UPDATE thoughts SET hearts = hearts + 1 WHERE id = :id
        → one statement, so concurrent likes never lose an increment

Error translation:
    IntegrityError on users.username  → DuplicateUsernameError
    any other SQLAlchemyError         → StoreError (details logged only)
"""

import functools
import logging
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import Select, asc, desc, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from happythoughts.exceptions import DuplicateUsernameError, StoreError
from happythoughts.models.thought import Thought
from happythoughts.models.user import User
from happythoughts.schemas.thought import ThoughtQuery, ThoughtSort
from happythoughts.stores.base import ThoughtStore, UserStore

logger = logging.getLogger(__name__)

# Secondary keys keep page boundaries stable when the primary key ties.
_ORDERINGS = {
    ThoughtSort.NONE: (asc(Thought.created_at), asc(Thought.id)),
    ThoughtSort.HEARTS: (desc(Thought.hearts), desc(Thought.created_at), asc(Thought.id)),
    ThoughtSort.DATE: (desc(Thought.created_at), asc(Thought.id)),
}

# Unique index on users.username (named by `index=True, unique=True` on the model)
USERNAME_CONSTRAINT = "ix_users_username"


def _constraint_name(orig: BaseException) -> Optional[str]:
    # asyncpg: the driver exception is chained behind SQLAlchemy's DBAPI adapter
    for candidate in (orig, orig.__cause__):
        name = getattr(candidate, "constraint_name", None)
        if name:
            return name
    diag = getattr(orig, "diag", None)  # psycopg
    return getattr(diag, "constraint_name", None)


def is_username_conflict(error: IntegrityError) -> bool:
    """
    True if `error` is the unique violation on users.username.

    PostgreSQL drivers report the violated constraint by name. SQLite reports
    only "UNIQUE constraint failed: <table>.<column>".
    """
    name = _constraint_name(error.orig)
    if name is not None:
        return name == USERNAME_CONSTRAINT
    return "users.username" in str(error.orig)


def translate_store_errors(operation):
    """Decorator: re-raise SQLAlchemy failures from a store coroutine as StoreError."""

    @functools.wraps(operation)
    async def wrapper(self, *args, **kwargs):
        try:
            return await operation(self, *args, **kwargs)
        except SQLAlchemyError as e:
            logger.error(
                "Store operation %s.%s failed: %s",
                type(self).__name__,
                operation.__name__,
                str(e),
                exc_info=True,
            )
            raise StoreError(
                context={"operation": operation.__name__, "error_type": type(e).__name__},
            ) from e

    return wrapper


class SqlThoughtStore(ThoughtStore):
    """ThoughtStore backed by the `thoughts` table."""

    def __init__(self, session: AsyncSession):
        self.session = session

    @staticmethod
    def _apply_filters(stmt: Select, query: ThoughtQuery) -> Select:
        if query.hearts_min is not None:
            stmt = stmt.where(Thought.hearts >= query.hearts_min)
        if query.category:
            # Case-insensitive exact match: "fun" finds "Fun" but not "Funny".
            stmt = stmt.where(func.lower(Thought.category) == query.category.lower())
        return stmt

    @translate_store_errors
    async def find(self, query: ThoughtQuery) -> List[Thought]:
        stmt = self._apply_filters(select(Thought), query)
        stmt = stmt.order_by(*_ORDERINGS[query.sort])
        stmt = stmt.offset(query.offset).limit(query.limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    @translate_store_errors
    async def count(self, query: ThoughtQuery) -> int:
        stmt = self._apply_filters(select(func.count()).select_from(Thought), query)
        result = await self.session.execute(stmt)
        return result.scalar_one()

    @translate_store_errors
    async def get_by_id(self, thought_id: uuid.UUID) -> Optional[Thought]:
        return await self.session.get(Thought, thought_id)

    @translate_store_errors
    async def insert(
        self,
        message: str,
        category: str,
        created_by: Optional[str],
    ) -> Thought:
        thought = Thought(message=message, category=category, created_by=created_by, hearts=0)
        self.session.add(thought)
        await self.session.flush()
        return thought

    @translate_store_errors
    async def update_by_id(
        self, thought_id: uuid.UUID, changes: Dict[str, Any]
    ) -> Optional[Thought]:
        thought = await self.session.get(Thought, thought_id)
        if thought is None:
            return None
        for field, value in changes.items():
            setattr(thought, field, value)
        await self.session.flush()
        return thought

    @translate_store_errors
    async def delete_by_id(self, thought_id: uuid.UUID) -> bool:
        thought = await self.session.get(Thought, thought_id)
        if thought is None:
            return False
        await self.session.delete(thought)
        await self.session.flush()
        return True

    @translate_store_errors
    async def increment_hearts(self, thought_id: uuid.UUID) -> Optional[Thought]:
        result = await self.session.execute(
            update(Thought)
            .where(Thought.id == thought_id)
            .values(hearts=Thought.hearts + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            return None

        # Reload so an instance already in the identity map sees the new count.
        refreshed = await self.session.execute(
            select(Thought)
            .where(Thought.id == thought_id)
            .execution_options(populate_existing=True)
        )
        return refreshed.scalar_one()


class SqlUserStore(UserStore):
    """UserStore backed by the `users` table."""

    def __init__(self, session: AsyncSession):
        self.session = session

    @translate_store_errors
    async def insert(self, username: str, password_hash: str, access_token: str) -> User:
        user = User(username=username, password_hash=password_hash, access_token=access_token)
        self.session.add(user)
        try:
            await self.session.flush()
        except IntegrityError as e:
            await self.session.rollback()
            if is_username_conflict(e):
                raise DuplicateUsernameError(username) from e
            raise
        return user

    @translate_store_errors
    async def find_by_username(self, username: str) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    @translate_store_errors
    async def find_by_token(self, access_token: str) -> Optional[User]:
        result = await self.session.execute(
            select(User).where(User.access_token == access_token)
        )
        return result.scalar_one_or_none()
