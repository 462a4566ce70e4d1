"""
Happy Thoughts API: SQL Store Tests
===================================

What:  Tests for SqlThoughtStore and SqlUserStore against in-memory SQLite.
How:   Rows are seeded with explicit timestamps and heart counts so every
       ordering is deterministic.

What we test:
    ✅ heartsMin and case-insensitive category filters (and both together)
    ✅ hearts / date / insertion orderings
    ✅ offset pagination and count ignoring pagination
    ✅ atomic like increments, update and delete by id
    ✅ SQLAlchemy failures surface as StoreError
"""

import uuid
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from sqlalchemy.exc import IntegrityError, OperationalError

from happythoughts.exceptions import DuplicateUsernameError, StoreError
from happythoughts.models.thought import Thought
from happythoughts.schemas.thought import ThoughtQuery, ThoughtSort
from happythoughts.stores.sql import SqlThoughtStore, is_username_conflict

_T0 = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

# (message, hearts, category, minutes after _T0)
_SEED = [
    ("First happy thought", 3, "Fun", 0),
    ("Second happy thought", 10, "Work", 1),
    ("Third happy thought", 0, "fun", 2),
    ("Fourth happy thought", 7, "Family", 3),
    ("Fifth happy thought", 7, "FUN", 4),
]


@pytest_asyncio.fixture
async def seeded(db_session):
    for message, hearts, category, minutes in _SEED:
        db_session.add(
            Thought(
                message=message,
                hearts=hearts,
                category=category,
                created_at=_T0 + timedelta(minutes=minutes),
            )
        )
    await db_session.flush()


def _messages(thoughts):
    return [t.message.split()[0] for t in thoughts]


class TestFind:

    @pytest.mark.asyncio
    async def test_insertion_order_by_default(self, thought_store, seeded):
        results = await thought_store.find(ThoughtQuery())
        assert _messages(results) == ["First", "Second", "Third", "Fourth", "Fifth"]

    @pytest.mark.asyncio
    async def test_sort_by_hearts(self, thought_store, seeded):
        results = await thought_store.find(ThoughtQuery(sort=ThoughtSort.HEARTS))
        assert [t.hearts for t in results] == [10, 7, 7, 3, 0]
        # Ties on hearts: newest first
        assert _messages(results)[1:3] == ["Fifth", "Fourth"]

    @pytest.mark.asyncio
    async def test_sort_by_date(self, thought_store, seeded):
        results = await thought_store.find(ThoughtQuery(sort=ThoughtSort.DATE))
        assert _messages(results) == ["Fifth", "Fourth", "Third", "Second", "First"]

    @pytest.mark.asyncio
    async def test_hearts_min(self, thought_store, seeded):
        results = await thought_store.find(ThoughtQuery(hearts_min=7))
        assert {t.hearts for t in results} == {7, 10}
        assert len(results) == 3

    @pytest.mark.asyncio
    async def test_category_is_case_insensitive_exact(self, thought_store, seeded):
        results = await thought_store.find(ThoughtQuery(category="fun"))
        assert _messages(results) == ["First", "Third", "Fifth"]

        assert await thought_store.find(ThoughtQuery(category="Fu")) == []

    @pytest.mark.asyncio
    async def test_filters_combine(self, thought_store, seeded):
        results = await thought_store.find(
            ThoughtQuery(category="FUN", hearts_min=3, sort=ThoughtSort.HEARTS)
        )
        assert _messages(results) == ["Fifth", "First"]

    @pytest.mark.asyncio
    async def test_pagination(self, thought_store, seeded):
        page1 = await thought_store.find(ThoughtQuery(page=1, limit=2))
        page3 = await thought_store.find(ThoughtQuery(page=3, limit=2))
        beyond = await thought_store.find(ThoughtQuery(page=4, limit=2))

        assert _messages(page1) == ["First", "Second"]
        assert _messages(page3) == ["Fifth"]
        assert beyond == []

    @pytest.mark.asyncio
    async def test_count_ignores_pagination(self, thought_store, seeded):
        assert await thought_store.count(ThoughtQuery(page=3, limit=1)) == 5
        assert await thought_store.count(ThoughtQuery(category="fun")) == 3
        assert await thought_store.count(ThoughtQuery(hearts_min=100)) == 0


class TestWrites:

    @pytest.mark.asyncio
    async def test_insert_assigns_id_and_defaults(self, thought_store):
        thought = await thought_store.insert("Hello world!", "General", None)

        assert isinstance(thought.id, uuid.UUID)
        assert thought.hearts == 0
        assert thought.created_at is not None

    @pytest.mark.asyncio
    async def test_increment_hearts(self, thought_store):
        thought = await thought_store.insert("Hello world!", "General", None)

        for _ in range(3):
            result = await thought_store.increment_hearts(thought.id)

        assert result.hearts == 3
        assert (await thought_store.get_by_id(thought.id)).hearts == 3

    @pytest.mark.asyncio
    async def test_increment_unknown(self, thought_store):
        assert await thought_store.increment_hearts(uuid.uuid4()) is None

    @pytest.mark.asyncio
    async def test_update_by_id(self, thought_store):
        thought = await thought_store.insert("Hello world!", "General", "ada")

        updated = await thought_store.update_by_id(thought.id, {"category": "Work"})

        assert updated.category == "Work"
        assert updated.message == "Hello world!"
        assert await thought_store.update_by_id(uuid.uuid4(), {"category": "Work"}) is None

    @pytest.mark.asyncio
    async def test_delete_by_id(self, thought_store):
        thought = await thought_store.insert("Hello world!", "General", "ada")

        assert await thought_store.delete_by_id(thought.id) is True
        assert await thought_store.get_by_id(thought.id) is None
        assert await thought_store.delete_by_id(thought.id) is False

    @pytest.mark.asyncio
    async def test_created_at_reads_back_as_utc(self, thought_store, db_session):
        thought = await thought_store.insert("Hello world!", "General", None)
        written = thought.created_at
        await db_session.commit()
        db_session.expire_all()

        reloaded = await thought_store.get_by_id(thought.id)

        assert reloaded.created_at.tzinfo is not None
        assert reloaded.created_at.utcoffset() == timedelta(0)
        assert reloaded.created_at == written


class TestErrorTranslation:

    @pytest.mark.asyncio
    async def test_driver_error_becomes_store_error(self):
        session = AsyncMock()
        session.execute.side_effect = OperationalError("SELECT 1", {}, Exception("db gone"))
        store = SqlThoughtStore(session)

        with pytest.raises(StoreError) as exc_info:
            await store.count(ThoughtQuery())

        assert exc_info.value.status_code == 500
        assert exc_info.value.context["operation"] == "count"

    @pytest.mark.asyncio
    async def test_duplicate_username(self, user_store, db_session):
        await user_store.insert("ada", "hash-1", "token-1")
        await db_session.commit()

        with pytest.raises(DuplicateUsernameError):
            await user_store.insert("ada", "hash-2", "token-2")

    @pytest.mark.asyncio
    async def test_find_by_token(self, user_store):
        user = await user_store.insert("ada", "hash-1", "token-1")

        assert (await user_store.find_by_token("token-1")).id == user.id
        assert await user_store.find_by_token("token-2") is None


class _DriverError(Exception):
    def __init__(self, message, constraint_name=None):
        super().__init__(message)
        self.constraint_name = constraint_name


def _integrity_error(orig):
    return IntegrityError("INSERT INTO users ...", {}, orig)


class TestUsernameConflict:

    def test_named_username_constraint(self):
        orig = _DriverError("duplicate key", constraint_name="ix_users_username")
        assert is_username_conflict(_integrity_error(orig)) is True

    def test_other_named_constraint(self):
        # The message mentions a username, but the violated index is the token's
        orig = _DriverError(
            'duplicate key (username=ada) violates "ix_users_access_token"',
            constraint_name="ix_users_access_token",
        )
        assert is_username_conflict(_integrity_error(orig)) is False

    def test_constraint_on_chained_driver_error(self):
        orig = Exception("adapter error")
        orig.__cause__ = _DriverError("duplicate key", constraint_name="ix_users_username")
        assert is_username_conflict(_integrity_error(orig)) is True

    def test_sqlite_column_message(self):
        orig = Exception("UNIQUE constraint failed: users.username")
        assert is_username_conflict(_integrity_error(orig)) is True

    def test_sqlite_token_column_message(self):
        orig = Exception("UNIQUE constraint failed: users.access_token")
        assert is_username_conflict(_integrity_error(orig)) is False

    @pytest.mark.asyncio
    async def test_duplicate_token_is_not_a_username_error(self, user_store, db_session):
        await user_store.insert("ada", "hash-1", "token-1")
        await db_session.commit()

        with pytest.raises(StoreError):
            await user_store.insert("bob", "hash-2", "token-1")
