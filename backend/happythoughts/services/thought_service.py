"""
Happy Thoughts API: Thought Service
===================================

What:  Business rules for thoughts: listing, lookup, creation, edits,
       deletion and likes.
How:   Validates input, parses ids, applies the ownership policy, and
       delegates persistence to a request-scoped ThoughtStore. Returns
       response schemas so routes stay thin.
Who:   Called by the /thoughts route handlers.

Operation flow:
    list        translate_query → store.count + store.find → ThoughtListResponse
    get         parse id → store.get_by_id → NotFoundError if missing
    create      validate message/category → store.insert
    update      parse id → load → can_mutate → validate patch → store.update_by_id
    delete      parse id → load → can_mutate → store.delete_by_id
    like        parse id → store.increment_hearts (no ownership check)

Ownership always runs before the patch is validated or applied, and before
deletion, so a non-owner never learns anything beyond "forbidden" and never
causes a write.
"""

import logging
import uuid
from typing import Optional

from happythoughts.exceptions import (
    ForbiddenError,
    InvalidIdentifierError,
    NotFoundError,
    ValidationError,
)
from happythoughts.models.thought import (
    CATEGORY_MAX_LENGTH,
    DEFAULT_CATEGORY,
    MESSAGE_MAX_LENGTH,
    MESSAGE_MIN_LENGTH,
    Thought,
)
from happythoughts.schemas.thought import (
    DeleteResponse,
    ThoughtListResponse,
    ThoughtPatch,
    ThoughtQuery,
    ThoughtResponse,
)
from happythoughts.schemas.user import Identity
from happythoughts.services.ownership import can_mutate
from happythoughts.stores.base import ThoughtStore

logger = logging.getLogger(__name__)


def parse_thought_id(raw: str) -> uuid.UUID:
    """
    Parse a path identifier.

    Raises:
        InvalidIdentifierError: `raw` is not a UUID and so cannot match any
            thought (→ 400 rather than 404).
    """
    try:
        return uuid.UUID(str(raw))
    except ValueError:
        raise InvalidIdentifierError(str(raw))


def validate_message(message: Optional[str]) -> str:
    if message is None or not message.strip():
        raise ValidationError("Message is required", field="message")
    if len(message) < MESSAGE_MIN_LENGTH:
        raise ValidationError(
            f"Message must be at least {MESSAGE_MIN_LENGTH} characters",
            field="message",
            context={"min_length": MESSAGE_MIN_LENGTH, "length": len(message)},
        )
    if len(message) > MESSAGE_MAX_LENGTH:
        raise ValidationError(
            f"Message must be max {MESSAGE_MAX_LENGTH} characters",
            field="message",
            context={"max_length": MESSAGE_MAX_LENGTH, "length": len(message)},
        )
    return message


def normalize_category(category: Optional[str]) -> str:
    """Blank or missing categories fall back to "General"; longer than the column is a 400."""
    if category is None or not category.strip():
        return DEFAULT_CATEGORY
    category = category.strip()
    if len(category) > CATEGORY_MAX_LENGTH:
        raise ValidationError(
            f"Category must be max {CATEGORY_MAX_LENGTH} characters",
            field="category",
            context={"max_length": CATEGORY_MAX_LENGTH, "length": len(category)},
        )
    return category


class ThoughtService:
    """
    Stateless thought operations.

    Each method takes the store to run against, so one service instance
    serves every request while each request keeps its own session.
    """

    async def list_thoughts(self, store: ThoughtStore, query: ThoughtQuery) -> ThoughtListResponse:
        total = await store.count(query)
        thoughts = await store.find(query)

        logger.debug(
            "Listed %d of %d thoughts (page=%d, limit=%d, sort=%s)",
            len(thoughts),
            total,
            query.page,
            query.limit,
            query.sort.value,
        )

        return ThoughtListResponse(
            page=query.page,
            limit=query.limit,
            total=total,
            results=[ThoughtResponse.model_validate(t) for t in thoughts],
        )

    async def _load(self, store: ThoughtStore, thought_id: uuid.UUID) -> Thought:
        thought = await store.get_by_id(thought_id)
        if thought is None:
            raise NotFoundError(resource="thought", resource_id=str(thought_id))
        return thought

    async def get_thought(self, store: ThoughtStore, raw_id: str) -> ThoughtResponse:
        thought = await self._load(store, parse_thought_id(raw_id))
        return ThoughtResponse.model_validate(thought)

    async def create_thought(
        self,
        store: ThoughtStore,
        message: Optional[str],
        category: Optional[str] = None,
        created_by: Optional[Identity] = None,
    ) -> ThoughtResponse:
        """
        Validate and persist a new thought.

        `created_by` is the authenticated caller, or None for an anonymous
        post (which nobody can edit or delete afterwards).
        """
        message = validate_message(message)
        thought = await store.insert(
            message=message,
            category=normalize_category(category),
            created_by=created_by.username if created_by else None,
        )
        logger.info(
            "Thought %s created by %s",
            thought.id,
            created_by.username if created_by else "anonymous",
        )
        return ThoughtResponse.model_validate(thought)

    async def update_thought(
        self,
        store: ThoughtStore,
        raw_id: str,
        patch: ThoughtPatch,
        requester: Identity,
    ) -> ThoughtResponse:
        thought_id = parse_thought_id(raw_id)
        thought = await self._load(store, thought_id)

        if not can_mutate(thought, requester):
            logger.warning(
                "User %s tried to update thought %s owned by %s",
                requester.username,
                thought_id,
                thought.created_by,
            )
            raise ForbiddenError()

        changes = patch.changes()
        if not changes:
            raise ValidationError(
                "Nothing to update: send at least one of message, category",
                context={"mutable_fields": ["message", "category"]},
            )
        if "message" in changes:
            changes["message"] = validate_message(changes["message"])
        if "category" in changes:
            changes["category"] = normalize_category(changes["category"])

        updated = await store.update_by_id(thought_id, changes)
        if updated is None:
            # Deleted between the ownership check and the update.
            raise NotFoundError(resource="thought", resource_id=str(thought_id))
        return ThoughtResponse.model_validate(updated)

    async def delete_thought(
        self,
        store: ThoughtStore,
        raw_id: str,
        requester: Identity,
    ) -> DeleteResponse:
        thought_id = parse_thought_id(raw_id)
        thought = await self._load(store, thought_id)

        if not can_mutate(thought, requester):
            logger.warning(
                "User %s tried to delete thought %s owned by %s",
                requester.username,
                thought_id,
                thought.created_by,
            )
            raise ForbiddenError(message="You are not allowed to delete this thought")

        if not await store.delete_by_id(thought_id):
            raise NotFoundError(resource="thought", resource_id=str(thought_id))
        logger.info("Thought %s deleted by %s", thought_id, requester.username)
        return DeleteResponse(success=True, id=thought_id)

    async def like_thought(self, store: ThoughtStore, raw_id: str) -> ThoughtResponse:
        thought_id = parse_thought_id(raw_id)
        thought = await store.increment_hearts(thought_id)
        if thought is None:
            raise NotFoundError(resource="thought", resource_id=str(thought_id))
        return ThoughtResponse.model_validate(thought)


thought_service = ThoughtService()
