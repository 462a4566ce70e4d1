"""
Happy Thoughts API: Abstract Store Interfaces
=============================================

What:  Abstract base classes describing the capabilities the core needs from
       persistence.
How:   Concrete stores subclass these and implement every coroutine.
Who:   ThoughtService and CredentialService receive a store per call.

Contract shared by all implementations:
    - Methods return `None` / `False` for "no such document"; the services
      decide whether that is a NotFoundError
    - Engine failures are raised as StoreError, never as driver exceptions
    - Each mutating call is atomic for the single document it touches
"""

import uuid
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from happythoughts.models.thought import Thought
from happythoughts.models.user import User
from happythoughts.schemas.thought import ThoughtQuery


class ThoughtStore(ABC):
    """Persistence contract for thoughts."""

    @abstractmethod
    async def find(self, query: ThoughtQuery) -> List[Thought]:
        """
        Return one page of thoughts.

        Applies the query's filters (hearts lower bound, case-insensitive
        category), then its ordering, then skips `query.offset` rows and
        returns at most `query.limit`.
        """
        ...

    @abstractmethod
    async def count(self, query: ThoughtQuery) -> int:
        """Number of thoughts matching the query's filters, ignoring pagination."""
        ...

    @abstractmethod
    async def get_by_id(self, thought_id: uuid.UUID) -> Optional[Thought]:
        ...

    @abstractmethod
    async def insert(
        self,
        message: str,
        category: str,
        created_by: Optional[str],
    ) -> Thought:
        """Persist a new thought with zero hearts and return it with its id."""
        ...

    @abstractmethod
    async def update_by_id(
        self, thought_id: uuid.UUID, changes: Dict[str, Any]
    ) -> Optional[Thought]:
        """Apply `changes` (attribute name → value) and return the updated thought."""
        ...

    @abstractmethod
    async def delete_by_id(self, thought_id: uuid.UUID) -> bool:
        """Delete the thought. Returns False if it did not exist."""
        ...

    @abstractmethod
    async def increment_hearts(self, thought_id: uuid.UUID) -> Optional[Thought]:
        """
        Add exactly one heart in a single atomic operation.

        Must not read-modify-write: two concurrent likes always yield +2.
        """
        ...


class UserStore(ABC):
    """Persistence contract for registered users."""

    @abstractmethod
    async def insert(self, username: str, password_hash: str, access_token: str) -> User:
        """
        Persist a new user.

        Raises:
            DuplicateUsernameError: the username is already taken. Detected
                by the store's unique constraint, not a prior lookup.
        """
        ...

    @abstractmethod
    async def find_by_username(self, username: str) -> Optional[User]:
        ...

    @abstractmethod
    async def find_by_token(self, access_token: str) -> Optional[User]:
        ...
