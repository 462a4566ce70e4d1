"""Ownership policy shared by update and delete."""

from typing import Optional, Protocol


class _Owned(Protocol):
    created_by: Optional[str]


class _Requester(Protocol):
    username: str


def can_mutate(thought: _Owned, requester: _Requester) -> bool:
    """
    True iff `requester` authored `thought`.

    Anonymous thoughts (`created_by is None`) are immutable. Likes and reads
    never consult this policy.
    """
    return thought.created_by is not None and thought.created_by == requester.username
