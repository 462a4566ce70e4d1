"""
Happy Thoughts API: Thought Request/Response Schemas
====================================================

What:  Pydantic models for the thought endpoints plus the typed query
       descriptor produced by the query translator.
How:   Field names are snake_case in Python and camelCase on the wire
       (`createdBy`, `createdAt`) via `alias_generator=to_camel`. FastAPI
       serializes response models by alias.

Request bodies are deliberately permissive (every field optional): length
and presence rules live in ThoughtService so they produce the API's own
400 `validation_error` instead of FastAPI's generic 422.
"""

import enum
import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_camel_config = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    from_attributes=True,
)


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class ThoughtResponse(BaseModel):
    """A single thought as returned by every thought endpoint."""

    model_config = _camel_config

    id: uuid.UUID = Field(description="Unique thought identifier (UUID)")
    message: str = Field(description="Thought text, 5 to 140 characters")
    hearts: int = Field(description="Number of likes")
    category: str = Field(description="Free-text category")
    created_by: Optional[str] = Field(
        default=None,
        description="Username of the author (null for anonymous thoughts)",
    )
    created_at: datetime = Field(description="Creation timestamp (UTC)")


class ThoughtListResponse(BaseModel):
    """
    One page of thoughts.

    `total` is the size of the filtered set before pagination, so a client
    can compute the page count as ceil(total / limit).
    """

    model_config = _camel_config

    page: int = Field(description="1-indexed page number that was served")
    limit: int = Field(description="Page size that was applied")
    total: int = Field(description="Thoughts matching the filters, across all pages")
    results: List[ThoughtResponse] = Field(description="Thoughts on this page")


class DeleteResponse(BaseModel):
    """Acknowledgement for DELETE /thoughts/{id}."""

    model_config = _camel_config

    success: bool = True
    id: uuid.UUID


# ══════════════════════════════════════════════════════════════════════════
# Request Bodies
# ══════════════════════════════════════════════════════════════════════════


class ThoughtCreate(BaseModel):
    """Body of POST /thoughts."""

    model_config = _camel_config

    message: Optional[str] = Field(default=None, description="Thought text (5-140 chars)")
    category: Optional[str] = Field(default=None, description="Up to 50 chars; defaults to 'General'")


class ThoughtPatch(BaseModel):
    """
    Body of PATCH/PUT /thoughts/{id}.

    Only `message` and `category` are mutable. Omitted fields keep their
    stored value; unknown keys such as `hearts` or `createdAt` are ignored.
    """

    model_config = _camel_config

    message: Optional[str] = None
    category: Optional[str] = None

    def changes(self) -> dict:
        """Fields the client actually sent, by attribute name."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


# ══════════════════════════════════════════════════════════════════════════
# Query Descriptor
# ══════════════════════════════════════════════════════════════════════════


class ThoughtSort(str, enum.Enum):
    """Orderings supported by GET /thoughts."""

    NONE = "none"      # insertion order
    HEARTS = "hearts"  # most liked first
    DATE = "date"      # newest first


class ThoughtQuery(BaseModel):
    """
    Typed filter/sort/pagination descriptor for `ThoughtService.list_thoughts`.

    Built by `translate_query` from raw query-string values; never raises on
    malformed input because the translator has already applied defaults.
    """

    hearts_min: Optional[int] = None
    category: Optional[str] = None
    sort: ThoughtSort = ThoughtSort.NONE
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit
