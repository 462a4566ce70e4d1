"""
Happy Thoughts API: Thought Route Handlers
==========================================

What:  HTTP bindings for listing, reading, posting, editing, deleting and
       liking thoughts.
How:   Each handler pulls its store and (where needed) the caller's identity
       from dependencies and hands off to ThoughtService. Errors are raised
       as application exceptions and rendered by the global handlers.

Endpoints:
    GET    /thoughts               public, filter/sort/paginate
    GET    /thoughts/{id}          public
    POST   /thoughts               token optional (anonymous posts allowed)
    PATCH  /thoughts/{id}          token required, owner only
    PUT    /thoughts/{id}          same as PATCH
    DELETE /thoughts/{id}          token required, owner only
    POST   /thoughts/{id}/like     public
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from happythoughts.dependencies import get_thought_store, optional_user, require_user
from happythoughts.schemas.common import ErrorResponse
from happythoughts.schemas.thought import (
    DeleteResponse,
    ThoughtCreate,
    ThoughtListResponse,
    ThoughtPatch,
    ThoughtResponse,
)
from happythoughts.schemas.user import Identity
from happythoughts.services.query_translator import translate_query
from happythoughts.services.thought_service import thought_service
from happythoughts.stores.base import ThoughtStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Thoughts"])

_NOT_FOUND = {"description": "Thought not found", "model": ErrorResponse}
_BAD_REQUEST = {"description": "Invalid input or malformed ID", "model": ErrorResponse}
_UNAUTHORIZED = {"description": "Missing or invalid access token", "model": ErrorResponse}
_FORBIDDEN = {"description": "Caller is not the author", "model": ErrorResponse}


@router.get(
    "/thoughts",
    response_model=ThoughtListResponse,
    responses={500: {"description": "Store error", "model": ErrorResponse}},
    summary="List thoughts",
    description=(
        "Offset-paginated list with optional filters. Malformed parameters fall back "
        "to defaults instead of failing. The total match count is also sent in "
        "the X-Total-Count header."
    ),
)
async def list_thoughts(
    response: Response,
    hearts_min: Optional[str] = Query(
        default=None, alias="heartsMin", description="Only thoughts with at least this many hearts"
    ),
    category: Optional[str] = Query(
        default=None, description="Category, matched case-insensitively"
    ),
    sort_by: Optional[str] = Query(
        default=None, alias="sortBy", description="'hearts' (most liked) or 'date' (newest)"
    ),
    page: Optional[str] = Query(default=None, description="1-indexed page number (default 1)"),
    limit: Optional[str] = Query(default=None, description="Page size (default 20, max 100)"),
    store: ThoughtStore = Depends(get_thought_store),
) -> ThoughtListResponse:
    query = translate_query(
        hearts_min=hearts_min,
        category=category,
        sort_by=sort_by,
        page=page,
        limit=limit,
    )
    result = await thought_service.list_thoughts(store, query)
    response.headers["X-Total-Count"] = str(result.total)
    return result


@router.get(
    "/thoughts/{thought_id}",
    response_model=ThoughtResponse,
    responses={400: _BAD_REQUEST, 404: _NOT_FOUND},
    summary="Get a single thought",
)
async def get_thought(
    thought_id: str,
    store: ThoughtStore = Depends(get_thought_store),
) -> ThoughtResponse:
    # Path ids are taken as plain strings so a malformed id becomes the API's
    # own 400 invalid_identifier rather than FastAPI's 422.
    return await thought_service.get_thought(store, thought_id)


@router.post(
    "/thoughts",
    status_code=201,
    response_model=ThoughtResponse,
    responses={400: _BAD_REQUEST, 401: _UNAUTHORIZED},
    summary="Post a new thought",
    description=(
        "Message must be 5 to 140 characters. With a valid access token the thought "
        "is attributed to the caller and can later be edited or deleted by them; "
        "without one it is posted anonymously."
    ),
)
async def create_thought(
    body: ThoughtCreate,
    user: Optional[Identity] = Depends(optional_user),
    store: ThoughtStore = Depends(get_thought_store),
) -> ThoughtResponse:
    return await thought_service.create_thought(
        store,
        message=body.message,
        category=body.category,
        created_by=user,
    )


@router.api_route(
    "/thoughts/{thought_id}",
    methods=["PATCH", "PUT"],
    response_model=ThoughtResponse,
    responses={400: _BAD_REQUEST, 401: _UNAUTHORIZED, 403: _FORBIDDEN, 404: _NOT_FOUND},
    summary="Edit a thought",
    description="Updates message and/or category. Only the author may edit.",
)
async def update_thought(
    thought_id: str,
    patch: ThoughtPatch,
    user: Identity = Depends(require_user),
    store: ThoughtStore = Depends(get_thought_store),
) -> ThoughtResponse:
    return await thought_service.update_thought(store, thought_id, patch, requester=user)


@router.delete(
    "/thoughts/{thought_id}",
    response_model=DeleteResponse,
    responses={400: _BAD_REQUEST, 401: _UNAUTHORIZED, 403: _FORBIDDEN, 404: _NOT_FOUND},
    summary="Delete a thought",
)
async def delete_thought(
    thought_id: str,
    user: Identity = Depends(require_user),
    store: ThoughtStore = Depends(get_thought_store),
) -> DeleteResponse:
    return await thought_service.delete_thought(store, thought_id, requester=user)


@router.post(
    "/thoughts/{thought_id}/like",
    response_model=ThoughtResponse,
    responses={400: _BAD_REQUEST, 404: _NOT_FOUND},
    summary="Like a thought",
    description="Adds one heart. Anyone may like any thought, any number of times.",
)
async def like_thought(
    thought_id: str,
    store: ThoughtStore = Depends(get_thought_store),
) -> ThoughtResponse:
    return await thought_service.like_thought(store, thought_id)
