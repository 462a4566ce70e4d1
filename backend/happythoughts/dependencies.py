"""
FastAPI dependencies: request-scoped stores and the authentication guard.

Routes declare what they need:

    store: ThoughtStore = Depends(get_thought_store)
    user: Identity = Depends(require_user)             # 401 without a valid token
    user: Optional[Identity] = Depends(optional_user)  # anonymous allowed

The guard dependencies resolve before the route body runs, so a rejected
request never reaches the service layer.
"""

from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from happythoughts.database import get_db_session
from happythoughts.schemas.user import Identity
from happythoughts.services.auth_guard import auth_guard
from happythoughts.stores.base import ThoughtStore, UserStore
from happythoughts.stores.sql import SqlThoughtStore, SqlUserStore


def get_thought_store(db: AsyncSession = Depends(get_db_session)) -> ThoughtStore:
    return SqlThoughtStore(db)


def get_user_store(db: AsyncSession = Depends(get_db_session)) -> UserStore:
    return SqlUserStore(db)


async def require_user(
    authorization: Optional[str] = Header(
        default=None,
        description="Access token, bare or as 'Bearer <token>'",
    ),
    users: UserStore = Depends(get_user_store),
) -> Identity:
    return await auth_guard.authenticate(users, authorization)


async def optional_user(
    authorization: Optional[str] = Header(
        default=None,
        description="Optional access token; omit to post anonymously",
    ),
    users: UserStore = Depends(get_user_store),
) -> Optional[Identity]:
    return await auth_guard.authenticate_optional(users, authorization)
