"""
Happy Thoughts API: Credential Service
======================================

What:  Registration, login and token resolution.
How:   Validates raw input, hashes with bcrypt (via passlib) off the event
       loop, and persists through a UserStore.
Who:   Called by the /register and /login routes and by the authentication
       guard.

Failure modes:
    register      → ValidationError, DuplicateUsernameError
    verify_login  → InvalidCredentialsError (same error for unknown user
                    and wrong password)
    resolve_token → UnknownTokenError
"""

import logging
from typing import Optional

from starlette.concurrency import run_in_threadpool

from happythoughts.exceptions import (
    InvalidCredentialsError,
    UnknownTokenError,
    ValidationError,
)
from happythoughts.models.user import (
    PASSWORD_MIN_LENGTH,
    USERNAME_MAX_LENGTH,
    USERNAME_MIN_LENGTH,
    User,
)
from happythoughts.security import generate_access_token, hash_password, verify_password
from happythoughts.stores.base import UserStore

logger = logging.getLogger(__name__)


class CredentialService:
    """
    Stateless credential operations over a request-scoped UserStore.

    bcrypt is CPU-bound (about 250ms at 12 rounds), so hashing and verifying
    run in Starlette's threadpool instead of blocking the event loop.
    """

    @staticmethod
    def _validate_registration(username: Optional[str], password: Optional[str]) -> str:
        if not username or not username.strip():
            raise ValidationError("Username is required", field="username")
        username = username.strip()
        if not USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH:
            raise ValidationError(
                f"Username must be between {USERNAME_MIN_LENGTH} and "
                f"{USERNAME_MAX_LENGTH} characters",
                field="username",
                context={"min_length": USERNAME_MIN_LENGTH, "max_length": USERNAME_MAX_LENGTH},
            )
        if not password:
            raise ValidationError("Password is required", field="password")
        if len(password) < PASSWORD_MIN_LENGTH:
            raise ValidationError(
                f"Password must be at least {PASSWORD_MIN_LENGTH} characters",
                field="password",
                context={"min_length": PASSWORD_MIN_LENGTH},
            )
        return username

    async def register(
        self,
        store: UserStore,
        username: Optional[str],
        password: Optional[str],
    ) -> User:
        """
        Create a user with a fresh access token.

        Input is validated before any hashing. Uniqueness is left to the
        store's constraint so two concurrent registrations cannot both win.
        """
        username = self._validate_registration(username, password)
        password_hash = await run_in_threadpool(hash_password, password)

        user = await store.insert(
            username=username,
            password_hash=password_hash,
            access_token=generate_access_token(),
        )
        logger.info("Registered user %s", user.username)
        return user

    async def verify_login(
        self,
        store: UserStore,
        username: Optional[str],
        password: Optional[str],
    ) -> User:
        if not username or not password:
            raise InvalidCredentialsError()

        user = await store.find_by_username(username.strip())
        if user is None:
            raise InvalidCredentialsError()

        if not await run_in_threadpool(verify_password, password, user.password_hash):
            logger.info("Failed login for user %s", user.username)
            raise InvalidCredentialsError()
        return user

    async def resolve_token(self, store: UserStore, token: str) -> User:
        """Look up the user owning `token`. No side effects."""
        user = await store.find_by_token(token)
        if user is None:
            raise UnknownTokenError()
        return user


credential_service = CredentialService()
