"""
Happy Thoughts API: Authentication Guard
========================================

What:  Turns the `Authorization` header into an Identity, or refuses.
How:   Accepts either a bare token or "Bearer <token>" (prefix matched
       case-insensitively), resolves it with CredentialService, and raises
       UnauthorizedError before the guarded operation runs.
Who:   Wrapped as FastAPI dependencies in `happythoughts.dependencies`.

    Header                     authenticate()          authenticate_optional()
    ─────────────────────────  ──────────────────────  ───────────────────────
    absent / blank             401 missing_credentials  None (anonymous)
    "Bearer <unknown>"         401 invalid_token        401 invalid_token
    "<known>" / "Bearer <k>"   Identity                 Identity
"""

from typing import Optional

from happythoughts.exceptions import UnauthorizedError
from happythoughts.schemas.user import Identity
from happythoughts.services.credential_service import CredentialService, credential_service
from happythoughts.stores.base import UserStore

BEARER_SCHEME = "bearer"


def extract_token(header_value: Optional[str]) -> Optional[str]:
    """Strip an optional "Bearer " prefix; None if no token is present."""
    if not header_value:
        return None
    value = header_value.strip()
    scheme, _, rest = value.partition(" ")
    if scheme.lower() == BEARER_SCHEME:
        value = rest.strip()
    return value or None


class AuthGuard:
    def __init__(self, credentials: CredentialService = credential_service):
        self.credentials = credentials

    async def authenticate(self, store: UserStore, header_value: Optional[str]) -> Identity:
        token = extract_token(header_value)
        if token is None:
            raise UnauthorizedError()
        user = await self.credentials.resolve_token(store, token)
        return Identity.model_validate(user)

    async def authenticate_optional(
        self, store: UserStore, header_value: Optional[str]
    ) -> Optional[Identity]:
        if extract_token(header_value) is None:
            return None
        return await self.authenticate(store, header_value)


auth_guard = AuthGuard()
