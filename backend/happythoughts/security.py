"""Password hashing (passlib/bcrypt) and access token generation."""

import secrets

from passlib.context import CryptContext

from happythoughts.config import settings

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)


def hash_password(password: str) -> str:
    """Salted bcrypt hash; the salt is embedded in the returned string."""
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def generate_access_token() -> str:
    """Opaque random bearer token (hex of `access_token_bytes` random bytes)."""
    return secrets.token_hex(settings.access_token_bytes)
