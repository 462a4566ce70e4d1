"""Pydantic schemas for registration, login and the authenticated identity."""

import uuid
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CredentialsRequest(BaseModel):
    """Body of POST /register and POST /login."""

    username: Optional[str] = Field(default=None, description="3 to 20 characters")
    password: Optional[str] = Field(default=None, description="At least 5 characters")


class AuthResponse(BaseModel):
    """Returned by register and login: the token to send in `Authorization`."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    username: str
    access_token: str


class Identity(BaseModel):
    """The caller resolved by the authentication guard."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    username: str
