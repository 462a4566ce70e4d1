"""
Happy Thoughts API: Shared Response Schemas
===========================================

What:  Error, health and welcome payloads used across routers.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ErrorResponse(BaseModel):
    """
    Standard error body for every non-2xx response.

    Example:
        {
            "error": "forbidden",
            "message": "You are not allowed to modify this thought",
            "details": {},
            "requestId": "3f2a9c1e"
        }
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class EndpointInfo(BaseModel):
    path: str
    methods: List[str]


class WelcomeResponse(BaseModel):
    """Body of GET /: a greeting plus every route the API exposes."""

    message: str
    endpoints: List[EndpointInfo]


class HealthResponse(BaseModel):
    """
    Health check result.

    status is "healthy" when the database answers `SELECT 1`, otherwise
    "unhealthy".
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    status: str = Field(description="healthy or unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="connected or disconnected")
    uptime_seconds: float = Field(description="Seconds since the process started")
