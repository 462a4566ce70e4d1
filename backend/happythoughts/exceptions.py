"""
Happy Thoughts API: Custom Exception Hierarchy
==============================================

What:  Typed application errors, one class per failure the API can report.
How:   Each exception carries a user-facing `message` and a `context` dict.
       Services and stores raise them; the handlers registered in
       `happythoughts.main` turn each type into a status code and the JSON
       shape `{error, message, details, requestId}`.

Exception Hierarchy:
    HappyThoughtsError (base)
    ├── ValidationError          → 400 Bad Request
    │   └── InvalidIdentifierError  → 400 (malformed thought id)
    ├── DuplicateUsernameError   → 400 Bad Request
    ├── InvalidCredentialsError  → 400 Bad Request (deliberately vague)
    ├── UnauthorizedError        → 401 Unauthorized
    ├── ForbiddenError           → 403 Forbidden
    ├── NotFoundError            → 404 Not Found
    └── StoreError               → 500 Internal Server Error

Each class has a stable `error_code` and `status_code`, so a single handler
can render the whole family.
"""

from typing import Any, Dict, Optional


class HappyThoughtsError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing description (safe to return in an API response)
        context:  Extra detail. Returned as `details` for client errors,
                  logged only for server errors.
    """

    status_code: int = 500
    error_code: str = "server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(HappyThoughtsError):
    """
    Client input failed a business rule (length, required field, empty patch).

    Example response:
        {
            "error": "validation_error",
            "message": "Message must be at least 5 characters",
            "details": {"field": "message", "min_length": 5}
        }
    """

    status_code = 400
    error_code = "validation_error"

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class InvalidIdentifierError(ValidationError):
    """A thought id that cannot possibly resolve (not a UUID)."""

    error_code = "invalid_identifier"

    def __init__(self, identifier: str):
        super().__init__(
            message=f"'{identifier}' is not a valid thought ID",
            field="id",
            context={"id": identifier},
        )


class DuplicateUsernameError(HappyThoughtsError):
    """Registration hit the unique constraint on `users.username`."""

    status_code = 400
    error_code = "duplicate_username"

    def __init__(self, username: str):
        super().__init__(
            message=f"Username '{username}' is already taken",
            context={"field": "username"},
        )


class InvalidCredentialsError(HappyThoughtsError):
    """
    Login failed.

    The same message is used whether the username is unknown or the password
    is wrong, so the response does not reveal which accounts exist.
    """

    status_code = 400
    error_code = "invalid_credentials"

    def __init__(self):
        super().__init__(message="Invalid username or password")


class UnauthorizedError(HappyThoughtsError):
    """
    Missing or unknown access token on a guarded operation.

    `context["reason"]` is "missing_credentials" or "invalid_token".
    """

    status_code = 401
    error_code = "unauthorized"

    def __init__(
        self,
        message: str = "Authentication required",
        reason: str = "missing_credentials",
    ):
        super().__init__(message=message, context={"reason": reason})
        self.reason = reason


class ForbiddenError(HappyThoughtsError):
    """Authenticated, but not the owner of the resource."""

    status_code = 403
    error_code = "forbidden"

    def __init__(
        self,
        message: str = "You are not allowed to modify this thought",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(HappyThoughtsError):
    """The requested resource does not exist."""

    status_code = 404
    error_code = "not_found"

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource.capitalize()} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class StoreError(HappyThoughtsError):
    """
    The persistence layer failed (connection lost, unexpected constraint,
    driver error).

    The client always gets a generic message; `context` holds the driver
    error type and is only written to the server log.
    """

    status_code = 500
    error_code = "server_error"

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class UnknownTokenError(UnauthorizedError):
    """`resolve_token` found no user for the presented token."""

    def __init__(self):
        super().__init__(message="Invalid access token", reason="invalid_token")
