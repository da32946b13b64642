"""
Blog API - Custom Exception Hierarchy
=====================================

What:  Application-specific exceptions for every failure a service can report.
How:   Each exception carries a user-facing message and an optional context
       dict. Global handlers (registered in main.py) map each type to its
       HTTP status and the uniform error envelope.
Who:   Raised by services and the access guard; caught by global handlers.

Exception Hierarchy:
    BlogError (base)
    ├── ValidationError          → 400 Bad Request
    ├── AuthenticationError      → 401 Unauthorized
    ├── PermissionDeniedError    → 403 Forbidden
    ├── NotFoundError            → 404 Not Found
    ├── AlreadyExistsError       → 409 Conflict
    └── DatabaseError            → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class BlogError(Exception):
    """
    Base exception for all Blog API errors.

    Attributes:
        message:  User-facing error description (returned in the response)
        context:  Additional debug info (logged, never returned)
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(BlogError):
    """
    Raised when a request is well-formed but breaks a business rule.

    When:    Attempt to change a post's author or a comment's post/author.
    HTTP:    400 Bad Request

    Schema-level failures (missing fields, blank strings) are reported by
    FastAPI's RequestValidationError and share the same 400 envelope.
    """

    status_code = 400

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


class AuthenticationError(BlogError):
    """
    Raised when the caller's identity cannot be established.

    When:    Bad login credentials, or a protected route called without a
             valid bearer token.
    HTTP:    401 Unauthorized

    Login failures always carry the same message so the response never
    reveals whether the username or the password was wrong.
    """

    status_code = 401

    def __init__(
        self,
        message: str = "Authentication is required to access this resource",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class PermissionDeniedError(BlogError):
    """
    Raised when an authenticated caller may not perform the operation.

    When:    Missing role (e.g. non-admin deleting a user) or ownership
             violation (editing someone else's post or comment).
    HTTP:    403 Forbidden
    """

    status_code = 403

    def __init__(
        self,
        message: str = "Access denied",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(BlogError):
    """
    Raised when a requested resource does not exist.

    Repositories return None for missing rows; services convert that into
    NotFoundError, e.g. NotFoundError("Post") → "Post not found".
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = str(resource_id)
        super().__init__(message=f"{resource} not found", context=ctx)
        self.resource = resource


class AlreadyExistsError(BlogError):
    """
    Raised when creating a resource would violate a uniqueness rule.

    When:    Registering with an email or username that is already taken.
    HTTP:    409 Conflict
    """

    status_code = 409

    def __init__(
        self,
        message: str = "Resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(BlogError):
    """
    Raised when a store operation fails unexpectedly.

    The message returned to the client is always generic; details are
    logged server-side only.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
