"""
Movie Blog API - Custom Exception Hierarchy
============================================

What:  Application-specific exceptions for the three ways a request can fail.
How:   Each exception carries a client-safe message and an optional context
       dict. Global handlers registered in main.py turn them into responses;
       the context is logged and never sent to the client.
Who:   Raised by the validators, the repository and the fallback route.

Exception Hierarchy:
    MovieBlogError (base)
    ├── ValidationError            → 400 Bad Request, JSON list of field violations
    ├── StoreError                 → 500 Internal Server Error, generic message
    └── RouteNotImplementedError   → 400 Bad Request, plain text
"""

from typing import Any, Dict, List, Optional


class MovieBlogError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(MovieBlogError):
    """
    Raised when a request payload fails field validation.

    Detected before any store access, so a request rejected with this error
    never changes a row.

    Example response:
        {
            "error": "validation_error",
            "message": "Request payload failed validation",
            "errors": [{"field": "title", "message": "must be a non-empty string"}]
        }
    """

    def __init__(
        self,
        violations: List[Dict[str, str]],
        message: str = "Request payload failed validation",
    ):
        super().__init__(message=message, context={"fields": [v["field"] for v in violations]})
        self.violations = violations


class StoreError(MovieBlogError):
    """
    Raised when the database cannot serve a resource operation.

    Covers pool checkout failures and timeouts, statement errors (including
    constraint violations) and an unreachable server. The message is generic;
    the driver error is kept in `context` for the server log only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if operation:
            ctx["operation"] = operation
        super().__init__(message=message, context=ctx)
        self.operation = operation


class RouteNotImplementedError(MovieBlogError):
    """
    Raised by the catch-all route when no resource route matches.

    Answered with 400 and a plain-text body rather than 404.
    """

    def __init__(self, method: str, path: str):
        super().__init__(
            message="Endpoint not implemented",
            context={"method": method, "path": path},
        )
        self.method = method
        self.path = path
