"""Exceptions raised by the social graph persistence layer."""

from typing import Any, Optional


class SocialGraphError(Exception):
    """Base exception for social graph errors."""

    pass


class GraphConnectionError(SocialGraphError, ConnectionError):
    """The graph store is unreachable or rejected the credentials."""

    pass


class QueryError(SocialGraphError):
    """Raised when a query is malformed or a value cannot be coerced."""

    def __init__(
        self,
        message: str,
        query: Optional[str] = None,
        original_error: Optional[Exception] = None,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        self.query = query
        self.original_error = original_error
        self.context = context or {}
        super().__init__(message)


class InvalidPaginationError(QueryError, ValueError):
    """Raised when ``limit`` or ``skip`` is not an acceptable integer."""
