"""Execution context abstraction and the shared query plumbing."""

from contextlib import contextmanager
from typing import Any, Iterator, Optional, Protocol, runtime_checkable

from loguru import logger
from neo4j import Record, Result, ResultSummary
from neo4j.exceptions import (
    AuthError,
    DriverError,
    Neo4jError,
    ServiceUnavailable,
    SessionExpired,
)

from .exceptions import GraphConnectionError, QueryError


@runtime_checkable
class ExecutionContext(Protocol):
    """
    Anything that can run one parameterized Cypher query.

    ``neo4j.Session`` (auto-commit), ``neo4j.Transaction`` and
    ``neo4j.ManagedTransaction`` all satisfy this interface, so call sites do
    not care which one they were handed.
    """

    def run(self, query: str, parameters: Optional[dict[str, Any]] = None, **kwargs: Any) -> Result:
        """Execute a Cypher query and return the result cursor."""
        ...


_CONNECTION_ERRORS = (ServiceUnavailable, SessionExpired, AuthError)


@contextmanager
def translate_driver_errors(query: Optional[str] = None) -> Iterator[None]:
    """
    Re-raise driver exceptions as ``GraphConnectionError`` or ``QueryError``.

    The driver reports some failures when the query is sent and others
    (constraint violations, runtime type errors, a connection dropped
    mid-stream) only when records are pulled, so both sides use this.
    """
    try:
        yield
    except _CONNECTION_ERRORS as e:
        logger.error(f"Graph store unavailable while executing query: {e}")
        raise GraphConnectionError(str(e)) from e
    except Neo4jError as e:
        logger.error(f"Neo4j error executing Cypher query: {e}")
        raise QueryError(str(e), query=query, original_error=e) from e
    except DriverError as e:
        logger.error(f"Driver error executing Cypher query: {e}")
        raise GraphConnectionError(str(e)) from e


def run_query(
    context: ExecutionContext,
    query: str,
    parameters: Optional[dict[str, Any]] = None,
) -> Result:
    """
    Run ``query`` through ``context`` exactly once and return its cursor.

    Failures reported when the query is sent are translated here. Failures
    the server reports while streaming surface when the cursor is read; use
    ``single_value``, ``fetch_records`` or ``consume`` to get them translated
    too. Nothing is retried here.
    """
    parameters = parameters or {}
    logger.debug(
        "Executing query with parameters {}: {}...",
        sorted(parameters),
        " ".join(query.split())[:100],
    )
    with translate_driver_errors(query):
        return context.run(query, parameters)


def single_value(result: Result, default: Any = 0) -> Any:
    """Return the first column of the single record in ``result``."""
    with translate_driver_errors():
        record = result.single()
    if record is None:
        return default
    return record[0]


def fetch_records(result: Result) -> list[Record]:
    """Drain ``result`` into a list of records."""
    with translate_driver_errors():
        return list(result)


def consume(result: Result) -> ResultSummary:
    """Discard remaining records and return the write/read summary."""
    with translate_driver_errors():
        return result.consume()


def coerce_id(value: Any, name: str = "user_id") -> int:
    """Coerce a user id to ``int``; raise ``QueryError`` if that is impossible."""
    if isinstance(value, bool):
        raise QueryError(f"Invalid {name}: {value!r}. Must be a valid integer.")
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except (TypeError, ValueError) as e:
        raise QueryError(
            f"Invalid {name}: {value!r}. Must be a valid integer.", original_error=e
        ) from e
