from typing import Any

from loguru import logger
from neo4j import Result

from ..context import ExecutionContext, coerce_id, run_query

UPSERT_FOLLOWS_QUERY = """
  MATCH (follower:User { user_id: $follower_id })
  MATCH (user:User { user_id: $user_id })
  MERGE (follower)-[op:FOLLOWS]->(user)
  RETURN op
"""

UPSERT_INVITED_BY_USER_QUERY = """
  MATCH (inviter:User { user_id: $inviter_id })
  MATCH (user:User { user_id: $user_id })
  MERGE (user)-[op:INVITED_BY_USER]->(inviter)
  RETURN op
"""


def upsert_follows(context: ExecutionContext, follower_id: Any, user_id: Any) -> Result:
    """
    Merge a single ``FOLLOWS`` edge from ``follower_id`` to ``user_id``.

    Both users must already exist. If either is missing nothing is created,
    no error is raised, and the returned cursor holds zero records.
    """
    params = {
        "follower_id": coerce_id(follower_id, "follower_id"),
        "user_id": coerce_id(user_id),
    }
    logger.debug(f"Upserting FOLLOWS {params['follower_id']} -> {params['user_id']}")
    return run_query(context, UPSERT_FOLLOWS_QUERY, params)


def upsert_invited_by_user(context: ExecutionContext, inviter_id: Any, user_id: Any) -> Result:
    """
    Merge an ``INVITED_BY_USER`` edge from the invited ``user_id`` to
    ``inviter_id``. Missing endpoints make it a silent no-op, as with
    ``upsert_follows``.
    """
    params = {
        "inviter_id": coerce_id(inviter_id, "inviter_id"),
        "user_id": coerce_id(user_id),
    }
    logger.debug(
        f"Upserting INVITED_BY_USER {params['user_id']} -> {params['inviter_id']}"
    )
    return run_query(context, UPSERT_INVITED_BY_USER_QUERY, params)
