"""
Read-only queries over users and their relationships.

Every function takes an ``ExecutionContext`` and returns the raw
``neo4j.Result``. List queries are ordered by ascending ``user_id`` and
paginated with ``skip``/``limit`` bound as parameters; aggregate queries
return one record with a single ``count`` column (see ``single_value``).
"""

from typing import Any

from neo4j import Result

from .context import ExecutionContext, coerce_id, run_query
from .models import DEFAULT_PAGE_LIMIT, Pagination

GET_USER_BY_ID_QUERY = """
  MATCH (u:User)
  WHERE u.user_id = $user_id
  RETURN u
  LIMIT 1
"""

GET_USER_FOLLOWERS_BY_ID_QUERY = """
  MATCH (follower:User)-[op:FOLLOWS]->(u:User { user_id: $user_id })
  RETURN follower
  ORDER BY follower.user_id
  SKIP $skip
  LIMIT $limit
"""

GET_FOLLOWING_USERS_BY_ID_QUERY = """
  MATCH (u:User { user_id: $user_id })-[op:FOLLOWS]->(following:User)
  RETURN following
  ORDER BY following.user_id
  SKIP $skip
  LIMIT $limit
"""

GET_NUM_FOLLOWERS_BY_ID_QUERY = """
  MATCH (follower:User)-[op:FOLLOWS]->(u:User { user_id: $user_id })
  RETURN count(op) AS count
"""

GET_NUM_FOLLOWING_BY_ID_QUERY = """
  MATCH (u:User { user_id: $user_id })-[op:FOLLOWS]->(following:User)
  RETURN count(op) AS count
"""

GET_NUM_USERS_QUERY = """
  MATCH (u:User)
  RETURN count(u) AS count
"""

GET_NUM_FOLLOWERS_QUERY = """
  MATCH (f:User)-[op:FOLLOWS]->(u:User)
  RETURN count(op) AS count
"""

GET_NUM_USER_INVITES_QUERY = """
  MATCH (a:User)-[op:INVITED_BY_USER]->(b:User)
  RETURN count(op) AS count
"""

# Edges point from the invited user to the inviter
GET_NUM_USERS_INVITED_BY_ID_QUERY = """
  MATCH (user:User)-[op:INVITED_BY_USER]->(u:User { user_id: $user_id })
  RETURN count(op) AS count
"""

GET_NUM_INVITES_FOR_USER_BY_ID_QUERY = """
  MATCH (u:User { user_id: $user_id })-[op:INVITED_BY_USER]->(inviter:User)
  RETURN count(op) AS count
"""

GET_USERS_INVITED_BY_ID_QUERY = """
  MATCH (user:User)-[op:INVITED_BY_USER]->(u:User { user_id: $user_id })
  RETURN user
  ORDER BY user.user_id
  SKIP $skip
  LIMIT $limit
"""


def _page(
    context: ExecutionContext, query: str, user_id: Any, limit: Any, skip: Any
) -> Result:
    page = Pagination.of(limit, skip)
    params = {"user_id": coerce_id(user_id), "skip": page.skip, "limit": page.limit}
    return run_query(context, query, params)


def get_user_by_id(context: ExecutionContext, user_id: Any) -> Result:
    return run_query(context, GET_USER_BY_ID_QUERY, {"user_id": coerce_id(user_id)})


def get_user_followers_by_id(
    context: ExecutionContext,
    user_id: Any,
    limit: int = DEFAULT_PAGE_LIMIT,
    skip: int = 0,
) -> Result:
    """Users following ``user_id``."""
    return _page(context, GET_USER_FOLLOWERS_BY_ID_QUERY, user_id, limit, skip)


def get_following_users_by_id(
    context: ExecutionContext,
    user_id: Any,
    limit: int = DEFAULT_PAGE_LIMIT,
    skip: int = 0,
) -> Result:
    """Users that ``user_id`` follows."""
    return _page(context, GET_FOLLOWING_USERS_BY_ID_QUERY, user_id, limit, skip)


def get_num_followers_by_id(context: ExecutionContext, user_id: Any) -> Result:
    return run_query(
        context, GET_NUM_FOLLOWERS_BY_ID_QUERY, {"user_id": coerce_id(user_id)}
    )


def get_num_following_by_id(context: ExecutionContext, user_id: Any) -> Result:
    return run_query(
        context, GET_NUM_FOLLOWING_BY_ID_QUERY, {"user_id": coerce_id(user_id)}
    )


def get_num_users(context: ExecutionContext) -> Result:
    return run_query(context, GET_NUM_USERS_QUERY)


def get_num_followers(context: ExecutionContext) -> Result:
    """Total number of ``FOLLOWS`` edges in the graph."""
    return run_query(context, GET_NUM_FOLLOWERS_QUERY)


def get_num_user_invites(context: ExecutionContext) -> Result:
    """Total number of ``INVITED_BY_USER`` edges in the graph."""
    return run_query(context, GET_NUM_USER_INVITES_QUERY)


def get_num_users_invited_by_id(context: ExecutionContext, user_id: Any) -> Result:
    """How many users ``user_id`` has invited."""
    return run_query(
        context, GET_NUM_USERS_INVITED_BY_ID_QUERY, {"user_id": coerce_id(user_id)}
    )


def get_num_invites_for_user_by_id(context: ExecutionContext, user_id: Any) -> Result:
    """How many inviters ``user_id`` has. Anything above 1 is corrupt data."""
    return run_query(
        context, GET_NUM_INVITES_FOR_USER_BY_ID_QUERY, {"user_id": coerce_id(user_id)}
    )


def get_users_invited_by_id(
    context: ExecutionContext,
    user_id: Any,
    limit: int = DEFAULT_PAGE_LIMIT,
    skip: int = 0,
) -> Result:
    return _page(context, GET_USERS_INVITED_BY_ID_QUERY, user_id, limit, skip)
