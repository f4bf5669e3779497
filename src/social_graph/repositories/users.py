from typing import Any, Callable, Mapping, Optional, Union

from loguru import logger
from neo4j import Result

from ..context import ExecutionContext, run_query
from ..models import SocialGraphUserProfile, UpsertPolicy
from ..sanitize import sanitize

USER_ATTRIBUTES = (
    "name",
    "photo_url",
    "username",
    "twitter",
    "bio",
    "displayname",
    "instagram",
    "num_followers",
    "num_following",
    "time_created",
    "is_blocked_by_network",
)

# Cypher expression binding each attribute's parameter
_PARAM_EXPRESSIONS = {
    "num_followers": "toInteger($num_followers)",
    "num_following": "toInteger($num_following)",
    "time_created": "datetime($time_created)",
}

# Values a new node gets when a merge payload omits the attribute
_CREATE_DEFAULTS = {
    "num_followers": "0",
    "num_following": "0",
    "is_blocked_by_network": "false",
}


def _set_clause(
    variable: str, keep_existing: bool = False, fill_defaults: bool = False
) -> str:
    assignments = []
    for attr in USER_ATTRIBUTES:
        expression = _PARAM_EXPRESSIONS.get(attr, f"${attr}")
        if fill_defaults and attr in _CREATE_DEFAULTS:
            expression = f"coalesce({expression}, {_CREATE_DEFAULTS[attr]})"
        if keep_existing:
            expression = f"coalesce({expression}, {variable}.{attr})"
        assignments.append(f"{variable}.{attr} = {expression}")
    return ",\n          ".join(assignments)


UPSERT_USER_QUERIES = {
    UpsertPolicy.CREATE_ONLY: f"""
      MERGE (user:User {{ user_id: $user_id }})
        ON CREATE SET {_set_clause("user")}
    """,
    UpsertPolicy.OVERWRITE_ON_CONFLICT: f"""
      MERGE (user:User {{ user_id: $user_id }})
        SET {_set_clause("user")}
    """,
    UpsertPolicy.MERGE_FIELDS: f"""
      MERGE (user:User {{ user_id: $user_id }})
        ON CREATE SET {_set_clause("user", fill_defaults=True)}
        ON MATCH SET {_set_clause("user", keep_existing=True)}
    """,
}

USER_ID_CONSTRAINT_QUERY = """
  CREATE CONSTRAINT user_id_unique IF NOT EXISTS
  FOR (user:User) REQUIRE user.user_id IS UNIQUE
"""


def upsert_user(
    context: ExecutionContext,
    profile: Union[SocialGraphUserProfile, Mapping[str, Any]],
    policy: UpsertPolicy = UpsertPolicy.CREATE_ONLY,
    sanitizer: Optional[Callable[[Optional[str]], Optional[str]]] = None,
) -> Result:
    """
    Find-or-create the ``User`` node keyed by ``profile.user_id``.

    Under the default ``CREATE_ONLY`` policy attributes are written only when
    the node is created; upserting an existing id leaves it untouched (first
    write wins). ``bio`` goes through the sanitizer before it is bound.
    """
    user = SocialGraphUserProfile.parse(profile)
    policy = UpsertPolicy(policy)
    params = user.to_parameters(supplied_only=policy is UpsertPolicy.MERGE_FIELDS)
    params["bio"] = (sanitizer or sanitize)(user.bio)
    logger.debug(f"Upserting user {user.user_id} with policy '{policy.value}'")
    return run_query(context, UPSERT_USER_QUERIES[policy], params)


def create_user_id_constraint(context: ExecutionContext) -> Result:
    """Ensure ``User.user_id`` is unique so concurrent merges cannot duplicate."""
    return run_query(context, USER_ID_CONSTRAINT_QUERY)
