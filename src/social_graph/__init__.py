"""Persistence and query layer for the follows/invites social graph."""

from .config import RuntimeSettings, load_runtime_settings
from .connection import (
    DriverManager,
    close_driver,
    create_driver,
    get_driver,
    init_driver,
    is_encryption_enabled,
    session,
)
from .context import (
    ExecutionContext,
    consume,
    fetch_records,
    run_query,
    single_value,
)
from .exceptions import (
    GraphConnectionError,
    InvalidPaginationError,
    QueryError,
    SocialGraphError,
)
from .logging_config import configure_logging
from .models import Pagination, SocialGraphUserProfile, UpsertPolicy, user_from_record
from .queries import (
    get_following_users_by_id,
    get_num_followers,
    get_num_followers_by_id,
    get_num_following_by_id,
    get_num_invites_for_user_by_id,
    get_num_user_invites,
    get_num_users,
    get_num_users_invited_by_id,
    get_user_by_id,
    get_user_followers_by_id,
    get_users_invited_by_id,
)
from .repositories import (
    create_user_id_constraint,
    upsert_follows,
    upsert_invited_by_user,
    upsert_user,
)
from .sanitize import sanitize

__all__ = [
    "DriverManager",
    "ExecutionContext",
    "GraphConnectionError",
    "InvalidPaginationError",
    "Pagination",
    "QueryError",
    "RuntimeSettings",
    "SocialGraphError",
    "SocialGraphUserProfile",
    "UpsertPolicy",
    "close_driver",
    "configure_logging",
    "consume",
    "create_driver",
    "create_user_id_constraint",
    "fetch_records",
    "get_driver",
    "get_following_users_by_id",
    "get_num_followers",
    "get_num_followers_by_id",
    "get_num_following_by_id",
    "get_num_invites_for_user_by_id",
    "get_num_user_invites",
    "get_num_users",
    "get_num_users_invited_by_id",
    "get_user_by_id",
    "get_user_followers_by_id",
    "get_users_invited_by_id",
    "init_driver",
    "is_encryption_enabled",
    "load_runtime_settings",
    "run_query",
    "sanitize",
    "session",
    "single_value",
    "upsert_follows",
    "upsert_invited_by_user",
    "upsert_user",
    "user_from_record",
]
