"""Write operations: idempotent node and edge upserts."""

from .relationships import upsert_follows, upsert_invited_by_user
from .users import create_user_id_constraint, upsert_user

__all__ = [
    "create_user_id_constraint",
    "upsert_follows",
    "upsert_invited_by_user",
    "upsert_user",
]
