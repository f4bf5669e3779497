import datetime
from enum import Enum
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, ValidationError

from .exceptions import InvalidPaginationError, QueryError

DEFAULT_PAGE_LIMIT = 1000
MAX_PAGE_LIMIT = 10000


class UpsertPolicy(str, Enum):
    """What a user upsert does when the node already exists."""

    CREATE_ONLY = "create_only"
    OVERWRITE_ON_CONFLICT = "overwrite_on_conflict"
    MERGE_FIELDS = "merge_fields"


class SocialGraphUserProfile(BaseModel):
    """A user profile as supplied by the ingestion process."""

    user_id: int
    name: Optional[str] = None
    photo_url: Optional[str] = None
    username: Optional[str] = None
    twitter: Optional[str] = None
    bio: Optional[str] = None
    displayname: Optional[str] = None
    instagram: Optional[str] = None
    num_followers: int = 0
    num_following: int = 0
    time_created: Optional[datetime.datetime] = None
    is_blocked_by_network: bool = False

    model_config = ConfigDict(extra="ignore")

    @classmethod
    def parse(
        cls, profile: Union["SocialGraphUserProfile", Mapping[str, Any]]
    ) -> "SocialGraphUserProfile":
        if isinstance(profile, cls):
            return profile
        try:
            return cls.model_validate(profile)
        except ValidationError as exc:
            raise QueryError(f"Invalid user profile: {exc}", original_error=exc) from exc

    def to_parameters(self, supplied_only: bool = False) -> dict[str, Any]:
        """
        Flatten into Cypher parameters; ``time_created`` as ISO-8601.

        With ``supplied_only`` every field the payload did not set explicitly
        is bound as ``None``, defaults included.
        """
        params = self.model_dump()
        if self.time_created is not None:
            params["time_created"] = self.time_created.isoformat()
        if supplied_only:
            for field in params:
                if field != "user_id" and field not in self.model_fields_set:
                    params[field] = None
        return params


class Pagination(BaseModel):
    """Validated ``limit``/``skip`` pair, bound as query parameters."""

    limit: StrictInt = Field(default=DEFAULT_PAGE_LIMIT, ge=0, le=MAX_PAGE_LIMIT)
    skip: StrictInt = Field(default=0, ge=0)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def of(cls, limit: Any = DEFAULT_PAGE_LIMIT, skip: Any = 0) -> "Pagination":
        try:
            return cls(limit=limit, skip=skip)
        except ValidationError as exc:
            raise InvalidPaginationError(
                f"Invalid pagination (limit={limit!r}, skip={skip!r}): {exc}",
                original_error=exc,
            ) from exc


def user_from_record(record: Mapping[str, Any], key: Optional[str] = None) -> SocialGraphUserProfile:
    """Map a record holding a ``User`` node into a profile."""
    node = record[key] if key is not None else record[0]
    props = dict(node)
    time_created = props.get("time_created")
    if hasattr(time_created, "to_native"):
        props["time_created"] = time_created.to_native()
    return SocialGraphUserProfile.model_validate(props)


__all__ = [
    "DEFAULT_PAGE_LIMIT",
    "MAX_PAGE_LIMIT",
    "Pagination",
    "SocialGraphUserProfile",
    "UpsertPolicy",
    "user_from_record",
]
