from unittest.mock import Mock

import pytest

from social_graph.exceptions import QueryError
from social_graph.models import SocialGraphUserProfile, UpsertPolicy
from social_graph.repositories import (
    create_user_id_constraint,
    upsert_follows,
    upsert_invited_by_user,
    upsert_user,
)
from social_graph.repositories.users import USER_ATTRIBUTES
from tests.helpers import last_call


@pytest.fixture
def profile():
    return SocialGraphUserProfile(
        user_id=1,
        name="Ada",
        username="ada",
        bio="<b>hi</b> there",
        num_followers=10,
        num_following=2,
        time_created="2021-01-01T00:00:00+00:00",
    )


class TestUpsertUser:
    def test_create_only_sets_attributes_on_create(self, mock_context, mock_result, profile):
        result = upsert_user(mock_context, profile)

        assert result is mock_result
        query, params = last_call(mock_context)
        assert query.startswith("MERGE (user:User { user_id: $user_id }) ON CREATE SET")
        assert "ON MATCH" not in query
        assert query.count("SET") == 1
        for attr in USER_ATTRIBUTES:
            assert f"user.{attr} =" in query
        assert "user.time_created = datetime($time_created)" in query
        assert "user.num_followers = toInteger($num_followers)" in query
        assert params["user_id"] == 1
        assert params["time_created"] == "2021-01-01T00:00:00+00:00"
        mock_context.run.assert_called_once()

    def test_bio_is_sanitized(self, mock_context, profile):
        upsert_user(mock_context, profile)
        _, params = last_call(mock_context)
        assert params["bio"] == "hi there"

    def test_custom_sanitizer_called_once(self, mock_context, profile):
        sanitizer = Mock(return_value="clean")

        upsert_user(mock_context, profile, sanitizer=sanitizer)

        sanitizer.assert_called_once_with("<b>hi</b> there")
        assert last_call(mock_context)[1]["bio"] == "clean"

    def test_accepts_mapping_payload(self, mock_context):
        upsert_user(mock_context, {"user_id": "5", "name": "Bo"})
        _, params = last_call(mock_context)
        assert params["user_id"] == 5
        assert params["name"] == "Bo"
        assert params["bio"] is None

    def test_invalid_payload_raises_before_round_trip(self, mock_context):
        with pytest.raises(QueryError):
            upsert_user(mock_context, {"user_id": "not-a-number"})
        mock_context.run.assert_not_called()

    def test_overwrite_policy_sets_unconditionally(self, mock_context, profile):
        upsert_user(mock_context, profile, policy=UpsertPolicy.OVERWRITE_ON_CONFLICT)
        query, _ = last_call(mock_context)
        assert "ON CREATE" not in query
        assert "SET user.name = $name" in query

    def test_merge_fields_policy_keeps_existing_values(self, mock_context, profile):
        upsert_user(mock_context, profile, policy="merge_fields")
        query, _ = last_call(mock_context)
        assert "ON CREATE SET user.name = $name" in query
        assert "ON MATCH SET user.name = coalesce($name, user.name)" in query
        assert (
            "user.time_created = coalesce(datetime($time_created), user.time_created)"
            in query
        )

    def test_merge_fields_binds_omitted_attributes_as_null(self, mock_context):
        upsert_user(
            mock_context,
            {"user_id": 1, "name": "second"},
            policy=UpsertPolicy.MERGE_FIELDS,
        )

        query, params = last_call(mock_context)
        assert params["name"] == "second"
        for attr in (
            "num_followers",
            "num_following",
            "is_blocked_by_network",
            "username",
            "time_created",
        ):
            assert params[attr] is None
        assert "ON MATCH SET user.name = coalesce($name, user.name)" in query
        assert "user.num_followers = coalesce(toInteger($num_followers), 0)" in query
        assert "user.is_blocked_by_network = coalesce($is_blocked_by_network, false)" in query

    def test_merge_fields_keeps_explicit_zero_and_false(self, mock_context):
        upsert_user(
            mock_context,
            {"user_id": 1, "num_followers": 0, "is_blocked_by_network": False},
            policy=UpsertPolicy.MERGE_FIELDS,
        )
        _, params = last_call(mock_context)
        assert params["num_followers"] == 0
        assert params["is_blocked_by_network"] is False

    def test_create_only_binds_defaults_for_omitted_attributes(self, mock_context):
        upsert_user(mock_context, {"user_id": 1})
        _, params = last_call(mock_context)
        assert params["num_followers"] == 0
        assert params["is_blocked_by_network"] is False

    def test_unknown_policy_rejected(self, mock_context, profile):
        with pytest.raises(ValueError):
            upsert_user(mock_context, profile, policy="replace_everything")


def test_create_user_id_constraint(mock_context):
    create_user_id_constraint(mock_context)
    query, params = last_call(mock_context)
    assert "CREATE CONSTRAINT user_id_unique IF NOT EXISTS" in query
    assert "REQUIRE user.user_id IS UNIQUE" in query
    assert params == {}


class TestUpsertFollows:
    def test_matches_both_endpoints_then_merges(self, mock_context, mock_result):
        result = upsert_follows(mock_context, "1", 2)

        assert result is mock_result
        query, params = last_call(mock_context)
        assert query == (
            "MATCH (follower:User { user_id: $follower_id }) "
            "MATCH (user:User { user_id: $user_id }) "
            "MERGE (follower)-[op:FOLLOWS]->(user) "
            "RETURN op"
        )
        assert params == {"follower_id": 1, "user_id": 2}

    def test_missing_endpoint_is_not_an_error(self, mock_context, mock_result):
        mock_result.peek.return_value = None

        result = upsert_follows(mock_context, 1, 999)

        assert result.peek() is None

    @pytest.mark.parametrize("follower_id,user_id", [("x", 1), (1, None)])
    def test_non_numeric_ids_raise(self, mock_context, follower_id, user_id):
        with pytest.raises(QueryError):
            upsert_follows(mock_context, follower_id, user_id)
        mock_context.run.assert_not_called()


class TestUpsertInvitedByUser:
    def test_edge_points_from_invited_to_inviter(self, mock_context):
        upsert_invited_by_user(mock_context, inviter_id=7, user_id=8)

        query, params = last_call(mock_context)
        assert "MATCH (inviter:User { user_id: $inviter_id })" in query
        assert "MATCH (user:User { user_id: $user_id })" in query
        assert "MERGE (user)-[op:INVITED_BY_USER]->(inviter)" in query
        assert query.endswith("RETURN op")
        assert params == {"inviter_id": 7, "user_id": 8}

    def test_non_numeric_inviter_raises(self, mock_context):
        with pytest.raises(QueryError):
            upsert_invited_by_user(mock_context, "abc", 8)
