"""Unit tests for stored entity records and their encode/decode boundary."""

from datetime import datetime, timezone

import pytest

from collabmatch.core.errors import InvalidDocumentError
from collabmatch.models import (
    LikeEdge,
    Message,
    PortfolioItem,
    Thread,
    User,
    UserRole,
    direct_thread_key,
)
from collabmatch.models.user import normalize_tags

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)
T1 = datetime(2024, 1, 2, tzinfo=timezone.utc)


class TestDirectThreadKey:
    """Tests for the canonical direct-thread key."""

    def test_sorted_pair(self) -> None:
        assert direct_thread_key("u1", "u2") == "u1_u2"

    def test_symmetric(self) -> None:
        assert direct_thread_key("bob", "alice") == direct_thread_key("alice", "bob")

    def test_separator_in_ids_does_not_collide(self) -> None:
        assert direct_thread_key("a_b", "c") != direct_thread_key("a", "b_c")

    def test_rejects_same_user(self) -> None:
        with pytest.raises(InvalidDocumentError):
            direct_thread_key("u1", "u1")

    def test_rejects_empty_id(self) -> None:
        with pytest.raises(InvalidDocumentError):
            direct_thread_key("", "u2")


class TestThread:
    """Tests for the Thread record."""

    def test_new_direct(self) -> None:
        thread = Thread.new_direct("u2", "u1", created_at=T0)

        assert thread.id == "u1_u2"
        assert thread.participants == ["u1", "u2"]
        assert thread.last_message == ""
        assert thread.last_message_time == T0
        assert not thread.is_group
        assert not thread.is_started

    def test_direct_thread_needs_two_participants(self) -> None:
        with pytest.raises(InvalidDocumentError):
            Thread.build(id="t1", participants=["u1"])

    def test_direct_thread_rejects_duplicate_participant(self) -> None:
        with pytest.raises(InvalidDocumentError):
            Thread.build(id="t1", participants=["u1", "u1"])

    def test_group_thread_allows_many(self) -> None:
        thread = Thread.build(id="g1", participants=["u1", "u2", "u3"], is_group=True)

        assert thread.other_participant("u1") == "u2"

    def test_activity_time_falls_back_to_created_at(self) -> None:
        thread = Thread.build(id="t1", participants=["u1", "u2"], created_at=T1)

        assert thread.activity_time == T1

    def test_other_participant(self) -> None:
        thread = Thread.new_direct("u1", "u2", created_at=T0)

        assert thread.other_participant("u1") == "u2"
        assert thread.has_participant("u2")
        assert not thread.has_participant("u3")


class TestDocumentBoundary:
    """Tests for versioned decoding."""

    def test_to_document_carries_schema_version(self) -> None:
        doc = LikeEdge.build(liker_id="u1", target_id="u2").to_document()

        assert doc == {"liker_id": "u1", "target_id": "u2", "schema_version": 1}

    def test_from_document_rejects_newer_schema(self) -> None:
        with pytest.raises(InvalidDocumentError, match="schema version"):
            LikeEdge.from_document({"liker_id": "u1", "target_id": "u2", "schema_version": 2})

    def test_from_document_without_version_is_accepted(self) -> None:
        edge = LikeEdge.from_document({"liker_id": "u1", "target_id": "u2"})

        assert edge.key == ("u1", "u2")

    def test_null_columns_use_defaults(self) -> None:
        thread = Thread.from_document(
            {"id": "t1", "participants": ["u1", "u2"], "last_message": None, "participant_photos": None}
        )

        assert thread.last_message == ""
        assert thread.participant_photos == {}

    def test_unknown_fields_are_ignored(self) -> None:
        user = User.from_document({"id": "u1", "fcm_token": "abc"})

        assert user.id == "u1"

    def test_malformed_document(self) -> None:
        with pytest.raises(InvalidDocumentError):
            Message.from_document({"thread_id": "t1", "sender_id": "u1"})

    def test_partial_document_only_has_set_fields(self) -> None:
        doc = User.build(id="u1", bio="hello").to_document(partial=True)

        assert doc == {"id": "u1", "bio": "hello", "schema_version": 1}


class TestLikeEdge:
    def test_self_like_rejected(self) -> None:
        with pytest.raises(InvalidDocumentError, match="cannot like themselves"):
            LikeEdge.build(liker_id="u1", target_id="u1")


class TestMessage:
    def test_blank_text_rejected(self) -> None:
        with pytest.raises(InvalidDocumentError):
            Message.build(thread_id="t1", sender_id="u1", text="   ")

    def test_defaults(self) -> None:
        message = Message.build(thread_id="t1", sender_id="u1", text="hi")

        assert message.status.value == "sent"
        assert message.type.value == "text"


class TestUser:
    """Tests for the User record."""

    def test_legacy_role_is_mapped(self) -> None:
        assert User.build(id="u1", role="Media Creator").role == UserRole.CONTENT_CREATOR

    def test_enterprise_role(self) -> None:
        assert User.build(id="u1", role="enterprise").role == UserRole.ENTERPRISE

    def test_unknown_role_rejected(self) -> None:
        with pytest.raises(InvalidDocumentError):
            User.build(id="u1", role="admin")

    def test_tags_are_normalized(self) -> None:
        user = User.build(id="u1", tags=[" Music ", "music", "", "Film"])

        assert user.tags == ["Music", "Film"]

    def test_similarity_ignores_case(self) -> None:
        user = User.build(id="u1", searchable=["Music", "Film"])

        assert user.similarity(["music", "games"]) == 1

    def test_matches_query(self) -> None:
        user = User.build(id="u1", display_name="Ada Lovelace", username="ada", searchable=["math"])

        assert user.matches_query("LOVE")
        assert user.matches_query("math")
        assert user.matches_query("  ")
        assert not user.matches_query("babbage")


def test_normalize_tags_keeps_first_seen_order() -> None:
    assert normalize_tags(["b", "A", "a", " b "]) == ["b", "A"]


class TestPortfolioItem:
    """Tests for the PortfolioItem record."""

    def test_blank_title_becomes_untitled(self) -> None:
        assert PortfolioItem.build(owner_id="u1", title="  ").title == "Untitled"

    def test_end_before_start_rejected(self) -> None:
        with pytest.raises(InvalidDocumentError, match="end date"):
            PortfolioItem.build(owner_id="u1", start_date=T1, end_date=T0)

    def test_naive_dates_are_utc(self) -> None:
        item = PortfolioItem.build(owner_id="u1", start_date=datetime(2024, 1, 1))

        assert item.start_date == T0
