import re

import pytest

from yelp_insights.models.conversation import ConversationNotFoundError, ConversationStore


def test_generated_ids_have_expected_shape():
    conv_id = ConversationStore.generate_id()
    assert re.fullmatch(r"conv_\d+_[a-z0-9]{9}", conv_id)
    assert ConversationStore.generate_id() != conv_id


def test_create_sets_active_and_appends(store):
    first = store.create_conversation("u1", "biz-1", "Golden Spoon")
    second = store.create_conversation("u1", "biz-1", "Golden Spoon")

    assert store.get_active_conversation("u1").id == second.id
    assert [c.id for c in store.get_all_conversations("u1")] == [first.id, second.id]
    assert first.messages == []
    assert first.chat_id is None


def test_users_are_isolated(store):
    conv = store.create_conversation("u1", "biz-1", "Golden Spoon")

    assert store.get_conversation("u2", conv.id) is None
    assert store.get_all_conversations("u2") == []
    assert store.get_active_conversation("u2") is None


def test_add_message_bumps_last_updated(store):
    conv = store.create_conversation("u1", "biz-1", "Golden Spoon")
    store.add_message("u1", conv.id, "user", "How is the coffee?")
    store.add_message("u1", conv.id, "assistant", "Great.")

    assert [m.role for m in conv.messages] == ["user", "assistant"]
    assert conv.last_updated == conv.messages[-1].timestamp


def test_add_message_to_unknown_conversation_raises(store):
    with pytest.raises(ConversationNotFoundError):
        store.add_message("u1", "conv_missing", "user", "hi")


def test_update_chat_id(store):
    conv = store.create_conversation("u1", "biz-1", "Golden Spoon")
    store.update_chat_id("u1", conv.id, "chat-42")
    assert store.get_conversation("u1", conv.id).chat_id == "chat-42"


def test_set_active_conversation(store):
    first = store.create_conversation("u1", "biz-1", "Golden Spoon")
    store.create_conversation("u1", "biz-1", "Golden Spoon")

    store.set_active_conversation("u1", first.id)
    assert store.get_active_conversation("u1").id == first.id

    with pytest.raises(ConversationNotFoundError):
        store.set_active_conversation("u1", "conv_missing")


def test_delete_clears_active_and_is_idempotent(store):
    conv = store.create_conversation("u1", "biz-1", "Golden Spoon")

    assert store.delete_conversation("u1", conv.id) is True
    assert store.get_active_conversation("u1") is None
    assert store.delete_conversation("u1", conv.id) is False


def test_get_all_returns_a_copy(store):
    store.create_conversation("u1", "biz-1", "Golden Spoon")
    listing = store.get_all_conversations("u1")
    listing.clear()
    assert len(store.get_all_conversations("u1")) == 1


def test_clear_user_conversations(store):
    store.create_conversation("u1", "biz-1", "Golden Spoon")
    store.clear_user_conversations("u1")
    assert store.get_all_conversations("u1") == []
    assert store.get_active_conversation("u1") is None


def test_display_date_is_month_day_year(store):
    conv = store.create_conversation("u1", "biz-1", "Golden Spoon")
    conv.timestamp = "2024-03-05T10:00:00+00:00"
    assert conv.display_date() == "3/5/2024"
