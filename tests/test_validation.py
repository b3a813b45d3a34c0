"""Tests for conversation validation rules and export normalization."""

from __future__ import annotations

from pagelogue.export import normalize_conversation, validate_conversation
from pagelogue.export.validation import LONG_MESSAGE_WARNING_LENGTH
from pagelogue.lib.models import ConversationData, ConversationMessage
from pagelogue.lib.roles import Role
from tests.factories import make_data


# =============================================================================
# Fatal rules
# =============================================================================


def test_well_formed_conversation_passes():
    result = validate_conversation(make_data())
    assert result.is_valid
    assert result.data_integrity
    assert result.errors == []
    assert result.warnings == []
    assert result.message_count == 2


def test_blank_title_is_fatal():
    result = validate_conversation(make_data(title="   "))
    assert not result.is_valid
    assert result.errors == ["Missing conversation title"]


def test_unrecognized_role_is_fatal():
    data = make_data()
    rogue = ConversationMessage.model_construct(role="system", content="You are helpful", timestamp=None, metadata=None)
    data = data.model_copy(update={"messages": [*data.messages, rogue]})

    result = validate_conversation(data)

    assert "Message 2 has invalid role: system" in result.errors
    assert not result.data_integrity


# =============================================================================
# Non-fatal rules
# =============================================================================


def test_empty_conversation_is_only_a_warning():
    data = ConversationData(title="Empty", messages=[], metadata=make_data().metadata)
    result = validate_conversation(data)
    assert result.is_valid
    assert result.warnings == ["No messages found in conversation"]


def test_first_message_from_assistant_warns():
    result = validate_conversation(make_data((Role.ASSISTANT, "Hi"), (Role.USER, "Hello")))
    assert result.is_valid
    assert "Conversation does not start with user message" in result.warnings


def test_consecutive_same_role_warns():
    data = make_data((Role.USER, "q"), (Role.ASSISTANT, "a1"), (Role.ASSISTANT, "a2"))
    result = validate_conversation(data)
    assert result.is_valid
    assert result.warnings == ["Messages 1 and 2 have same role (assistant)"]


def test_unsafe_markup_warns_once():
    data = make_data(
        (Role.USER, "What does <script>alert(1)</script> do?"),
        (Role.ASSISTANT, 'Links like <a href="javascript:void(0)" onclick = "x()"> run code.'),
    )
    result = validate_conversation(data)
    assert result.is_valid
    assert result.warnings == ["Messages contain potentially unsafe HTML/script content"]


def test_plain_words_starting_with_on_are_safe():
    result = validate_conversation(make_data((Role.USER, "Turn the oven on = later"), (Role.ASSISTANT, "online")))
    assert result.warnings == []


def test_assignments_outside_tags_are_safe():
    data = make_data((Role.USER, "Set one = 1 then print it"), (Role.ASSISTANT, "onload = init; x = onerror=2"))
    assert validate_conversation(data).warnings == []


def test_event_handler_attribute_in_tag_warns():
    data = make_data((Role.USER, "Why does this fire?"), (Role.ASSISTANT, '<img src="x.png" onerror = "fix()">'))
    assert validate_conversation(data).warnings == ["Messages contain potentially unsafe HTML/script content"]


def test_long_message_warns():
    data = make_data((Role.USER, "q"), (Role.ASSISTANT, "x" * (LONG_MESSAGE_WARNING_LENGTH + 1)))
    result = validate_conversation(data)
    assert result.is_valid
    assert result.warnings == [f"Message 1 is unusually long ({LONG_MESSAGE_WARNING_LENGTH + 1} chars)"]


# =============================================================================
# Normalization
# =============================================================================


def test_normalization_is_idempotent():
    data = make_data((Role.USER, "  spaced   out \n\n\n\n text "), (Role.ASSISTANT, "```\nkeep    this\n```"))
    data = data.model_copy(update={"title": "  My   Chat  "})

    once = normalize_conversation(data)

    assert once.title == "My Chat"
    assert once.messages[0].content == "spaced out\n\ntext"
    assert once.messages[1].content == "```\nkeep    this\n```"
    assert normalize_conversation(once) == once


def test_normalization_sets_total_messages():
    data = make_data()
    data = data.model_copy(update={"metadata": data.metadata.model_copy(update={"total_messages": 99})})
    assert normalize_conversation(data).metadata.total_messages == 2


def test_include_flags_drop_fields():
    data = make_data()

    no_timestamps = normalize_conversation(data, include_timestamps=False)
    assert all(m.timestamp is None for m in no_timestamps.messages)
    assert all(m.metadata is not None for m in no_timestamps.messages)

    no_metadata = normalize_conversation(data, include_metadata=False)
    assert all(m.metadata is None for m in no_metadata.messages)

    no_snippet = normalize_conversation(data, include_raw_snippet=False)
    assert all(m.metadata.raw_snippet is None for m in no_snippet.messages)
    assert [m.metadata.message_id for m in no_snippet.messages] == ["msg-0", "msg-1"]
