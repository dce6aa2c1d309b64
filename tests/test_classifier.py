"""Tests for memory payload parsing and classification."""

import pytest

from src.errors import ParseError
from src.memory.classifier import classify
from src.memory.models import (
    ConversationPayload,
    FactPayload,
    SummaryPayload,
    parse_payload,
)

# -- parse_payload -----------------------------------------------------------


def test_parse_conversation() -> None:
    payload = parse_payload(
        {
            "type": "conversation",
            "channel": "whatsapp",
            "user_message": "hi",
            "assistant_message": "hello",
            "timestamp": "2026-02-28T10:00:00Z",
        }
    )
    assert isinstance(payload, ConversationPayload)
    assert payload.channel == "whatsapp"


def test_parse_fact_and_summary() -> None:
    fact = parse_payload({"type": "fact", "key": "user_name", "content": "Adrien"})
    summary = parse_payload({"type": "summary", "content": "Trip planning", "channel": "cli"})
    assert isinstance(fact, FactPayload)
    assert isinstance(summary, SummaryPayload)


def test_untyped_payload_with_user_message_is_conversation() -> None:
    """Conversation points are indexed without a type field."""
    payload = parse_payload(
        {"role": "exchange", "user_message": "hi", "assistant_message": "hello"}
    )
    assert isinstance(payload, ConversationPayload)


def test_untyped_payload_without_user_message_is_fact() -> None:
    payload = parse_payload({"content": "Likes coffee"})
    assert isinstance(payload, FactPayload)


def test_null_optional_fields_accepted() -> None:
    payload = parse_payload({"type": "fact", "content": "x", "key": None, "channel": None})
    assert payload.key is None
    assert payload.channel is None


def test_unknown_type_rejected() -> None:
    with pytest.raises(ParseError, match="'reminder'"):
        parse_payload({"type": "reminder", "content": "call mom"})


def test_unknown_type_message_names_the_type() -> None:
    with pytest.raises(ParseError, match="Unrecognized memory payload type"):
        parse_payload({"type": "reminder", "content": "call mom"})


def test_bad_field_reported_as_invalid_field() -> None:
    with pytest.raises(ParseError, match="Invalid conversation payload fields: timestamp") as exc_info:
        parse_payload({"type": "conversation", "user_message": "hi", "timestamp": 1740000000})
    assert "Unrecognized" not in str(exc_info.value)


# -- classify ----------------------------------------------------------------


def test_conversation_attributes_each_actor() -> None:
    payload = ConversationPayload(user_message="test souvenir", assistant_message="réponse test")
    content = classify(payload)
    user_line, assistant_line = content.split("\n")
    assert user_line == "User: test souvenir"
    assert assistant_line == "Assistant: réponse test"


def test_fact_surfaces_key_and_content() -> None:
    assert classify(FactPayload(key="user_name", content="Adrien")) == "user_name: Adrien"


def test_fact_without_key_is_content_only() -> None:
    assert classify(FactPayload(content="Allergic to peanuts")) == "Allergic to peanuts"


def test_summary_is_verbatim() -> None:
    text = "Discussed the Lisbon trip.\nDecided on May."
    assert classify(SummaryPayload(content=text)) == text
