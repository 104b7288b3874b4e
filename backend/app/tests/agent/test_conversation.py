import pytest

from app.agent.artifacts import ChatTurnMessage
from app.agent.conversation import format_conversation


def _msg(role: str, content: str) -> ChatTurnMessage:
    return ChatTurnMessage(role=role, content=content)


def test_single_user_message_yields_system_then_human():
    formatted = format_conversation([_msg("user", "I want to build something with maps")], "general")

    assert len(formatted) == 2
    assert formatted[0].role == "system"
    assert "Current context: general" in formatted[0].content
    assert formatted[1].role == "human"
    assert formatted[1].content == "I want to build something with maps"
    assert formatted[1].to_openai() == {"role": "user", "content": "I want to build something with maps"}


def test_multi_turn_history_preserves_count_and_roles():
    history = [
        _msg("user", "Give me an idea"),
        _msg("assistant", "How about a recipe app?"),
        _msg("system", "Be brief"),
        _msg("user", "Make it harder"),
    ]

    formatted = format_conversation(history, "refinement", {"skillLevel": "advanced"})

    assert len(formatted) == len(history) + 1
    assert [m.role for m in formatted] == ["system", "human", "assistant", "human", "human"]
    assert [m.content for m in formatted[1:]] == [m.content for m in history]
    assert "User's skill level: advanced" in formatted[0].content
    assert "Available time: Not specified" in formatted[0].content


def test_final_message_is_sent_as_human_even_when_from_assistant():
    history = [_msg("user", "Hi"), _msg("assistant", "Hello there")]

    formatted = format_conversation(history, None)

    assert formatted[-1].role == "human"
    assert formatted[-1].content == "Hello there"


def test_lone_assistant_message_takes_multi_turn_path():
    formatted = format_conversation([_msg("assistant", "Welcome back")], "features")

    assert [m.role for m in formatted] == ["system", "human"]
    assert "Project concept: Not specified" in formatted[0].content


def test_empty_history_is_rejected():
    with pytest.raises(ValueError):
        format_conversation([], "general")
