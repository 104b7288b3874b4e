import logging
from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from app.agent.artifacts import LLMMessage
from app.agent.prompt_registry import resolve_prompt

logger = logging.getLogger(__name__)


class HistoryEntry(Protocol):
    role: str
    content: str


def _history_role(role: str) -> str:
    if role == "assistant":
        return "assistant"
    # user, system and anything unrecognised are sent as human turns
    return "human"


def format_conversation(
    messages: Sequence[HistoryEntry],
    context: str | None,
    additional_params: Mapping[str, Any] | None = None,
) -> list[LLMMessage]:
    """
    Build the message list sent to the model for a chat exchange.

    A lone user message goes through the resolved template as-is: system prompt
    followed by the user text. Any other history is sent as one system prompt,
    the earlier entries mapped role-for-role, and the final entry as a human turn.
    """
    if not messages:
        raise ValueError("At least one message is required")

    resolved = resolve_prompt(context, additional_params)

    if len(messages) == 1 and messages[0].role == "user":
        formatted = resolved.template.format_messages(resolved.params, messages[0].content)
        logger.debug("Formatted single-turn prompt for context %r", context)
        return formatted

    system_prompt = resolved.template.format_system(resolved.params)
    formatted = [LLMMessage(role="system", content=system_prompt)]
    formatted.extend(
        LLMMessage(role=_history_role(msg.role), content=msg.content)
        for msg in messages[:-1]
    )
    formatted.append(LLMMessage(role="human", content=messages[-1].content))
    logger.debug(
        "Formatted %s-turn conversation for context %r", len(messages), context
    )
    return formatted
