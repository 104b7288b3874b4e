import logging

from app.agent.artifacts import ChatCompletion, ChatTurn
from app.agent.conversation import format_conversation
from app.agent.llm_client import LLMClient
from app.core.errors import ChatGenerationError

logger = logging.getLogger(__name__)


class ChatAgent:
    """
    Agent that answers one brainstorming turn: resolves the context prompt,
    formats the history and asks the model for the next assistant message.
    """

    def __init__(self, llm: LLMClient | None = None, model_name: str | None = None):
        self.llm = llm or LLMClient(model_name=model_name)

    async def run(self, input_data: ChatTurn) -> ChatCompletion:
        logger.info("Processing chat messages with context: %s", input_data.context)
        try:
            messages = format_conversation(
                input_data.messages,
                input_data.context,
                input_data.additional_params,
            )
            completion = await self.llm.generate_chat(messages)
        except Exception as e:
            logger.error("Chat generation failed for context %r: %s", input_data.context, e)
            raise ChatGenerationError() from e

        logger.info("AI response generated successfully for context: %s", input_data.context)
        return completion
