import logging
from collections.abc import Sequence
from datetime import datetime, timezone

from openai import AsyncOpenAI

from app.agent.artifacts import ChatCompletion, LLMMessage
from app.core.config import settings

logger = logging.getLogger(__name__)


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class LLMClient:
    """Chat gateway for any OpenAI-compatible endpoint.

    One instance is built at application startup and shared by all requests;
    the underlying `AsyncOpenAI` client is safe for concurrent use.
    """

    def __init__(
        self,
        model_name: str | None = None,
        base_url: str | None = None,
        api_key: str | None = None,
        temperature: float | None = None,
    ):
        self.model_name = model_name or settings.MODEL_DEFAULT
        self.temperature = settings.LLM_TEMPERATURE if temperature is None else temperature
        self.client = AsyncOpenAI(
            base_url=base_url or settings.LLM_BASE_URL,
            api_key=api_key or settings.LLM_API_KEY,
        )

    def _sampling_options(self) -> dict:
        # gpt-5 models only accept their default temperature
        if self.model_name.lower().startswith("gpt-5") or self.temperature is None:
            return {}
        return {"temperature": self.temperature}

    async def generate_chat(self, messages: Sequence[LLMMessage]) -> ChatCompletion:
        """
        Send the formatted messages and return the generated text with the time it arrived.
        Provider errors propagate unchanged; there is no retry.
        """
        logger.info("Requesting chat completion from %s (%s messages)", self.model_name, len(messages))
        try:
            completion = await self.client.chat.completions.create(
                model=self.model_name,
                messages=[message.to_openai() for message in messages],
                **self._sampling_options(),
            )
        except Exception as e:
            logger.error("Chat completion via %s failed: %s", self.model_name, e)
            raise

        if not completion.choices:
            logger.error("Chat completion via %s came back empty", self.model_name)
            raise ValueError(f"Model {self.model_name} returned no choices")

        content = completion.choices[0].message.content or ""
        logger.info("Chat completion received from %s", self.model_name)
        return ChatCompletion(content=content, timestamp=utc_timestamp())
