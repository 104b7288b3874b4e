from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from app.agent.artifacts import LLMMessage
from app.agent.llm_client import LLMClient


def _mock_openai(content: str | None = "A fresh idea", choices: bool = True):
    mock_message = MagicMock()
    mock_message.content = content

    mock_choice = MagicMock()
    mock_choice.message = mock_message

    mock_response = MagicMock()
    mock_response.choices = [mock_choice] if choices else []

    mock_completions = MagicMock()
    mock_completions.create = AsyncMock(return_value=mock_response)

    mock_chat = MagicMock()
    mock_chat.completions = mock_completions

    mock_client_instance = AsyncMock()
    mock_client_instance.chat = mock_chat
    return mock_client_instance, mock_completions


MESSAGES = [
    LLMMessage(role="system", content="You are Buildsy AI."),
    LLMMessage(role="human", content="Suggest a project"),
]


@pytest.mark.asyncio
async def test_generate_chat_maps_roles_and_returns_timestamped_text():
    mock_client_instance, mock_completions = _mock_openai("Project: Recipe Box")

    with patch("app.agent.llm_client.AsyncOpenAI", return_value=mock_client_instance):
        with patch("app.agent.llm_client.settings.LLM_API_KEY", "dummy_key"):
            client = LLMClient(model_name="test-model", temperature=0.7)

            result = await client.generate_chat(MESSAGES)

            assert result.content == "Project: Recipe Box"
            assert result.timestamp.endswith("Z")
            mock_completions.create.assert_called_once_with(
                model="test-model",
                messages=[
                    {"role": "system", "content": "You are Buildsy AI."},
                    {"role": "user", "content": "Suggest a project"},
                ],
                temperature=0.7,
            )


@pytest.mark.asyncio
async def test_gpt5_models_omit_temperature():
    mock_client_instance, mock_completions = _mock_openai()

    with patch("app.agent.llm_client.AsyncOpenAI", return_value=mock_client_instance):
        client = LLMClient(model_name="gpt-5-mini", api_key="dummy_key", temperature=0.2)
        await client.generate_chat(MESSAGES)

        assert "temperature" not in mock_completions.create.call_args.kwargs


@pytest.mark.asyncio
async def test_empty_choices_raise():
    mock_client_instance, _ = _mock_openai(choices=False)

    with patch("app.agent.llm_client.AsyncOpenAI", return_value=mock_client_instance):
        client = LLMClient(model_name="test-model", api_key="dummy_key")

        with pytest.raises(ValueError):
            await client.generate_chat(MESSAGES)


@pytest.mark.asyncio
async def test_provider_errors_propagate_without_retry():
    mock_client_instance, mock_completions = _mock_openai()
    mock_completions.create.side_effect = RuntimeError("rate limited")

    with patch("app.agent.llm_client.AsyncOpenAI", return_value=mock_client_instance):
        client = LLMClient(model_name="test-model", api_key="dummy_key")

        with pytest.raises(RuntimeError, match="rate limited"):
            await client.generate_chat(MESSAGES)
        mock_completions.create.assert_called_once()
