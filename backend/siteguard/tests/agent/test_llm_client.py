from unittest.mock import patch

import pytest
from pydantic import BaseModel

from siteguard.agent.llm_client import (
    USAGE_LIMIT_MESSAGE,
    AIServiceError,
    AIUsageLimitExceeded,
    ImageInput,
    LLMClient,
    _json_candidates,
    is_quota_error,
)
from siteguard.tests.utils import mock_openai_client


class DummyModel(BaseModel):
    name: str
    age: int


@pytest.mark.asyncio
async def test_llm_client_json_parsing():
    mock_client_instance, create = mock_openai_client('{"name": "Alice", "age": 30}')

    with patch("siteguard.agent.llm_client.AsyncOpenAI", return_value=mock_client_instance):
        with patch("siteguard.agent.llm_client.settings.LLM_API_KEY", "dummy_key"):
            client = LLMClient(model_name="test-model")

            result = await client.generate_structured(
                system_prompt="You are a helpful assistant.",
                user_prompt="Give me Alice's details",
                response_schema=DummyModel,
            )

            assert isinstance(result, DummyModel)
            assert result.name == "Alice"
            assert result.age == 30
            create.assert_called_once()
            assert create.call_args.kwargs["model"] == "test-model"


@pytest.mark.asyncio
async def test_llm_client_reads_fenced_json_with_chatter():
    mock_client_instance, _ = mock_openai_client(
        'Sure! Here it is:\n```json\n{"name": "Bola", "age": 41}\n```\nLet me know.'
    )

    with patch("siteguard.agent.llm_client.AsyncOpenAI", return_value=mock_client_instance):
        with patch("siteguard.agent.llm_client.settings.LLM_API_KEY", "dummy_key"):
            result = await LLMClient().generate_structured("sys", "user", DummyModel)

    assert result == DummyModel(name="Bola", age=41)


@pytest.mark.asyncio
async def test_llm_client_retries_once_then_raises():
    mock_client_instance, create = mock_openai_client("not json", '{"name": "Chi"}')

    with patch("siteguard.agent.llm_client.AsyncOpenAI", return_value=mock_client_instance):
        with patch("siteguard.agent.llm_client.settings.LLM_API_KEY", "dummy_key"):
            with pytest.raises(ValueError):
                await LLMClient().generate_structured("sys", "user", DummyModel)

    assert create.call_count == 2
    retry_messages = create.call_args_list[1].kwargs["messages"]
    assert "could not be parsed" in retry_messages[0]["content"]
    assert create.call_args_list[1].kwargs["temperature"] == 0


@pytest.mark.asyncio
async def test_llm_client_recovers_on_retry():
    mock_client_instance, create = mock_openai_client("", '{"name": "Dayo", "age": 7}')

    with patch("siteguard.agent.llm_client.AsyncOpenAI", return_value=mock_client_instance):
        with patch("siteguard.agent.llm_client.settings.LLM_API_KEY", "dummy_key"):
            result = await LLMClient().generate_structured("sys", "user", DummyModel)

    assert result.name == "Dayo"
    assert create.call_count == 2


@pytest.mark.asyncio
async def test_quota_errors_become_usage_limit():
    mock_client_instance, create = mock_openai_client(
        Exception("429 RESOURCE_EXHAUSTED: You exceeded your current quota")
    )

    with patch("siteguard.agent.llm_client.AsyncOpenAI", return_value=mock_client_instance):
        with patch("siteguard.agent.llm_client.settings.LLM_API_KEY", "dummy_key"):
            with pytest.raises(AIUsageLimitExceeded) as exc_info:
                await LLMClient().generate_structured("sys", "user", DummyModel)

    assert str(exc_info.value) == USAGE_LIMIT_MESSAGE
    create.assert_called_once()


@pytest.mark.asyncio
async def test_other_provider_errors_become_service_errors():
    mock_client_instance, _ = mock_openai_client(ConnectionError("connection reset"))

    with patch("siteguard.agent.llm_client.AsyncOpenAI", return_value=mock_client_instance):
        with patch("siteguard.agent.llm_client.settings.LLM_API_KEY", "dummy_key"):
            with pytest.raises(AIServiceError) as exc_info:
                await LLMClient().generate_text("sys", "user")

    assert not isinstance(exc_info.value, AIUsageLimitExceeded)


@pytest.mark.asyncio
async def test_image_is_sent_as_data_url():
    mock_client_instance, create = mock_openai_client('{"name": "Photo", "age": 1}')
    image = ImageInput(data=b"\x89PNG", mime_type="image/png")

    with patch("siteguard.agent.llm_client.AsyncOpenAI", return_value=mock_client_instance):
        with patch("siteguard.agent.llm_client.settings.LLM_API_KEY", "dummy_key"):
            await LLMClient().generate_structured("sys", "describe", DummyModel, image=image)

    user_content = create.call_args.kwargs["messages"][1]["content"]
    assert user_content[0]["image_url"]["url"] == "data:image/png;base64,iVBORw=="
    assert user_content[1] == {"type": "text", "text": "describe"}


@pytest.mark.asyncio
async def test_generate_text_rejects_empty_content():
    mock_client_instance, _ = mock_openai_client("   ")

    with patch("siteguard.agent.llm_client.AsyncOpenAI", return_value=mock_client_instance):
        with patch("siteguard.agent.llm_client.settings.LLM_API_KEY", "dummy_key"):
            with pytest.raises(AIServiceError):
                await LLMClient().generate_text("sys", "user")


def test_missing_api_key_is_a_service_error():
    with patch("siteguard.agent.llm_client.settings.LLM_API_KEY", None):
        with patch("siteguard.agent.llm_client.settings.GEMINI_API_KEY", None):
            with pytest.raises(AIServiceError):
                LLMClient()


class _StatusError(Exception):
    status_code = 429


def test_is_quota_error():
    assert is_quota_error(_StatusError("too many requests"))
    assert is_quota_error(Exception("You exceeded your current quota"))
    assert not is_quota_error(Exception("Internal server error"))


def test_json_candidates_prefers_fenced_block():
    text = 'Result:\n```json\n{"a": 1}\n```\ntrailing {"b": 2}'

    candidates = _json_candidates(text)

    assert candidates[0] == '{"a": 1}'
    assert _json_candidates("") == []
