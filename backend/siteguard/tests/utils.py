from unittest.mock import AsyncMock, MagicMock


def _completion(content: str | None) -> MagicMock:
    # Mock response object mapping the OpenAI API response structure
    mock_message = MagicMock()
    mock_message.content = content
    mock_choice = MagicMock()
    mock_choice.message = mock_message
    mock_response = MagicMock()
    mock_response.choices = [mock_choice]
    return mock_response


def mock_openai_client(*outcomes: str | BaseException) -> tuple[AsyncMock, AsyncMock]:
    """An AsyncOpenAI stand-in answering each chat completion with the next outcome.

    Strings become message content, exceptions are raised from ``create``.
    Returns the client instance and the ``create`` mock for call assertions.
    """
    side_effect = [o if isinstance(o, BaseException) else _completion(o) for o in outcomes]

    mock_completions = MagicMock()
    mock_completions.create = AsyncMock(side_effect=side_effect)

    mock_chat = MagicMock()
    mock_chat.completions = mock_completions

    mock_client_instance = AsyncMock()
    mock_client_instance.chat = mock_chat
    return mock_client_instance, mock_completions.create
