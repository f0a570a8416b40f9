"""
Unit tests for LLMService.

Tests cover:
- Configuration loading
- Model alias resolution and parameter filtering
- Completion results (content, tool calls, usage)
- Retry logic and error handling
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from todoflow.infrastructure.llm.llm_service import LLMService


@pytest.fixture
def mock_config(tmp_path):
    """Create temporary config file."""
    config_content = """
default_model: "main"
models:
  main: "gpt-4.1"
  fast: "gpt-4.1-mini"
model_params:
  gpt-4.1:
    temperature: 0.2
    max_tokens: 1000
    reasoning: "ignored"
default_params:
  temperature: 0.7
retry_policy:
  max_attempts: 3
  backoff_multiplier: 2
  timeout: 30
  retry_on_errors:
    - "RateLimitError"
logging:
  log_token_usage: true
"""
    config_file = tmp_path / "llm_config.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return str(config_file)


@pytest.fixture
def service(mock_config):
    return LLMService(config_path=mock_config)


def _response(content="ok", tool_calls=None, total_tokens=42):
    message = MagicMock()
    message.content = content
    message.tool_calls = tool_calls
    response = MagicMock()
    response.choices = [MagicMock(message=message)]
    response.usage = MagicMock(total_tokens=total_tokens, prompt_tokens=30, completion_tokens=12)
    return response


def _tool_call(call_id, name, arguments):
    call = MagicMock()
    call.id = call_id
    call.function.name = name
    call.function.arguments = arguments
    return call


class TestLLMServiceConfig:
    def test_init_loads_config(self, service):
        assert service.default_model == "main"
        assert service.models["fast"] == "gpt-4.1-mini"
        assert service.retry_policy.max_attempts == 3

    def test_missing_config_raises(self):
        with pytest.raises(FileNotFoundError):
            LLMService(config_path="nonexistent.yaml")

    def test_empty_config_raises(self, tmp_path):
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("", encoding="utf-8")
        with pytest.raises(ValueError, match="empty or invalid"):
            LLMService(config_path=str(config_file))

    def test_config_without_models_raises(self, tmp_path):
        config_file = tmp_path / "no_models.yaml"
        config_file.write_text('default_model: "main"\n', encoding="utf-8")
        with pytest.raises(ValueError, match="at least one model"):
            LLMService(config_path=str(config_file))

    def test_resolve_model(self, service):
        assert service._resolve_model(None) == "gpt-4.1"
        assert service._resolve_model("fast") == "gpt-4.1-mini"
        assert service._resolve_model("claude-x") == "claude-x"

    def test_model_family_prefix_parameters(self, service):
        assert service._get_model_parameters("gpt-4.1-mini")["temperature"] == 0.2
        assert service._get_model_parameters("other-model") == {"temperature": 0.7}


class TestLLMServiceComplete:
    @pytest.mark.asyncio
    async def test_complete_returns_content_and_usage(self, service):
        with patch("litellm.acompletion", new_callable=AsyncMock) as mock_completion:
            mock_completion.return_value = _response('{"ok": true}')

            result = await service.complete(
                [{"role": "user", "content": "hi"}],
                model="fast",
                response_format={"type": "json_object"},
            )

        assert result["success"] is True
        assert result["content"] == '{"ok": true}'
        assert result["tool_calls"] == []
        assert result["usage"]["total_tokens"] == 42
        kwargs = mock_completion.await_args.kwargs
        assert kwargs["model"] == "gpt-4.1-mini"
        assert kwargs["response_format"] == {"type": "json_object"}
        assert kwargs["timeout"] == 30
        assert "reasoning" not in kwargs

    @pytest.mark.asyncio
    async def test_complete_normalizes_tool_calls(self, service):
        calls = [
            _tool_call("c1", "createTodo", '{"content": "buy milk"}'),
            _tool_call("c2", "listTodos", "not json"),
        ]
        with patch("litellm.acompletion", new_callable=AsyncMock) as mock_completion:
            mock_completion.return_value = _response(None, tool_calls=calls)

            result = await service.complete([{"role": "user", "content": "add buy milk"}])

        assert result["tool_calls"] == [
            {"id": "c1", "name": "createTodo", "arguments": {"content": "buy milk"}},
            {"id": "c2", "name": "listTodos", "arguments": {}},
        ]

    @pytest.mark.asyncio
    async def test_retries_on_configured_errors(self, service):
        class RateLimitError(Exception):
            pass

        with patch("litellm.acompletion", new_callable=AsyncMock) as mock_completion, patch(
            "todoflow.infrastructure.llm.llm_service.asyncio.sleep", new_callable=AsyncMock
        ) as mock_sleep:
            mock_completion.side_effect = [RateLimitError("slow down"), _response("ok")]

            result = await service.complete([{"role": "user", "content": "hi"}])

        assert result["success"] is True
        assert mock_completion.await_count == 2
        mock_sleep.assert_awaited_once_with(1.0)

    @pytest.mark.asyncio
    async def test_non_retryable_error_returns_failure(self, service):
        with patch("litellm.acompletion", new_callable=AsyncMock) as mock_completion:
            mock_completion.side_effect = ValueError("bad request")

            result = await service.complete([{"role": "user", "content": "hi"}])

        assert result["success"] is False
        assert result["error"] == "bad request"
        assert result["error_type"] == "ValueError"
        assert mock_completion.await_count == 1
