"""
LLM Service for centralized LLM interactions.

Wraps `litellm.acompletion` with model alias resolution, per-model default
parameters, retry with exponential backoff and token usage extraction.
Model failures are returned as `{"success": False, ...}` dicts instead of
being raised, so the LLM-backed collaborators can map them onto their own
`success=False` results.
"""

import asyncio
import json
import os
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import litellm
import structlog
import yaml

PASSTHROUGH_PARAMS = {"tools", "tool_choice", "response_format"}
ALLOWED_PARAMS = {
    "temperature",
    "top_p",
    "max_tokens",
    "frequency_penalty",
    "presence_penalty",
}


@dataclass
class RetryPolicy:
    """Retry policy configuration."""

    max_attempts: int = 3
    backoff_multiplier: float = 2.0
    timeout: int = 30
    retry_on_errors: list[str] = field(default_factory=list)


class LLMService:
    """
    Centralized service for LLM interactions.

    Configuration is read from a YAML file with the sections `default_model`,
    `models` (alias -> model name), `model_params`, `default_params`,
    `retry_policy` and `logging`.
    """

    def __init__(self, config_path: str = "configs/llm_config.yaml"):
        """
        Initialize LLMService with configuration.

        Args:
            config_path: Path to YAML configuration file

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        self.logger = structlog.get_logger().bind(component="llm_service")
        self._load_config(config_path)

        if not os.getenv(self.api_key_env):
            self.logger.warning(
                "llm.api_key_missing",
                env_var=self.api_key_env,
                hint="Set environment variable for API access",
            )

        self.logger.info(
            "llm.service_initialized",
            default_model=self.default_model,
            model_aliases=list(self.models.keys()),
        )

    def _load_config(self, config_path: str) -> None:
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"LLM config not found: {config_path}")

        with open(config_file, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)

        if config is None:
            raise ValueError(f"Config file is empty or invalid: {config_path}")

        self.default_model = config.get("default_model", "main")
        self.models: dict[str, str] = config.get("models", {})
        self.model_params: dict[str, dict[str, Any]] = config.get("model_params", {})
        self.default_params: dict[str, Any] = config.get("default_params", {})

        if not self.models:
            raise ValueError("Config must define at least one model in 'models' section")

        retry_config = config.get("retry_policy", {})
        self.retry_policy = RetryPolicy(
            max_attempts=retry_config.get("max_attempts", 3),
            backoff_multiplier=retry_config.get("backoff_multiplier", 2.0),
            timeout=retry_config.get("timeout", 30),
            retry_on_errors=retry_config.get("retry_on_errors", []),
        )

        self.logging_config = config.get("logging", {})
        self.api_key_env = config.get("providers", {}).get("openai", {}).get(
            "api_key_env", "OPENAI_API_KEY"
        )

    def _resolve_model(self, model_alias: str | None) -> str:
        """Resolve a model alias to the actual model name (unknown aliases pass through)."""
        if model_alias is None:
            model_alias = self.default_model
        return self.models.get(model_alias, model_alias)

    def _get_model_parameters(self, model: str) -> dict[str, Any]:
        """Exact model match first, then model family prefix, then defaults."""
        if model in self.model_params:
            return self.model_params[model].copy()
        for model_key, params in self.model_params.items():
            if model.startswith(model_key):
                return params.copy()
        return self.default_params.copy()

    @staticmethod
    def _filter_parameters(params: dict[str, Any]) -> dict[str, Any]:
        return {
            key: value
            for key, value in params.items()
            if key in ALLOWED_PARAMS or key in PASSTHROUGH_PARAMS
        }

    @staticmethod
    def _extract_tool_calls(message: Any) -> list[dict[str, Any]]:
        """Normalize tool calls from a completion message into plain dicts."""
        tool_calls = getattr(message, "tool_calls", None) or []
        normalized = []
        for call in tool_calls:
            function = getattr(call, "function", None)
            if function is None:
                continue
            raw_arguments = getattr(function, "arguments", None) or "{}"
            try:
                arguments = json.loads(raw_arguments)
            except (TypeError, ValueError):
                arguments = {}
            normalized.append(
                {
                    "id": getattr(call, "id", None),
                    "name": function.name,
                    "arguments": arguments if isinstance(arguments, dict) else {},
                }
            )
        return normalized

    @staticmethod
    def _extract_usage(response: Any) -> dict[str, int]:
        usage = getattr(response, "usage", None) or {}
        if isinstance(usage, dict):
            return {key: int(value) for key, value in usage.items() if isinstance(value, (int, float))}
        return {
            "total_tokens": getattr(usage, "total_tokens", 0) or 0,
            "prompt_tokens": getattr(usage, "prompt_tokens", 0) or 0,
            "completion_tokens": getattr(usage, "completion_tokens", 0) or 0,
        }

    async def complete(
        self,
        messages: list[dict[str, Any]],
        model: str | None = None,
        **kwargs: Any,
    ) -> dict[str, Any]:
        """
        Perform LLM completion with retry logic.

        Args:
            messages: List of message dicts with 'role' and 'content'
            model: Model alias or None (uses default)
            **kwargs: Parameter overrides (temperature, max_tokens, tools, ...)

        Returns:
            Dict with:
            - success: bool
            - content: str | None (if successful)
            - tool_calls: list of {id, name, arguments} (if successful)
            - usage: Dict with token counts
            - latency_ms: int
            - error: str (if failed)
        """
        actual_model = self._resolve_model(model)
        params = self._filter_parameters({**self._get_model_parameters(actual_model), **kwargs})

        for attempt in range(self.retry_policy.max_attempts):
            try:
                start_time = time.time()
                self.logger.info(
                    "llm.completion.started",
                    model=actual_model,
                    attempt=attempt + 1,
                    message_count=len(messages),
                )

                response = await litellm.acompletion(
                    model=actual_model,
                    messages=messages,
                    timeout=self.retry_policy.timeout,
                    **params,
                )

                message = response.choices[0].message
                token_stats = self._extract_usage(response)
                latency_ms = int((time.time() - start_time) * 1000)

                if self.logging_config.get("log_token_usage", True):
                    self.logger.info(
                        "llm.completion.success",
                        model=actual_model,
                        tokens=token_stats.get("total_tokens", 0),
                        latency_ms=latency_ms,
                    )

                return {
                    "success": True,
                    "content": getattr(message, "content", None),
                    "tool_calls": self._extract_tool_calls(message),
                    "usage": token_stats,
                    "model": actual_model,
                    "latency_ms": latency_ms,
                }

            except Exception as e:
                error_type = type(e).__name__
                error_msg = str(e)

                should_retry = attempt < self.retry_policy.max_attempts - 1 and any(
                    err_type in error_type or err_type in error_msg
                    for err_type in self.retry_policy.retry_on_errors
                )

                if should_retry:
                    backoff_time = self.retry_policy.backoff_multiplier**attempt
                    self.logger.warning(
                        "llm.completion.retry",
                        model=actual_model,
                        error_type=error_type,
                        attempt=attempt + 1,
                        backoff_seconds=backoff_time,
                    )
                    await asyncio.sleep(backoff_time)
                else:
                    self.logger.error(
                        "llm.completion.failed",
                        model=actual_model,
                        error_type=error_type,
                        error=error_msg[:200],
                        attempts=attempt + 1,
                    )
                    return {
                        "success": False,
                        "error": error_msg,
                        "error_type": error_type,
                        "model": actual_model,
                    }

        return {
            "success": False,
            "error": "Max retries exceeded",
            "model": actual_model,
        }
