"""LLM client for job description analysis.

Wraps LiteLLM with structured (Pydantic) output, bounded retries and a
single error type so callers can fall back cleanly.
"""

from __future__ import annotations

import asyncio
import logging
import os
from typing import TypeVar

from litellm import Timeout, acompletion
from pydantic import BaseModel, ValidationError

from src.analysis.config import AnalysisConfig, get_analysis_config

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

# LiteLLM loads `.env` into the process environment in DEV mode.
os.environ.setdefault("LITELLM_MODE", "PRODUCTION")


class LLMError(Exception):
    """Exception raised when LLM operations fail."""

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.original_error = original_error


class AnalysisLLM:
    """LLM client used by the AI-backed job analyzer."""

    def __init__(self, config: AnalysisConfig | None = None):
        self.config = config or get_analysis_config()
        self._setup_provider_env()

    def _setup_provider_env(self) -> None:
        """Export provider settings that LiteLLM only reads from the environment."""
        if self.config.llm_base_url and self.config.llm_provider == "anthropic":
            # Anthropic SDK appends /v1 itself
            base_url = self.config.llm_base_url.rstrip("/")
            if base_url.endswith("/v1"):
                base_url = base_url[:-3]
            os.environ["ANTHROPIC_BASE_URL"] = base_url
            if self.config.llm_api_key:
                os.environ["ANTHROPIC_API_KEY"] = self.config.llm_api_key

    def model_name(self) -> str:
        """Return the model name formatted for LiteLLM routing."""
        model = self.config.llm_model
        provider = self.config.llm_provider

        if "/" in model:
            return model
        if provider == "anthropic":
            return f"anthropic/{model}"
        if self.config.llm_base_url:
            # OpenAI-compatible endpoint (local models, proxies)
            return f"openai/{model}"
        if provider == "openai":
            return model
        return f"{provider}/{model}"

    async def generate_structured(
        self,
        prompt: str,
        output_model: type[T],
        system_prompt: str | None = None,
    ) -> T:
        """Generate output validated against ``output_model``.

        Raises:
            LLMError: If the call fails after retries, times out, or the
                response does not validate.
        """
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        attempts = self.config.llm_max_retries + 1
        for attempt in range(attempts):
            try:
                response = await self._call_completion(messages, output_model)
            except Timeout as e:
                raise LLMError(
                    f"LLM request timed out (timeout={self.config.llm_timeout}s)", e
                ) from e
            except Exception as e:
                if attempt + 1 >= attempts:
                    raise LLMError(f"LLM call failed after retries: {e}", e) from e
                wait_time = 2 * (attempt + 1)
                logger.warning(
                    f"LLM call failed (attempt {attempt + 1}), retrying in {wait_time}s: {e}"
                )
                await asyncio.sleep(wait_time)
                continue

            # Parse errors are not retried
            return self._parse_response(response, output_model)

        raise LLMError("LLM call failed: no attempts made")

    async def _call_completion(
        self,
        messages: list[dict],
        response_format: type[BaseModel] | None = None,
    ):
        kwargs = {
            "model": self.model_name(),
            "messages": messages,
            "timeout": self.config.llm_timeout,
        }
        if self.config.llm_api_key:
            kwargs["api_key"] = self.config.llm_api_key
        if self.config.llm_base_url and self.config.llm_provider != "anthropic":
            kwargs["base_url"] = self.config.llm_base_url
        if response_format is not None:
            kwargs["response_format"] = response_format

        return await acompletion(**kwargs)

    def _parse_response(self, response, output_model: type[T]) -> T:
        message = response.choices[0].message
        content = getattr(message, "content", None)

        # Some providers return structured output as tool call arguments
        if content is None:
            tool_calls = getattr(message, "tool_calls", None) or []
            if tool_calls:
                arguments = getattr(getattr(tool_calls[0], "function", None), "arguments", None)
                if isinstance(arguments, str) and arguments.strip():
                    content = arguments

        if not content:
            raise LLMError("LLM returned no content to parse.")

        try:
            return output_model.model_validate_json(extract_json(content))
        except ValidationError as e:
            raise LLMError(f"LLM response failed validation: {e}", e) from e
        except Exception as e:
            raise LLMError(f"Failed to parse LLM response as JSON: {e}", e) from e


def extract_json(content: str) -> str:
    """Strip markdown fences and leading chatter around a JSON object."""
    content = content.strip()

    if content.startswith("```"):
        first_newline = content.find("\n")
        if first_newline != -1:
            content = content[first_newline + 1 :]
        if content.endswith("```"):
            content = content[:-3]
        content = content.strip()

    if content.startswith("{"):
        return content

    start = content.find("{")
    if start == -1:
        return content

    depth = 0
    for idx in range(start, len(content)):
        ch = content[idx]
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return content[start : idx + 1]
    return content
