"""
OpenAI Service

Thin wrapper over the AsyncOpenAI chat-completions endpoint. Every provider
failure is translated into the generation exception hierarchy here, so the
rest of the code never handles openai exception types directly.
"""

from typing import Any, Dict, List, Optional

import openai
from openai import AsyncOpenAI

from promptdeck.agents.generation.config import AIConfig, get_ai_config
from promptdeck.agents.generation.exceptions import (
    AIAuthError,
    AIBadRequestError,
    AIGenerationError,
    AINetworkError,
    AIRateLimitError,
    AITimeoutError,
    ProviderUnavailableError,
)
from promptdeck.setup_logging_optimized import get_logger

logger = get_logger(__name__)


def _status_code(error: Exception) -> Optional[int]:
    if hasattr(error, 'status_code'):
        return error.status_code
    if hasattr(error, 'response') and hasattr(error.response, 'status_code'):
        return error.response.status_code
    return None


def translate_openai_error(error: Exception, model: str) -> AIGenerationError:
    """Map an openai SDK exception to the generation error hierarchy."""
    context = {'model': model}

    # Timeout must be checked first: APITimeoutError subclasses APIConnectionError
    if isinstance(error, openai.APITimeoutError):
        return AITimeoutError("AI request timed out", cause=error, context=context)
    if isinstance(error, openai.APIConnectionError):
        return AINetworkError("Could not reach the AI service", cause=error, context=context)

    error_code = _status_code(error)
    context['status'] = error_code

    if error_code in (401, 403):
        logger.warning(f"AI service rejected credentials ({error_code})")
        return AIAuthError("AI service rejected the API key", cause=error, context=context)
    if error_code == 429:
        logger.warning(f"Rate limit exceeded (429): {error}")
        return AIRateLimitError("Rate limit exceeded", cause=error, context=context)
    if error_code == 400:
        return AIBadRequestError("AI service rejected the request", cause=error, context=context)
    if error_code is not None and error_code >= 500:
        logger.warning(f"AI service error ({error_code}): {error}")
        return ProviderUnavailableError(
            f"AI service unavailable (HTTP {error_code})", cause=error, context=context
        )
    return AIGenerationError(f"AI request failed: {error}", cause=error, context=context)


class OpenAIService:
    """Chat-completion client returning raw JSON text."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        config: Optional[AIConfig] = None,
        client: Optional[AsyncOpenAI] = None,
    ):
        self.config = config or get_ai_config()
        self.api_key = api_key if api_key is not None else self.config.api_key
        self.model = self.config.model
        self.client = client or AsyncOpenAI(
            api_key=self.api_key,
            base_url=self.config.base_url,
            max_retries=0,
        )

    async def complete_json(self, system_prompt: str, user_prompt: str) -> Optional[str]:
        """Run one JSON-mode completion; returns the message content (may be empty)."""
        messages: List[Dict[str, str]] = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]
        logger.info(f"Requesting completion from {self.model} ({len(user_prompt)} prompt chars)")
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=self.config.temperature,
                max_tokens=self.config.max_tokens,
                response_format={"type": "json_object"},
            )
        except openai.OpenAIError as e:
            raise translate_openai_error(e, self.model)

        if not response.choices:
            return None
        return response.choices[0].message.content

    async def list_models(self) -> Any:
        """Cheapest authenticated call; used to check a key."""
        try:
            return await self.client.models.list()
        except openai.OpenAIError as e:
            raise translate_openai_error(e, self.model)
