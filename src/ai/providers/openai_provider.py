"""OpenAI provider adapter."""

from typing import Any, Optional

from openai import AsyncOpenAI

import constants
from ai.providers.base import BaseProvider
from log import get_logger
from models.requests import AIRequest

logger = get_logger(__name__)


class OpenAIProvider(BaseProvider):
    """Calls the OpenAI Chat Completions API.

    The message list is sent as-is, role structure included.
    """

    name = constants.PROVIDER_OPENAI

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        default_model: Optional[str] = None,
    ) -> None:
        """Initialize adapter and the underlying async client."""
        super().__init__(api_key, base_url, default_model)
        client_kwargs: dict[str, Any] = {"api_key": api_key, "max_retries": 0}
        if base_url:
            client_kwargs["base_url"] = base_url
        self._client = AsyncOpenAI(**client_kwargs)

    def _call_kwargs(self, request: AIRequest, timeout: float) -> dict[str, Any]:
        """Build keyword arguments for chat completion call."""
        call_kwargs: dict[str, Any] = {
            "model": request.model,
            "messages": [message.model_dump() for message in request.messages],
            "timeout": timeout,
        }
        if request.temperature is not None:
            call_kwargs["temperature"] = request.temperature
        if request.max_tokens is not None:
            call_kwargs["max_tokens"] = request.max_tokens
        if request.wants_json:
            call_kwargs["response_format"] = {"type": "json_object"}
        return call_kwargs

    async def invoke(self, request: AIRequest, timeout: float) -> str:
        """Send chat completion request and return first completion's text."""
        call_kwargs = self._call_kwargs(request, timeout)

        if request.stream:
            logger.debug("Streaming completion from model %s", request.model)
            stream = await self._client.chat.completions.create(
                stream=True, **call_kwargs
            )
            parts: list[str] = []
            async for chunk in stream:
                if chunk.choices:
                    parts.append(chunk.choices[0].delta.content or "")
            return self._ensure_content("".join(parts))

        response = await self._client.chat.completions.create(**call_kwargs)
        content = response.choices[0].message.content if response.choices else None
        return self._ensure_content(content)
