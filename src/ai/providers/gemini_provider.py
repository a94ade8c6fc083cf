"""Google Gemini provider adapter."""

from typing import Any, Optional

from google import genai
from google.genai import types as genai_types

import constants
from ai.providers.base import BaseProvider
from log import get_logger
from models.requests import AIRequest

logger = get_logger(__name__)


def _build_prompt(request: AIRequest) -> str:
    """Concatenate all message contents into one prompt.

    Multi-turn role structure is not sent to this provider.
    """
    return "\n".join(message.content for message in request.messages)


def _first_candidate_text(response: Any) -> Optional[str]:
    """Extract text of the first candidate from generate content response."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return None
    content = candidates[0].content
    if content is None or not content.parts:
        return None
    return "".join(part.text for part in content.parts if part.text)


class GeminiProvider(BaseProvider):
    """Calls the Google Gemini API via the `google-genai` SDK."""

    name = constants.PROVIDER_GEMINI

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        default_model: Optional[str] = None,
    ) -> None:
        """Initialize adapter and the underlying client."""
        super().__init__(
            api_key, base_url, default_model or constants.DEFAULT_GEMINI_MODEL
        )
        client_kwargs: dict[str, Any] = {"api_key": api_key}
        if base_url:
            client_kwargs["http_options"] = genai_types.HttpOptions(base_url=base_url)
        self._client = genai.Client(**client_kwargs)

    def _model_for(self, request: AIRequest) -> str:
        """Return Gemini model for request, falling back to default model."""
        if request.model.startswith("gemini"):
            return request.model
        return self._default_model  # type: ignore[return-value]

    def _generate_config(
        self, request: AIRequest, timeout: float
    ) -> genai_types.GenerateContentConfig:
        """Build generation config from sampling parameters of the request."""
        config_kwargs: dict[str, Any] = {
            # timeout is expressed in milliseconds by the SDK
            "http_options": genai_types.HttpOptions(timeout=int(timeout * 1000)),
        }
        if request.temperature is not None:
            config_kwargs["temperature"] = request.temperature
        if request.max_tokens is not None:
            config_kwargs["max_output_tokens"] = request.max_tokens
        if request.wants_json:
            config_kwargs["response_mime_type"] = "application/json"
        return genai_types.GenerateContentConfig(**config_kwargs)

    async def invoke(self, request: AIRequest, timeout: float) -> str:
        """Send single prompt request and return first candidate's text."""
        model = self._model_for(request)
        call_kwargs: dict[str, Any] = {
            "model": model,
            "contents": _build_prompt(request),
            "config": self._generate_config(request, timeout),
        }

        if request.stream:
            logger.debug("Streaming content from model %s", model)
            parts: list[str] = []
            async for chunk in await self._client.aio.models.generate_content_stream(
                **call_kwargs
            ):
                parts.append(_first_candidate_text(chunk) or "")
            return self._ensure_content("".join(parts))

        response = await self._client.aio.models.generate_content(**call_kwargs)
        return self._ensure_content(_first_candidate_text(response))
