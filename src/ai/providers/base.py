"""Abstract base class for AI provider adapters."""

from abc import ABC, abstractmethod
from typing import Optional

from ai.providers.empty_response_error import EmptyResponseError
from models.requests import AIRequest


class BaseProvider(ABC):
    """Interface that every provider adapter must implement.

    Adapters translate the normalized request into a provider specific call
    and extract the textual result. They raise raw errors from the provider
    SDK; classification is done by the orchestrator.
    """

    #: Provider name, one of `constants.SUPPORTED_PROVIDERS`.
    name: str = ""

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        default_model: Optional[str] = None,
    ) -> None:
        """Initialize adapter with provider credential."""
        self._api_key = api_key
        self._base_url = base_url
        self._default_model = default_model

    @abstractmethod
    async def invoke(self, request: AIRequest, timeout: float) -> str:
        """Call the provider and return produced text.

        Args:
            request: Normalized request.
            timeout: Time in seconds after which the call is abandoned.

        Returns:
            Non-empty text produced by provider.

        Raises:
            EmptyResponseError: When provider returned no content.
        """

    def _ensure_content(self, content: Optional[str]) -> str:
        """Check that provider returned some content."""
        if not content:
            raise EmptyResponseError(self.name)
        return content

    def __str__(self) -> str:
        """Return textual representation of adapter instance."""
        return f"{type(self).__name__}: {self.name}"
