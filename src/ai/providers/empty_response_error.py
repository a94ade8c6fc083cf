"""Error raised by provider adapters when provider returns no content."""

import constants


class EmptyResponseError(Exception):
    """Provider reported success, but returned no content."""

    def __init__(self, provider: str, message: str = constants.EMPTY_RESPONSE_MESSAGE):
        """Initialize error with name of provider that returned no content."""
        super().__init__(message)
        self.provider = provider
        self.message = message
