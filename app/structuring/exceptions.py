class StructuringError(Exception):
    """Raised when structured extraction fails."""


class StructuringNetworkError(StructuringError):
    """Raised when the AI provider call fails due to network/infrastructure issues."""


class StructuringAuthError(StructuringError):
    """Raised when the AI provider rejects the configured credentials."""


class StructuringRateLimitError(StructuringError):
    """Raised when the AI provider throttles the request."""


class PayloadTooLargeError(StructuringError):
    """Raised when the submitted text exceeds what the provider accepts."""


class MalformedResponseError(StructuringError):
    """Raised when the provider reply is not a JSON object."""
