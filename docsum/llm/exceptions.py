class LlmError(Exception):
    """Raised when a language-model request fails."""


class LlmNetworkError(LlmError):
    """Raised when the provider call fails due to network/infrastructure issues."""


class LlmAuthenticationError(LlmError):
    """Raised when the provider rejects the API key."""


class LlmRateLimitError(LlmError):
    """Raised when the provider rate limit is exceeded."""


class LlmQuotaError(LlmError):
    """Raised when the account has no remaining quota."""


class LlmResponseError(LlmError):
    """Raised when the provider reply is empty or malformed."""
