"""Error taxonomy shared by the trailer providers and the resolver."""

from __future__ import annotations


class ProviderError(Exception):
    """Base class for failures raised while talking to a trailer provider."""

    def __init__(self, message: str, *, provider: str | None = None) -> None:
        super().__init__(message)
        self.provider = provider


class ProviderUnavailableError(ProviderError):
    """The provider cannot be used because it has no access credential."""


class ProviderAuthenticationError(ProviderError):
    """The provider rejected the configured credential."""


class TransientProviderError(ProviderError):
    """Network failure, timeout, rate limit or malformed upstream payload."""


class InvalidIdentifierError(ValueError):
    """The requested identifier does not follow a supported ID scheme."""
