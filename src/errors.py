"""Exceptions shared by the retrieval and web search layers."""


class ProviderError(Exception):
    """Raised when an external provider fails (HTTP status, network, timeout)."""


class ConfigurationError(Exception):
    """Raised when a provider is called without its required URL or credential."""


class ParseError(ValueError):
    """Raised for a malformed timestamp or an unknown memory payload type."""
