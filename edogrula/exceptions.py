"""Errors raised by the search core."""


class SearchError(RuntimeError):
    """Base exception for search failures."""
    pass


class RegistryUnavailable(SearchError):
    """Raised when a registry probe fails at the storage layer."""
    pass
