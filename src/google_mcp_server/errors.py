"""Exceptions raised by google-mcp-server.

All exceptions inherit from GoogleMcpError so callers can catch
everything this package raises with a single except clause.
"""


class GoogleMcpError(Exception):
    """Base exception for all google-mcp-server errors."""


class ConfigurationError(GoogleMcpError):
    """Raised when required configuration is missing at startup."""


class DuplicateToolError(GoogleMcpError, ValueError):
    """Raised when two tools are registered under the same name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Tool '{name}' is already registered")


class GoogleApiError(GoogleMcpError):
    """Raised when a Google REST endpoint answers with a non-2xx status.

    Attributes:
        status_code: HTTP status returned by Google.
        message: Error message reported by the API, or a generic fallback.
    """

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(message)
