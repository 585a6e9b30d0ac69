"""Export the exception hierarchy shared by the clients, the dispatcher and the server."""

from .exceptions import (
    SupabaseMCPError,
    ConfigurationError,
    BackendError,
    UnknownToolError,
    ToolArgumentError,
    ToolRegistrationError,
)

__all__ = [
    "SupabaseMCPError",
    "ConfigurationError",
    "BackendError",
    "UnknownToolError",
    "ToolArgumentError",
    "ToolRegistrationError",
]
