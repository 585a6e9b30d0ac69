"""
Custom exception classes for the Supabase MCP server.

Every error raised below the dispatcher derives from ``SupabaseMCPError``. The
dispatcher catches them and turns them into failure envelopes, so none of these
reach the protocol transport.
"""


class SupabaseMCPError(Exception):
    """Base exception for all server errors."""

    pass


class ConfigurationError(SupabaseMCPError):
    """Raised when a tool needs a credential that has not been configured.

    The message always names the missing credential(s).
    """

    pass


class BackendError(SupabaseMCPError):
    """Raised when a call to the Supabase REST or Management API fails.

    The message is the best human-readable text that could be extracted from the
    response (or from the transport failure). No status code is kept.
    """

    pass


class UnknownToolError(SupabaseMCPError):
    """Raised when a tool name has no dispatch route."""

    pass


class ToolArgumentError(SupabaseMCPError):
    """Raised when a required tool argument is missing."""

    pass


class ToolRegistrationError(SupabaseMCPError):
    """Raised when the tool catalog and the dispatch table disagree."""

    pass
