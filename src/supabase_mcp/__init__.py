"""Supabase MCP Server - Supabase REST, Storage, Auth Admin and Management API as MCP tools."""

__version__ = "1.0.0"
SERVER_NAME = "supabase-mcp"

from .core import (  # noqa: E402
    ServerConfig,
    Dispatcher,
    ResultEnvelope,
    SessionStore,
    SupabaseMCPError,
    list_tools,
)
from .clients import ManagementClient, SupabaseClient  # noqa: E402

__all__ = [
    "__version__",
    "SERVER_NAME",
    "ServerConfig",
    "Dispatcher",
    "ResultEnvelope",
    "SessionStore",
    "SupabaseMCPError",
    "list_tools",
    "ManagementClient",
    "SupabaseClient",
]
