"""MCP server surface and transports."""

from .server import SERVER_INFO_URI, connection_overrides, create_server, server_info
from .http import MCP_PATH, create_app, run_http

__all__ = [
    "SERVER_INFO_URI",
    "connection_overrides",
    "create_server",
    "server_info",
    "MCP_PATH",
    "create_app",
    "run_http",
]
