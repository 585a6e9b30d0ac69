from .exceptions import (
    SupabaseMCPError,
    ConfigurationError,
    BackendError,
    UnknownToolError,
    ToolArgumentError,
    ToolRegistrationError,
)
from .logger import get_logger, setup_logging
from .config import ServerConfig
from .tools import (
    Dispatcher,
    ResultEnvelope,
    SessionState,
    SessionStore,
    ToolDefinition,
    ToolRegistry,
    list_tools,
)

__all__ = [
    "SupabaseMCPError",
    "ConfigurationError",
    "BackendError",
    "UnknownToolError",
    "ToolArgumentError",
    "ToolRegistrationError",
    "get_logger",
    "setup_logging",
    "ServerConfig",
    "Dispatcher",
    "ResultEnvelope",
    "SessionState",
    "SessionStore",
    "ToolDefinition",
    "ToolRegistry",
    "list_tools",
]
