"""MCP server exposing the Supabase tool catalog, guidance prompts and a status resource."""

import json
from typing import Any, Dict, Iterable, List, Mapping, Optional

from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents

from .. import SERVER_NAME, __version__
from ..core.config import CREDENTIAL_KEYS, ServerConfig
from ..core.logger import get_logger
from ..core.tools import Dispatcher, SessionState, SessionStore, ToolRegistry
from ..core.tools.catalog import category_counts
from . import prompts

logger = get_logger(__name__)

SERVER_INFO_URI = "supabase://server-info"


def connection_overrides(request: Any) -> Dict[str, str]:
    """Credential overrides carried in the query string of an HTTP connection.

    Args:
        request: The transport request (a Starlette ``Request`` in HTTP mode), or ``None``.

    Returns:
        The ``SUPABASE_*`` credential keys present with a non-empty value.
    """
    params: Optional[Mapping[str, str]] = getattr(request, "query_params", None)
    if not params:
        return {}
    return {key: params[key] for key in CREDENTIAL_KEYS if params.get(key)}


def server_info(config: ServerConfig, registry: ToolRegistry) -> Dict[str, Any]:
    """Connection status and tool inventory. Never includes secret values."""
    return {
        "name": SERVER_NAME,
        "version": __version__,
        "connected_project": bool(config.url),
        "supabase_url": config.url or "(not configured)",
        "authenticated": bool(config.service_role_key),
        "management_api": bool(config.access_token),
        "tools_available": len(registry),
        "tool_categories": category_counts(),
    }


def create_server(
    config: ServerConfig,
    store: Optional[SessionStore] = None,
    dispatcher: Optional[Dispatcher] = None,
) -> Server:
    """
    Build the low-level MCP server.

    Args:
        config: Process configuration.
        store: Session store shared with the transport. A new one is created if omitted.
        dispatcher: Tool dispatcher. A new one over the full catalog is created if omitted.

    Returns:
        A server ready to be run over stdio or mounted behind the HTTP session manager.
    """
    if store is None:
        store = SessionStore(config)
    if dispatcher is None:
        dispatcher = Dispatcher()
    server: Server = Server(SERVER_NAME, version=__version__)

    def current_session() -> SessionState:
        ctx = server.request_context
        return store.get(ctx.session, connection_overrides(ctx.request))

    @server.list_tools()
    async def handle_list_tools() -> List[types.Tool]:
        return [tool.to_mcp_tool() for tool in dispatcher.registry.list_tools()]

    # Argument checks are done by the dispatcher so every failure reads the same way.
    @server.call_tool(validate_input=False)
    async def handle_call_tool(name: str, arguments: Dict[str, Any]) -> types.CallToolResult:
        envelope = await dispatcher.invoke(name, arguments, current_session())
        return types.CallToolResult(
            content=[types.TextContent(type="text", text=envelope.to_text())],
            isError=not envelope.ok,
        )

    @server.list_prompts()
    async def handle_list_prompts() -> List[types.Prompt]:
        return prompts.list_prompts()

    @server.get_prompt()
    async def handle_get_prompt(name: str, arguments: Optional[Dict[str, str]] = None) -> types.GetPromptResult:
        return prompts.get_prompt(name)

    @server.list_resources()
    async def handle_list_resources() -> List[types.Resource]:
        return [
            types.Resource(
                uri=SERVER_INFO_URI,
                name="server-info",
                description="Connection status and available tools for this Supabase MCP server",
                mimeType="application/json",
            )
        ]

    @server.read_resource()
    async def handle_read_resource(uri: Any) -> Iterable[ReadResourceContents]:
        if str(uri).rstrip("/") != SERVER_INFO_URI:
            raise ValueError(f"Unknown resource: {uri}")
        info = server_info(current_session().config, dispatcher.registry)
        return [ReadResourceContents(content=json.dumps(info, indent=2), mime_type="application/json")]

    logger.debug("MCP server '%s' created with %d tools.", SERVER_NAME, len(dispatcher.registry))
    return server
