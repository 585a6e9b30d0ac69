"""Streamable HTTP transport: a Starlette app served by uvicorn."""

import contextlib
from typing import AsyncIterator, Optional

import uvicorn
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route
from starlette.types import Receive, Scope, Send

from .. import SERVER_NAME, __version__
from ..core.config import ServerConfig
from ..core.logger import get_logger
from ..core.tools import Dispatcher, SessionStore
from .server import create_server

logger = get_logger(__name__)

MCP_PATH = "/mcp"


class MCPEndpoint:
    """ASGI app forwarding every request on the MCP path to the session manager."""

    def __init__(self, session_manager: StreamableHTTPSessionManager) -> None:
        self._session_manager = session_manager

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        await self._session_manager.handle_request(scope, receive, send)


def create_app(config: ServerConfig, store: Optional[SessionStore] = None) -> Starlette:
    """
    Build the HTTP application.

    ``GET /`` reports status, ``/mcp`` speaks the streamable HTTP protocol with one
    stateful session per client. Credentials given as query parameters on ``/mcp``
    (``?SUPABASE_URL=...``) apply to that session only.

    Args:
        config: Process configuration.
        store: Session store. A new one is created if omitted.

    Returns:
        The Starlette application.
    """
    if store is None:
        store = SessionStore(config)
    dispatcher = Dispatcher()
    server = create_server(config, store=store, dispatcher=dispatcher)
    session_manager = StreamableHTTPSessionManager(app=server, event_store=None, json_response=False, stateless=False)

    async def info(request: Request) -> JSONResponse:
        return JSONResponse(
            {
                "name": SERVER_NAME,
                "version": __version__,
                "status": "ok",
                "tools": len(dispatcher.registry),
                "transport": "streamable-http",
                "endpoints": {"mcp": MCP_PATH},
            }
        )

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        async with session_manager.run():
            logger.info("MCP endpoint ready at %s", MCP_PATH)
            yield
        logger.info("Shutting down...")
        await store.close_all()

    return Starlette(
        routes=[
            Route("/", info, methods=["GET"]),
            Route(MCP_PATH, MCPEndpoint(session_manager)),
        ],
        lifespan=lifespan,
    )


def run_http(config: ServerConfig) -> None:
    """Serve the HTTP application until interrupted."""
    app = create_app(config)
    logger.info("Supabase MCP Server (HTTP) listening on %s:%d", config.host, config.port)
    logger.info("MCP endpoint: http://localhost:%d%s", config.port, MCP_PATH)
    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level.lower())
