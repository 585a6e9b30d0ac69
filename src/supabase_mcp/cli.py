"""Command-line entry point: ``supabase-mcp [--http] [--host H] [--port P] [--log-level L]``."""

import argparse
import asyncio
from typing import List, Optional

from mcp.server.stdio import stdio_server

from . import SERVER_NAME, __version__
from .core.config import ServerConfig
from .core.logger import get_logger, setup_logging
from .core.tools import SessionStore, TOOLS
from .server import create_server, run_http

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=SERVER_NAME,
        description="MCP server for the Supabase REST, Storage, Auth Admin and Management APIs",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--http", action="store_true", help="Serve streamable HTTP instead of stdio")
    parser.add_argument("--host", help="Bind address in HTTP mode (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, help="Port in HTTP mode (default: $PORT or 3000)")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Log level (default: $SUPABASE_MCP_LOG_LEVEL or INFO)",
    )
    return parser


def _log_startup(config: ServerConfig, transport: str) -> None:
    masked = config.describe()
    logger.info("Supabase MCP Server running on %s", transport)
    logger.info("Supabase URL: %s", masked["url"])
    logger.info("Service Role Key: %s", masked["service_role_key"])
    logger.info("Access Token: %s", masked["access_token"])
    logger.info("Tools available: %d", len(TOOLS))


async def run_stdio(config: ServerConfig) -> None:
    """Serve one MCP session over stdin/stdout until the client disconnects."""
    store = SessionStore(config)
    server = create_server(config, store=store)
    try:
        async with stdio_server() as (read_stream, write_stream):
            logger.info("Ready for MCP client")
            await server.run(read_stream, write_stream, server.create_initialization_options())
    finally:
        await store.close_all()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    config = ServerConfig.from_env()
    updates = {}
    if args.host:
        updates["host"] = args.host
    if args.port:
        updates["port"] = args.port
    if args.log_level:
        updates["log_level"] = args.log_level
    if updates:
        config = config.model_copy(update=updates)

    setup_logging(config.log_level)
    _log_startup(config, "streamable-http" if args.http else "stdio")

    try:
        if args.http:
            run_http(config)
        else:
            asyncio.run(run_stdio(config))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down.")
    return 0
