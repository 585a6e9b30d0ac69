"""Turns a tool call into exactly one backend client call."""

from typing import Any, Mapping, Optional

from ...exceptions import ConfigurationError, SupabaseMCPError
from ...logger import get_logger
from ..catalog import AUTH_ADMIN, DATABASE_REST, FIELDS_PARAM, STORAGE
from ..models import ResultEnvelope, ToolInvocation
from ..registry import ToolRegistry
from ....clients import ManagementClient, SupabaseClient
from ..registry.routes import CONTROL, DATA
from .session import SessionState

logger = get_logger(__name__)

_DATA_LABELS = {
    DATABASE_REST: "database operations",
    STORAGE: "storage operations",
    AUTH_ADMIN: "auth admin operations",
}


def missing_credentials_message(capability: str, category: str) -> str:
    """Message for a tool whose client is not configured. Always names the credential."""
    if capability == DATA:
        label = _DATA_LABELS.get(category, "project operations")
        return f"SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY are required for {label}"
    return "SUPABASE_ACCESS_TOKEN is required for Management API operations"


class Dispatcher:
    """
    Routes tool invocations to the data-plane or control-plane client.

    ``invoke`` never raises for a failing tool: every error becomes a failure
    envelope carrying a human-readable message.
    """

    def __init__(self, registry: Optional[ToolRegistry] = None) -> None:
        if registry is None:
            registry = ToolRegistry(client_types={DATA: SupabaseClient, CONTROL: ManagementClient})
        self.registry = registry

    async def invoke(self, name: str, arguments: Optional[Mapping[str, Any]], session: SessionState) -> ResultEnvelope:
        """
        Execute one tool call.

        Args:
            name: Tool name.
            arguments: Argument bag as received. ``None`` is treated as empty.
            session: State holding the caller's clients.

        Returns:
            A success envelope with the backend payload, or a failure envelope.
        """
        invocation = ToolInvocation(name=name, arguments=dict(arguments or {}))
        try:
            payload = await self._run(invocation, session)
        except SupabaseMCPError as e:
            logger.info("Tool '%s' failed: %s", name, e)
            return ResultEnvelope.failure(str(e))
        except Exception as e:
            logger.error("Unexpected error while executing tool '%s'.", name, exc_info=True)
            return ResultEnvelope.failure(str(e) or type(e).__name__)

        logger.debug("Tool '%s' succeeded.", name)
        return ResultEnvelope.success(payload)

    async def _run(self, invocation: ToolInvocation, session: SessionState) -> Any:
        tool, route = self.registry.lookup(invocation.name)

        client = session.client_for(route.capability, invocation.arguments)
        if client is None:
            raise ConfigurationError(missing_credentials_message(route.capability, tool.category))

        arguments = {key: value for key, value in invocation.arguments.items() if key != FIELDS_PARAM}
        kwargs = route.extract(arguments)

        logger.info("Executing tool '%s'.", invocation.name)
        method = getattr(client, route.method)
        return await method(**kwargs)
