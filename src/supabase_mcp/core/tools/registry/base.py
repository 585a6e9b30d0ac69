"""Tool registry joining the catalog with the dispatch table."""

import inspect
from typing import Dict, Iterable, List, Optional, Tuple

from ...exceptions import ToolRegistrationError, UnknownToolError
from ...logger import get_logger
from ..catalog import FIELDS_PARAM, TOOLS
from ..models import ToolDefinition
from .routes import CONTROL, DATA, ROUTES, ToolRoute

logger = get_logger(__name__)


class ToolRegistry:
    """
    A central registry of every invocable tool.

    Holds the definitions advertised to the caller and, for each of them, the route
    the dispatcher uses. Registration checks that the two agree, so a mismatch is
    caught at startup instead of on the first call.
    """

    def __init__(
        self,
        tools: Optional[Iterable[ToolDefinition]] = None,
        routes: Optional[Iterable[ToolRoute]] = None,
        client_types: Optional[Dict[str, type]] = None,
    ) -> None:
        """Initialize and validate the registry.

        Args:
            tools: Tool definitions. Defaults to the full catalog.
            routes: Dispatch routes. Defaults to the built-in table.
            client_types: Optional capability -> client class map. When given, every
                route's method must exist on the class and accept the extracted keywords.

        Raises:
            ToolRegistrationError: If tools and routes do not match one-to-one.
        """
        self.tools: Dict[str, ToolDefinition] = {}
        self.routes: Dict[str, ToolRoute] = {}
        self._client_types = client_types or {}

        route_map: Dict[str, ToolRoute] = {}
        for route in ROUTES if routes is None else routes:
            if route.name in route_map:
                raise ToolRegistrationError(f"Route for '{route.name}' is declared twice.")
            route_map[route.name] = route

        for tool in TOOLS if tools is None else tools:
            route = route_map.pop(tool.name, None)
            if route is None:
                msg = f"Tool '{tool.name}' has no dispatch route."
                logger.error(msg)
                raise ToolRegistrationError(msg)
            self.register(tool, route)

        if route_map:
            msg = f"Routes without a catalog entry: {', '.join(sorted(route_map))}"
            logger.error(msg)
            raise ToolRegistrationError(msg)

        logger.debug("Tool registry ready with %d tools.", len(self.tools))

    def register(self, tool: ToolDefinition, route: ToolRoute) -> None:
        """
        Register a tool together with its route.

        Args:
            tool: The catalog entry.
            route: The dispatch route for it.

        Raises:
            ToolRegistrationError: If the tool already exists or the route disagrees
                with the tool's schema.
        """
        if tool.name in self.tools:
            msg = f"Tool '{tool.name}' is already registered."
            logger.error(msg)
            raise ToolRegistrationError(msg)

        self._check_route(tool, route)
        self.tools[tool.name] = tool
        self.routes[tool.name] = route

    def _check_route(self, tool: ToolDefinition, route: ToolRoute) -> None:
        if route.name != tool.name:
            raise ToolRegistrationError(f"Route '{route.name}' registered under tool '{tool.name}'.")

        if route.capability not in (DATA, CONTROL):
            raise ToolRegistrationError(f"Route '{route.name}' has unknown capability '{route.capability}'.")

        if set(route.required) != set(tool.required):
            raise ToolRegistrationError(
                f"Tool '{tool.name}' requires {sorted(tool.required)} but its route requires {sorted(route.required)}."
            )

        declared = set(tool.parameter_names)
        if FIELDS_PARAM not in declared:
            raise ToolRegistrationError(f"Tool '{tool.name}' does not accept '{FIELDS_PARAM}'.")
        unknown = [key for key in route.argument_keys if key not in declared]
        if unknown:
            raise ToolRegistrationError(f"Route '{route.name}' reads undeclared argument(s): {', '.join(unknown)}")

        client_type = self._client_types.get(route.capability)
        if client_type is not None:
            method = getattr(client_type, route.method, None)
            if method is None or not inspect.iscoroutinefunction(method):
                raise ToolRegistrationError(f"{client_type.__name__} has no coroutine '{route.method}'.")
            keywords = route.extract({key: "x" for key in route.required}).keys()
            params = inspect.signature(method).parameters
            missing = [kw for kw in keywords if kw not in params]
            if missing:
                raise ToolRegistrationError(
                    f"{client_type.__name__}.{route.method} does not accept: {', '.join(missing)}"
                )

    def list_tools(self) -> List[ToolDefinition]:
        """All registered tools in registration (catalog) order."""
        return list(self.tools.values())

    def lookup(self, name: str) -> Tuple[ToolDefinition, ToolRoute]:
        """Find a tool and its route.

        Raises:
            UnknownToolError: If no tool has that name.
        """
        try:
            return self.tools[name], self.routes[name]
        except KeyError:
            raise UnknownToolError(f"Unknown tool: {name}") from None

    def __contains__(self, name: object) -> bool:
        return name in self.tools

    def __len__(self) -> int:
        return len(self.tools)
