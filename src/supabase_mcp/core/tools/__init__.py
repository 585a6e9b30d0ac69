from .catalog import CATEGORIES, FIELDS_PARAM, TOOLS, category_counts, list_tools
from .models import ResultEnvelope, ToolAnnotations, ToolDefinition, ToolInvocation, ToolParameter
from .registry import ToolRegistry, ToolRoute, ROUTES
from .execution import Dispatcher, SessionState, SessionStore

__all__ = [
    "CATEGORIES",
    "FIELDS_PARAM",
    "TOOLS",
    "category_counts",
    "list_tools",
    "ResultEnvelope",
    "ToolAnnotations",
    "ToolDefinition",
    "ToolInvocation",
    "ToolParameter",
    "ToolRegistry",
    "ToolRoute",
    "ROUTES",
    "Dispatcher",
    "SessionState",
    "SessionStore",
]
