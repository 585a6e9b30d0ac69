"""Tool-related data models."""

from .models import ToolAnnotations, ToolDefinition, ToolParameter
from .tool_call import ResultEnvelope, ToolInvocation

__all__ = ["ToolAnnotations", "ToolDefinition", "ToolParameter", "ResultEnvelope", "ToolInvocation"]
