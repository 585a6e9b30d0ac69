from .base import ToolRegistry
from .routes import CONTROL, DATA, ROUTES, ToolRoute

__all__ = ["ToolRegistry", "ToolRoute", "ROUTES", "DATA", "CONTROL"]
