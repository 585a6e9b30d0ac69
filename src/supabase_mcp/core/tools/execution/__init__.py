"""Tool execution: per-session clients and the dispatcher."""

from .dispatcher import Dispatcher, missing_credentials_message
from .session import SessionState, SessionStore

__all__ = ["Dispatcher", "missing_credentials_message", "SessionState", "SessionStore"]
