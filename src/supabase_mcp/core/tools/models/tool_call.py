"""Data models for tool invocations and their outcomes."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class ToolInvocation:
    """A single inbound tool call: a name plus a loosely typed argument bag."""

    name: str
    arguments: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ResultEnvelope:
    """Normalized outcome of a tool call.

    Exactly one of ``payload`` (when ``ok``) or ``message`` (when not ``ok``) is meaningful.
    """

    ok: bool
    payload: Any = None
    message: Optional[str] = None

    @classmethod
    def success(cls, payload: Any) -> ResultEnvelope:
        return cls(ok=True, payload=payload)

    @classmethod
    def failure(cls, message: str) -> ResultEnvelope:
        return cls(ok=False, message=message)

    def to_text(self) -> str:
        """Render the envelope the way it is shown to the calling agent."""
        if self.ok:
            return json.dumps(self.payload, indent=2, ensure_ascii=False, default=str)
        return f"Error: {self.message}"
