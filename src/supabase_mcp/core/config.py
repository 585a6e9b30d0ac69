"""Process-level configuration for the Supabase MCP server."""

import os
from typing import Any, Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .logger import get_logger

logger = get_logger(__name__)

# Keys accepted both as environment variables and as per-session overrides.
URL_KEY = "SUPABASE_URL"
SERVICE_ROLE_KEY = "SUPABASE_SERVICE_ROLE_KEY"
ACCESS_TOKEN_KEY = "SUPABASE_ACCESS_TOKEN"
CREDENTIAL_KEYS = (URL_KEY, SERVICE_ROLE_KEY, ACCESS_TOKEN_KEY)

_FIELD_BY_KEY = {
    URL_KEY: "url",
    SERVICE_ROLE_KEY: "service_role_key",
    ACCESS_TOKEN_KEY: "access_token",
}


class ServerConfig(BaseModel):
    """
    Credentials and runtime settings for one server process.

    Attributes:
        url: Project URL of the Supabase instance (data plane).
        service_role_key: Service role key used as both ``apikey`` and bearer token.
        access_token: Personal access token for the Management API (control plane).
        timeout: Optional per-request timeout in seconds. ``None`` disables it.
        host: Bind address for the HTTP transport.
        port: Port for the HTTP transport.
        log_level: Level name passed to ``setup_logging``.
    """

    model_config = ConfigDict(frozen=True)

    url: Optional[str] = None
    service_role_key: Optional[str] = None
    access_token: Optional[str] = None
    timeout: Optional[float] = Field(default=None, gt=0)
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"

    @field_validator("url", "service_role_key", "access_token", mode="before")
    @classmethod
    def _blank_is_missing(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def has_data_plane(self) -> bool:
        """True when both the project URL and the service role key are set."""
        return bool(self.url and self.service_role_key)

    @property
    def has_control_plane(self) -> bool:
        """True when a Management API access token is set."""
        return bool(self.access_token)

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None, load_dotenv_file: bool = True) -> "ServerConfig":
        """Build a configuration from environment variables.

        Args:
            env: Mapping to read from. Defaults to ``os.environ``.
            load_dotenv_file: Whether to load a ``.env`` file into the process
                environment first. Ignored when ``env`` is given.

        Returns:
            The parsed configuration. Missing values stay ``None``.
        """
        if env is None:
            if load_dotenv_file:
                load_dotenv()
            env = os.environ

        values: dict[str, Any] = {
            "url": env.get(URL_KEY),
            "service_role_key": env.get(SERVICE_ROLE_KEY),
            "access_token": env.get(ACCESS_TOKEN_KEY),
        }
        if env.get("SUPABASE_MCP_TIMEOUT"):
            values["timeout"] = env["SUPABASE_MCP_TIMEOUT"]
        if env.get("PORT"):
            values["port"] = env["PORT"]
        if env.get("SUPABASE_MCP_LOG_LEVEL"):
            values["log_level"] = env["SUPABASE_MCP_LOG_LEVEL"]
        return cls.model_validate(values)

    def with_overrides(self, overrides: Optional[Mapping[str, Any]]) -> "ServerConfig":
        """Return a copy where any non-empty credential override replaces the current value.

        Args:
            overrides: Mapping keyed by ``SUPABASE_URL`` / ``SUPABASE_SERVICE_ROLE_KEY`` /
                ``SUPABASE_ACCESS_TOKEN``. Other keys are ignored.

        Returns:
            A new ``ServerConfig`` (or ``self`` if nothing applies).
        """
        if not overrides:
            return self
        update = {
            field: overrides[key]
            for key, field in _FIELD_BY_KEY.items()
            if isinstance(overrides.get(key), str) and overrides[key].strip()
        }
        if not update:
            return self
        logger.debug("Applying credential overrides for: %s", ", ".join(sorted(update)))
        return self.model_copy(update=update)

    def with_fallbacks(self, fallbacks: Optional[Mapping[str, Any]]) -> "ServerConfig":
        """Return a copy where credentials that are still missing are taken from ``fallbacks``.

        Args:
            fallbacks: Mapping keyed like ``with_overrides``.

        Returns:
            A new ``ServerConfig`` (or ``self`` if nothing applies).
        """
        if not fallbacks:
            return self
        update = {
            field: fallbacks[key]
            for key, field in _FIELD_BY_KEY.items()
            if getattr(self, field) is None and isinstance(fallbacks.get(key), str) and fallbacks[key].strip()
        }
        if not update:
            return self
        return self.model_copy(update=update)

    def describe(self) -> dict[str, str]:
        """Masked summary for startup logging. Never contains secrets."""
        return {
            "url": self.url or "(not configured)",
            "service_role_key": "***configured***" if self.service_role_key else "(not configured)",
            "access_token": (
                "***configured***" if self.access_token else "(not configured - management API disabled)"
            ),
        }
