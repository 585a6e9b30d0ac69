"""Per-session client state."""

import weakref
from typing import Any, Mapping, Optional

import httpx

from ....clients import ManagementClient, RESTClient, SupabaseClient
from ...config import ServerConfig
from ...logger import get_logger
from ..registry.routes import CONTROL, DATA

logger = get_logger(__name__)


class SessionState:
    """
    Lazily built backend clients for one protocol session.

    The configuration is the process configuration with any connection-level
    overrides already applied. Clients are created on first use and cached for the
    rest of the session. When the configuration cannot build a client, the first
    call whose argument bag carries usable credentials builds it instead.
    """

    def __init__(
        self,
        config: ServerConfig,
        overrides: Optional[Mapping[str, Any]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.config = config.with_overrides(overrides)
        self._transport = transport
        self._data_client: Optional[SupabaseClient] = None
        self._control_client: Optional[ManagementClient] = None

    def _build_data_client(self, config: ServerConfig) -> SupabaseClient:
        logger.debug("Creating data-plane client for %s", config.url)
        return SupabaseClient(config.url, config.service_role_key, timeout=config.timeout, transport=self._transport)

    def _build_control_client(self, config: ServerConfig) -> ManagementClient:
        logger.debug("Creating management client")
        return ManagementClient(config.access_token, timeout=config.timeout, transport=self._transport)

    @property
    def data_client(self) -> Optional[SupabaseClient]:
        """The project client, or ``None`` while URL or service role key is missing."""
        if self._data_client is None and self.config.has_data_plane:
            self._data_client = self._build_data_client(self.config)
        return self._data_client

    @property
    def control_client(self) -> Optional[ManagementClient]:
        """The Management API client, or ``None`` while no access token is set."""
        if self._control_client is None and self.config.has_control_plane:
            self._control_client = self._build_control_client(self.config)
        return self._control_client

    def client_for(self, capability: str, fallbacks: Optional[Mapping[str, Any]] = None) -> Optional[RESTClient]:
        """
        Resolve the client serving a capability.

        Args:
            capability: ``"data"`` or ``"control"``.
            fallbacks: Argument bag of the current call. Its ``SUPABASE_*`` keys are
                used only while the session has no client for the capability.

        Returns:
            The client, or ``None`` if the capability is not configured.
        """
        if capability not in (DATA, CONTROL):
            raise ValueError(f"Unknown capability: {capability}")

        client = self.data_client if capability == DATA else self.control_client
        if client is not None:
            return client

        config = self.config.with_fallbacks(fallbacks)
        if capability == DATA and config.has_data_plane:
            logger.debug("Using credentials from call arguments for the data-plane client")
            self._data_client = self._build_data_client(config)
            return self._data_client
        if capability == CONTROL and config.has_control_plane:
            logger.debug("Using credentials from call arguments for the management client")
            self._control_client = self._build_control_client(config)
            return self._control_client
        return None

    async def aclose(self) -> None:
        """Drop cached clients. They hold no open connections between requests."""
        self._data_client = None
        self._control_client = None


class SessionStore:
    """Maps live protocol sessions to their ``SessionState``.

    Sessions are held weakly, so the state of a session that has ended is
    released with it.
    """

    def __init__(self, config: ServerConfig, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        self.config = config
        self._transport = transport
        self._states: "weakref.WeakKeyDictionary[Any, SessionState]" = weakref.WeakKeyDictionary()

    def get(self, session: Any, overrides: Optional[Mapping[str, Any]] = None) -> SessionState:
        """Return the state for ``session``, creating it on first use.

        ``overrides`` only apply when the state is created.
        """
        state = self._states.get(session)
        if state is None:
            state = SessionState(self.config, overrides, self._transport)
            self._states[session] = state
            logger.debug("Opened session state (%d active)", len(self._states))
        return state

    def __len__(self) -> int:
        return len(self._states)

    async def close_all(self) -> None:
        """Close every open session. Failures are logged and do not stop the others."""
        states = list(self._states.values())
        self._states.clear()
        for state in states:
            try:
                await state.aclose()
            except Exception:
                logger.warning("Failed to close session state", exc_info=True)
        if states:
            logger.info("Closed %d session(s)", len(states))
