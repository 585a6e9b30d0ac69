import gc
from unittest.mock import AsyncMock

import pytest

from supabase_mcp.clients import ManagementClient, SupabaseClient
from supabase_mcp.core.config import ServerConfig
from supabase_mcp.core.tools.execution import SessionState, SessionStore

from .conftest import PROJECT_URL, SERVICE_KEY


class FakeSession:
    """Stand-in for a protocol session; only identity and weak-referencing matter."""


def test_clients_are_lazy_and_cached(full_config: ServerConfig) -> None:
    state = SessionState(full_config)
    assert state._data_client is None

    client = state.client_for("data")
    assert isinstance(client, SupabaseClient)
    assert client.base_url == PROJECT_URL
    assert state.client_for("data") is client
    assert isinstance(state.client_for("control"), ManagementClient)


def test_missing_credentials_yield_no_client(empty_config: ServerConfig) -> None:
    state = SessionState(empty_config)
    assert state.client_for("data") is None
    assert state.client_for("control") is None


def test_unknown_capability(full_config: ServerConfig) -> None:
    with pytest.raises(ValueError):
        SessionState(full_config).client_for("nope")


def test_connection_overrides_win_over_process_config(full_config: ServerConfig) -> None:
    state = SessionState(full_config, overrides={"SUPABASE_URL": "https://other.supabase.co"})

    assert state.client_for("data").base_url == "https://other.supabase.co"
    assert full_config.url == PROJECT_URL


def test_argument_fallbacks_are_kept_for_the_session(empty_config: ServerConfig) -> None:
    state = SessionState(empty_config)
    fallbacks = {"SUPABASE_URL": PROJECT_URL, "SUPABASE_SERVICE_ROLE_KEY": SERVICE_KEY}

    client = state.client_for("data", fallbacks)
    assert isinstance(client, SupabaseClient)
    assert client.base_url == PROJECT_URL
    assert state.client_for("data") is client
    assert state.client_for("data", {"SUPABASE_URL": "https://other.supabase.co"}) is client
    assert state.client_for("control") is None


def test_argument_fallbacks_build_control_client(empty_config: ServerConfig) -> None:
    state = SessionState(empty_config)

    client = state.client_for("control", {"SUPABASE_ACCESS_TOKEN": "sbp_fallback"})
    assert isinstance(client, ManagementClient)
    assert state.client_for("control") is client


def test_incomplete_argument_fallbacks_build_nothing(empty_config: ServerConfig) -> None:
    state = SessionState(empty_config)

    assert state.client_for("data", {"SUPABASE_URL": PROJECT_URL}) is None
    assert state._data_client is None


def test_argument_fallbacks_ignored_when_configured(full_config: ServerConfig) -> None:
    state = SessionState(full_config)
    cached = state.client_for("data")

    assert state.client_for("data", {"SUPABASE_URL": "https://evil.supabase.co"}) is cached


def test_store_isolates_sessions(full_config: ServerConfig) -> None:
    store = SessionStore(full_config)
    first, second = FakeSession(), FakeSession()

    assert store.get(first) is store.get(first)
    assert store.get(first) is not store.get(second)
    assert len(store) == 2


def test_store_applies_overrides_on_creation_only(full_config: ServerConfig) -> None:
    store = SessionStore(full_config)
    session = FakeSession()

    state = store.get(session, {"SUPABASE_URL": "https://one.supabase.co"})
    assert store.get(session, {"SUPABASE_URL": "https://two.supabase.co"}) is state
    assert state.config.url == "https://one.supabase.co"


def test_store_drops_ended_sessions(full_config: ServerConfig) -> None:
    store = SessionStore(full_config)
    session = FakeSession()
    store.get(session)

    del session
    gc.collect()
    assert len(store) == 0


@pytest.mark.asyncio
async def test_close_all_is_best_effort(full_config: ServerConfig) -> None:
    store = SessionStore(full_config)
    sessions = [FakeSession(), FakeSession()]
    states = [store.get(session) for session in sessions]
    states[0].aclose = AsyncMock(side_effect=RuntimeError("close failed"))
    states[1].aclose = AsyncMock()

    await store.close_all()

    states[0].aclose.assert_awaited_once()
    states[1].aclose.assert_awaited_once()
    assert len(store) == 0
