from unittest.mock import AsyncMock

import pytest

from supabase_mcp.clients import ManagementClient, SupabaseClient
from supabase_mcp.core.config import ServerConfig
from supabase_mcp.core.tools import ResultEnvelope
from supabase_mcp.core.tools.execution import Dispatcher, SessionState
from supabase_mcp.core.tools.registry import CONTROL, DATA, ROUTES, ToolRegistry

from .conftest import PROJECT_URL, SERVICE_KEY, RecordingTransport


@pytest.fixture(scope="module")
def dispatcher() -> Dispatcher:
    return Dispatcher()


@pytest.fixture
def session(full_config: ServerConfig, recorder: RecordingTransport) -> SessionState:
    return SessionState(full_config, transport=recorder.transport)


@pytest.mark.asyncio
@pytest.mark.parametrize("route", [r for r in ROUTES if r.capability == DATA], ids=lambda r: r.name)
async def test_data_tools_require_data_credentials(
    dispatcher: Dispatcher, recorder: RecordingTransport, route
) -> None:
    config = ServerConfig(access_token="token")
    session = SessionState(config, transport=recorder.transport)

    envelope = await dispatcher.invoke(route.name, {}, session)

    assert not envelope.ok
    assert envelope.message.startswith("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY are required")
    assert recorder.requests == []


@pytest.mark.asyncio
@pytest.mark.parametrize("route", [r for r in ROUTES if r.capability == CONTROL], ids=lambda r: r.name)
async def test_control_tools_require_access_token(dispatcher: Dispatcher, recorder: RecordingTransport, route) -> None:
    config = ServerConfig(url=PROJECT_URL, service_role_key=SERVICE_KEY)
    session = SessionState(config, transport=recorder.transport)

    envelope = await dispatcher.invoke(route.name, {"project_ref": "abc"}, session)

    assert not envelope.ok
    assert envelope.message.startswith("SUPABASE_ACCESS_TOKEN is required")
    assert recorder.requests == []


@pytest.mark.asyncio
async def test_unknown_tool(dispatcher: Dispatcher, session: SessionState) -> None:
    envelope = await dispatcher.invoke("sb_drop_everything", {}, session)
    assert envelope == ResultEnvelope.failure("Unknown tool: sb_drop_everything")


@pytest.mark.asyncio
async def test_unknown_tool_is_reported_before_credentials(dispatcher: Dispatcher, empty_config: ServerConfig) -> None:
    envelope = await dispatcher.invoke("sb_nope", {}, SessionState(empty_config))
    assert envelope.message == "Unknown tool: sb_nope"


@pytest.mark.asyncio
async def test_missing_required_argument(
    dispatcher: Dispatcher, session: SessionState, recorder: RecordingTransport
) -> None:
    envelope = await dispatcher.invoke("sb_get_user", {"_fields": "id"}, session)

    assert not envelope.ok
    assert "user_id" in envelope.message
    assert recorder.requests == []


@pytest.mark.asyncio
async def test_success_envelope(dispatcher: Dispatcher, session: SessionState, recorder: RecordingTransport) -> None:
    recorder.respond(200, json_body=[{"id": "bucket-1"}])

    envelope = await dispatcher.invoke("sb_list_buckets", None, session)

    assert envelope == ResultEnvelope.success([{"id": "bucket-1"}])
    assert envelope.to_text() == '[\n  {\n    "id": "bucket-1"\n  }\n]'


@pytest.mark.asyncio
async def test_no_content_response(dispatcher: Dispatcher, session: SessionState, recorder: RecordingTransport) -> None:
    recorder.respond(204)

    envelope = await dispatcher.invoke("sb_delete_records", {"table": "t", "filter": "id=eq.1"}, session)

    assert envelope == ResultEnvelope.success({"success": True, "status": 204})


@pytest.mark.asyncio
async def test_backend_error_message(dispatcher: Dispatcher, session: SessionState, recorder: RecordingTransport) -> None:
    recorder.respond(400, json_body={"message": "invalid input"})

    envelope = await dispatcher.invoke("sb_list_records", {"table": "t"}, session)

    assert envelope == ResultEnvelope.failure("invalid input")
    assert envelope.to_text() == "Error: invalid input"


@pytest.mark.asyncio
async def test_fields_never_reaches_data_plane(
    dispatcher: Dispatcher, session: SessionState, recorder: RecordingTransport
) -> None:
    await dispatcher.invoke(
        "sb_list_records", {"table": "users", "filter": "age=gt.18&status=eq.active", "_fields": "id"}, session
    )

    assert recorder.last_query() == [("age", "gt.18"), ("status", "eq.active")]

    await dispatcher.invoke("sb_insert_records", {"table": "users", "records": {"a": 1}, "_fields": "id"}, session)
    assert recorder.last_json() == {"a": 1}


@pytest.mark.asyncio
async def test_fields_never_reaches_control_plane(
    dispatcher: Dispatcher, session: SessionState, recorder: RecordingTransport
) -> None:
    await dispatcher.invoke("sb_run_query", {"project_ref": "abc", "query": "select 1", "_fields": "x"}, session)

    assert recorder.last_json() == {"query": "select 1"}
    assert "_fields" not in str(recorder.last.url)


@pytest.mark.asyncio
async def test_upsert_through_dispatcher(
    dispatcher: Dispatcher, session: SessionState, recorder: RecordingTransport
) -> None:
    await dispatcher.invoke("sb_upsert_records", {"table": "t", "records": [{"id": 1}], "return": "minimal"}, session)

    assert recorder.last.headers["Prefer"] == "resolution=merge-duplicates, return=minimal"


@pytest.mark.asyncio
async def test_list_objects_sort_through_dispatcher(
    dispatcher: Dispatcher, session: SessionState, recorder: RecordingTransport
) -> None:
    await dispatcher.invoke("sb_list_objects", {"bucket": "b", "sort_column": "created_at"}, session)

    assert recorder.last_json() == {
        "prefix": "",
        "limit": 100,
        "offset": 0,
        "sortBy": {"column": "created_at", "order": "asc"},
    }


@pytest.mark.asyncio
async def test_argument_credentials_used_as_fallback(
    dispatcher: Dispatcher, empty_config: ServerConfig, recorder: RecordingTransport
) -> None:
    session = SessionState(empty_config, transport=recorder.transport)
    arguments = {
        "table": "users",
        "SUPABASE_URL": "https://fallback.supabase.co",
        "SUPABASE_SERVICE_ROLE_KEY": "fallback-key",
    }

    envelope = await dispatcher.invoke("sb_list_records", arguments, session)

    assert envelope.ok
    assert recorder.last.url.host == "fallback.supabase.co"
    assert recorder.last.headers["apikey"] == "fallback-key"
    assert recorder.last_query() == []


@pytest.mark.asyncio
async def test_argument_credentials_carry_over_to_later_calls(
    dispatcher: Dispatcher, empty_config: ServerConfig, recorder: RecordingTransport
) -> None:
    session = SessionState(empty_config, transport=recorder.transport)
    credentials = {"SUPABASE_URL": "https://fallback.supabase.co", "SUPABASE_SERVICE_ROLE_KEY": "fallback-key"}

    first = await dispatcher.invoke("sb_list_buckets", credentials, session)
    second = await dispatcher.invoke("sb_list_buckets", {}, session)

    assert first.ok and second.ok
    assert len(recorder.requests) == 2
    assert all(request.url.host == "fallback.supabase.co" for request in recorder.requests)
    assert recorder.last.headers["apikey"] == "fallback-key"


def test_dispatcher_keeps_given_registry() -> None:
    registry = ToolRegistry(client_types={DATA: SupabaseClient, CONTROL: ManagementClient})
    assert Dispatcher(registry=registry).registry is registry


@pytest.mark.asyncio
async def test_process_config_wins_over_argument_credentials(
    dispatcher: Dispatcher, session: SessionState, recorder: RecordingTransport
) -> None:
    await dispatcher.invoke("sb_list_buckets", {"SUPABASE_URL": "https://other.supabase.co"}, session)

    assert str(recorder.last.url).startswith(PROJECT_URL)


@pytest.mark.asyncio
async def test_unexpected_exception_becomes_failure(
    dispatcher: Dispatcher, session: SessionState, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(SupabaseClient, "list_buckets", AsyncMock(side_effect=RuntimeError("kaboom")))

    envelope = await dispatcher.invoke("sb_list_buckets", {}, session)

    assert envelope == ResultEnvelope.failure("kaboom")
