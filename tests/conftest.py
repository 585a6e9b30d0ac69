import json
from typing import Any, Callable, List, Optional

import httpx
import pytest

from supabase_mcp.clients import ManagementClient, SupabaseClient
from supabase_mcp.core.config import ServerConfig

PROJECT_URL = "https://abc123.supabase.co"
SERVICE_KEY = "service-role-key"
ACCESS_TOKEN = "sbp_access_token"


class RecordingTransport:
    """Answers requests from a queue of canned responses and keeps every request it saw.

    When the queue is empty, ``200 {}`` is returned.
    """

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self._responders: List[Callable[[httpx.Request], httpx.Response]] = []
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self._responders:
            return self._responders.pop(0)(request)
        return httpx.Response(200, json={})

    def respond(
        self, status_code: int = 200, json_body: Any = None, text: Optional[str] = None
    ) -> "RecordingTransport":
        if json_body is not None:
            self._responders.append(lambda request: httpx.Response(status_code, json=json_body))
        else:
            self._responders.append(lambda request: httpx.Response(status_code, text=text or ""))
        return self

    def fail(self, error: Exception) -> "RecordingTransport":
        def raise_error(request: httpx.Request) -> httpx.Response:
            raise error

        self._responders.append(raise_error)
        return self

    @property
    def last(self) -> httpx.Request:
        assert self.requests, "no request was sent"
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)

    def last_query(self) -> List[tuple]:
        return list(self.last.url.params.multi_items())


@pytest.fixture
def recorder() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def data_client(recorder: RecordingTransport) -> SupabaseClient:
    return SupabaseClient(PROJECT_URL + "/", SERVICE_KEY, transport=recorder.transport)


@pytest.fixture
def management_client(recorder: RecordingTransport) -> ManagementClient:
    return ManagementClient(ACCESS_TOKEN, transport=recorder.transport)


@pytest.fixture
def full_config() -> ServerConfig:
    return ServerConfig(url=PROJECT_URL, service_role_key=SERVICE_KEY, access_token=ACCESS_TOKEN)


@pytest.fixture
def empty_config() -> ServerConfig:
    return ServerConfig()
