"""Shared request primitive for the Supabase REST and Management API clients."""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple
from urllib.parse import parse_qsl, quote

import httpx

from ..core.exceptions import BackendError
from ..core.logger import get_logger

logger = get_logger(__name__)

QueryPairs = List[Tuple[str, str]]


@dataclass(frozen=True)
class RequestSpec:
    """A fully translated HTTP request, before it is sent.

    Attributes:
        method: HTTP verb.
        path: Path relative to the client's base URL, already percent-encoded.
        query: Ordered query pairs. Repeated keys are allowed (PostgREST filters).
        headers: Per-call headers merged over the client's auth headers.
        body: JSON-serializable body, or ``None`` for no body.
    """

    method: str
    path: str
    query: QueryPairs = field(default_factory=list)
    headers: Dict[str, str] = field(default_factory=dict)
    body: Any = None


def path_segment(value: Any) -> str:
    """Percent-encode a single path segment (slashes included)."""
    return quote(str(value), safe="")


def build_query(params: Optional[Mapping[str, Any]] = None, filter: Optional[str] = None) -> QueryPairs:
    """Build ordered query pairs.

    Entries of ``params`` whose value is ``None`` or ``""`` are dropped. A PostgREST
    filter string such as ``"age=gt.18&status=eq.active"`` is parsed as a query string
    of its own, and each of its pairs is appended independently.

    Args:
        params: Named query parameters.
        filter: Raw PostgREST filter fragment.

    Returns:
        The list of ``(key, value)`` pairs to send.
    """
    pairs: QueryPairs = []
    for key, value in (params or {}).items():
        if value is None or value == "":
            continue
        pairs.append((key, str(value)))
    if filter:
        pairs.extend(parse_qsl(filter, keep_blank_values=True))
    return pairs


def compact(body: Mapping[str, Any]) -> Dict[str, Any]:
    """Drop keys whose value is ``None`` from a client-built body."""
    return {key: value for key, value in body.items() if value is not None}


def prefer_header(*preferences: Optional[str]) -> Dict[str, str]:
    """Build a ``Prefer`` header from the given non-empty preferences."""
    present = [p for p in preferences if p]
    if not present:
        return {}
    return {"Prefer": ", ".join(present)}


def extract_error_message(status_code: int, text: str) -> str:
    """Best human-readable error text for a failed response.

    Tries the JSON body's ``message``, ``error`` and ``msg`` fields in that order,
    then the raw body, then ``HTTP <status>``.
    """
    try:
        data = json.loads(text)
    except ValueError:
        return text or f"HTTP {status_code}"

    if isinstance(data, dict):
        for key in ("message", "error", "msg"):
            value = data.get(key)
            if value:
                return value if isinstance(value, str) else json.dumps(value)
    return text or f"HTTP {status_code}"


class RESTClient(ABC):
    """
    Base class for authenticated JSON-over-HTTP clients.

    Subclasses provide the base URL and the auth headers. Every method of a subclass
    funnels through ``_request``, which raises ``BackendError`` on any transport
    failure or non-2xx response and never retries.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Args:
            base_url: Root URL every request path is appended to. A trailing slash is removed.
            timeout: Optional timeout in seconds for each request. ``None`` waits indefinitely.
            transport: Optional httpx transport, mainly for tests.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @abstractmethod
    def _auth_headers(self) -> Dict[str, str]:
        """Headers authenticating every request of this client."""
        pass

    def _headers(self, extra: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        headers = {**self._auth_headers(), "Content-Type": "application/json"}
        if extra:
            headers.update(extra)
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        *,
        query: Optional[Iterable[Tuple[str, str]]] = None,
        headers: Optional[Mapping[str, str]] = None,
        body: Any = None,
    ) -> Any:
        spec = RequestSpec(
            method=method,
            path=path,
            query=list(query or []),
            headers=dict(headers or {}),
            body=body,
        )
        return await self.send(spec)

    async def send(self, spec: RequestSpec) -> Any:
        """Send a translated request and normalize the response.

        Args:
            spec: The request to send.

        Returns:
            The parsed JSON body, ``{"text": ...}`` for a non-JSON body, or
            ``{"success": True, "status": <code>}`` for an empty body.

        Raises:
            BackendError: If the request fails or the response status is not 2xx.
        """
        url = f"{self.base_url}{spec.path}"
        content = json.dumps(spec.body) if spec.body is not None else None
        logger.debug("%s %s (query keys: %s)", spec.method, spec.path, [k for k, _ in spec.query])

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.request(
                    spec.method,
                    url,
                    params=spec.query or None,
                    headers=self._headers(spec.headers),
                    content=content,
                )
        except httpx.HTTPError as e:
            msg = str(e) or f"{type(e).__name__} while calling {spec.method} {spec.path}"
            logger.warning("Request %s %s failed: %s", spec.method, spec.path, msg)
            raise BackendError(msg) from e

        return self._parse_response(spec, response)

    @staticmethod
    def _parse_response(spec: RequestSpec, response: httpx.Response) -> Any:
        text = response.text
        if not response.is_success:
            msg = extract_error_message(response.status_code, text)
            logger.warning("%s %s returned HTTP %s: %s", spec.method, spec.path, response.status_code, msg)
            raise BackendError(msg)

        if not text:
            return {"success": True, "status": response.status_code}
        try:
            return json.loads(text)
        except ValueError:
            return {"text": text}
