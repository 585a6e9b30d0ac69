"""Data-plane client: REST (PostgREST), Storage and Auth Admin of one Supabase project.

Authenticates every request with the service role key, sent both as ``apikey`` and as
a bearer token.
"""

import json
from typing import Any, Dict, List, Mapping, Optional

import httpx

from .base import RESTClient, build_query, compact, path_segment, prefer_header


def _query_value(value: Any) -> str:
    # JSON spelling for booleans and containers, plain str() for everything else.
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None or isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


class SupabaseClient(RESTClient):
    """Authenticated accessor for a single Supabase project."""

    def __init__(
        self,
        url: str,
        service_role_key: str,
        *,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Args:
            url: Project URL, e.g. ``https://xyz.supabase.co``.
            service_role_key: Service role (or other) API key of the project.
            timeout: Optional per-request timeout in seconds.
            transport: Optional httpx transport, mainly for tests.
        """
        super().__init__(url, timeout=timeout, transport=transport)
        self._key = service_role_key

    def _auth_headers(self) -> Dict[str, str]:
        return {"apikey": self._key, "Authorization": f"Bearer {self._key}"}

    @staticmethod
    def _table_path(table: str) -> str:
        return f"/rest/v1/{path_segment(table)}"

    # ========== REST API (Database CRUD) ==========

    async def list_records(
        self,
        table: str,
        select: Optional[str] = None,
        filter: Optional[str] = None,
        order: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> Any:
        """Read rows of a table or view.

        Args:
            table: Table or view name.
            select: Column list, may embed related tables (``*,orders(*)``).
            filter: PostgREST filter fragment, e.g. ``age=gt.18&status=eq.active``.
            order: Ordering, e.g. ``created_at.desc``.
            limit: Maximum number of rows.
            offset: Number of rows to skip.

        Returns:
            The rows returned by PostgREST.
        """
        query = build_query({"select": select, "order": order, "limit": limit, "offset": offset}, filter)
        return await self._request("GET", self._table_path(table), query=query)

    async def insert_records(
        self, table: str, records: Any, return_: Optional[str] = None, select: Optional[str] = None
    ) -> Any:
        """Insert a single record object or a list of them."""
        return await self._request(
            "POST",
            self._table_path(table),
            query=build_query({"select": select}),
            headers=prefer_header(f"return={return_}" if return_ else None),
            body=records,
        )

    async def update_records(
        self,
        table: str,
        filter: str,
        data: Mapping[str, Any],
        return_: Optional[str] = None,
        select: Optional[str] = None,
    ) -> Any:
        """Patch every row matching ``filter`` with ``data``.

        The caller is responsible for passing a non-empty filter; an empty one
        updates the whole table.
        """
        return await self._request(
            "PATCH",
            self._table_path(table),
            query=build_query({"select": select}, filter),
            headers=prefer_header(f"return={return_}" if return_ else None),
            body=data,
        )

    async def upsert_records(
        self,
        table: str,
        records: Any,
        resolution: Optional[str] = None,
        return_: Optional[str] = None,
        select: Optional[str] = None,
        on_conflict: Optional[str] = None,
    ) -> Any:
        """Insert records, merging (or ignoring) rows that conflict.

        Args:
            table: Table name.
            records: A record object or a list of them.
            resolution: ``merge-duplicates`` (default) or ``ignore-duplicates``.
            return_: Value of the ``return=`` preference.
            select: Columns to return with ``return=representation``.
            on_conflict: Unique column(s) to detect conflicts on, if not the primary key.

        Returns:
            The PostgREST response.
        """
        return await self._request(
            "POST",
            self._table_path(table),
            query=build_query({"select": select, "on_conflict": on_conflict}),
            headers=prefer_header(
                f"resolution={resolution or 'merge-duplicates'}",
                f"return={return_}" if return_ else None,
            ),
            body=records,
        )

    async def delete_records(
        self, table: str, filter: str, return_: Optional[str] = None, select: Optional[str] = None
    ) -> Any:
        """Delete every row matching ``filter``."""
        return await self._request(
            "DELETE",
            self._table_path(table),
            query=build_query({"select": select}, filter),
            headers=prefer_header(f"return={return_}" if return_ else None),
        )

    async def call_function(
        self, function: str, params: Optional[Mapping[str, Any]] = None, method: Optional[str] = None
    ) -> Any:
        """Call a stored PostgreSQL function through ``/rest/v1/rpc``.

        GET sends each parameter in the query string, POST (the default) sends them as
        the JSON body.
        """
        path = f"/rest/v1/rpc/{path_segment(function)}"
        if (method or "POST").upper() == "GET":
            query = build_query({key: _query_value(value) for key, value in (params or {}).items()})
            return await self._request("GET", path, query=query)
        return await self._request("POST", path, body=dict(params or {}))

    # ========== Storage API ==========

    async def list_buckets(self) -> Any:
        return await self._request("GET", "/storage/v1/bucket")

    async def create_bucket(
        self,
        name: str,
        public: Optional[bool] = None,
        file_size_limit: Optional[int] = None,
        allowed_mime_types: Optional[List[str]] = None,
    ) -> Any:
        """Create a bucket. Buckets are private unless ``public`` is true."""
        body = compact(
            {
                "name": name,
                "public": False if public is None else public,
                "file_size_limit": file_size_limit,
                "allowed_mime_types": allowed_mime_types,
            }
        )
        return await self._request("POST", "/storage/v1/bucket", body=body)

    async def delete_bucket(self, bucket_id: str) -> Any:
        return await self._request("DELETE", f"/storage/v1/bucket/{path_segment(bucket_id)}")

    async def list_objects(
        self,
        bucket: str,
        prefix: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        search: Optional[str] = None,
        sort_by: Optional[Mapping[str, str]] = None,
    ) -> Any:
        """List objects of a bucket.

        Args:
            bucket: Bucket name.
            prefix: Folder prefix, ``""`` by default.
            limit: Page size, 100 by default.
            offset: Objects to skip, 0 by default.
            search: Name search term.
            sort_by: ``{"column": ..., "order": "asc" | "desc"}``.

        Returns:
            The object listing.
        """
        sort = None
        if sort_by:
            sort = {"column": sort_by["column"], "order": sort_by.get("order") or "asc"}
        body = compact(
            {
                "prefix": prefix or "",
                "limit": limit or 100,
                "offset": offset or 0,
                "search": search,
                "sortBy": sort,
            }
        )
        return await self._request("POST", f"/storage/v1/object/list/{path_segment(bucket)}", body=body)

    async def delete_objects(self, bucket: str, paths: List[str]) -> Any:
        return await self._request(
            "DELETE", f"/storage/v1/object/{path_segment(bucket)}", body={"prefixes": list(paths)}
        )

    async def create_signed_url(self, bucket: str, path: str, expires_in: int) -> Any:
        """Create a temporary download URL. ``path`` keeps its slashes."""
        return await self._request(
            "POST",
            f"/storage/v1/object/sign/{path_segment(bucket)}/{path.lstrip('/')}",
            body={"expiresIn": expires_in},
        )

    # ========== Auth Admin API ==========

    async def list_users(self, page: Optional[int] = None, per_page: Optional[int] = None) -> Any:
        return await self._request(
            "GET", "/auth/v1/admin/users", query=build_query({"page": page, "per_page": per_page})
        )

    async def get_user(self, user_id: str) -> Any:
        return await self._request("GET", f"/auth/v1/admin/users/{path_segment(user_id)}")

    async def create_user(
        self,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        password: Optional[str] = None,
        email_confirm: Optional[bool] = None,
        phone_confirm: Optional[bool] = None,
        user_metadata: Optional[Mapping[str, Any]] = None,
        app_metadata: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """Create an auth user identified by email or phone."""
        body = compact(
            {
                "email": email,
                "phone": phone,
                "password": password,
                "email_confirm": email_confirm,
                "phone_confirm": phone_confirm,
                "user_metadata": user_metadata,
                "app_metadata": app_metadata,
            }
        )
        return await self._request("POST", "/auth/v1/admin/users", body=body)

    async def update_user(
        self,
        user_id: str,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        password: Optional[str] = None,
        email_confirm: Optional[bool] = None,
        phone_confirm: Optional[bool] = None,
        user_metadata: Optional[Mapping[str, Any]] = None,
        app_metadata: Optional[Mapping[str, Any]] = None,
        ban_duration: Optional[str] = None,
    ) -> Any:
        """Update an auth user. ``ban_duration="none"`` lifts a ban."""
        body = compact(
            {
                "email": email,
                "phone": phone,
                "password": password,
                "email_confirm": email_confirm,
                "phone_confirm": phone_confirm,
                "user_metadata": user_metadata,
                "app_metadata": app_metadata,
                "ban_duration": ban_duration,
            }
        )
        return await self._request("PUT", f"/auth/v1/admin/users/{path_segment(user_id)}", body=body)

    async def delete_user(self, user_id: str) -> Any:
        return await self._request("DELETE", f"/auth/v1/admin/users/{path_segment(user_id)}")
