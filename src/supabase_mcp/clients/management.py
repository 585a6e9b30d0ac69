"""Control-plane client for the Supabase Management API (``api.supabase.com``).

Handles account-level operations with a personal access token. Unlike the project
client no ``apikey`` header is sent.
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence

import httpx

from .base import RESTClient, compact, path_segment

MANAGEMENT_BASE = "https://api.supabase.com"


class ManagementClient(RESTClient):
    """Authenticated accessor for the account-management endpoint."""

    def __init__(
        self,
        access_token: str,
        *,
        base_url: str = MANAGEMENT_BASE,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(base_url, timeout=timeout, transport=transport)
        self._access_token = access_token

    def _auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self._access_token}"}

    @staticmethod
    def _project_path(project_ref: str, suffix: str = "") -> str:
        return f"/v1/projects/{path_segment(project_ref)}{suffix}"

    # ========== Projects ==========

    async def list_projects(self) -> Any:
        return await self._request("GET", "/v1/projects")

    async def get_project(self, project_ref: str) -> Any:
        return await self._request("GET", self._project_path(project_ref))

    async def create_project(
        self, name: str, organization_id: str, region: str, db_pass: str, plan: Optional[str] = None
    ) -> Any:
        """Create a project. Provisioning continues server-side after the call returns."""
        body = compact(
            {
                "name": name,
                "organization_id": organization_id,
                "region": region,
                "db_pass": db_pass,
                "plan": plan,
            }
        )
        return await self._request("POST", "/v1/projects", body=body)

    async def pause_project(self, project_ref: str) -> Any:
        return await self._request("POST", self._project_path(project_ref, "/pause"))

    async def restore_project(self, project_ref: str) -> Any:
        return await self._request("POST", self._project_path(project_ref, "/restore"))

    # ========== Database ==========

    async def run_query(self, project_ref: str, query: str) -> Any:
        """Execute raw SQL. The text is forwarded exactly as given."""
        return await self._request("POST", self._project_path(project_ref, "/database/query"), body={"query": query})

    async def list_migrations(self, project_ref: str) -> Any:
        return await self._request("GET", self._project_path(project_ref, "/database/migrations"))

    async def get_typescript_types(self, project_ref: str) -> Any:
        return await self._request("GET", self._project_path(project_ref, "/types/typescript"))

    # ========== Edge Functions ==========

    async def list_functions(self, project_ref: str) -> Any:
        return await self._request("GET", self._project_path(project_ref, "/functions"))

    async def get_function(self, project_ref: str, function_slug: str) -> Any:
        return await self._request(
            "GET", self._project_path(project_ref, f"/functions/{path_segment(function_slug)}")
        )

    # ========== Secrets ==========

    async def list_secrets(self, project_ref: str) -> Any:
        return await self._request("GET", self._project_path(project_ref, "/secrets"))

    async def create_secrets(self, project_ref: str, secrets: Sequence[Mapping[str, str]]) -> Any:
        """Create or overwrite secrets given as ``{"name": ..., "value": ...}`` pairs."""
        body: List[Dict[str, str]] = [dict(secret) for secret in secrets]
        return await self._request("POST", self._project_path(project_ref, "/secrets"), body=body)

    async def delete_secrets(self, project_ref: str, names: Sequence[str]) -> Any:
        return await self._request("DELETE", self._project_path(project_ref, "/secrets"), body=list(names))

    # ========== API Keys ==========

    async def list_api_keys(self, project_ref: str) -> Any:
        return await self._request("GET", self._project_path(project_ref, "/api-keys"))
