"""Client for the hosted REST (PostgREST) data store."""

from __future__ import annotations

from typing import Any

import httpx

from icrollup.context import RequestContext

TABLE_PLANS = "ic_action_plans"
TABLE_ACTIONS = "ic_actions"
TABLE_ASSESSMENTS = "ic_condition_assessments"
TABLE_CONDITIONS = "ic_conditions"
TABLE_STANDARDS = "ic_standards"
TABLE_COMPONENTS = "ic_components"
TABLE_DEPARTMENTS = "departments"


class DataStoreClientError(Exception):
    """Raised when a data-store query fails."""


def in_filter(ids: list[str]) -> str:
    """PostgREST ``in`` operator value for a list of ids."""
    return "in.(" + ",".join(f'"{i}"' for i in ids) + ")"


class DataStoreClient:
    """HTTP client for the data store's auto-generated REST API."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
        }

    async def _select(self, table: str, params: dict[str, str]) -> list[dict[str, Any]]:
        """Run a ``select=*`` query on a table and return its rows."""
        query = {"select": "*", **params}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(
                    f"{self.base_url}/rest/v1/{table}",
                    headers=self._headers(),
                    params=query,
                )
        except httpx.HTTPError as exc:
            raise DataStoreClientError(f"Query on {table} failed: {exc}") from exc

        if response.status_code != 200:
            raise DataStoreClientError(
                f"Query on {table} failed: {response.status_code} {response.text}"
            )
        data = response.json()
        if not isinstance(data, list):
            raise DataStoreClientError(f"Query on {table} returned a non-list payload")
        return data

    async def _select_ids(self, table: str, ids: list[str]) -> list[dict[str, Any]]:
        if not ids:
            return []
        return await self._select(table, {"id": in_filter(ids)})

    async def fetch_plans(self, ctx: RequestContext) -> list[dict[str, Any]]:
        return await self._select(TABLE_PLANS, {"organization_id": f"eq.{ctx.organization_id}"})

    async def fetch_actions(self, ctx: RequestContext, plan_id: str) -> list[dict[str, Any]]:
        return await self._select(TABLE_ACTIONS, {
            "organization_id": f"eq.{ctx.organization_id}",
            "action_plan_id": f"eq.{plan_id}",
        })

    async def fetch_condition_assessments(self, ctx: RequestContext, plan_id: str) -> list[dict[str, Any]]:
        return await self._select(TABLE_ASSESSMENTS, {
            "organization_id": f"eq.{ctx.organization_id}",
            "action_plan_id": f"eq.{plan_id}",
        })

    async def fetch_conditions(self, ctx: RequestContext, ids: list[str]) -> list[dict[str, Any]]:
        return await self._select_ids(TABLE_CONDITIONS, ids)

    async def fetch_standards(self, ctx: RequestContext, ids: list[str]) -> list[dict[str, Any]]:
        return await self._select_ids(TABLE_STANDARDS, ids)

    async def fetch_components(self, ctx: RequestContext, ids: list[str]) -> list[dict[str, Any]]:
        return await self._select_ids(TABLE_COMPONENTS, ids)

    async def fetch_departments(self, ctx: RequestContext) -> list[dict[str, Any]]:
        return await self._select(TABLE_DEPARTMENTS, {"organization_id": f"eq.{ctx.organization_id}"})

    async def test_connection(self) -> bool:
        """Check that the REST endpoint answers."""
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(f"{self.base_url}/rest/v1/", headers=self._headers())
            return response.status_code < 500
        except httpx.HTTPError:
            return False
