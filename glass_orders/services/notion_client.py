"""
Notion REST client
Async wrapper over the handful of Notion endpoints the workflow needs:
data source queries, page retrieve/create/update and workspace search.
"""

import logging
from typing import Any, Optional

import httpx

from ..config import HTTP_TIMEOUT, NOTION_API_KEY, NOTION_API_URL, NOTION_VERSION
from ..exceptions import NotionAPIError

logger = logging.getLogger(__name__)

# Notion caps page_size at 100
MAX_PAGE_SIZE = 100


class NotionClient:
    """Service for interacting with the Notion API"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        version: Optional[str] = None,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key or NOTION_API_KEY
        self.version = version or NOTION_VERSION
        self.base_url = (base_url or NOTION_API_URL).rstrip("/")
        self.transport = transport

        if not self.api_key:
            logger.warning("NOTION_API_KEY not set; every Notion call will fail until configured")

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Notion-Version": self.version,
            "Content-Type": "application/json",
        }

    async def _request(self, method: str, path: str, json: Optional[dict] = None) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(transport=self.transport, timeout=HTTP_TIMEOUT) as client:
                response = await client.request(method, url, headers=self._headers(), json=json)
        except httpx.HTTPError as e:
            logger.error(f"❌ Notion request failed: {method} {path}: {e}")
            raise NotionAPIError(f"Notion request failed: {e}") from e

        if response.status_code >= 400:
            try:
                body = response.json()
            except ValueError:
                body = {}
            message = body.get("message") or response.text or f"HTTP {response.status_code}"
            code = body.get("code")
            logger.error(f"❌ Notion API error [{response.status_code} {code}] {method} {path}: {message}")
            raise NotionAPIError(message, status_code=response.status_code, code=code)

        return response.json()

    async def query_data_source(
        self,
        data_source_id: str,
        filter: Optional[dict] = None,
        sorts: Optional[list[dict]] = None,
        page_size: int = MAX_PAGE_SIZE,
    ) -> list[dict[str, Any]]:
        """
        Query a data source and return every matching page.

        Follows `next_cursor` until `has_more` is false, so callers always see
        the full result set.
        """
        payload: dict[str, Any] = {"page_size": min(page_size, MAX_PAGE_SIZE)}
        if filter:
            payload["filter"] = filter
        if sorts:
            payload["sorts"] = sorts

        results: list[dict[str, Any]] = []
        while True:
            data = await self._request("POST", f"/data_sources/{data_source_id}/query", json=payload)
            results.extend(data.get("results", []))
            if not data.get("has_more") or not data.get("next_cursor"):
                break
            payload["start_cursor"] = data["next_cursor"]

        logger.debug(f"📊 Data source {data_source_id} returned {len(results)} pages")
        return results

    async def retrieve_page(self, page_id: str) -> dict[str, Any]:
        return await self._request("GET", f"/pages/{page_id}")

    async def create_page(self, data_source_id: str, properties: dict) -> dict[str, Any]:
        payload = {
            "parent": {"type": "data_source_id", "data_source_id": data_source_id},
            "properties": properties,
        }
        return await self._request("POST", "/pages", json=payload)

    async def update_page(self, page_id: str, properties: dict) -> dict[str, Any]:
        return await self._request("PATCH", f"/pages/{page_id}", json={"properties": properties})

    async def search_data_sources(self) -> list[dict[str, Any]]:
        """List the data sources shared with the integration, most recently edited first"""
        payload: dict[str, Any] = {
            "filter": {"property": "object", "value": "data_source"},
            "sort": {"direction": "descending", "timestamp": "last_edited_time"},
            "page_size": MAX_PAGE_SIZE,
        }
        results: list[dict[str, Any]] = []
        while True:
            data = await self._request("POST", "/search", json=payload)
            results.extend(data.get("results", []))
            if not data.get("has_more") or not data.get("next_cursor"):
                break
            payload["start_cursor"] = data["next_cursor"]
        return results


def get_notion() -> NotionClient:
    """Dependency injection for NotionClient"""
    return NotionClient()
