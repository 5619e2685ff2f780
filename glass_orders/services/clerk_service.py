import logging
from typing import Any, Optional

import httpx

from .. import config
from ..exceptions import ClerkAPIError

logger = logging.getLogger(__name__)

# Key in a Clerk user's unsafe_metadata linking the user to a Notion crew page
CREW_METADATA_KEY = "notion_crew_id"


class ClerkService:
    """Service for the Clerk Backend API"""

    def __init__(self, secret_key: Optional[str] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.secret_key = secret_key or config.CLERK_SECRET_KEY
        self.base_url = config.CLERK_API_URL.rstrip("/")
        self.transport = transport

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        if not self.secret_key:
            raise ClerkAPIError("Clerk not configured. Please set CLERK_SECRET_KEY in .env")

        try:
            async with httpx.AsyncClient(transport=self.transport, timeout=config.HTTP_TIMEOUT) as client:
                response = await client.request(
                    method,
                    f"{self.base_url}{path}",
                    headers={"Authorization": f"Bearer {self.secret_key}"},
                    **kwargs,
                )
        except httpx.HTTPError as e:
            logger.error(f"❌ Clerk request failed: {method} {path}: {e}")
            raise ClerkAPIError(f"Clerk request failed: {e}") from e

        if response.status_code >= 400:
            try:
                errors = response.json().get("errors") or [{}]
                message = errors[0].get("long_message") or errors[0].get("message")
            except ValueError:
                message = None
            message = message or response.text or f"HTTP {response.status_code}"
            logger.error(f"❌ Clerk API error [{response.status_code}] {method} {path}: {message}")
            raise ClerkAPIError(message, status_code=response.status_code)

        return response.json()

    async def get_user(self, user_id: str) -> dict[str, Any]:
        return await self._request("GET", f"/users/{user_id}")

    async def find_users_by_email(self, email: str) -> list[dict[str, Any]]:
        return await self._request("GET", "/users", params={"email_address": [email]})

    async def update_unsafe_metadata(self, user_id: str, metadata: dict) -> dict[str, Any]:
        """Merge metadata into the user's unsafe_metadata; keys set to None are removed"""
        return await self._request(
            "PATCH", f"/users/{user_id}/metadata", json={"unsafe_metadata": metadata}
        )

    async def get_crew_id(self, user_id: str) -> Optional[str]:
        """Notion crew page id linked to a user, if any"""
        user = await self.get_user(user_id)
        crew_id = (user.get("unsafe_metadata") or {}).get(CREW_METADATA_KEY)
        return str(crew_id) if crew_id else None


def get_clerk_service() -> ClerkService:
    """Dependency injection for ClerkService"""
    return ClerkService()
