"""CAMPEX — ActiveCampaign API Client.

Handles authentication and single-request transport. Pagination lives in the
pipeline driver; there is no retry here, a failed request fails the run.
"""

from typing import Any, Dict, Optional

import httpx

from campex.config import settings
from campex.core.logging import get_logger

logger = get_logger("activecampaign.client")

API_PREFIX = "/api/3"


class ActiveCampaignAPIError(Exception):
    """Raised when the ActiveCampaign API returns an error or is unreachable."""

    def __init__(self, message: str, status_code: int = 0):
        self.status_code = status_code
        super().__init__(message)


class ActiveCampaignClient:
    """Async HTTP client for the ActiveCampaign v3 API."""

    def __init__(
        self,
        base_url: str | None = None,
        api_token: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if base_url is None:
            base_url = settings.activecampaign_base_url
        self.base_url = base_url.rstrip("/")
        self.api_token = (
            api_token if api_token is not None else settings.activecampaign_api_token
        )
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def api_base(self) -> str:
        return f"{self.base_url}{API_PREFIX}"

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers={"Api-Token": self.api_token},
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> "ActiveCampaignClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    # ── Core Request Method ──

    async def request(
        self,
        method: str,
        path: str,
        params: Dict[str, Any] | None = None,
    ) -> Dict[str, Any]:
        """Make one request against ``/api/3`` and return the decoded body."""
        if not self.base_url:
            raise ActiveCampaignAPIError("ACTIVECAMPAIGN_BASE_URL is not configured")

        url = f"{self.api_base}{path}"
        client = await self._get_client()
        logger.info(f"Fetching from URL: {url}", extra={"endpoint": path})

        try:
            resp = await client.request(method, url, params=params)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            body: Any = {}
            if e.response.headers.get("content-type", "").startswith(
                "application/json"
            ):
                try:
                    body = e.response.json()
                except ValueError:
                    body = {}
            detail = (body.get("message") if isinstance(body, dict) else None) or (
                f"HTTP error! status: {status}"
            )
            raise ActiveCampaignAPIError(detail, status) from e
        except httpx.RequestError as e:
            raise ActiveCampaignAPIError(f"Connection failed: {e}") from e

        try:
            return resp.json()
        except ValueError as e:
            raise ActiveCampaignAPIError(
                f"Invalid JSON from {path}", resp.status_code
            ) from e

    # ── Token Validation ──

    async def validate_token(self) -> Dict[str, Any]:
        """Check the API token by fetching the authenticated user."""
        result = await self.request("GET", "/users/me")
        user = result.get("user", {})
        return {
            "valid": bool(user),
            "username": user.get("username", ""),
            "email": user.get("email", ""),
        }
