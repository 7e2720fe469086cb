"""Portal API client for the marketplace profile and breeding program lookups.

All calls are tenant-scoped through the ``X-Tenant-Id`` header. Failures raise
``ApiError`` carrying the server's message when it sent one.
"""

import logging
from typing import Any, Protocol

import httpx

from .models import ProfileSnapshot, TenantContext

logger = logging.getLogger(__name__)

PROFILE_PATH = "/api/v1/marketplace/profile"
BREEDING_PROGRAMS_PATH = "/api/v1/breeding/programs"


class ApiError(Exception):
    def __init__(self, message: str, status: int):
        super().__init__(message)
        self.message = message
        self.status = status


class StorefrontBackend(Protocol):
    """What the editor needs from persistence; ``StorefrontClient`` is the HTTP one."""

    async def fetch_profile(self, tenant_id: str) -> ProfileSnapshot: ...

    async def save_draft(self, tenant_id: str, profile: dict[str, Any]) -> None: ...

    async def publish(self, tenant_id: str, profile: dict[str, Any]) -> None: ...

    async def unpublish(self, tenant_id: str) -> None: ...

    async def fetch_breeding_program_references(self, tenant_id: str) -> set[str]: ...


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        message = body.get("message") or body.get("error")
        if message:
            return str(message)
    return f"Request failed with status {response.status_code}"


class StorefrontClient:
    """
    Async client for the breeder portal REST API.

    Args:
        base_url: API root, e.g. "https://portal.example.com"
        timeout: Seconds before httpx gives up on a request
        transport: Optional httpx transport (tests pass a MockTransport)
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_context(cls, context: TenantContext, **kwargs) -> "StorefrontClient":
        return cls(context.api_base_url, timeout=context.timeout, **kwargs)

    async def _request(
        self,
        method: str,
        path: str,
        tenant_id: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        headers = {
            "Content-Type": "application/json",
            "X-Tenant-Id": tenant_id,
        }
        logger.debug("%s %s for tenant %s", method, path, tenant_id)
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url, timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.request(method, path, json=json, params=params, headers=headers)
        except httpx.HTTPError as exc:
            raise ApiError(f"Could not reach {self.base_url}: {exc}", 0) from exc

        if response.is_error:
            raise ApiError(_error_message(response), response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return None

    async def fetch_profile(self, tenant_id: str) -> ProfileSnapshot:
        data = await self._request("GET", PROFILE_PATH, tenant_id)
        return ProfileSnapshot.from_dict(data if isinstance(data, dict) else None)

    async def save_draft(self, tenant_id: str, profile: dict[str, Any]) -> None:
        await self._request("PUT", f"{PROFILE_PATH}/draft", tenant_id, json=profile)

    async def publish(self, tenant_id: str, profile: dict[str, Any]) -> None:
        await self._request("POST", f"{PROFILE_PATH}/publish", tenant_id, json=profile)

    async def unpublish(self, tenant_id: str) -> None:
        await self._request("POST", f"{PROFILE_PATH}/unpublish", tenant_id)

    async def fetch_breeding_program_references(self, tenant_id: str) -> set[str]:
        """Lower-cased breed text of every breeding program the tenant has."""
        data = await self._request("GET", BREEDING_PROGRAMS_PATH, tenant_id, params={"limit": 100})
        return _parse_program_references(data)


def _parse_program_references(response: Any) -> set[str]:
    """
    >>> sorted(_parse_program_references({"items": [{"breedText": "Labrador"}, {"breedText": None}, {}]}))
    ['labrador']
    """
    linked: set[str] = set()
    if not isinstance(response, dict):
        return linked
    for program in response.get("items") or []:
        if isinstance(program, dict) and program.get("breedText"):
            linked.add(str(program["breedText"]).lower())
    return linked
