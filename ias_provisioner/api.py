"""Client for the IAS Applications REST API."""

import http
import logging
from dataclasses import dataclass
from typing import Any, Collection, Mapping, Optional
from uuid import UUID

from aiohttp import BasicAuth, ClientSession

from .models import ApiSecretRequest, ApplicationRecord

LOGGER = logging.getLogger(__name__)

APPLICATIONS_PATH = "/Applications/v1/"


@dataclass
class APIResponse:
    """Status, headers and decoded body of an API call."""

    status: int
    headers: Mapping[str, str]
    body: Any = None


class ApplicationsAPI:
    """Thin wrapper around the IAS application directory endpoints.

    Status codes are returned to the caller untouched; only bodies of the
    expected success status are decoded.
    """

    def __init__(self, tenant_url: str, user: str, password: str):
        """Initialize the API client."""
        self.base_url = tenant_url.rstrip("/") + APPLICATIONS_PATH
        self.auth = BasicAuth(user, password)

    async def _request(
        self,
        method: str,
        url: str,
        expect: Collection[int],
        **kwargs,
    ) -> APIResponse:
        async with ClientSession(auth=self.auth) as session:
            async with session.request(method, url, **kwargs) as response:
                body = None
                if response.status in expect:
                    body = await response.json(content_type=None)
                LOGGER.debug("%s %s -> %s", method, url, response.status)
                return APIResponse(response.status, response.headers, body)

    def application_url(self, app_id: UUID) -> str:
        """Return the URL of a single application."""
        return f"{self.base_url}{app_id}"

    async def list_applications(self, query: Optional[str] = None) -> APIResponse:
        """List applications, optionally filtered."""
        params = {"filter": query} if query else None
        return await self._request(
            "GET", self.base_url, (http.HTTPStatus.OK,), params=params
        )

    async def create_application(self, application: ApplicationRecord) -> APIResponse:
        """Create an application; its ID is returned in the Location header."""
        return await self._request(
            "POST",
            self.base_url,
            (),
            json=application.model_dump(mode="json", by_alias=True, exclude_none=True),
        )

    async def create_api_secret(
        self, app_id: UUID, request: ApiSecretRequest
    ) -> APIResponse:
        """Create an API secret for an application."""
        return await self._request(
            "POST",
            f"{self.application_url(app_id)}/apiSecrets",
            (http.HTTPStatus.CREATED,),
            json=request.model_dump(mode="json", by_alias=True),
        )

    async def get_application(self, app_id: UUID) -> APIResponse:
        """Fetch an application by ID."""
        return await self._request(
            "GET", self.application_url(app_id), (http.HTTPStatus.OK,)
        )

    async def delete_application(self, app_id: UUID) -> APIResponse:
        """Delete an application by ID."""
        return await self._request(
            "DELETE", self.application_url(app_id), ()
        )
