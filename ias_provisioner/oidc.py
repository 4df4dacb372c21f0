"""OIDC discovery for an IAS tenant."""

import asyncio
import http
import logging
from typing import Optional

from aiohttp import ClientSession, ClientTimeout

from .models import OidcConfiguration

LOGGER = logging.getLogger(__name__)

WELL_KNOWN_PATH = "/.well-known/openid-configuration"
DISCOVERY_TIMEOUT = 5


class OidcDiscoveryResolver:
    """Resolve and cache the token endpoint and JWKS URI of a tenant.

    Both values are tenant-wide and only change together with the tenant, which
    means a new client, so each is fetched at most once per instance. The two
    values are cached independently, and an absent value is not cached.
    """

    def __init__(self, tenant_url: str, timeout: float = DISCOVERY_TIMEOUT):
        """Initialize the resolver."""
        self.discovery_url = tenant_url.rstrip("/") + WELL_KNOWN_PATH
        self.timeout = ClientTimeout(total=timeout)
        self._token_endpoint: Optional[str] = None
        self._jwks_uri: Optional[str] = None
        self._token_endpoint_lock = asyncio.Lock()
        self._jwks_uri_lock = asyncio.Lock()

    async def get_configuration(self) -> Optional[OidcConfiguration]:
        """Fetch the discovery document; None if the tenant does not serve one."""
        async with ClientSession(timeout=self.timeout) as session:
            async with session.get(self.discovery_url) as response:
                if response.status != http.HTTPStatus.OK:
                    LOGGER.warning(
                        "Failed to fetch OIDC configuration from %s, status %s",
                        self.discovery_url,
                        response.status,
                    )
                    return None
                body = await response.json(content_type=None)

        return OidcConfiguration.model_validate(body or {})

    async def get_token_endpoint(self) -> Optional[str]:
        """Return the token endpoint of the tenant."""
        async with self._token_endpoint_lock:
            if self._token_endpoint is None:
                config = await self.get_configuration()
                if config:
                    self._token_endpoint = config.token_endpoint or None
            return self._token_endpoint

    async def get_jwks_uri(self) -> Optional[str]:
        """Return the JWKS URI of the tenant."""
        async with self._jwks_uri_lock:
            if self._jwks_uri is None:
                config = await self.get_configuration()
                if config:
                    self._jwks_uri = config.jwks_uri or None
            return self._jwks_uri
