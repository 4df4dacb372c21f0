"""IAS client provisioning OAuth2 applications."""

import asyncio
import http
import logging
import weakref
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Optional
from uuid import UUID

from aiohttp import ClientError
from pydantic import ValidationError

from .api import APIResponse, ApplicationsAPI
from .error import ErrorKind, IASClientError
from .models import (
    ApiSecretRequest,
    ApiSecretResponse,
    Application,
    ApplicationRecord,
    ApplicationsResponse,
    Credentials,
)
from .oidc import OidcDiscoveryResolver

LOGGER = logging.getLogger(__name__)

# Transport and decoding failures wrapped into IASClientError at each stage.
TRANSPORT_ERRORS = (ClientError, asyncio.TimeoutError, ValueError)


class Client(ABC):
    """Capability to provision applications in an IAS tenant."""

    @abstractmethod
    async def create_application(self, name: str) -> Application:
        """Create an application, replacing any application with the same name."""

    @abstractmethod
    async def delete_application(self, name: str) -> None:
        """Delete the application with the given name, if any."""

    @abstractmethod
    def get_credentials(self) -> Credentials:
        """Return the tenant connection info of this client."""


ClientFactory = Callable[..., Client]


def new_client(
    tenant_url: str, user: str, password: str, *, serialize_by_name: bool = False
) -> Client:
    """Create a client for the given IAS tenant."""
    return IASClient(
        ApplicationsAPI(tenant_url, user, password),
        OidcDiscoveryResolver(tenant_url),
        Credentials(url=tenant_url, username=user, password=password),
        serialize_by_name=serialize_by_name,
    )


class IASClient(Client):
    """Client for the IAS application directory."""

    def __init__(
        self,
        api: ApplicationsAPI,
        oidc: OidcDiscoveryResolver,
        credentials: Optional[Credentials],
        *,
        serialize_by_name: bool = False,
    ):
        """Initialize the client."""
        self.api = api
        self.oidc = oidc
        self.credentials = credentials
        self.serialize_by_name = serialize_by_name
        self._name_locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = (
            weakref.WeakValueDictionary()
        )

    def get_credentials(self) -> Credentials:
        """Return the tenant connection info of this client."""
        if self.credentials is None:
            self.credentials = Credentials()
        return self.credentials

    @asynccontextmanager
    async def _name_guard(self, name: str) -> AsyncIterator[None]:
        if not self.serialize_by_name:
            yield
            return

        lock = self._name_locks.get(name)
        if lock is None:
            lock = asyncio.Lock()
            self._name_locks[name] = lock
        async with lock:
            yield

    async def create_application(self, name: str) -> Application:
        """Create an application in IAS.

        This is not idempotent: if an application with the name already exists it
        is deleted and a new one is created, so the creation never has to resume
        from a partially provisioned application.
        """
        async with self._name_guard(name):
            existing = await self.get_application_by_name(name)
            if existing is not None:
                await self._delete_existing_application(name, existing.id)

            app_id = await self._create_new_application(name)
            LOGGER.info("Created application %s with id %s", name, app_id)

            client_secret = await self._create_secret(app_id)
            client_id = await self._get_client_id(app_id)

        # Neither URL is part of the application; both come from the tenant's
        # OIDC configuration.
        token_url = await self.get_token_url()
        jwks_uri = await self.get_jwks_uri()

        return Application(
            name=name,
            id=str(app_id),
            client_id=client_id,
            client_secret=client_secret,
            token_url=token_url,
            jwks_uri=jwks_uri,
        )

    async def delete_application(self, name: str) -> None:
        """Delete an application in IAS; does nothing if it does not exist."""
        async with self._name_guard(name):
            existing = await self.get_application_by_name(name)
            if existing is None:
                return

            await self._delete_application(existing.id)

    async def get_token_url(self) -> str:
        """Return the token URL of the tenant."""
        try:
            token_url = await self.oidc.get_token_endpoint()
        except TRANSPORT_ERRORS as err:
            raise IASClientError(ErrorKind.FETCH_TOKEN_URL) from err
        if not token_url:
            raise IASClientError(ErrorKind.FETCH_TOKEN_URL)
        return token_url

    async def get_jwks_uri(self) -> str:
        """Return the JWKS URI of the tenant."""
        try:
            jwks_uri = await self.oidc.get_jwks_uri()
        except TRANSPORT_ERRORS as err:
            raise IASClientError(ErrorKind.FETCH_JWKS_URI) from err
        if not jwks_uri:
            raise IASClientError(ErrorKind.FETCH_JWKS_URI)
        return jwks_uri

    async def get_application_by_name(self, name: str) -> Optional[ApplicationRecord]:
        """Return the only application with the given name, or None."""
        kind = ErrorKind.FETCH_EXISTING_APPLICATIONS
        try:
            res = await self.api.list_applications(f"name eq {name}")
        except TRANSPORT_ERRORS as err:
            raise IASClientError(kind, name=name) from err

        # Not documented, but the API answers 404 when no application matches.
        if res.status == http.HTTPStatus.NOT_FOUND:
            return None

        if res.status != http.HTTPStatus.OK:
            LOGGER.error(
                "Failed to fetch existing applications with name %s, status %s",
                name,
                res.status,
            )
            raise IASClientError(kind, name=name, status=res.status)

        try:
            applications = ApplicationsResponse.model_validate(
                res.body or {}
            ).applications
        except ValidationError as err:
            raise IASClientError(kind, name=name, status=res.status) from err

        # An empty list is handled as well, since the 404 behaviour is
        # undocumented.
        if not applications:
            return None
        if len(applications) > 1:
            LOGGER.error("Found %d applications with name %s", len(applications), name)
            raise IASClientError(ErrorKind.MULTIPLE_APPLICATIONS, name=name)

        application = applications[0]
        if application.id is None:
            raise IASClientError(kind, name=name, status=res.status)
        return application

    async def _delete_existing_application(self, name: str, app_id: UUID) -> None:
        kind = ErrorKind.DELETE_EXISTING_APPLICATION
        try:
            res = await self.api.delete_application(app_id)
        except TRANSPORT_ERRORS as err:
            raise IASClientError(kind, name=name, app_id=str(app_id)) from err

        # Already gone between lookup and delete.
        if res.status == http.HTTPStatus.NOT_FOUND:
            return

        if res.status != http.HTTPStatus.OK:
            LOGGER.error(
                "Failed to delete existing application %s, status %s",
                app_id,
                res.status,
            )
            raise IASClientError(
                kind, name=name, app_id=str(app_id), status=res.status
            )
        LOGGER.info("Deleted existing application %s with id %s", name, app_id)

    async def _create_new_application(self, name: str) -> UUID:
        kind = ErrorKind.CREATE_APPLICATION
        try:
            res = await self.api.create_application(ApplicationRecord.for_name(name))
        except TRANSPORT_ERRORS as err:
            raise IASClientError(kind, name=name) from err

        if res.status != http.HTTPStatus.CREATED:
            LOGGER.error(
                "Failed to create application %s, status %s", name, res.status
            )
            raise IASClientError(kind, name=name, status=res.status)

        return extract_application_id(res, name)

    async def _create_secret(self, app_id: UUID) -> str:
        kind = ErrorKind.CREATE_API_SECRET
        try:
            res = await self.api.create_api_secret(app_id, ApiSecretRequest())
            secret = None
            if res.status == http.HTTPStatus.CREATED:
                secret = ApiSecretResponse.model_validate(res.body or {}).secret
        except TRANSPORT_ERRORS as err:
            raise IASClientError(kind, app_id=str(app_id)) from err

        if res.status != http.HTTPStatus.CREATED:
            LOGGER.error(
                "Failed to create api secret for %s, status %s", app_id, res.status
            )
            raise IASClientError(kind, app_id=str(app_id), status=res.status)
        if not secret:
            LOGGER.error("Created api secret for %s has no value", app_id)
            raise IASClientError(kind, app_id=str(app_id), status=res.status)

        return secret

    async def _get_client_id(self, app_id: UUID) -> str:
        # The client ID is generated only after an API secret is created, so the
        # application has to be fetched again.
        kind = ErrorKind.RETRIEVE_CLIENT_ID
        try:
            res = await self.api.get_application(app_id)
            client_id = None
            if res.status == http.HTTPStatus.OK:
                client_id = ApplicationRecord.model_validate(res.body or {}).client_id
        except TRANSPORT_ERRORS as err:
            raise IASClientError(kind, app_id=str(app_id)) from err

        if res.status != http.HTTPStatus.OK:
            LOGGER.error(
                "Failed to retrieve client ID of %s, status %s", app_id, res.status
            )
            raise IASClientError(kind, app_id=str(app_id), status=res.status)
        if not client_id:
            LOGGER.error("Application %s has no client ID", app_id)
            raise IASClientError(kind, app_id=str(app_id), status=res.status)

        return client_id

    async def _delete_application(self, app_id: UUID) -> None:
        kind = ErrorKind.DELETE_APPLICATION
        try:
            res = await self.api.delete_application(app_id)
        except TRANSPORT_ERRORS as err:
            raise IASClientError(kind, app_id=str(app_id)) from err

        # Not documented, but the API answers 404 when the ID is unknown.
        if res.status == http.HTTPStatus.NOT_FOUND:
            return

        if res.status != http.HTTPStatus.OK:
            LOGGER.error(
                "Failed to delete application %s, status %s", app_id, res.status
            )
            raise IASClientError(kind, app_id=str(app_id), status=res.status)
        LOGGER.info("Deleted application with id %s", app_id)


def extract_application_id(res: APIResponse, name: Optional[str] = None) -> UUID:
    """Return the application ID, the last segment of the Location header."""
    location = res.headers.get("Location") or ""
    try:
        return UUID(location.rstrip("/").split("/")[-1])
    except ValueError as err:
        LOGGER.error("Invalid Location header %r for application %s", location, name)
        raise IASClientError(
            ErrorKind.RETRIEVE_APPLICATION_ID, name=name, status=res.status
        ) from err
