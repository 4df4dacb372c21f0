"""Models for IAS applications, API secrets and OIDC discovery."""

from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

AUTHENTICATION_SCHEMA = (
    "urn:sap:identity:application:schemas:extension:sci:1.0:Authentication"
)
SSO_TYPE_OPENID_CONNECT = "openIdConnect"
SECRET_DESCRIPTION = "ias-provisioner"
OAUTH_SCOPE = "oAuth"


class Credentials(BaseModel):
    """Connection info for an IAS tenant."""

    model_config = ConfigDict(frozen=True)

    url: str = ""
    username: str = ""
    password: str = Field(default="", repr=False)


class Application(BaseModel):
    """A provisioned IAS application and the OAuth2 client details to use it."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    id: str = Field(min_length=1)
    client_id: str = Field(min_length=1)
    client_secret: str = Field(min_length=1, repr=False)
    token_url: str = Field(min_length=1)
    jwks_uri: str = Field(min_length=1)


class Branding(BaseModel):
    """Application branding."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    display_name: Optional[str] = Field(default=None, alias="displayName")


class AuthenticationSchema(BaseModel):
    """Authentication schema extension of an application."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    sso_type: Optional[str] = Field(default=None, alias="ssoType")
    client_id: Optional[str] = Field(default=None, alias="clientId")


class ApplicationRecord(BaseModel):
    """Application as stored in the IAS application directory."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: Optional[UUID] = None
    name: Optional[str] = None
    branding: Optional[Branding] = None
    schemas: Optional[List[str]] = None
    authentication: Optional[AuthenticationSchema] = Field(
        default=None, alias=AUTHENTICATION_SCHEMA
    )

    @classmethod
    def for_name(cls, name: str) -> "ApplicationRecord":
        """Return a new OpenID Connect application record for name."""
        return cls(
            name=name,
            branding=Branding(display_name=name),
            schemas=[AUTHENTICATION_SCHEMA],
            authentication=AuthenticationSchema(sso_type=SSO_TYPE_OPENID_CONNECT),
        )

    @property
    def client_id(self) -> Optional[str]:
        """Client ID, only set once an API secret exists."""
        if self.authentication is None:
            return None
        return self.authentication.client_id


class ApplicationsResponse(BaseModel):
    """Response of the application list endpoint."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    total_results: Optional[int] = Field(default=None, alias="totalResults")
    items_per_page: Optional[int] = Field(default=None, alias="itemsPerPage")
    applications: Optional[List[ApplicationRecord]] = None


class ApiSecretRequest(BaseModel):
    """Request body for API secret creation."""

    model_config = ConfigDict(populate_by_name=True)

    authorization_scopes: List[str] = Field(
        default_factory=lambda: [OAUTH_SCOPE], alias="authorizationScopes"
    )
    description: str = SECRET_DESCRIPTION


class ApiSecretResponse(BaseModel):
    """Response of API secret creation."""

    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    secret: Optional[str] = Field(default=None, repr=False)


class OidcConfiguration(BaseModel):
    """Subset of an OpenID provider configuration document."""

    model_config = ConfigDict(extra="allow")

    issuer: Optional[str] = None
    token_endpoint: Optional[str] = None
    jwks_uri: Optional[str] = None
