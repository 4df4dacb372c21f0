import re
import uuid

import pytest

from ..client import new_client
from .mocks import AUTH_SCHEMA, FakeTenant

TENANT_URL = "https://tenant.example.com"
TOKEN_URL = "https://t/oauth/token"
JWKS_URI = "https://t/jwks"


@pytest.fixture
def tenant_url():
    return TENANT_URL


@pytest.fixture
def applications_url(tenant_url):
    return tenant_url + "/Applications/v1/"


@pytest.fixture
def list_url(applications_url):
    return re.compile(re.escape(applications_url) + r"\?filter=.*$")


@pytest.fixture
def discovery_url(tenant_url):
    return tenant_url + "/.well-known/openid-configuration"


@pytest.fixture
def discovery_document():
    return {
        "issuer": TENANT_URL,
        "token_endpoint": TOKEN_URL,
        "jwks_uri": JWKS_URI,
    }


@pytest.fixture
def app_id():
    return uuid.uuid4()


@pytest.fixture
def client(tenant_url):
    return new_client(tenant_url, "user", "password")


@pytest.fixture
def tenant(tenant_url):
    return FakeTenant(tenant_url, TOKEN_URL, JWKS_URI)


@pytest.fixture
def mock_create(applications_url):
    """Register the create, secret and fetch responses of one application."""

    def _mock_create(mocked, app_id, secret="abc", client_id="cid-1"):
        app_url = f"{applications_url}{app_id}"
        mocked.post(
            applications_url,
            status=201,
            headers={"Location": f"/Applications/v1/{app_id}"},
        )
        mocked.post(f"{app_url}/apiSecrets", status=201, payload={"secret": secret})
        mocked.get(
            app_url,
            status=200,
            payload={"id": str(app_id), AUTH_SCHEMA: {"clientId": client_id}},
        )

    return _mock_create


def requests_for(mocked, method, path=None):
    """Return the recorded calls for method, optionally restricted to a path."""
    calls = []
    for (req_method, url), req_calls in mocked.requests.items():
        if req_method == method and (path is None or url.path == path):
            calls.extend(req_calls)
    return calls
