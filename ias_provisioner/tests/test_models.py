import uuid

import pytest
from pydantic import ValidationError

from ..models import (
    ApiSecretRequest,
    Application,
    ApplicationRecord,
    ApplicationsResponse,
    Credentials,
)
from .mocks import AUTH_SCHEMA


def test_application_requires_non_empty_fields():
    fields = {
        "name": "svc-a",
        "id": str(uuid.uuid4()),
        "client_id": "cid-1",
        "client_secret": "abc",
        "token_url": "https://t/oauth/token",
        "jwks_uri": "https://t/jwks",
    }
    assert Application(**fields).client_id == "cid-1"

    for field in fields:
        with pytest.raises(ValidationError):
            Application(**dict(fields, **{field: ""}))


def test_application_hides_secret_in_repr():
    application = Application(
        name="svc-a",
        id="id",
        client_id="cid-1",
        client_secret="super-secret",
        token_url="https://t/oauth/token",
        jwks_uri="https://t/jwks",
    )
    assert "super-secret" not in repr(application)


def test_credentials_hide_password_in_repr():
    credentials = Credentials(url="https://t", username="user", password="hunter2")
    assert "hunter2" not in repr(credentials)
    assert Credentials().password == ""


def test_application_record_for_name():
    record = ApplicationRecord.for_name("svc-a")

    assert record.model_dump(by_alias=True, exclude_none=True) == {
        "name": "svc-a",
        "branding": {"displayName": "svc-a"},
        "schemas": [AUTH_SCHEMA],
        AUTH_SCHEMA: {"ssoType": "openIdConnect"},
    }


def test_application_record_client_id():
    app_id = uuid.uuid4()
    record = ApplicationRecord.model_validate(
        {
            "id": str(app_id),
            "name": "svc-a",
            "multiTenantApp": False,
            AUTH_SCHEMA: {"clientId": "cid-1", "ssoType": "openIdConnect"},
        }
    )

    assert record.id == app_id
    assert record.client_id == "cid-1"
    assert ApplicationRecord(name="svc-a").client_id is None


def test_applications_response():
    response = ApplicationsResponse.model_validate(
        {"totalResults": 1, "applications": [{"id": str(uuid.uuid4())}]}
    )
    assert response.total_results == 1
    assert len(response.applications) == 1
    assert ApplicationsResponse.model_validate({}).applications is None


def test_api_secret_request_defaults():
    assert ApiSecretRequest().model_dump(by_alias=True) == {
        "authorizationScopes": ["oAuth"],
        "description": "ias-provisioner",
    }
