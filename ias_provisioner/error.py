"""IAS provisioning errors."""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Remote call boundary at which provisioning failed."""

    CREATE_APPLICATION = "failed to create application"
    FETCH_EXISTING_APPLICATIONS = "failed to fetch existing applications"
    DELETE_EXISTING_APPLICATION = (
        "failed to delete existing application before creation"
    )
    CREATE_API_SECRET = "failed to create api secret"
    RETRIEVE_CLIENT_ID = "failed to retrieve client ID"
    FETCH_TOKEN_URL = "failed to fetch token url"
    FETCH_JWKS_URI = "failed to fetch jwks uri"
    DELETE_APPLICATION = "failed to delete application"
    MULTIPLE_APPLICATIONS = "found multiple applications with the same name"
    RETRIEVE_APPLICATION_ID = "failed to retrieve application ID from header"


class IASError(Exception):
    """Base class for IAS provisioning errors."""


class IASClientError(IASError):
    """A provisioning call failed at a known stage.

    The ``kind`` identifies the stage; ``name``, ``app_id`` and ``status`` carry
    whatever context was available when the stage failed. The underlying
    transport error, if any, is chained as ``__cause__``.
    """

    def __init__(
        self,
        kind: ErrorKind,
        *,
        name: Optional[str] = None,
        app_id: Optional[str] = None,
        status: Optional[int] = None,
    ):
        """Initialize the error."""
        self.kind = kind
        self.name = name
        self.app_id = app_id
        self.status = status

        context = []
        if name is not None:
            context.append(f"name={name}")
        if app_id is not None:
            context.append(f"id={app_id}")
        if status is not None:
            context.append(f"status={status}")

        message = kind.value
        if context:
            message = f"{message} ({', '.join(context)})"
        super().__init__(message)
