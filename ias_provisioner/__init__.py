"""Provision OAuth2 applications in an IAS tenant."""

from .client import Client, ClientFactory, IASClient, new_client
from .config import Config, ConfigError
from .error import ErrorKind, IASClientError, IASError
from .models import Application, Credentials

__all__ = [
    "Application",
    "Client",
    "ClientFactory",
    "Config",
    "ConfigError",
    "Credentials",
    "ErrorKind",
    "IASClient",
    "IASClientError",
    "IASError",
    "new_client",
]
