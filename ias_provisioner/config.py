"""Retrieve configuration values."""

from dataclasses import dataclass
from os import getenv
from typing import Any, Mapping, Optional

from .client import Client, ClientFactory, new_client

TRUTHY = ("1", "true", "yes", "on")


class ConfigError(ValueError):
    """Base class for configuration errors."""

    def __init__(self, var: str, env: str):
        """Initialize a ConfigError."""
        super().__init__(
            f"Invalid {var} specified for IAS provisioner; use either "
            f"ias.{var} config value or environment variable {env}"
        )


@dataclass
class Config:
    """Configuration for the IAS provisioner."""

    url: str
    user: str
    password: str
    serialize_by_name: bool = False

    @classmethod
    def from_settings(cls, settings: Optional[Mapping[str, Any]] = None) -> "Config":
        """Retrieve configuration from settings, falling back to the environment."""
        settings = settings or {}
        url = settings.get("url") or getenv("IAS_URL")
        user = settings.get("user") or getenv("IAS_USER")
        password = settings.get("password") or getenv("IAS_PASSWORD")

        serialize_by_name = settings.get("serialize_by_name")
        if serialize_by_name is None:
            serialize_by_name = getenv("IAS_SERIALIZE_BY_NAME", "")
        if isinstance(serialize_by_name, str):
            serialize_by_name = serialize_by_name.strip().lower() in TRUTHY

        if not url:
            raise ConfigError("url", "IAS_URL")
        if not user:
            raise ConfigError("user", "IAS_USER")
        if not password:
            raise ConfigError("password", "IAS_PASSWORD")

        return cls(url, user, password, bool(serialize_by_name))

    def create_client(self, factory: ClientFactory = new_client) -> Client:
        """Create a client for the configured tenant."""
        return factory(
            self.url,
            self.user,
            self.password,
            serialize_by_name=self.serialize_by_name,
        )
