import os
import uuid

import pytest

from ias_provisioner import Config

REQUIRED_ENV = ("IAS_URL", "IAS_USER", "IAS_PASSWORD")


@pytest.fixture
def config():
    missing = [var for var in REQUIRED_ENV if not os.getenv(var)]
    if missing:
        pytest.skip(f"IAS tenant not configured, missing {', '.join(missing)}")
    return Config.from_settings()


@pytest.fixture
def client(config):
    return config.create_client()


@pytest.fixture
def app_name():
    return f"ias-provisioner-it-{uuid.uuid4().hex[:8]}"
