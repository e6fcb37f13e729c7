"""
Pytest fixtures for redstone-fetch tests.

The gateway is replaced by an httpx MockTransport, no test talks to the network.
"""

from typing import Any, Callable

import json

import httpx
import pytest

from redstone_fetch.data_service.config import GatewayConfig
from tests.utils import TEST_GATEWAY_URL, RecordingGateway


@pytest.fixture
def gateway_config() -> GatewayConfig:
    return GatewayConfig(gateway_url=TEST_GATEWAY_URL, unsigned_metadata="test#redstone-primary-prod")


@pytest.fixture
def json_gateway() -> Callable[..., RecordingGateway]:
    """Factory for a gateway that answers every request with the given JSON body and status."""

    def _factory(body: Any, status_code: int = 200) -> RecordingGateway:
        return RecordingGateway(lambda request: httpx.Response(status_code, content=json.dumps(body).encode()))

    return _factory
