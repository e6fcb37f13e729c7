"""Builders for gateway responses used across the tests."""

from typing import Any, Callable, Optional

import base64

import httpx

TEST_GATEWAY_URL = "https://gateway.test"
TEST_TIMESTAMP_MS = 1700000000000


def make_signature(fill: int = 1) -> str:
    """Base64 of a 65 byte signature made of a single repeated byte."""
    return base64.b64encode(bytes([fill]) * 65).decode()


def make_package(
    data_feed_id: str = "ETH",
    value: Any = 1234.5,
    signer: Optional[str] = "0x0000000000000000000000000000000000000001",
    metadata_value: Optional[str] = None,
    timestamp_ms: int = TEST_TIMESTAMP_MS,
    signature_fill: int = 1,
) -> dict[str, Any]:
    """Build a signed data package dict shaped like the gateway JSON."""
    data_point: dict[str, Any] = {"dataFeedId": data_feed_id, "value": value}
    if metadata_value is not None:
        data_point["metadata"] = {"value": metadata_value}

    package: dict[str, Any] = {
        "timestampMilliseconds": timestamp_ms,
        "signature": make_signature(signature_fill),
        "dataPoints": [data_point],
        "dataPackageId": data_feed_id,
        "dataServiceId": "redstone-primary-prod",
    }
    if signer is not None:
        package["signerAddress"] = signer
    return package


def make_signers_response(data_feed_id: str = "ETH", signers_count: int = 3) -> dict[str, Any]:
    return {
        data_feed_id: [
            make_package(data_feed_id, signer=f"0x{index:040x}", signature_fill=index)
            for index in range(1, signers_count + 1)
        ]
    }


class RecordingGateway:
    """Mock gateway handler recording every request it serves."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.handler = handler
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

