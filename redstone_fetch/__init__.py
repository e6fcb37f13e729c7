"""
redstone-fetch - command line tools for RedStone oracle data.

This package provides:
- data_service: an async client for RedStone gateways and the payload format
- scripts: the payload-fetch and price-fetch command line tools
"""

from redstone_fetch._version import SDK_VERSION
from redstone_fetch.data_service import DataServiceClient, GatewayConfig, RequestConfig

__all__ = [
    "SDK_VERSION",
    "DataServiceClient",
    "GatewayConfig",
    "RequestConfig",
]
