"""
RedStone data service client.

This package fetches signed data packages from RedStone gateways and
assembles them into payloads and ABI encoded prices.
"""

from redstone_fetch.data_service.client import DataServiceClient
from redstone_fetch.data_service.config import (
    DEFAULT_DATA_SERVICE_ID,
    PAYLOAD_SIGNERS_COUNT,
    PRICE_SIGNERS_COUNT,
    GatewayConfig,
    RequestConfig,
    get_config,
)
from redstone_fetch.data_service.encoding import encode_uint256, scale_price, to_hex
from redstone_fetch.data_service.exceptions import (
    DataShapeError,
    ExternalServiceError,
    InsufficientSignersError,
    InvalidRequestConfigError,
    RedstoneFetchError,
    UsageError,
)
from redstone_fetch.data_service.models import DataPoint, DataPointMetadata, SignedDataPackage
from redstone_fetch.data_service.payload import prepare_payload, serialize_payload
from redstone_fetch.data_service.result import ServiceResult, fetch_result

__all__ = [
    # Client
    "DataServiceClient",
    # Config
    "DEFAULT_DATA_SERVICE_ID",
    "PAYLOAD_SIGNERS_COUNT",
    "PRICE_SIGNERS_COUNT",
    "GatewayConfig",
    "RequestConfig",
    "get_config",
    # Encoding
    "encode_uint256",
    "scale_price",
    "to_hex",
    # Exceptions
    "DataShapeError",
    "ExternalServiceError",
    "InsufficientSignersError",
    "InvalidRequestConfigError",
    "RedstoneFetchError",
    "UsageError",
    # Models
    "DataPoint",
    "DataPointMetadata",
    "SignedDataPackage",
    # Payload
    "prepare_payload",
    "serialize_payload",
    # Results
    "ServiceResult",
    "fetch_result",
]
