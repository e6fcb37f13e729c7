"""
Configuration settings for the RedStone data service client.
"""

from typing import Optional

import os
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv

from redstone_fetch.data_service.exceptions import InvalidRequestConfigError

DEFAULT_DATA_SERVICE_ID = "redstone-primary-prod"
DEFAULT_GATEWAY_URL = "https://oracle-gateway-1.a.redstone.finance"
DEFAULT_TIMEOUT_SECONDS = 30.0

PAYLOAD_SIGNERS_COUNT = 3
PRICE_SIGNERS_COUNT = 1


@dataclass(frozen=True)
class RequestConfig:
    """Parameters of a single data package request"""

    data_service_id: str
    data_feed_ids: tuple[str, ...]
    unique_signers_count: int
    historical_timestamp_ms: Optional[int] = None

    def __post_init__(self):
        if not self.data_service_id:
            raise InvalidRequestConfigError("data_service_id must not be empty")

        if isinstance(self.data_feed_ids, str):
            raise InvalidRequestConfigError("data_feed_ids must be a sequence of feed ids, not a string")
        # Accept any sequence but store a tuple so the config stays hashable
        object.__setattr__(self, "data_feed_ids", tuple(self.data_feed_ids))
        if not self.data_feed_ids:
            raise InvalidRequestConfigError("At least one data feed id is required")
        for feed_id in self.data_feed_ids:
            if not isinstance(feed_id, str) or not feed_id:
                raise InvalidRequestConfigError(f"Invalid data feed id: {feed_id!r}")

        if isinstance(self.unique_signers_count, bool) or not isinstance(self.unique_signers_count, int):
            raise InvalidRequestConfigError("unique_signers_count must be an integer")
        if self.unique_signers_count < 1:
            raise InvalidRequestConfigError(
                f"unique_signers_count must be at least 1, got {self.unique_signers_count}"
            )

        if self.historical_timestamp_ms is not None:
            if isinstance(self.historical_timestamp_ms, bool) or not isinstance(self.historical_timestamp_ms, int):
                raise InvalidRequestConfigError("historical_timestamp_ms must be an integer")
            if self.historical_timestamp_ms < 0:
                raise InvalidRequestConfigError(
                    f"historical_timestamp_ms must not be negative, got {self.historical_timestamp_ms}"
                )

    @property
    def is_historical(self) -> bool:
        return self.historical_timestamp_ms is not None

    @classmethod
    def for_feed(
        cls,
        data_feed_id: str,
        unique_signers_count: int,
        timestamp_seconds: Optional[int] = None,
        data_service_id: str = DEFAULT_DATA_SERVICE_ID,
    ) -> "RequestConfig":
        """Create a config for one feed, converting the timestamp from seconds to milliseconds.

        Args:
            data_feed_id: Feed to request (e.g. ETH)
            unique_signers_count: Number of distinct signers required
            timestamp_seconds: Optional historical timestamp in seconds
            data_service_id: RedStone data service to query

        Returns:
            Validated RequestConfig
        """
        return cls(
            data_service_id=data_service_id,
            data_feed_ids=(data_feed_id,),
            unique_signers_count=unique_signers_count,
            historical_timestamp_ms=(timestamp_seconds * 1000 if timestamp_seconds is not None else None),
        )


@dataclass
class GatewayConfig:
    """Configuration for the RedStone gateway connection"""

    gateway_url: str = DEFAULT_GATEWAY_URL
    data_service_id: str = DEFAULT_DATA_SERVICE_ID
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    unsigned_metadata: str = ""

    @classmethod
    def from_env(cls) -> "GatewayConfig":
        """Create a config instance from environment variables."""
        load_dotenv(find_dotenv(usecwd=True))

        timeout = os.environ.get("REDSTONE_TIMEOUT_SECONDS", str(DEFAULT_TIMEOUT_SECONDS))
        try:
            timeout_seconds = float(timeout)
        except ValueError as e:
            raise InvalidRequestConfigError(f"REDSTONE_TIMEOUT_SECONDS must be a number of seconds, got {timeout!r}") from e

        return cls(
            gateway_url=os.environ.get("REDSTONE_GATEWAY_URL", DEFAULT_GATEWAY_URL),
            data_service_id=os.environ.get("REDSTONE_DATA_SERVICE_ID", DEFAULT_DATA_SERVICE_ID),
            timeout_seconds=timeout_seconds,
            unsigned_metadata=os.environ.get("REDSTONE_UNSIGNED_METADATA", ""),
        )


def get_config() -> GatewayConfig:
    """Get configuration from environment."""
    return GatewayConfig.from_env()
