"""
Models for RedStone gateway responses.
"""

from __future__ import annotations

from typing import Any, Optional, Union

from decimal import Decimal, InvalidOperation

from pydantic import BaseModel, ConfigDict, Field

from redstone_fetch.data_service.exceptions import DataShapeError


class DataPointMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    value: Optional[Union[str, float, int]] = Field(default=None, description="""Aggregated value as reported by the node""")
    source_metadata: Optional[dict[str, Any]] = Field(default=None, alias="""sourceMetadata""")


class DataPoint(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    data_feed_id: str = Field(alias="""dataFeedId""")
    # Numbers are numeric data points, strings are base64 encoded bytes
    value: Union[float, int, str]
    decimals: Optional[int] = Field(default=None)
    metadata: Optional[DataPointMetadata] = Field(default=None)

    @property
    def is_numeric(self) -> bool:
        return not isinstance(self.value, str)


class SignedDataPackage(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    timestamp_milliseconds: int = Field(alias="""timestampMilliseconds""")
    signature: str = Field(description="""Base64 encoded 65 byte ECDSA signature (r, s, v)""")
    data_points: list[DataPoint] = Field(alias="""dataPoints""")
    signer_address: Optional[str] = Field(default=None, alias="""signerAddress""")
    data_package_id: Optional[str] = Field(default=None, alias="""dataPackageId""")
    data_service_id: Optional[str] = Field(default=None, alias="""dataServiceId""")

    def price_value(self) -> Decimal:
        """
        Read the numeric value of the first data point.

        The metadata value is preferred since it carries the full precision
        reported by the node. Numeric data points without metadata fall back
        to their value field.

        Returns:
            Price as a Decimal

        Raises:
            DataShapeError: If the package has no data points or no numeric value
        """
        if not self.data_points:
            raise DataShapeError(f"Data package {self.data_package_id!r} has no data points")

        data_point = self.data_points[0]
        raw_value: Any = None
        if data_point.metadata is not None and data_point.metadata.value is not None:
            raw_value = data_point.metadata.value
        elif data_point.is_numeric:
            raw_value = data_point.value

        if raw_value is None:
            raise DataShapeError(f"Data point {data_point.data_feed_id!r} has no numeric value")

        try:
            value = Decimal(str(raw_value))
        except InvalidOperation as e:
            raise DataShapeError(f"Data point {data_point.data_feed_id!r} has a non-numeric value: {raw_value!r}") from e

        if not value.is_finite():
            raise DataShapeError(f"Data point {data_point.data_feed_id!r} has a non-finite value: {raw_value!r}")
        return value
