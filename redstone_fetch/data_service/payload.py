"""
Serialization of signed data packages into the RedStone payload format.

A payload is appended to contract calldata and parsed from the end, so the
layout is read right to left::

    [signed data package]... | packages count (2) | unsigned metadata |
    unsigned metadata byte size (3) | REDSTONE_MARKER (9)

and each signed data package is::

    [data feed id (32) | value (value byte size)]... | timestamp (6) |
    value byte size (4) | data points count (3) | signature (65)
"""

import base64
import binascii
import logging
from decimal import Decimal

from web3 import Web3

from redstone_fetch.data_service.encoding import DECIMALS_PRICE, scale_price
from redstone_fetch.data_service.exceptions import DataShapeError
from redstone_fetch.data_service.models import DataPoint, SignedDataPackage

logger = logging.getLogger("redstone_fetch.payload")

REDSTONE_MARKER = bytes.fromhex("000002ed57011e0000")

DATA_FEED_ID_BS = 32
DEFAULT_VALUE_BS = 32
TIMESTAMP_BS = 6
DATA_POINT_VALUE_BYTE_SIZE_BS = 4
DATA_POINTS_COUNT_BS = 3
SIGNATURE_BS = 65
DATA_PACKAGES_COUNT_BS = 2
UNSIGNED_METADATA_BYTE_SIZE_BS = 3


def _to_fixed_bytes(value: int, size: int, what: str) -> bytes:
    try:
        return value.to_bytes(size, "big")
    except OverflowError as e:
        raise DataShapeError(f"{what} {value} does not fit into {size} bytes") from e


def data_feed_id_to_bytes32(data_feed_id: str) -> bytes:
    """
    Convert a data feed id to its bytes32 form.

    Short ids are UTF-8 encoded and right padded. Longer ids are hashed,
    unless they already are a 0x prefixed bytes32 hex string.
    """
    if len(data_feed_id) > 31:
        if data_feed_id.startswith("0x") and len(data_feed_id) == 2 + 2 * DATA_FEED_ID_BS:
            return Web3.to_bytes(hexstr=data_feed_id)
        return bytes(Web3.keccak(text=data_feed_id))

    return data_feed_id.encode("utf-8").ljust(DATA_FEED_ID_BS, b"\x00")


def serialize_value(data_point: DataPoint) -> bytes:
    """Serialize a data point value into a fixed width word."""
    if data_point.is_numeric:
        decimals = data_point.decimals if data_point.decimals is not None else DECIMALS_PRICE
        # Signed bytes carry exactly `decimals` places
        exponent = Decimal(str(data_point.value)).normalize().as_tuple().exponent
        if isinstance(exponent, int) and exponent < -decimals:
            raise DataShapeError(
                f"Value of {data_point.data_feed_id!r} has more than {decimals} decimals: {data_point.value}"
            )
        scaled = scale_price(data_point.value, decimals=decimals)
        if scaled < 0:
            raise DataShapeError(f"Negative value for {data_point.data_feed_id!r}: {data_point.value}")
        return _to_fixed_bytes(scaled, DEFAULT_VALUE_BS, f"Value of {data_point.data_feed_id!r}")

    try:
        raw = base64.b64decode(data_point.value, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DataShapeError(f"Value of {data_point.data_feed_id!r} is not valid base64") from e

    if len(raw) > DEFAULT_VALUE_BS:
        raise DataShapeError(f"Value of {data_point.data_feed_id!r} is {len(raw)} bytes, max is {DEFAULT_VALUE_BS}")
    return raw.rjust(DEFAULT_VALUE_BS, b"\x00")


def decode_signature(signature: str) -> bytes:
    try:
        raw = base64.b64decode(signature, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DataShapeError("Data package signature is not valid base64") from e

    if len(raw) != SIGNATURE_BS:
        raise DataShapeError(f"Data package signature must be {SIGNATURE_BS} bytes, got {len(raw)}")
    return raw


def serialize_data_package(package: SignedDataPackage) -> bytes:
    """
    Serialize one signed data package.

    Args:
        package: Signed data package as returned by the gateway

    Returns:
        Serialized package bytes including the signature
    """
    if not package.data_points:
        raise DataShapeError(f"Data package {package.data_package_id!r} has no data points")

    # Contracts expect data points ordered by their bytes32 feed id
    serialized_points = sorted(
        (data_feed_id_to_bytes32(point.data_feed_id), serialize_value(point)) for point in package.data_points
    )

    return b"".join(
        [
            *(feed_id + value for feed_id, value in serialized_points),
            _to_fixed_bytes(package.timestamp_milliseconds, TIMESTAMP_BS, "Timestamp"),
            _to_fixed_bytes(DEFAULT_VALUE_BS, DATA_POINT_VALUE_BYTE_SIZE_BS, "Value byte size"),
            _to_fixed_bytes(len(serialized_points), DATA_POINTS_COUNT_BS, "Data points count"),
            decode_signature(package.signature),
        ]
    )


def serialize_payload(packages: list[SignedDataPackage], unsigned_metadata: str = "") -> bytes:
    """
    Serialize signed data packages into a RedStone payload.

    Args:
        packages: Signed data packages to include
        unsigned_metadata: Free form metadata appended outside of the signed part

    Returns:
        Payload bytes ending with the RedStone marker
    """
    metadata_bytes = unsigned_metadata.encode("utf-8")

    serialized = b"".join(serialize_data_package(package) for package in packages)
    payload = b"".join(
        [
            serialized,
            _to_fixed_bytes(len(packages), DATA_PACKAGES_COUNT_BS, "Data packages count"),
            metadata_bytes,
            _to_fixed_bytes(len(metadata_bytes), UNSIGNED_METADATA_BYTE_SIZE_BS, "Unsigned metadata byte size"),
            REDSTONE_MARKER,
        ]
    )

    logger.debug(f"Serialized {len(packages)} data packages into {len(payload)} payload bytes")
    return payload


def prepare_payload(packages: list[SignedDataPackage], unsigned_metadata: str = "") -> str:
    """Return the payload as hex without the 0x prefix, ready to append to calldata."""
    return serialize_payload(packages, unsigned_metadata).hex()
