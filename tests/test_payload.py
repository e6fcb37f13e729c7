import base64

import pytest
from web3 import Web3

from redstone_fetch.data_service.exceptions import DataShapeError
from redstone_fetch.data_service.models import SignedDataPackage
from redstone_fetch.data_service.payload import (
    REDSTONE_MARKER,
    data_feed_id_to_bytes32,
    prepare_payload,
    serialize_data_package,
    serialize_payload,
)
from tests.utils import TEST_TIMESTAMP_MS, make_package


def _package(**kwargs) -> SignedDataPackage:
    return SignedDataPackage.model_validate(make_package(**kwargs))


def test_short_feed_id_is_right_padded():
    assert data_feed_id_to_bytes32("ETH") == b"ETH" + bytes(29)


def test_long_feed_id_is_hashed():
    feed_id = "SOME_VERY_LONG_DATA_FEED_IDENTIFIER_NAME"

    assert data_feed_id_to_bytes32(feed_id) == bytes(Web3.keccak(text=feed_id))


def test_bytes32_hex_feed_id_is_kept():
    feed_id = "0x" + "ab" * 32

    assert data_feed_id_to_bytes32(feed_id) == bytes.fromhex("ab" * 32)


def test_serialize_numeric_data_package():
    serialized = serialize_data_package(_package(value=1234.5, signature_fill=7))

    assert serialized == (
        b"ETH" + bytes(29)
        + (123450000000).to_bytes(32, "big")
        + TEST_TIMESTAMP_MS.to_bytes(6, "big")
        + (32).to_bytes(4, "big")
        + (1).to_bytes(3, "big")
        + bytes([7]) * 65
    )


def test_serialize_bytes_value_is_left_padded():
    serialized = serialize_data_package(_package(value=base64.b64encode(b"\x01\x02").decode()))

    assert serialized[32:64] == bytes(30) + b"\x01\x02"


def test_data_points_sorted_by_feed_id():
    raw = make_package("ETH", value=2.0)
    raw["dataPoints"].append({"dataFeedId": "BTC", "value": 1.0})

    serialized = serialize_data_package(SignedDataPackage.model_validate(raw))

    assert serialized[:3] == b"BTC"
    assert serialized[64:67] == b"ETH"
    assert serialized[-68:-65] == (2).to_bytes(3, "big")


def test_payload_layout():
    packages = [_package(signature_fill=1), _package(signature_fill=2)]

    payload = serialize_payload(packages, unsigned_metadata="meta")

    package_size = 64 + 6 + 4 + 3 + 65
    assert len(payload) == 2 * package_size + 2 + 4 + 3 + 9
    assert payload.endswith(REDSTONE_MARKER)
    assert payload[-12:-9] == (4).to_bytes(3, "big")
    assert payload[-16:-12] == b"meta"
    assert payload[-18:-16] == (2).to_bytes(2, "big")


def test_prepare_payload_is_hex_without_prefix():
    payload = prepare_payload([_package()])

    assert not payload.startswith("0x")
    assert payload.endswith("000002ed57011e0000")
    assert bytes.fromhex(payload) == serialize_payload([_package()])


def test_invalid_signature_length():
    raw = make_package()
    raw["signature"] = base64.b64encode(bytes(64)).decode()

    with pytest.raises(DataShapeError):
        serialize_data_package(SignedDataPackage.model_validate(raw))


def test_oversized_bytes_value():
    with pytest.raises(DataShapeError):
        serialize_data_package(_package(value=base64.b64encode(bytes(33)).decode()))


def test_negative_numeric_value():
    with pytest.raises(DataShapeError):
        serialize_data_package(_package(value=-1.0))


def test_numeric_value_at_declared_decimals():
    raw = make_package(value=1.5)
    raw["dataPoints"][0]["decimals"] = 1

    serialized = serialize_data_package(SignedDataPackage.model_validate(raw))

    assert serialized[32:64] == (15).to_bytes(32, "big")


@pytest.mark.parametrize("value, decimals", [(1.123456789, None), (1.55, 1)])
def test_numeric_value_finer_than_decimals(value, decimals):
    raw = make_package(value=value)
    if decimals is not None:
        raw["dataPoints"][0]["decimals"] = decimals

    with pytest.raises(DataShapeError):
        serialize_data_package(SignedDataPackage.model_validate(raw))
