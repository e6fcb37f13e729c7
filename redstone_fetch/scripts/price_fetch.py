#!/usr/bin/env python3
"""
Price Fetch - print a RedStone price as an ABI encoded uint256.

Requests a single signer data package, scales its value by 10^8 and writes
the encoded 32 byte word to stdout, as 0x hex by default or raw with --raw.

Historical requests round the scaled price up, latest requests round it
down.

Usage:
    price-fetch ETH
    price-fetch ETH 1700000000    # historical, timestamp in seconds
    price-fetch ETH --raw > price.bin
"""

from typing import Optional

import asyncio
import logging
import sys

from redstone_fetch.data_service.client import DataServiceClient
from redstone_fetch.data_service.config import PRICE_SIGNERS_COUNT, RequestConfig
from redstone_fetch.data_service.encoding import encode_uint256, scale_price, to_hex
from redstone_fetch.data_service.exceptions import DataShapeError, InvalidRequestConfigError, UsageError
from redstone_fetch.data_service.models import SignedDataPackage
from redstone_fetch.data_service.result import ServiceResult, fetch_result
from redstone_fetch.scripts.common import (
    EXIT_DATA_SHAPE_ERROR,
    EXIT_OK,
    EXIT_SERVICE_ERROR,
    build_parser,
    report_usage_error,
    setup_logging,
)

logger = logging.getLogger("redstone_fetch.price_fetch")


async def fetch_data_packages(
    client: DataServiceClient, data_feed_id: str, timestamp_seconds: Optional[int] = None
) -> ServiceResult[list[SignedDataPackage]]:
    request = RequestConfig.for_feed(
        data_feed_id,
        PRICE_SIGNERS_COUNT,
        timestamp_seconds,
        data_service_id=client.config.data_service_id,
    )
    logger.info(f"Requesting data packages: {request}")
    return await fetch_result(client.get_data_packages(request))


def compute_price(packages: list[SignedDataPackage], historical: bool) -> int:
    """
    Scale the first package's price to 8 decimals.

    Args:
        packages: Data packages returned by the data service
        historical: Whether the packages were requested for a historical timestamp

    Returns:
        Price scaled by 10^8, rounded up for historical requests and down otherwise

    Raises:
        DataShapeError: If there are no packages or the first has no numeric value
    """
    if not packages:
        raise DataShapeError("Data service returned no data packages")

    price = packages[0].price_value()
    scaled = scale_price(price, round_up=historical)
    logger.info(f"Price {price} scaled to {scaled}")
    return scaled


def main(argv: Optional[list[str]] = None) -> int:
    setup_logging()

    parser = build_parser(
        prog="price-fetch",
        description="Print a RedStone price as an ABI encoded uint256 scaled by 10^8.",
        timestamp_help="Optional timestamp in seconds",
    )
    parser.add_argument("--raw", action="store_true", help="Write the raw 32 bytes instead of 0x hex")

    try:
        args = parser.parse_args(argv)
        client = DataServiceClient()
        result = asyncio.run(fetch_data_packages(client, args.feed, args.timestamp))
    except (UsageError, InvalidRequestConfigError) as e:
        return report_usage_error(parser, e)

    if not result.ok:
        logger.error(f"Data service request failed: {result.error}")
        return EXIT_SERVICE_ERROR

    try:
        encoded = encode_uint256(compute_price(result.unwrap(), historical=args.timestamp is not None))
    except DataShapeError as e:
        logger.error(f"Cannot read price: {e}")
        return EXIT_DATA_SHAPE_ERROR

    if args.raw:
        sys.stdout.buffer.write(encoded)
        sys.stdout.buffer.flush()
    else:
        sys.stdout.write(to_hex(encoded))
        sys.stdout.flush()
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
