#!/usr/bin/env python3
"""
Payload Fetch - print a signed RedStone payload for a data feed.

Requests data packages from 3 distinct signers and writes the serialized
payload (hex, no 0x prefix, no trailing newline) to stdout.

Usage:
    payload-fetch ETH
    payload-fetch ETH 1700000000    # historical, timestamp in seconds
"""

from typing import Optional

import asyncio
import logging
import sys

from redstone_fetch.data_service.client import DataServiceClient
from redstone_fetch.data_service.config import PAYLOAD_SIGNERS_COUNT, RequestConfig
from redstone_fetch.data_service.exceptions import DataShapeError, InvalidRequestConfigError, UsageError
from redstone_fetch.data_service.result import ServiceResult, fetch_result
from redstone_fetch.scripts.common import (
    EXIT_DATA_SHAPE_ERROR,
    EXIT_OK,
    EXIT_SERVICE_ERROR,
    build_parser,
    report_usage_error,
    setup_logging,
)

logger = logging.getLogger("redstone_fetch.payload_fetch")


async def fetch_payload(
    client: DataServiceClient, data_feed_id: str, timestamp_seconds: Optional[int] = None
) -> ServiceResult[str]:
    """Fetch the payload for one feed, optionally as of a historical timestamp in seconds."""
    request = RequestConfig.for_feed(
        data_feed_id,
        PAYLOAD_SIGNERS_COUNT,
        timestamp_seconds,
        data_service_id=client.config.data_service_id,
    )
    logger.info(f"Requesting payload: {request}")
    return await fetch_result(client.get_payload(request))


def main(argv: Optional[list[str]] = None) -> int:
    setup_logging()

    parser = build_parser(
        prog="payload-fetch",
        description="Print a signed RedStone payload for a data feed.",
        timestamp_help="Optional historical timestamp in seconds",
    )
    try:
        args = parser.parse_args(argv)
        client = DataServiceClient()
        result = asyncio.run(fetch_payload(client, args.feed, args.timestamp))
    except (UsageError, InvalidRequestConfigError) as e:
        return report_usage_error(parser, e)
    except DataShapeError as e:
        logger.error(f"Unexpected data package shape: {e}")
        return EXIT_DATA_SHAPE_ERROR

    if not result.ok:
        logger.error(f"Data service request failed: {result.error}")
        return EXIT_SERVICE_ERROR

    sys.stdout.write(result.unwrap())
    sys.stdout.flush()
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
