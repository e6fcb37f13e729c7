"""Shared command line plumbing for the fetch scripts."""

from typing import NoReturn, Optional

import argparse
import logging
import os
import sys

from dotenv import find_dotenv, load_dotenv

from redstone_fetch.data_service.exceptions import UsageError

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_SERVICE_ERROR = 2
EXIT_DATA_SHAPE_ERROR = 3

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_log_level(level: Optional[str] = None) -> int:
    """Resolve the log level from the argument, LOG_LEVEL in the environment or .env, or WARNING."""
    load_dotenv(find_dotenv(usecwd=True))

    level_name = (level or os.environ.get("LOG_LEVEL", "WARNING")).upper()
    return getattr(logging, level_name, logging.WARNING)


def setup_logging(level: Optional[str] = None) -> None:
    """Log to stderr so stdout only ever carries the fetched data."""
    logging.basicConfig(level=get_log_level(level), format=LOG_FORMAT, stream=sys.stderr)


class FetchArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises UsageError instead of exiting with status 2."""

    def error(self, message: str) -> NoReturn:
        raise UsageError(message)


def build_parser(prog: str, description: str, timestamp_help: str) -> FetchArgumentParser:
    parser = FetchArgumentParser(prog=prog, description=description)
    parser.add_argument("feed", help="Data feed identifier, e.g. ETH")
    parser.add_argument("timestamp", nargs="?", type=int, default=None, help=timestamp_help)
    return parser


def report_usage_error(parser: argparse.ArgumentParser, error: Exception) -> int:
    parser.print_usage(sys.stderr)
    sys.stderr.write(f"{parser.prog}: error: {error}\n")
    return EXIT_USAGE
