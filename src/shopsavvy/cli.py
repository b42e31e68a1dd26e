"""
ShopSavvy Data API - command line

Environment:
    SHOPSAVVY_API_KEY      - required (ss_live_... or ss_test_...)
    SHOPSAVVY_BASE_URL     - optional base URL override
    SHOPSAVVY_TIMEOUT_SEC  - optional request timeout (default: 30)

Examples:
    shopsavvy product 012345678901
    shopsavvy offers 012345678901 B08N5WRWNW --retailer amazon
    shopsavvy history 012345678901 --start 2024-01-01 --end 2024-01-31
    shopsavvy schedule 012345678901 --frequency daily
    shopsavvy usage
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import List, Optional

from .client import ShopSavvyClient
from .config import __version__
from .errors import ConfigurationError, ShopSavvyError
from .schema import Frequency, WireModel


EXIT_OK = 0
EXIT_API_ERROR = 1
EXIT_CONFIG_ERROR = 2


def setup_logging(log_level: str) -> logging.Logger:
    logger = logging.getLogger("shopsavvy")
    logger.setLevel(getattr(logging, log_level.upper(), logging.WARNING))
    logger.handlers.clear()

    fmt = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setFormatter(fmt)
    ch.setLevel(logger.level)
    logger.addHandler(ch)

    return logger


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="shopsavvy", description="ShopSavvy Data API command line client"
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (logs go to stderr).",
    )
    sub = p.add_subparsers(dest="command", required=True)

    s = sub.add_parser("search", help="Keyword product search")
    s.add_argument("query")
    s.add_argument("--limit", type=int, default=None)
    s.add_argument("--offset", type=int, default=None)

    s = sub.add_parser("product", help="Product details by identifier(s)")
    s.add_argument("identifiers", nargs="+")
    s.add_argument("--format", default=None, help="Output format hint, e.g. csv")

    s = sub.add_parser("offers", help="Current offers by identifier(s)")
    s.add_argument("identifiers", nargs="+")
    s.add_argument("--retailer", default=None)
    s.add_argument("--format", default=None)

    s = sub.add_parser("history", help="Price history for an identifier")
    s.add_argument("identifier")
    s.add_argument("--start", required=True, help="Start date (YYYY-MM-DD)")
    s.add_argument("--end", required=True, help="End date (YYYY-MM-DD)")
    s.add_argument("--retailer", default=None)
    s.add_argument("--format", default=None)

    s = sub.add_parser("schedule", help="Schedule monitoring for identifier(s)")
    s.add_argument("identifiers", nargs="+")
    s.add_argument(
        "--frequency",
        default=Frequency.DAILY.value,
        help="hourly, daily or weekly (default: daily)",
    )
    s.add_argument("--retailer", default=None)

    sub.add_parser("scheduled", help="List scheduled products")

    s = sub.add_parser("unschedule", help="Remove identifier(s) from monitoring")
    s.add_argument("identifiers", nargs="+")

    sub.add_parser("usage", help="Credit usage for the current period")

    return p


def client_from_env() -> ShopSavvyClient:
    timeout_raw = os.getenv("SHOPSAVVY_TIMEOUT_SEC", "").strip()
    timeout: Optional[float] = None
    if timeout_raw:
        try:
            timeout = float(timeout_raw)
        except ValueError as e:
            raise ConfigurationError(
                f"SHOPSAVVY_TIMEOUT_SEC must be a number, got '{timeout_raw}'."
            ) from e

    return ShopSavvyClient(
        os.getenv("SHOPSAVVY_API_KEY", ""),
        base_url=os.getenv("SHOPSAVVY_BASE_URL") or None,
        timeout=timeout,
    )


def run_command(client: ShopSavvyClient, args: argparse.Namespace) -> WireModel:
    cmd = args.command
    ids: List[str] = getattr(args, "identifiers", [])
    batch = len(ids) > 1

    if cmd == "search":
        return client.search_products(args.query, limit=args.limit, offset=args.offset)
    if cmd == "product":
        if batch:
            return client.get_product_details_batch(ids, format=args.format)
        return client.get_product_details(ids[0], format=args.format)
    if cmd == "offers":
        if batch:
            return client.get_current_offers_batch(
                ids, retailer=args.retailer, format=args.format
            )
        return client.get_current_offers(
            ids[0], retailer=args.retailer, format=args.format
        )
    if cmd == "history":
        return client.get_price_history(
            args.identifier,
            args.start,
            args.end,
            retailer=args.retailer,
            format=args.format,
        )
    if cmd == "schedule":
        if batch:
            return client.schedule_product_monitoring_batch(
                ids, args.frequency, retailer=args.retailer
            )
        return client.schedule_product_monitoring(
            ids[0], args.frequency, retailer=args.retailer
        )
    if cmd == "scheduled":
        return client.get_scheduled_products()
    if cmd == "unschedule":
        if batch:
            return client.remove_products_from_schedule(ids)
        return client.remove_product_from_schedule(ids[0])
    if cmd == "usage":
        return client.get_usage()

    raise ValueError(f"Unknown command: {cmd}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logger = setup_logging(args.log_level)

    try:
        client = client_from_env()
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    with client:
        try:
            result = run_command(client, args)
        except ShopSavvyError as e:
            logger.debug("Command failed", exc_info=True)
            print(f"{type(e).__name__}: {e}", file=sys.stderr)
            return EXIT_API_ERROR

    print(json.dumps(result.to_wire(), indent=2, ensure_ascii=False))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
