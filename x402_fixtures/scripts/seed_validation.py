"""Seed the content database with the x402 validation authors and articles.

The harness expects two platform authors (Base and Solana payout wallets) and
three articles priced at $0.01. Authors are upserted by address so the script
can be re-run safely; articles are inserted on every run, so reset storage
between harness runs to avoid duplicates.

Storage selection:
- Default to SQLite for local development (no GCP required).
- Switch via --storage firestore or X402_STORAGE.
- For SQLite, you can set --db-path PATH or X402_DB_PATH.
"""
from __future__ import annotations

import argparse
import logging
import os
import sqlite3
import sys
from typing import Mapping, Sequence

from google.api_core.exceptions import GoogleAPIError
from google.auth.exceptions import DefaultCredentialsError

from x402_fixtures.services.catalog import SeedConfig
from x402_fixtures.services.seeder import (
    DEFAULT_READINESS_ATTEMPTS,
    SupportsFixtureRepository,
    ValidationSeeder,
)
from x402_fixtures.services.sqlite_repo import LocalSQLiteFixtureRepository

LOGGER = logging.getLogger("x402.seed")

if not LOGGER.handlers:  # avoid duplicates on re-import
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    LOGGER.addHandler(handler)
    LOGGER.setLevel(logging.INFO)
    LOGGER.propagate = False


def _configure_logging() -> None:
    level_name = os.getenv("X402_LOG_LEVEL", "INFO").upper()
    LOGGER.setLevel(getattr(logging, level_name, logging.INFO))


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed x402 validation authors and articles.")
    parser.add_argument(
        "--storage",
        choices=["sqlite", "firestore"],
        default=os.getenv("X402_STORAGE", "sqlite").lower(),
        help="Select backing storage (default from X402_STORAGE or 'sqlite').",
    )
    parser.add_argument(
        "--db-path",
        default=os.getenv("X402_DB_PATH"),
        help="Path to SQLite database file (default from X402_DB_PATH or user profile).",
    )
    parser.add_argument(
        "--evm-address",
        default=None,
        help="Platform Base wallet (overrides X402_PLATFORM_EVM_ADDRESS).",
    )
    parser.add_argument(
        "--sol-address",
        default=None,
        help="Platform Solana wallet (overrides X402_PLATFORM_SOL_ADDRESS).",
    )
    parser.add_argument(
        "--readiness-attempts",
        type=int,
        default=DEFAULT_READINESS_ATTEMPTS,
        help="How many times to probe storage before giving up.",
    )
    return parser.parse_args(argv)


def _build_config(args: argparse.Namespace, environ: Mapping[str, str]) -> SeedConfig:
    config = SeedConfig.from_env(environ)
    return SeedConfig(
        evm_address=(args.evm_address or "").strip() or config.evm_address,
        sol_address=(args.sol_address or "").strip() or config.sol_address,
    )


def _create_repository(storage: str, db_path: str | None) -> SupportsFixtureRepository:
    if storage == "firestore":
        from x402_fixtures.services.firestore import FirestoreFixtureRepository

        return FirestoreFixtureRepository()
    return LocalSQLiteFixtureRepository(db_path=db_path)


def main(argv: Sequence[str] | None = None, *, environ: Mapping[str, str] | None = None) -> int:
    _configure_logging()
    args = _parse_args(argv)
    config = _build_config(args, os.environ if environ is None else environ)
    LOGGER.info("SEED_RUN storage=%s", args.storage)

    try:
        repository = _create_repository(args.storage, args.db_path)
    except (DefaultCredentialsError, GoogleAPIError, OSError, sqlite3.Error) as exc:
        LOGGER.error("Failed to open %s storage: %s", args.storage, exc)
        return 1

    seeder = ValidationSeeder(
        repository=repository,
        config=config,
        readiness_attempts=args.readiness_attempts,
    )
    result = seeder.run()

    for error in result.errors:
        LOGGER.error("SEED_ERROR %s", error)

    if not result.succeeded:
        LOGGER.error("Validation seed did not complete; partial data may remain in storage")
        return 1

    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
