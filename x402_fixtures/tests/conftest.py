"""Shared fixtures and helpers for the test suite."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest

from x402_fixtures.services.sqlite_repo import LocalSQLiteFixtureRepository


class ListHandler(logging.Handler):
    """Collect formatted log messages emitted during a test."""

    def __init__(self) -> None:
        super().__init__(level=logging.NOTSET)
        self.messages: list[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.messages.append(record.getMessage())


@pytest.fixture()
def seed_logs() -> Iterator[list[str]]:
    """Capture messages from the ``x402.seed`` logger, which does not propagate."""

    logger = logging.getLogger("x402.seed")
    handler = ListHandler()
    previous_level = logger.level
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    try:
        yield handler.messages
    finally:
        logger.removeHandler(handler)
        logger.setLevel(previous_level)


@pytest.fixture()
def db_path(tmp_path: Path) -> Path:
    """Return a fresh SQLite database location inside the test's temp dir."""

    return tmp_path / "data" / "fixtures.db"


@pytest.fixture()
def sqlite_repository(db_path: Path) -> Iterator[LocalSQLiteFixtureRepository]:
    repository = LocalSQLiteFixtureRepository(db_path=db_path)
    yield repository
    repository.close()
