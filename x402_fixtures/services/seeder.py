"""Seed platform authors and priced validation articles for the payment harness."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Protocol

from x402_fixtures.models.content import Article, Author
from x402_fixtures.services.catalog import (
    VALIDATION_CATEGORY,
    VALIDATION_PRICE_USD,
    SeedConfig,
    ValidationArticleConfig,
    build_seed_authors,
    build_validation_articles,
)
from x402_fixtures.utils.text import calculate_read_time, format_address, generate_preview


logger = logging.getLogger("x402.seed")

DEFAULT_READINESS_ATTEMPTS = 5
DEFAULT_READINESS_BACKOFF = 0.5


class SupportsFixtureRepository(Protocol):
    """Storage operations the seeder relies on."""

    def ping(self) -> None:
        """Raise if the underlying connection is not ready to serve requests."""

    def create_or_update_author(self, author: Author) -> Author:
        """Insert or merge an author keyed by wallet address."""

    def create_article(self, article: Article) -> Article:
        """Insert an article and return it with its assigned identifier."""

    def close(self) -> None:
        """Release the underlying connection."""


class RepositoryNotReadyError(RuntimeError):
    """Raised when the repository never answered a readiness probe."""


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class SeedResult:
    """Records written during a seeding run and any error that stopped it."""

    authors: list[Author] = field(default_factory=list)
    articles: list[Article] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return not self.errors


@dataclass(slots=True)
class ValidationSeeder:
    """Write the fixed validation catalog through ``repository``, then close it.

    The run is strictly sequential. A failure stops the run at the failing
    record; records written before it stay in storage.
    """

    repository: SupportsFixtureRepository
    config: SeedConfig = field(default_factory=SeedConfig)
    clock: Callable[[], datetime] = _utc_now
    sleep: Callable[[float], None] = time.sleep
    readiness_attempts: int = DEFAULT_READINESS_ATTEMPTS
    readiness_backoff: float = DEFAULT_READINESS_BACKOFF

    def run(self) -> SeedResult:
        result = SeedResult()
        seed_authors = build_seed_authors(self.config, now=self.clock())
        article_configs = build_validation_articles(self.config)

        try:
            self._wait_until_ready()
            logger.info("SEED_START authors=%d articles=%d", len(seed_authors), len(article_configs))

            for author in seed_authors:
                stored = self.repository.create_or_update_author(author)
                result.authors.append(stored)
                logger.info(
                    "SEED_AUTHOR %s (%s)",
                    format_address(author.address),
                    author.primary_payout_network.value,
                )

            for article_config in article_configs:
                created = self.repository.create_article(self._build_article(article_config))
                result.articles.append(created)
                logger.info(
                    'SEED_ARTICLE "%s" created (ID %s) for %s',
                    article_config.title,
                    created.id,
                    article_config.author_primary_network.value.upper(),
                )

            logger.info(
                "SEED_COMPLETE ensured %d authors and %d articles",
                len(result.authors),
                len(result.articles),
            )
        except Exception as exc:
            logger.exception("SEED_ERROR Error populating database")
            result.errors.append(f"Seeding failed: {exc}")
        finally:
            self.repository.close()

        return result

    def _build_article(self, article_config: ValidationArticleConfig) -> Article:
        timestamp = self.clock()
        return Article(
            title=article_config.title,
            content=article_config.content,
            preview=generate_preview(article_config.content),
            price=VALIDATION_PRICE_USD,
            author_address=article_config.author_address,
            author_primary_network=article_config.author_primary_network,
            read_time=calculate_read_time(article_config.content),
            publish_date=timestamp,
            created_at=timestamp,
            updated_at=timestamp,
            categories=[VALIDATION_CATEGORY],
        )

    def _wait_until_ready(self) -> None:
        """Probe the repository, doubling the delay between failed attempts."""

        attempts = max(1, self.readiness_attempts)
        delay = self.readiness_backoff
        for attempt in range(1, attempts + 1):
            try:
                self.repository.ping()
                return
            except Exception as exc:
                if attempt == attempts:
                    raise RepositoryNotReadyError(
                        f"Repository not ready after {attempts} attempts: {exc}"
                    ) from exc
                logger.warning(
                    "SEED_WAITING repository not ready (attempt %d/%d): %s", attempt, attempts, exc
                )
                self.sleep(delay)
                delay *= 2
