"""Tests for the validation seeding procedure."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from x402_fixtures.models.content import Article, Author
from x402_fixtures.services.catalog import SeedConfig
from x402_fixtures.services.seeder import ValidationSeeder

NOW = datetime(2024, 7, 1, 9, 0, tzinfo=timezone.utc)


@dataclass
class StubRepository:
    """Repository double that records every call and can fail on demand."""

    fail_on_article: int | None = None
    ping_failures: int = 0
    calls: list[str] = field(default_factory=list)
    authors: dict[str, Author] = field(default_factory=dict)
    articles: list[Article] = field(default_factory=list)

    def ping(self) -> None:
        self.calls.append("ping")
        if self.ping_failures:
            self.ping_failures -= 1
            raise ConnectionError("connection refused")

    def create_or_update_author(self, author: Author) -> Author:
        self.calls.append(f"author:{author.address}")
        self.authors[author.address] = author
        return author

    def create_article(self, article: Article) -> Article:
        self.calls.append(f"article:{article.title}")
        if self.fail_on_article is not None and len(self.articles) == self.fail_on_article:
            raise RuntimeError("constraint violation")
        stored = replace(article, id=f"art-{len(self.articles) + 1}")
        self.articles.append(stored)
        return stored

    def close(self) -> None:
        self.calls.append("close")


def _seeder(repository: StubRepository, **kwargs: object) -> ValidationSeeder:
    sleeps: list[float] = kwargs.pop("sleeps", [])  # type: ignore[assignment]
    return ValidationSeeder(
        repository=repository,
        config=SeedConfig(evm_address="0xEc115640B09416a59fE77e4e7b852fE700Fa6bF1", sol_address="solwallet12345"),
        clock=lambda: NOW,
        sleep=sleeps.append,
        **kwargs,  # type: ignore[arg-type]
    )


def test_run_seeds_authors_then_articles_and_closes(seed_logs: list[str]) -> None:
    repository = StubRepository()

    result = _seeder(repository).run()

    assert result.succeeded
    assert repository.calls[0] == "ping"
    assert repository.calls[1:3] == [
        "author:0xEc115640B09416a59fE77e4e7b852fE700Fa6bF1",
        "author:solwallet12345",
    ]
    assert [c for c in repository.calls if c.startswith("article:")] == [
        "article:x402 Harness: Base Mainnet Purchase",
        "article:x402 Harness: Base Regression Article",
        "article:x402 Harness: Solana Validation Article",
    ]
    assert repository.calls[-1] == "close"
    assert [a.id for a in result.articles] == ["art-1", "art-2", "art-3"]

    assert any("SEED_AUTHOR 0xEc11...6bF1 (base)" in line for line in seed_logs)
    assert any('SEED_ARTICLE "x402 Harness: Solana Validation Article" created (ID art-3) for SOLANA' in line for line in seed_logs)
    assert any("SEED_COMPLETE ensured 2 authors and 3 articles" in line for line in seed_logs)


def test_articles_carry_derived_fields_and_single_timestamp() -> None:
    repository = StubRepository()

    result = _seeder(repository).run()

    for article in result.articles:
        assert article.price == Decimal("0.01")
        assert article.categories == ["Validation"]
        assert article.publish_date == article.created_at == article.updated_at == NOW
        assert article.read_time == "1 min read"
        assert "<" not in article.preview and article.preview
        assert (article.views, article.purchases, article.likes, article.popularity_score) == (0, 0, 0, 0)
        assert article.earnings == Decimal("0")

    base_addresses = [a.author_address for a in result.articles if a.author_primary_network.value == "base"]
    assert len(base_addresses) == 2 and len(set(base_addresses)) == 1


def test_seed_authors_are_backdated_relative_to_clock() -> None:
    repository = StubRepository()

    _seeder(repository).run()

    created = [author.created_at for author in repository.authors.values()]
    assert created == [NOW - timedelta(days=2), NOW - timedelta(days=1)]


def test_failure_stops_run_keeps_earlier_records_and_still_closes(seed_logs: list[str]) -> None:
    repository = StubRepository(fail_on_article=1)

    result = _seeder(repository).run()

    assert not result.succeeded
    assert result.errors == ["Seeding failed: constraint violation"]
    assert len(repository.articles) == 1
    assert "article:x402 Harness: Solana Validation Article" not in repository.calls
    assert repository.calls[-1] == "close"
    assert repository.calls.count("close") == 1
    assert any("SEED_ERROR" in line for line in seed_logs)


def test_readiness_probe_retries_with_backoff() -> None:
    repository = StubRepository(ping_failures=2)
    sleeps: list[float] = []

    result = _seeder(repository, sleeps=sleeps, readiness_backoff=0.25).run()

    assert result.succeeded
    assert repository.calls[:3] == ["ping", "ping", "ping"]
    assert sleeps == [0.25, 0.5]


def test_repository_that_never_becomes_ready_is_reported() -> None:
    repository = StubRepository(ping_failures=10)
    sleeps: list[float] = []

    result = _seeder(repository, sleeps=sleeps, readiness_attempts=3).run()

    assert not result.succeeded
    assert "not ready after 3 attempts" in result.errors[0]
    assert len(sleeps) == 2
    assert repository.authors == {}
    assert repository.calls == ["ping", "ping", "ping", "close"]
