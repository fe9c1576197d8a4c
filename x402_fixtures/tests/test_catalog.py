"""Tests for the validation fixture catalog."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

from x402_fixtures.models.content import SupportedAuthorNetwork
from x402_fixtures.services.catalog import (
    DEFAULT_PLATFORM_EVM_ADDRESS,
    DEFAULT_PLATFORM_SOL_ADDRESS,
    SeedConfig,
    build_seed_authors,
    build_validation_articles,
)


def test_seed_config_defaults_when_environment_is_empty() -> None:
    config = SeedConfig.from_env({})

    assert config.evm_address == DEFAULT_PLATFORM_EVM_ADDRESS
    assert config.sol_address == DEFAULT_PLATFORM_SOL_ADDRESS


def test_seed_config_reads_overrides_and_ignores_blank_values() -> None:
    config = SeedConfig.from_env(
        {"X402_PLATFORM_EVM_ADDRESS": " 0x1111111111111111111111111111111111111111 ", "X402_PLATFORM_SOL_ADDRESS": "  "}
    )

    assert config.evm_address == "0x1111111111111111111111111111111111111111"
    assert config.sol_address == DEFAULT_PLATFORM_SOL_ADDRESS


def test_seed_authors_are_backdated_in_order() -> None:
    now = datetime(2024, 6, 10, 8, 30, tzinfo=timezone.utc)

    authors = build_seed_authors(SeedConfig(), now=now)

    assert [a.address for a in authors] == [DEFAULT_PLATFORM_EVM_ADDRESS, DEFAULT_PLATFORM_SOL_ADDRESS]
    assert [a.primary_payout_network for a in authors] == [
        SupportedAuthorNetwork.BASE,
        SupportedAuthorNetwork.SOLANA,
    ]
    assert authors[0].created_at == now - timedelta(days=2)
    assert authors[1].created_at == now - timedelta(days=1)
    assert all(a.total_articles == a.total_views == a.total_purchases == 0 for a in authors)


def test_validation_articles_reference_seed_authors() -> None:
    config = SeedConfig(evm_address="0xbase", sol_address="solwallet")

    articles = build_validation_articles(config)

    assert len(articles) == 3
    assert len({a.title for a in articles}) == 3
    assert [a.author_address for a in articles] == ["0xbase", "0xbase", "solwallet"]
    assert articles[2].author_primary_network is SupportedAuthorNetwork.SOLANA
    assert all(a.content.startswith("<p>") for a in articles)
