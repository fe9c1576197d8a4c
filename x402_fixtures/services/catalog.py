"""Fixed author and article catalog used to seed the payment validation harness."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Final

from x402_fixtures.models.content import Author, SupportedAuthorNetwork

DEFAULT_PLATFORM_EVM_ADDRESS: Final[str] = "0xEc115640B09416a59fE77e4e7b852fE700Fa6bF1"
DEFAULT_PLATFORM_SOL_ADDRESS: Final[str] = "cAXdcMFHK6y9yTP7AMETzXC7zvTeDBbQ5f4nvSWDx51"

EVM_ADDRESS_ENV: Final[str] = "X402_PLATFORM_EVM_ADDRESS"
SOL_ADDRESS_ENV: Final[str] = "X402_PLATFORM_SOL_ADDRESS"

VALIDATION_PRICE_USD: Final[Decimal] = Decimal("0.01")
VALIDATION_CATEGORY: Final[str] = "Validation"


@dataclass(slots=True, frozen=True)
class SeedConfig:
    """Platform wallet addresses that own the seeded fixtures."""

    evm_address: str = DEFAULT_PLATFORM_EVM_ADDRESS
    sol_address: str = DEFAULT_PLATFORM_SOL_ADDRESS

    @classmethod
    def from_env(cls, environ: Mapping[str, str]) -> "SeedConfig":
        """Build a config from ``environ``; blank or missing values use the defaults."""

        evm = (environ.get(EVM_ADDRESS_ENV) or "").strip()
        sol = (environ.get(SOL_ADDRESS_ENV) or "").strip()
        return cls(
            evm_address=evm or DEFAULT_PLATFORM_EVM_ADDRESS,
            sol_address=sol or DEFAULT_PLATFORM_SOL_ADDRESS,
        )


@dataclass(slots=True, frozen=True)
class ValidationArticleConfig:
    """Static part of a validation article; derived fields are filled in while seeding."""

    title: str
    content: str
    author_address: str
    author_primary_network: SupportedAuthorNetwork


def build_seed_authors(config: SeedConfig, *, now: datetime | None = None) -> list[Author]:
    """Return the platform authors, backdated so the Base account is the older one."""

    reference = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return [
        Author(
            address=config.evm_address,
            primary_payout_network=SupportedAuthorNetwork.BASE,
            created_at=reference - timedelta(days=2),
        ),
        Author(
            address=config.sol_address,
            primary_payout_network=SupportedAuthorNetwork.SOLANA,
            created_at=reference - timedelta(days=1),
        ),
    ]


def build_validation_articles(config: SeedConfig) -> list[ValidationArticleConfig]:
    """Return the three harness articles in creation order.

    Purchases are unique per wallet per article, not per author, so the two
    Base articles share one author to cover two purchases paid to the same
    address.
    """

    return [
        ValidationArticleConfig(
            title="x402 Harness: Base Mainnet Purchase",
            content=(
                "<p>Use this article to validate Base mainnet purchases via the Coinbase x402 facilitator.</p>"
                "<p>It is pinned to the platform Base wallet and costs exactly $0.01.</p>"
            ),
            author_address=config.evm_address,
            author_primary_network=SupportedAuthorNetwork.BASE,
        ),
        ValidationArticleConfig(
            title="x402 Harness: Base Regression Article",
            content=(
                "<p>Second Base article for regression testing. Keeping a sibling entry ensures we can "
                "purchase twice without violating 1 purchase per wallet per article rule.</p>"
                "<p>Also priced at $0.01.</p>"
            ),
            author_address=config.evm_address,
            author_primary_network=SupportedAuthorNetwork.BASE,
        ),
        ValidationArticleConfig(
            title="x402 Harness: Solana Validation Article",
            content=(
                "<p>This article is tied to the Solana payout address so the harness can walk through "
                "SPL USDC purchases.</p>"
                "<p>It mirrors the Base price ($0.01) for consistency across networks.</p>"
            ),
            author_address=config.sol_address,
            author_primary_network=SupportedAuthorNetwork.SOLANA,
        ),
    ]


__all__ = [
    "DEFAULT_PLATFORM_EVM_ADDRESS",
    "DEFAULT_PLATFORM_SOL_ADDRESS",
    "EVM_ADDRESS_ENV",
    "SOL_ADDRESS_ENV",
    "SeedConfig",
    "VALIDATION_CATEGORY",
    "VALIDATION_PRICE_USD",
    "ValidationArticleConfig",
    "build_seed_authors",
    "build_validation_articles",
]
