"""Domain models for authors and articles stored in the content database."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Sequence


class SupportedAuthorNetwork(str, Enum):
    """Payout networks an author can receive funds on."""

    BASE = "base"
    SOLANA = "solana"


def _default_datetime() -> datetime:
    """Return a timezone-aware UTC timestamp."""
    return datetime.now(timezone.utc)


def _parse_datetime(value: Any) -> datetime | None:
    """Coerce a string/date/datetime value into a timezone-aware UTC datetime."""

    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _parse_network(value: Any) -> SupportedAuthorNetwork:
    if isinstance(value, SupportedAuthorNetwork):
        return value
    if isinstance(value, str):
        try:
            return SupportedAuthorNetwork(value.strip().lower())
        except ValueError:
            pass
    raise ValueError(f"Unsupported payout network: {value!r}")


def _parse_decimal(value: Any) -> Decimal:
    """Fixed-point coercion; floats go through ``str`` so 0.01 stays 0.01."""

    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool) or value is None:
        return Decimal("0")
    try:
        return Decimal(str(value))
    except InvalidOperation:
        return Decimal("0")


def _int_value(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    return 0


def _listify_strings(value: Any) -> list[str]:
    """Normalise a value into a list of non-empty strings."""

    if isinstance(value, str):
        trimmed = value.strip()
        return [trimmed] if trimmed else []

    if isinstance(value, Sequence):
        result: list[str] = []
        for item in value:
            if isinstance(item, str):
                trimmed = item.strip()
                if trimmed:
                    result.append(trimmed)
        return result

    return []


def _optional_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _text_value(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _snapshot_data(snapshot: Any) -> dict[str, Any]:
    if snapshot is None:
        return {}

    to_dict = getattr(snapshot, "to_dict", None)
    if callable(to_dict):
        return to_dict() or {}

    if isinstance(snapshot, dict):
        return dict(snapshot)

    return {}


def _snapshot_id(snapshot: Any) -> str | None:
    if snapshot is None:
        return None

    identifier = getattr(snapshot, "id", None)
    if identifier is not None:
        return str(identifier)

    if isinstance(snapshot, dict):
        candidate = snapshot.get("id")
        if candidate is not None:
            return str(candidate)

    return None


@dataclass(slots=True)
class Author:
    """A platform author identified by the wallet address that receives payouts."""

    address: str
    primary_payout_network: SupportedAuthorNetwork
    created_at: datetime = field(default_factory=_default_datetime)
    total_earnings: Decimal = Decimal("0")
    total_articles: int = 0
    total_views: int = 0
    total_purchases: int = 0

    def to_document(self) -> dict[str, Any]:
        return {
            "address": self.address,
            "primaryPayoutNetwork": self.primary_payout_network.value,
            "createdAt": self.created_at,
            "totalEarnings": float(self.total_earnings),
            "totalArticles": self.total_articles,
            "totalViews": self.total_views,
            "totalPurchases": self.total_purchases,
        }

    @classmethod
    def from_document(cls, snapshot: Any) -> "Author":
        data = _snapshot_data(snapshot)
        address = _text_value(data.get("address")) or _snapshot_id(snapshot) or ""

        return cls(
            address=address,
            primary_payout_network=_parse_network(data.get("primaryPayoutNetwork")),
            created_at=_parse_datetime(data.get("createdAt")) or _default_datetime(),
            total_earnings=_parse_decimal(data.get("totalEarnings")),
            total_articles=_int_value(data.get("totalArticles")),
            total_views=_int_value(data.get("totalViews")),
            total_purchases=_int_value(data.get("totalPurchases")),
        )


@dataclass(slots=True)
class Article:
    """A priced article owned by an author; ``id`` is assigned by storage."""

    title: str
    content: str
    preview: str
    price: Decimal
    author_address: str
    author_primary_network: SupportedAuthorNetwork
    read_time: str
    publish_date: datetime = field(default_factory=_default_datetime)
    created_at: datetime = field(default_factory=_default_datetime)
    updated_at: datetime = field(default_factory=_default_datetime)
    categories: list[str] = field(default_factory=list)
    views: int = 0
    purchases: int = 0
    earnings: Decimal = Decimal("0")
    likes: int = 0
    popularity_score: int = 0
    id: str | None = None

    def to_document(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "title": self.title,
            "content": self.content,
            "preview": self.preview,
            "price": float(self.price),
            "authorAddress": self.author_address,
            "authorPrimaryNetwork": self.author_primary_network.value,
            "publishDate": self.publish_date,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "views": self.views,
            "purchases": self.purchases,
            "earnings": float(self.earnings),
            "readTime": self.read_time,
            "categories": list(self.categories),
            "likes": self.likes,
            "popularityScore": self.popularity_score,
        }
        if self.id:
            payload["id"] = self.id
        return payload

    @classmethod
    def from_document(cls, snapshot: Any) -> "Article":
        data = _snapshot_data(snapshot)
        doc_id = _snapshot_id(snapshot) or _optional_str(data.get("id"))
        created = _parse_datetime(data.get("createdAt")) or _default_datetime()

        return cls(
            title=_text_value(data.get("title")),
            content=_text_value(data.get("content")),
            preview=_text_value(data.get("preview")),
            price=_parse_decimal(data.get("price")),
            author_address=_text_value(data.get("authorAddress")),
            author_primary_network=_parse_network(data.get("authorPrimaryNetwork")),
            read_time=_text_value(data.get("readTime")),
            publish_date=_parse_datetime(data.get("publishDate")) or created,
            created_at=created,
            updated_at=_parse_datetime(data.get("updatedAt")) or created,
            categories=_listify_strings(data.get("categories")),
            views=_int_value(data.get("views")),
            purchases=_int_value(data.get("purchases")),
            earnings=_parse_decimal(data.get("earnings")),
            likes=_int_value(data.get("likes")),
            popularity_score=_int_value(data.get("popularityScore")),
            id=doc_id,
        )
