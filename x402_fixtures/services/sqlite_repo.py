"""SQLite-backed fixture repository for local harness runs.

Surface used by the seeder:
  - ping, create_or_update_author, create_article, close
Read helpers for tests and inspection:
  - get_author, list_authors, get_article, list_articles

Design notes
------------
- Documents are stored verbatim as the model's `to_document()` JSON in a `data` column.
- Authors are keyed by wallet address; upserts merge counters/network but keep the
  first `createdAt` so re-seeding never makes an account look younger.
- Articles get a generated id and are plain inserts; there is no title uniqueness.
- WAL mode and foreign_keys are enabled. Suitable for single-writer, multi-reader local use.

Default location (if not provided):  ~/x402/data/fixtures.db
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
import json
import os
from pathlib import Path
import secrets
import sqlite3
from typing import Any, Final

from x402_fixtures.models.content import Article, Author

DEFAULT_DB_PATH: Final[Path] = Path.home() / "x402" / "data" / "fixtures.db"
DEFAULT_AUTHORS_TABLE: Final[str] = "authors"
DEFAULT_ARTICLES_TABLE: Final[str] = "articles"
DB_PATH_ENV: Final[str] = "X402_DB_PATH"


def _to_iso8601(value: datetime | date) -> str:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).isoformat()
    # date -> midnight UTC ISO
    return datetime(value.year, value.month, value.day, tzinfo=timezone.utc).isoformat()


def _json_default(o: object):
    if isinstance(o, (datetime, date)):
        return _to_iso8601(o)
    if isinstance(o, Decimal):
        return str(o)
    if isinstance(o, set):
        return list(o)
    return str(o)


def _json(obj: Any) -> str:
    return json.dumps(obj, ensure_ascii=False, separators=(",", ":"), default=_json_default)


def _json_or_none(txt: str | None) -> dict[str, Any] | None:
    if not txt:
        return None
    return json.loads(txt)


def _iso_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")


class LocalSQLiteFixtureRepository:
    """SQLite repository that mirrors the FirestoreFixtureRepository surface."""

    def __init__(
        self,
        db_path: str | Path | None = None,
        *,
        author_table: str = DEFAULT_AUTHORS_TABLE,
        article_table: str = DEFAULT_ARTICLES_TABLE,
    ) -> None:
        self._db_path = Path(db_path) if db_path else DEFAULT_DB_PATH
        self._author_table = author_table
        self._article_table = article_table
        self._closed = False

        if str(self._db_path) != ":memory:":
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(self._db_path), check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        with self._conn:
            self._conn.execute("PRAGMA foreign_keys = ON;")
            self._conn.execute("PRAGMA journal_mode = WAL;")
        self._bootstrap()

    @property
    def db_path(self) -> Path:
        return self._db_path

    # --- schema ----------------------------------------------------------------

    def _bootstrap(self) -> None:
        """Create required tables and indexes if they don't exist."""
        with self._conn:
            self._conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {self._author_table} (
                    address TEXT PRIMARY KEY,
                    primary_payout_network TEXT NOT NULL,
                    data TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );
                """
            )
            self._conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {self._article_table} (
                    id TEXT PRIMARY KEY,
                    title TEXT,
                    author_address TEXT NOT NULL,
                    data TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    FOREIGN KEY(author_address) REFERENCES {self._author_table}(address)
                );
                """
            )
            self._conn.execute(
                f"""CREATE INDEX IF NOT EXISTS idx_{self._article_table}_author
                    ON {self._article_table}(author_address);"""
            )

    # --- readiness ---------------------------------------------------------------

    def ping(self) -> None:
        """Raise ``sqlite3.Error`` if the connection cannot serve queries."""
        self._conn.execute("SELECT 1;").fetchone()

    # --- Author helpers ----------------------------------------------------------

    def get_author(self, address: str) -> Author | None:
        row = self._conn.execute(
            f"SELECT address, data FROM {self._author_table} WHERE address = ?;",
            (address,),
        ).fetchone()
        return self._row_to_author(row) if row else None

    def list_authors(self) -> list[Author]:
        rows = self._conn.execute(
            f"SELECT address, data FROM {self._author_table} ORDER BY rowid;"
        ).fetchall()
        return [self._row_to_author(r) for r in rows]

    def create_or_update_author(self, author: Author) -> Author:
        """Insert ``author`` or merge it into the existing record for its address."""
        doc = author.to_document()
        existing = self.get_author(author.address)
        if existing is not None:
            doc["createdAt"] = existing.created_at

        payload = _json(doc)
        now = _iso_now()

        with self._conn:
            self._conn.execute(
                f"""
                INSERT INTO {self._author_table}(address, primary_payout_network, data, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(address) DO UPDATE SET
                    primary_payout_network = excluded.primary_payout_network,
                    data = excluded.data,
                    updated_at = excluded.updated_at;
                """,
                (author.address, author.primary_payout_network.value, payload, now, now),
            )

        return self.get_author(author.address) or Author.from_document(_json_or_none(payload))

    # --- Article helpers ---------------------------------------------------------

    def get_article(self, article_id: str) -> Article | None:
        row = self._conn.execute(
            f"SELECT id, data FROM {self._article_table} WHERE id = ?;",
            (article_id,),
        ).fetchone()
        return self._row_to_article(row) if row else None

    def list_articles(self) -> list[Article]:
        rows = self._conn.execute(
            f"SELECT id, data FROM {self._article_table} ORDER BY rowid;"
        ).fetchall()
        return [self._row_to_article(r) for r in rows]

    def create_article(self, article: Article) -> Article:
        """Insert ``article`` under a freshly generated id and return the stored copy."""
        art_id = self._generate_id()
        doc = article.to_document()
        doc["id"] = art_id
        payload = _json(doc)
        now = _iso_now()

        with self._conn:
            self._conn.execute(
                f"""
                INSERT INTO {self._article_table}(id, title, author_address, data, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?);
                """,
                (art_id, article.title, article.author_address, payload, now, now),
            )

        return self.get_article(art_id) or self._row_to_article({"id": art_id, "data": payload})

    # --- Lifecycle ---------------------------------------------------------------

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._conn.close()

    # --- Conversions -------------------------------------------------------------

    def _row_to_author(self, row: sqlite3.Row) -> Author:
        data = _json_or_none(row["data"]) or {}
        data.setdefault("address", row["address"])
        return Author.from_document(data)

    def _row_to_article(self, row: sqlite3.Row | dict) -> Article:
        row_id = row["id"]
        data = _json_or_none(row["data"]) or {}
        data["id"] = str(row_id)
        return Article.from_document(data)

    # --- IDs ---------------------------------------------------------------------

    @staticmethod
    def _generate_id() -> str:
        # Compact, URL-safe-ish 20-char id
        return secrets.token_urlsafe(15).replace("-", "_").replace(".", "_")


def create_repository(**kwargs: Any) -> LocalSQLiteFixtureRepository:
    """Factory helper to create a repository instance."""
    db_path = kwargs.pop("db_path", None) or os.getenv(DB_PATH_ENV)
    return LocalSQLiteFixtureRepository(db_path=db_path, **kwargs)
