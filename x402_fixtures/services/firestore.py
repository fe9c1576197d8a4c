"""Firestore data access helpers for the validation fixtures."""
from __future__ import annotations

from typing import Any, Final

from google.cloud import firestore
from google.cloud.firestore import Client, CollectionReference, DocumentReference

from x402_fixtures.models.content import Article, Author

DEFAULT_AUTHORS_COLLECTION: Final[str] = "authors"
DEFAULT_ARTICLES_COLLECTION: Final[str] = "articles"


class FirestoreFixtureRepository:
    """Repository that encapsulates all Firestore access for author and article collections."""

    def __init__(
        self,
        client: Client | None = None,
        *,
        author_collection: str = DEFAULT_AUTHORS_COLLECTION,
        article_collection: str = DEFAULT_ARTICLES_COLLECTION,
    ) -> None:
        self._client = client or firestore.Client()
        self._author_collection_name = author_collection
        self._article_collection_name = article_collection
        self._closed = False

    @property
    def client(self) -> Client:
        return self._client

    @property
    def author_collection(self) -> CollectionReference:
        return self._client.collection(self._author_collection_name)

    @property
    def article_collection(self) -> CollectionReference:
        return self._client.collection(self._article_collection_name)

    def ping(self) -> None:
        """Issue a one-document read so connection problems surface before seeding."""
        for _ in self.author_collection.limit(1).stream():
            break

    # ------------------------------------------------------------------
    # Author helpers
    # ------------------------------------------------------------------
    def get_author(self, address: str) -> Author | None:
        """Retrieve an author by wallet address (the document ID)."""
        snapshot = self.author_collection.document(address).get()
        if not snapshot.exists:
            return None
        return Author.from_document(snapshot)

    def list_authors(self) -> list[Author]:
        return [Author.from_document(snapshot) for snapshot in self.author_collection.stream()]

    def create_or_update_author(self, author: Author) -> Author:
        """Upsert ``author`` under its address, keeping the first recorded ``createdAt``."""
        document = self.author_collection.document(author.address)
        payload = author.to_document()
        existing = document.get()
        if existing.exists:
            payload.pop("createdAt", None)
        document.set(payload, merge=True)
        return Author.from_document(document.get())

    # ------------------------------------------------------------------
    # Article helpers
    # ------------------------------------------------------------------
    def get_article(self, article_id: str) -> Article | None:
        """Retrieve a single article by its Firestore document ID."""
        snapshot = self.article_collection.document(article_id).get()
        if not snapshot.exists:
            return None
        return Article.from_document(snapshot)

    def list_articles(self) -> list[Article]:
        query = self.article_collection.order_by("createdAt", direction=firestore.Query.ASCENDING)
        return [Article.from_document(snapshot) for snapshot in query.stream()]

    def create_article(self, article: Article) -> Article:
        """Add ``article`` as a new document, returning it with the assigned ID."""
        document: DocumentReference = self.article_collection.document()
        payload = article.to_document()
        payload.pop("id", None)
        document.set(payload)
        return Article.from_document(document.get())

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._client.close()


def create_repository(**kwargs: Any) -> FirestoreFixtureRepository:
    """Factory helper that mirrors the default project-aware client creation."""
    return FirestoreFixtureRepository(**kwargs)
