"""
catalog/store.py -- SQLAlchemy-backed read store for movie catalog documents.

Catalog content is schema-free: each document is an arbitrary JSON object
kept as text and grouped by collection. Only the two fields the read paths
key on are lifted into columns:
  movie_id -- the document's "id", for detail lookups
  title    -- the document's "title", for search

Collections:
  top_rated, trending, originals, popular -- list endpoints
  movies                                  -- per-movie detail documents

Pattern: Repository + Data Mapper, as in auth/store.py. Route handlers never
touch SQL directly. Errors are not caught here; the API's catch-all handler
turns them into a 500 so every request still gets a response.

Security: all queries use bound parameters. Search terms are matched as
literal substrings -- LIKE wildcards in user input are escaped, never
interpreted.

Usage:
    store = CatalogStore("sqlite:///catalog.db")
    store.add_document("movies", {"id": "tt01", "title": "Heat"})
    store.search("hea")
    store.close()
"""

import json
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, Integer, MetaData, String, Table, Text, create_engine, event
from sqlalchemy.engine import Engine

COLLECTIONS = ("top_rated", "trending", "originals", "popular", "movies")
DETAIL_COLLECTION = "movies"

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

_documents = Table(
    "catalog_documents",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("collection", String(30), nullable=False, index=True),
    Column("movie_id", String(64), index=True),
    Column("title", String(500)),
    Column("data", Text, nullable=False),  # JSON object serialized as text
    Column("created_at", String(32), nullable=False),
)


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class CatalogStore:
    def __init__(self, db_url: str) -> None:
        connect_args: dict = {}
        if db_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self.engine: Engine = create_engine(db_url, connect_args=connect_args)
        if db_url.startswith("sqlite"):
            event.listen(self.engine, "connect", _set_wal_mode)
        metadata.create_all(self.engine)

    def add_document(self, collection: str, document: dict) -> int:
        """Store a document in a collection and return its row id.

        Raises ValueError for an unknown collection.
        """
        if collection not in COLLECTIONS:
            raise ValueError(f"Unknown catalog collection: {collection!r}")
        movie_id = document.get("id")
        with self.engine.begin() as conn:
            result = conn.execute(
                _documents.insert().values(
                    collection=collection,
                    movie_id=str(movie_id) if movie_id is not None else None,
                    title=document.get("title"),
                    data=json.dumps(document),
                    created_at=_now_iso(),
                )
            )
            return result.inserted_primary_key[0]

    def list_collection(self, collection: str) -> list[dict]:
        """Return every document in a collection, in insertion order."""
        with self.engine.connect() as conn:
            rows = conn.execute(
                _documents.select().where(_documents.c.collection == collection).order_by(_documents.c.id)
            ).fetchall()
        return [_row_to_document(r) for r in rows]

    def get_movie(self, movie_id: str) -> Optional[dict]:
        """Return the detail document for movie_id, or None."""
        with self.engine.connect() as conn:
            row = conn.execute(
                _documents.select()
                .where((_documents.c.collection == DETAIL_COLLECTION) & (_documents.c.movie_id == movie_id))
                .order_by(_documents.c.id)
                .limit(1)
            ).fetchone()
        return _row_to_document(row) if row is not None else None

    def search(self, term: str) -> list[dict]:
        """Return detail documents whose title contains term, case-insensitively."""
        with self.engine.connect() as conn:
            rows = conn.execute(
                _documents.select()
                .where(
                    (_documents.c.collection == DETAIL_COLLECTION)
                    & _documents.c.title.ilike(_like_pattern(term), escape="\\")
                )
                .order_by(_documents.c.id)
            ).fetchall()
        return [_row_to_document(r) for r in rows]

    def close(self) -> None:
        self.engine.dispose()


def _row_to_document(row) -> dict:
    return json.loads(row.data)
