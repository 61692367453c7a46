"""SQLiteDocumentStore — durable, single-file document backend using aiosqlite."""

from __future__ import annotations

import asyncio
import json
import uuid
from collections.abc import AsyncIterator, Awaitable, Callable, Mapping
from typing import Any, TypeVar

import aiosqlite

from casbin_docstore.stores.base import Document, DocumentRef, DocumentStore, Query, Transaction

T = TypeVar("T")

_CREATE_TABLE = """
CREATE TABLE IF NOT EXISTS documents (
    collection TEXT NOT NULL,
    doc_id     TEXT NOT NULL,
    data       TEXT NOT NULL,
    PRIMARY KEY (collection, doc_id)
)
"""


def _json_path(name: str) -> str:
    escaped = name.replace('"', '\\"')
    return f'$."{escaped}"'


def _where(query: Query) -> tuple[str, list[str]]:
    """Translate *query* into a WHERE clause over ``json_extract``."""
    clauses = ["collection = ?"]
    params = [query.collection]
    for name, value in query.equals.items():
        clauses.append("json_extract(data, ?) = ?")
        params.extend((_json_path(name), value))
    for name in query.non_empty:
        # Only non-empty TEXT compares greater than ''.
        clauses.append("json_extract(data, ?) > ''")
        params.append(_json_path(name))
    return " AND ".join(clauses), params


def _to_document(collection: str, row: Any) -> Document:
    return Document(DocumentRef(collection, row[0]), json.loads(row[1]))


class _SQLiteTransaction(Transaction):
    """Statements run inside the connection's open ``BEGIN IMMEDIATE`` block."""

    def __init__(self, db: aiosqlite.Connection) -> None:
        self._db = db

    async def documents(self, query: Query) -> list[Document]:
        where, params = _where(query)
        cursor = await self._db.execute(
            f"SELECT doc_id, data FROM documents WHERE {where}", params
        )
        rows = await cursor.fetchall()
        return [_to_document(query.collection, row) for row in rows]

    async def create(self, collection: str, data: Mapping[str, Any]) -> DocumentRef:
        ref = DocumentRef(collection, uuid.uuid4().hex)
        await self._db.execute(
            "INSERT INTO documents (collection, doc_id, data) VALUES (?, ?, ?)",
            (ref.collection, ref.id, json.dumps(dict(data))),
        )
        return ref

    async def set(self, ref: DocumentRef, data: Mapping[str, Any]) -> None:
        await self._db.execute(
            "INSERT OR REPLACE INTO documents (collection, doc_id, data) VALUES (?, ?, ?)",
            (ref.collection, ref.id, json.dumps(dict(data))),
        )

    async def delete(self, ref: DocumentRef) -> None:
        await self._db.execute(
            "DELETE FROM documents WHERE collection = ? AND doc_id = ?",
            (ref.collection, ref.id),
        )


class SQLiteDocumentStore(DocumentStore):
    """Persistent document store backed by a single SQLite file.

    Documents are kept as JSON text; queries filter with ``json_extract``.
    Transactions are serialized on the store's connection and take the
    database write lock up front (``BEGIN IMMEDIATE``), so two processes
    sharing the file also commit one after the other.

    Parameters:
        db_path: Path to the SQLite database file.  Use ``":memory:"``
                 for an in-memory database (useful for testing).
        timeout: Seconds to wait for a lock held by another connection
                 before failing with "database is locked".
    """

    def __init__(self, db_path: str = "casbin_docstore.db", timeout: float = 5.0) -> None:
        self._db_path = db_path
        self._timeout = timeout
        self._db: aiosqlite.Connection | None = None
        self._lock = asyncio.Lock()

    async def _connect(self) -> aiosqlite.Connection:
        if self._db is None:
            # Autocommit mode: transactions are opened and closed explicitly.
            self._db = await aiosqlite.connect(
                self._db_path, timeout=self._timeout, isolation_level=None
            )
            await self._db.execute(_CREATE_TABLE)
        return self._db

    async def close(self) -> None:
        if self._db:
            await self._db.close()
            self._db = None

    # ── DocumentStore protocol ───────────────────────────────

    async def documents(self, query: Query) -> AsyncIterator[Document]:
        where, params = _where(query)
        async with self._lock:
            db = await self._connect()
            cursor = await db.execute(f"SELECT doc_id, data FROM documents WHERE {where}", params)
            rows = await cursor.fetchall()
        for row in rows:
            yield _to_document(query.collection, row)

    async def get(self, ref: DocumentRef) -> Document | None:
        async with self._lock:
            db = await self._connect()
            cursor = await db.execute(
                "SELECT doc_id, data FROM documents WHERE collection = ? AND doc_id = ?",
                (ref.collection, ref.id),
            )
            row = await cursor.fetchone()
        if row is None:
            return None
        return _to_document(ref.collection, row)

    async def run_transaction(self, fn: Callable[[Transaction], Awaitable[T]]) -> T:
        async with self._lock:
            db = await self._connect()
            await db.execute("BEGIN IMMEDIATE")
            try:
                result = await fn(_SQLiteTransaction(db))
                await db.execute("COMMIT")
            except BaseException:
                # A failed COMMIT (e.g. SQLITE_BUSY) leaves the transaction open.
                if db.in_transaction:
                    await db.execute("ROLLBACK")
                raise
            return result
