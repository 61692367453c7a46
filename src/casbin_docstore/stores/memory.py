"""InMemoryDocumentStore — zero-config, dict-backed storage for development and testing."""

from __future__ import annotations

import asyncio
import copy
import uuid
from collections import defaultdict
from collections.abc import AsyncIterator, Awaitable, Callable, Mapping
from typing import Any, TypeVar

from casbin_docstore.stores.base import (
    Document,
    DocumentRef,
    DocumentStore,
    Query,
    Transaction,
)

T = TypeVar("T")


class _MemoryTransaction(Transaction):
    """Reads see the committed state; writes are staged until commit."""

    def __init__(self, store: InMemoryDocumentStore) -> None:
        self._store = store
        self._writes: list[tuple[DocumentRef, dict[str, Any] | None]] = []

    async def documents(self, query: Query) -> list[Document]:
        return self._store._snapshot(query)

    async def create(self, collection: str, data: Mapping[str, Any]) -> DocumentRef:
        ref = DocumentRef(collection, uuid.uuid4().hex)
        self._writes.append((ref, copy.deepcopy(dict(data))))
        return ref

    async def set(self, ref: DocumentRef, data: Mapping[str, Any]) -> None:
        self._writes.append((ref, copy.deepcopy(dict(data))))

    async def delete(self, ref: DocumentRef) -> None:
        self._writes.append((ref, None))

    def commit(self) -> None:
        data = self._store._data
        for ref, value in self._writes:
            if value is None:
                data[ref.collection].pop(ref.id, None)
            else:
                data[ref.collection][ref.id] = value


class InMemoryDocumentStore(DocumentStore):
    """In-memory store using nested dicts.  Data is lost on process exit.

    Transactions run one at a time under an ``asyncio.Lock``.
    """

    def __init__(self) -> None:
        self._data: dict[str, dict[str, dict[str, Any]]] = defaultdict(dict)
        self._lock = asyncio.Lock()

    def _snapshot(self, query: Query) -> list[Document]:
        return [
            Document(DocumentRef(query.collection, doc_id), copy.deepcopy(data))
            for doc_id, data in list(self._data[query.collection].items())
            if query.matches(data)
        ]

    async def documents(self, query: Query) -> AsyncIterator[Document]:
        for doc in self._snapshot(query):
            yield doc

    async def get(self, ref: DocumentRef) -> Document | None:
        data = self._data[ref.collection].get(ref.id)
        if data is None:
            return None
        return Document(ref, copy.deepcopy(data))

    async def run_transaction(self, fn: Callable[[Transaction], Awaitable[T]]) -> T:
        async with self._lock:
            tx = _MemoryTransaction(self)
            result = await fn(tx)
            tx.commit()
            return result
