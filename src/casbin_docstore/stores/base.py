"""DocumentStore protocol — collections of schemaless documents with transactions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class DocumentRef:
    """Address of one document: ``(collection, id)``."""

    collection: str
    id: str


@dataclass(frozen=True)
class Document:
    """A document read from a store.  ``data`` is a detached copy."""

    ref: DocumentRef
    data: dict[str, Any]

    @property
    def id(self) -> str:
        return self.ref.id


@dataclass(frozen=True)
class Query:
    """Conjunction of constraints over one collection.

    Attributes:
        collection: Collection to search.
        equals:     ``field -> value`` that must match exactly.
        non_empty:  Fields that must hold a non-empty string.
    """

    collection: str
    equals: Mapping[str, str] = field(default_factory=dict)
    non_empty: tuple[str, ...] = ()

    def where(self, name: str, value: str) -> Query:
        """Return a copy with one more equality constraint."""
        return Query(self.collection, {**self.equals, name: value}, self.non_empty)

    def where_all(self, constraints: Mapping[str, str]) -> Query:
        return Query(self.collection, {**self.equals, **constraints}, self.non_empty)

    def matches(self, data: Mapping[str, Any]) -> bool:
        for name, value in self.equals.items():
            if data.get(name) != value:
                return False
        for name in self.non_empty:
            value = data.get(name)
            if not isinstance(value, str) or not value:
                return False
        return True


class Transaction(ABC):
    """Operations available inside :meth:`DocumentStore.run_transaction`.

    Writes become visible to other callers only when the transaction
    commits, and all of them or none do.
    """

    @abstractmethod
    async def documents(self, query: Query) -> list[Document]:
        """Return every document matching *query*."""
        ...

    @abstractmethod
    async def create(self, collection: str, data: Mapping[str, Any]) -> DocumentRef:
        """Create a document under a fresh id and return its reference."""
        ...

    @abstractmethod
    async def set(self, ref: DocumentRef, data: Mapping[str, Any]) -> None:
        """Create or overwrite the document at *ref*."""
        ...

    @abstractmethod
    async def delete(self, ref: DocumentRef) -> None:
        """Delete a document.  No-op if it does not exist."""
        ...


class DocumentStore(ABC):
    """Abstract base for all document backends.

    The store knows nothing about policies.  It keeps ``dict[str, Any]``
    documents grouped in named collections, answers constraint queries
    and runs atomic units of work.
    """

    @abstractmethod
    def documents(self, query: Query) -> AsyncIterator[Document]:
        """Stream documents matching *query*, outside any transaction."""
        ...

    @abstractmethod
    async def get(self, ref: DocumentRef) -> Document | None:
        """Return the document at *ref*, or ``None`` if it does not exist."""
        ...

    @abstractmethod
    async def run_transaction(self, fn: Callable[[Transaction], Awaitable[T]]) -> T:
        """Run *fn* as one atomic unit and return its result.

        If *fn* raises (including ``asyncio.CancelledError``) nothing it
        wrote is applied and the exception propagates unchanged.  Failed
        transactions are not retried.
        """
        ...

    async def close(self) -> None:
        """Release any connection held by the store."""
