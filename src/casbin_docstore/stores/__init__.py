"""Document storage backends for policy records and model definitions."""

from casbin_docstore.config import StoreConfig
from casbin_docstore.exceptions import StoreConfigError
from casbin_docstore.stores.base import Document, DocumentRef, DocumentStore, Query, Transaction
from casbin_docstore.stores.memory import InMemoryDocumentStore
from casbin_docstore.stores.sqlite import SQLiteDocumentStore

__all__ = [
    "Document",
    "DocumentRef",
    "DocumentStore",
    "InMemoryDocumentStore",
    "Query",
    "SQLiteDocumentStore",
    "Transaction",
    "create_store",
]


def create_store(config: StoreConfig | None = None) -> DocumentStore:
    """Build the document store described by *config* (in-memory by default)."""
    config = config or StoreConfig()
    if config.type == "sqlite":
        if not config.path:
            raise StoreConfigError("SQLite store requires 'path' configuration")
        return SQLiteDocumentStore(config.path)
    if config.type == "memory":
        return InMemoryDocumentStore()
    raise StoreConfigError(f"Unknown store type: '{config.type}'")
