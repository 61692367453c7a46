"""Custom exceptions for the casbin_docstore package.

Storage and transport failures raised by a backend (``sqlite3`` errors,
cancellation, timeouts) are never wrapped: they reach the caller as-is.
"""

from __future__ import annotations


class DocStoreError(Exception):
    """Base exception for all adapter-level errors."""


class RecordDecodeError(DocStoreError):
    """Raised when a stored document cannot be turned back into a policy rule or model."""

    def __init__(self, document_id: str, detail: str) -> None:
        self.document_id = document_id
        super().__init__(f"Cannot decode document '{document_id}': {detail}")


class ModelValidationError(DocStoreError):
    """Raised when a model definition does not parse.  Nothing is written."""


class ModelNotFoundError(DocStoreError):
    """Raised when no model definition was ever saved to the collection."""

    def __init__(self, collection: str) -> None:
        self.collection = collection
        super().__init__(f"No model definition stored in collection '{collection}'")


class StoreConfigError(DocStoreError):
    """Raised when a document store cannot be built from its configuration."""
