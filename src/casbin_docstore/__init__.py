"""casbin_docstore — Casbin policy storage on document databases.

Policy rules are kept as flat ``{p_type, v0..v5}`` documents.  Loading
appends them to a Casbin model; saving replaces the whole collection in
one transaction.
"""

from casbin_docstore.adapter import DocumentAdapter
from casbin_docstore.config import DEFAULT_COLLECTION, AdapterConfig, StoreConfig
from casbin_docstore.exceptions import (
    DocStoreError,
    ModelNotFoundError,
    ModelValidationError,
    RecordDecodeError,
    StoreConfigError,
)
from casbin_docstore.filters import plan_filter
from casbin_docstore.model_store import (
    load_model,
    load_model_text,
    save_model,
    save_model_from_file,
)
from casbin_docstore.record import PolicyRecord, PolicyRule, decode, encode
from casbin_docstore.stores import (
    InMemoryDocumentStore,
    SQLiteDocumentStore,
    create_store,
)

__all__ = [
    "DEFAULT_COLLECTION",
    "AdapterConfig",
    "DocStoreError",
    "DocumentAdapter",
    "InMemoryDocumentStore",
    "ModelNotFoundError",
    "ModelValidationError",
    "PolicyRecord",
    "PolicyRule",
    "RecordDecodeError",
    "SQLiteDocumentStore",
    "StoreConfig",
    "StoreConfigError",
    "create_store",
    "decode",
    "encode",
    "load_model",
    "load_model_text",
    "plan_filter",
    "save_model",
    "save_model_from_file",
]
