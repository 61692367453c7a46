"""Configuration models for the adapter and its document store.

These Pydantic models are the whole configuration surface: the
collection the adapter reads and writes, and which backend holds it.
"""

from __future__ import annotations

from pydantic import BaseModel

DEFAULT_COLLECTION = "casbin"


class AdapterConfig(BaseModel):
    """Adapter configuration.

    Attributes:
        collection: Collection holding policy records and the model
                    definition.  Optional; empty means ``"casbin"``.
    """

    collection: str = ""

    def collection_name(self) -> str:
        return self.collection or DEFAULT_COLLECTION


class StoreConfig(BaseModel):
    """Document store configuration.

    Attributes:
        type: Store type ("memory" or "sqlite")
        path: Path to SQLite database file (for sqlite type)
    """

    type: str = "memory"
    path: str = ""
