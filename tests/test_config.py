"""Tests for configuration and store creation."""

import pytest

from casbin_docstore import (
    DEFAULT_COLLECTION,
    AdapterConfig,
    InMemoryDocumentStore,
    SQLiteDocumentStore,
    StoreConfig,
    StoreConfigError,
    create_store,
)


def test_collection_defaults_to_casbin():
    assert AdapterConfig().collection_name() == DEFAULT_COLLECTION == "casbin"


def test_empty_collection_means_default():
    assert AdapterConfig(collection="").collection_name() == "casbin"


def test_custom_collection():
    assert AdapterConfig(collection="policies").collection_name() == "policies"


def test_adapter_config_from_json():
    config = AdapterConfig.model_validate_json('{"collection": "tenant-a"}')
    assert config.collection_name() == "tenant-a"


def test_create_memory_store_by_default():
    assert isinstance(create_store(), InMemoryDocumentStore)
    assert isinstance(create_store(StoreConfig(type="memory")), InMemoryDocumentStore)


async def test_create_sqlite_store(tmp_path):
    store = create_store(StoreConfig(type="sqlite", path=str(tmp_path / "p.db")))
    assert isinstance(store, SQLiteDocumentStore)
    await store.close()


def test_sqlite_store_requires_path():
    with pytest.raises(StoreConfigError, match="path"):
        create_store(StoreConfig(type="sqlite"))


def test_unknown_store_type():
    with pytest.raises(StoreConfigError, match="firestore"):
        create_store(StoreConfig(type="firestore"))
