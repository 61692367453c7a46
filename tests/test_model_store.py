"""Tests for model definition storage."""

import pytest

from casbin_docstore import (
    AdapterConfig,
    ModelNotFoundError,
    ModelValidationError,
    RecordDecodeError,
    load_model,
    load_model_text,
    save_model,
    save_model_from_file,
)
from casbin_docstore.model_store import parse_model
from casbin_docstore.stores import DocumentRef


def model_to_text(model):
    lines = [
        f"{sec}.{key}: {assertion.value}"
        for sec, assertions in model.model.items()
        for key, assertion in assertions.items()
    ]
    return "\n".join(sorted(lines))


async def test_save_and_load_model(store, config, examples_dir):
    path = examples_dir / "rbac_model.conf"
    await save_model_from_file(store, path, config)

    loaded = await load_model(store, config)
    assert model_to_text(loaded) == model_to_text(parse_model(path.read_text()))


async def test_load_model_text_returns_saved_text(store, config, examples_dir):
    text = (examples_dir / "rbac_tenant_service.conf").read_text()
    await save_model(store, text, config)
    assert await load_model_text(store, config) == text


async def test_save_invalid_file(store, config, examples_dir):
    with pytest.raises(ModelValidationError):
        await save_model_from_file(store, examples_dir / "rbac_policy.csv", config)
    with pytest.raises(ModelNotFoundError):
        await load_model_text(store, config)


async def test_save_invalid_text_keeps_previous(store, config, examples_dir):
    text = (examples_dir / "rbac_model.conf").read_text()
    await save_model(store, text, config)

    with pytest.raises(ModelValidationError):
        await save_model(store, "", config)
    assert await load_model_text(store, config) == text


@pytest.mark.parametrize(
    "text",
    [
        "",
        "[request_definition]\nr = sub, obj, act\n",
        "[request_definition]\nr = sub, obj, act\n\n[policy_definition]\np = sub, obj, act\n",
    ],
)
async def test_save_partial_definition_rejected(store, config, text):
    with pytest.raises(ModelValidationError, match="missing required sections"):
        await save_model(store, text, config)
    with pytest.raises(ModelNotFoundError):
        await load_model_text(store, config)


def test_parse_model_names_missing_sections():
    with pytest.raises(ModelValidationError) as exc_info:
        parse_model("[request_definition]\nr = sub, obj, act\n")
    message = str(exc_info.value)
    assert "p, e, m" in message


async def test_load_model_fail(store):
    config = AdapterConfig(collection="docstore-notexist")
    with pytest.raises(ModelNotFoundError) as exc_info:
        await load_model(store, config)
    assert exc_info.value.collection == "docstore-notexist"


async def test_default_collection(store, examples_dir):
    await save_model_from_file(store, examples_dir / "rbac_model.conf")
    assert await store.get(DocumentRef("casbin", "conf")) is not None


async def test_save_overwrites_previous(store, config, examples_dir):
    await save_model_from_file(store, examples_dir / "rbac_model.conf", config)
    await save_model_from_file(store, examples_dir / "rbac_tenant_service.conf", config)
    loaded = await load_model(store, config)
    expected = parse_model((examples_dir / "rbac_tenant_service.conf").read_text())
    assert model_to_text(loaded) == model_to_text(expected)


async def test_load_malformed_document(store, config):
    ref = DocumentRef(config.collection, "conf")
    await store.run_transaction(lambda tx: tx.set(ref, {"text": 5}))
    with pytest.raises(RecordDecodeError):
        await load_model_text(store, config)


def test_parse_model_chains_cause():
    with pytest.raises(ModelValidationError) as exc_info:
        parse_model("p, alice, data1, read")
    assert exc_info.value.__cause__ is not None
