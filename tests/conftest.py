"""Shared test fixtures."""

from pathlib import Path

import pytest
from casbin.model import Model

from casbin_docstore import AdapterConfig, DocumentAdapter
from casbin_docstore.stores import InMemoryDocumentStore, SQLiteDocumentStore

EXAMPLES = Path(__file__).resolve().parent.parent / "examples"
RBAC_MODEL = EXAMPLES / "rbac_model.conf"
RBAC_POLICY = EXAMPLES / "rbac_policy.csv"
TENANT_MODEL = EXAMPLES / "rbac_tenant_service.conf"


def _load(path: Path) -> Model:
    model = Model()
    model.load_model_from_text(path.read_text())
    return model


@pytest.fixture(params=["memory", "sqlite"])
async def store(request, tmp_path):
    if request.param == "sqlite":
        backend = SQLiteDocumentStore(str(tmp_path / "docstore.db"))
    else:
        backend = InMemoryDocumentStore()
    yield backend
    await backend.close()


@pytest.fixture
def config():
    return AdapterConfig(collection="docstore-unittest")


@pytest.fixture
def adapter(store, config):
    return DocumentAdapter(store, config)


@pytest.fixture
def rbac_model():
    return _load(RBAC_MODEL)


@pytest.fixture
def tenant_model():
    return _load(TENANT_MODEL)


@pytest.fixture
def make_model():
    """Return a factory for empty models; RBAC unless another ``.conf`` is given."""
    return lambda path=RBAC_MODEL: _load(path)


@pytest.fixture
def examples_dir():
    return EXAMPLES
