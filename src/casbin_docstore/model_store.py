"""Model definition storage — one validated ``conf`` document per collection."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from casbin.model import Model

from casbin_docstore.config import AdapterConfig
from casbin_docstore.exceptions import ModelNotFoundError, ModelValidationError, RecordDecodeError
from casbin_docstore.stores.base import DocumentRef

if TYPE_CHECKING:
    from casbin_docstore.stores.base import DocumentStore, Transaction

logger = logging.getLogger(__name__)

MODEL_DOCUMENT_ID = "conf"
MODEL_TEXT_FIELD = "text"

# request_definition, policy_definition, policy_effect, matchers
REQUIRED_SECTIONS = ("r", "p", "e", "m")


def _model_ref(config: AdapterConfig | None) -> DocumentRef:
    return DocumentRef((config or AdapterConfig()).collection_name(), MODEL_DOCUMENT_ID)


def parse_model(text: str) -> Model:
    """Parse a Casbin model definition, raising :class:`ModelValidationError` if invalid."""
    model = Model()
    try:
        model.load_model_from_text(text)
    except Exception as exc:
        raise ModelValidationError(f"Invalid model definition: {exc}") from exc
    missing = [sec for sec in REQUIRED_SECTIONS if not model.model.get(sec)]
    if missing:
        raise ModelValidationError(
            f"Invalid model definition: missing required sections: {', '.join(missing)}"
        )
    return model


async def save_model(store: DocumentStore, text: str, config: AdapterConfig | None = None) -> None:
    """Validate *text* and store it as the collection's model definition.

    Invalid text is rejected before anything is written; a previously
    saved definition stays in place.
    """
    parse_model(text)
    ref = _model_ref(config)

    async def write(tx: Transaction) -> None:
        await tx.set(ref, {MODEL_TEXT_FIELD: text})

    await store.run_transaction(write)
    logger.info("Saved model definition to collection '%s'", ref.collection)


async def save_model_from_file(
    store: DocumentStore, path: str | Path, config: AdapterConfig | None = None
) -> None:
    """Read a ``.conf`` file and store it with :func:`save_model`."""
    await save_model(store, Path(path).read_text(encoding="utf-8"), config)


async def load_model_text(store: DocumentStore, config: AdapterConfig | None = None) -> str:
    """Return the stored model definition text.

    Raises:
        ModelNotFoundError: No definition was ever saved to the collection.
        RecordDecodeError:  The stored document has no ``text`` string.
    """
    ref = _model_ref(config)
    doc = await store.get(ref)
    if doc is None:
        raise ModelNotFoundError(ref.collection)
    text = doc.data.get(MODEL_TEXT_FIELD)
    if not isinstance(text, str):
        raise RecordDecodeError(ref.id, f"'{MODEL_TEXT_FIELD}' must be a string")
    return text


async def load_model(store: DocumentStore, config: AdapterConfig | None = None) -> Model:
    """Load the stored model definition and parse it into a Casbin model."""
    return parse_model(await load_model_text(store, config))
