"""DocumentAdapter — Casbin policy persistence on top of a DocumentStore."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from types import TracebackType
from typing import TYPE_CHECKING

from casbin.persist.adapters.asyncio import AsyncAdapter

from casbin_docstore.config import AdapterConfig
from casbin_docstore.exceptions import RecordDecodeError
from casbin_docstore.filters import exact_rule_filter, plan_filter
from casbin_docstore.record import (
    PTYPE_FIELD,
    PolicyRecord,
    PolicyRule,
    decode,
    encode,
    encode_rule,
)
from casbin_docstore.stores.base import Query

if TYPE_CHECKING:
    from casbin.model import Model

    from casbin_docstore.stores.base import DocumentStore, Transaction

logger = logging.getLogger(__name__)

_SECTIONS = ("p", "g")


class DocumentAdapter(AsyncAdapter):
    """Stores Casbin policy rules as flat records in a document collection.

    Every rule becomes one document ``{p_type, v0..v5}``.  Mutations run
    inside a store transaction, so concurrent readers see the collection
    either before or after a call, never halfway.  The adapter adds no
    locking or retries of its own; errors from the store propagate as-is.

    The adapter owns *store*.  Release it with :meth:`close`, or use the
    adapter as an async context manager::

        async with DocumentAdapter(SQLiteDocumentStore("policy.db")) as adapter:
            enforcer = casbin.AsyncEnforcer("rbac_model.conf", adapter)
            await enforcer.load_policy()

    Parameters:
        store:  Backend holding the collection.
        config: Adapter configuration.  Defaults to the ``"casbin"`` collection.
    """

    def __init__(self, store: DocumentStore, config: AdapterConfig | None = None) -> None:
        self._store = store
        self._collection = (config or AdapterConfig()).collection_name()

    @property
    def store(self) -> DocumentStore:
        return self._store

    @property
    def collection(self) -> str:
        return self._collection

    # ── lifecycle ────────────────────────────────────────────

    async def close(self) -> None:
        await self._store.close()

    async def __aenter__(self) -> DocumentAdapter:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    # ── queries ──────────────────────────────────────────────

    def _policy_query(self) -> Query:
        """Every policy record: documents with a non-empty ``p_type``."""
        return Query(self._collection, non_empty=(PTYPE_FIELD,))

    async def _delete_matching(self, query: Query) -> int:
        async def delete_all(tx: Transaction) -> int:
            docs = await tx.documents(query)
            for doc in docs:
                await tx.delete(doc.ref)
            return len(docs)

        return await self._store.run_transaction(delete_all)

    # ── AsyncAdapter interface ───────────────────────────────

    async def load_policy(self, model: Model) -> None:
        """Append every stored rule to *model*.

        The model is not cleared first.  Loading stops at the first record
        that cannot be decoded; rules appended before it stay in the model.
        """
        count = 0
        async for doc in self._store.documents(self._policy_query()):
            rule = decode(PolicyRecord.from_document(doc.data, doc.id))
            assertions = model.model.get(rule.section)
            if assertions is None or rule.ptype not in assertions:
                raise RecordDecodeError(
                    doc.id, f"policy type '{rule.ptype}' is not defined in the model"
                )
            assertions[rule.ptype].policy.append(list(rule.fields))
            count += 1
        logger.debug("Loaded %d policy rules from collection '%s'", count, self._collection)

    async def save_policy(self, model: Model) -> bool:
        """Replace the whole stored policy with the rules held by *model*.

        All existing policy records are deleted and one record per rule is
        created, in a single transaction.  Very large policies can exceed
        the number of operations a backend allows in one transaction.
        """
        records = [
            encode(ptype, rule)
            for sec in _SECTIONS
            for ptype, assertion in model.model.get(sec, {}).items()
            for rule in assertion.policy
        ]

        async def replace_all(tx: Transaction) -> int:
            existing = await tx.documents(self._policy_query())
            for doc in existing:
                await tx.delete(doc.ref)
            for record in records:
                await tx.create(self._collection, record.to_document())
            return len(existing)

        deleted = await self._store.run_transaction(replace_all)
        logger.debug(
            "Saved %d policy rules to collection '%s' (replaced %d)",
            len(records),
            self._collection,
            deleted,
        )
        return True

    async def add_policy(self, sec: str, ptype: str, rule: Sequence[str]) -> bool:
        """Store one rule as a new record."""
        record = encode_rule(PolicyRule(ptype, tuple(rule)))

        async def create(tx: Transaction) -> None:
            await tx.create(self._collection, record.to_document())

        await self._store.run_transaction(create)
        return True

    async def remove_policy(self, sec: str, ptype: str, rule: Sequence[str]) -> bool:
        """Delete every record equal to *rule* on ``p_type`` and ``v0``..``v4``.

        ``v5`` is not compared.  Removing a rule that is not stored succeeds.
        """
        policy_rule = PolicyRule(ptype, tuple(rule))
        record = encode_rule(policy_rule)
        query = self._policy_query().where(PTYPE_FIELD, ptype).where_all(exact_rule_filter(record))
        deleted = await self._delete_matching(query)
        logger.debug("Removed %d records for %s", deleted, policy_rule)
        return True

    async def remove_filtered_policy(
        self, sec: str, ptype: str, field_index: int, *field_values: str
    ) -> bool:
        """Delete every record of *ptype* matching the filter window.

        ``field_values[i]`` constrains field ``field_index + i``; empty
        values match anything.  Zero matches is not an error.
        """
        constraints = plan_filter(field_index, field_values)
        query = self._policy_query().where(PTYPE_FIELD, ptype).where_all(constraints)
        deleted = await self._delete_matching(query)
        logger.debug(
            "Removed %d '%s' records matching %s", deleted, ptype, constraints or "<any>"
        )
        return True
