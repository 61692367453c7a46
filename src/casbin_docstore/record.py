"""Record codec — policy rules to flat storage records and back.

Internally a rule is a :class:`PolicyRule`: a policy type plus the tuple
of fields it actually has.  The fixed-width :class:`PolicyRecord` exists
only at the storage boundary, where an empty slot means "no more fields".
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from casbin_docstore.exceptions import RecordDecodeError

MAX_FIELDS = 6
PTYPE_FIELD = "p_type"
VALUE_FIELDS: tuple[str, ...] = tuple(f"v{i}" for i in range(MAX_FIELDS))


@dataclass(frozen=True)
class PolicyRule:
    """One policy line as the enforcer sees it.

    Attributes:
        ptype:  Policy type key (``"p"``, ``"p2"``, ``"g"`` ...).
        fields: The rule's values, in order, without padding.
    """

    ptype: str
    fields: tuple[str, ...] = ()

    @property
    def section(self) -> str:
        """``"p"`` or ``"g"`` — the leading character of the policy type."""
        return self.ptype[:1]


@dataclass(frozen=True)
class PolicyRecord:
    """Fixed-width storage shape of a rule: ``p_type`` plus ``v0``..``v5``."""

    ptype: str
    v0: str = ""
    v1: str = ""
    v2: str = ""
    v3: str = ""
    v4: str = ""
    v5: str = ""

    @property
    def values(self) -> tuple[str, ...]:
        return (self.v0, self.v1, self.v2, self.v3, self.v4, self.v5)

    def to_document(self) -> dict[str, str]:
        doc = {PTYPE_FIELD: self.ptype}
        doc.update(zip(VALUE_FIELDS, self.values, strict=True))
        return doc

    @classmethod
    def from_document(cls, data: Mapping[str, Any], document_id: str = "") -> PolicyRecord:
        """Validate a stored document and build the record.

        Missing ``v*`` slots read as empty; anything that is not a string
        is rejected.
        """
        ptype = data.get(PTYPE_FIELD)
        if not isinstance(ptype, str) or not ptype:
            raise RecordDecodeError(document_id, f"'{PTYPE_FIELD}' must be a non-empty string")

        values: list[str] = []
        for name in VALUE_FIELDS:
            value = data.get(name, "")
            if value is None:
                value = ""
            if not isinstance(value, str):
                raise RecordDecodeError(
                    document_id, f"'{name}' must be a string, got {type(value).__name__}"
                )
            values.append(value)
        return cls(ptype, *values)


def encode(ptype: str, rule: Sequence[str]) -> PolicyRecord:
    """Place ``rule[i]`` into slot ``v{i}``; unused slots stay empty."""
    if len(rule) > MAX_FIELDS:
        raise ValueError(f"A policy rule holds at most {MAX_FIELDS} fields, got {len(rule)}")
    return PolicyRecord(ptype, *rule)


def encode_rule(rule: PolicyRule) -> PolicyRecord:
    return encode(rule.ptype, rule.fields)


def decode(record: PolicyRecord) -> PolicyRule:
    """Rebuild the rule from the longest non-empty prefix of ``v0``..``v5``.

    Slots after the first empty one are ignored even when filled.  A record
    with an empty ``v0`` decodes to a zero-length rule.
    """
    fields: list[str] = []
    for value in record.values:
        if not value:
            break
        fields.append(value)
    return PolicyRule(record.ptype, tuple(fields))
