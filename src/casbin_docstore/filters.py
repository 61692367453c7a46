"""Filter planner — equality constraints for bulk policy removal."""

from __future__ import annotations

from collections.abc import Sequence

from casbin_docstore.record import MAX_FIELDS, VALUE_FIELDS, PolicyRecord

# Slots compared by single-rule removal.  ``v5`` is not one of them, so
# records that differ from the rule only in ``v5`` match as well.
EXACT_MATCH_FIELDS: tuple[str, ...] = VALUE_FIELDS[:5]


def plan_filter(field_index: int, field_values: Sequence[str]) -> dict[str, str]:
    """Map a filter window onto ``{slot_name: value}`` constraints.

    ``field_values[0]`` addresses absolute position ``field_index``.  Every
    position ``k`` in ``0..5`` inside ``[field_index, field_index + len(field_values))``
    whose value is non-empty is constrained; positions outside the window and
    empty values are wildcards.  ``field_index`` may be negative, in which
    case the values addressing positions before ``v0`` are unused.

    >>> plan_filter(0, ["data2_admin"])
    {'v0': 'data2_admin'}
    >>> plan_filter(-2, ["x", "y", "z"])
    {'v0': 'z'}
    """
    end = field_index + len(field_values)
    constraints: dict[str, str] = {}
    for k in range(MAX_FIELDS):
        if field_index <= k < end:
            value = field_values[k - field_index]
            if value:
                constraints[VALUE_FIELDS[k]] = value
    return constraints


def exact_rule_filter(record: PolicyRecord) -> dict[str, str]:
    """Constraints matching ``record`` on ``v0``..``v4``, empty slots included."""
    return {name: value for name, value in zip(EXACT_MATCH_FIELDS, record.values, strict=False)}
