"""
Conversion between Casbin policy rules and rows of the policy rule table.

A policy rule is a policy type (``p``, ``g``, ``g2``...) plus up to six ordered
values. The table stores the type in ``p_type`` and the values in ``v0``..``v5``,
filling columns from left to right and leaving the rest as empty strings.

Reading a row back relies on that left-packing: only the leading run of
non-empty values is considered part of the rule. A row such as
``p, alice, "", read`` is read as ``p, alice``.
"""

from typing import Any, Sequence

from casbin_sqldb_adapter.engine.exceptions import UnsupportedArity

VALUE_FIELDS = ("v0", "v1", "v2", "v3", "v4", "v5")

MAX_ARITY = len(VALUE_FIELDS)

LINE_SEPARATOR = ", "


def encode_rule(ptype: str, rule: Sequence[str]) -> dict[str, str]:
    """
    Build the column values for a policy rule.

    Args:
        ptype (str): Policy type of the rule.
        rule (Sequence[str]): Ordered rule values, at most six.

    Returns:
        dict[str, str]: Values for ``ptype`` and every value column.

    Raises:
        UnsupportedArity: If the rule has more values than value columns.
    """
    if len(rule) > MAX_ARITY:
        raise UnsupportedArity(
            f"Policy rule {list(rule)} has {len(rule)} values, at most {MAX_ARITY} are supported"
        )

    columns = {"ptype": ptype}
    for position, field in enumerate(VALUE_FIELDS):
        columns[field] = rule[position] if position < len(rule) else ""
    return columns


def present_values(row: Any) -> list[str]:
    """Return the leading run of non-empty values stored in a row."""
    values = []
    for field in VALUE_FIELDS:
        value = getattr(row, field)
        if not value:
            break
        values.append(value)
    return values


def decode_rule(row: Any) -> list[str]:
    """
    Read a policy rule back from a row.

    Args:
        row: Any object exposing ``ptype`` and ``v0``..``v5`` attributes.

    Returns:
        list[str]: ``[ptype, *values]``, or an empty list when the row holds no value.
    """
    values = present_values(row)
    if not values:
        return []
    return [row.ptype, *values]


def rule_to_line(row: Any) -> str:
    """Render a row as a Casbin policy line, empty when the row holds no value."""
    return LINE_SEPARATOR.join(decode_rule(row))
