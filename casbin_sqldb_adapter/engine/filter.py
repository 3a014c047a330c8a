"""
Filter Implementation and Query Predicates for Casbin Policy Rules.

This module provides the Filter class used to specify criteria for selective
loading of Casbin policy rules, and the builders that turn matching criteria
into Django lookups against the policy rule table.

Three kinds of criteria are supported:

- A ``Filter`` object with candidate values per column, used by filtered loads.
- A field offset plus field values, used by filtered removals.
- A full policy rule, used to remove that exact rule.

Every builder returns a dictionary of lookups meant to be passed to
``QuerySet.filter(**lookups)``. All lookups are combined with AND logic.
"""

from enum import Enum
from typing import Optional, Sequence

import attr
from django.db.models import QuerySet

from casbin_sqldb_adapter.engine.codec import VALUE_FIELDS, encode_rule
from casbin_sqldb_adapter.engine.exceptions import InvalidFilterType


class PolicyAttribute(Enum):
    """
    Enumeration of Casbin policy attributes.

    These attributes map to the fields of the CasbinRule model, but their meaning
    depends on the policy type (ptype). The ``ptype`` field is stored in the
    ``p_type`` column.
    """

    PTYPE = "ptype"
    """ptype (str): Type of policy"""

    V0 = "v0"
    """v0 (str): First policy value."""

    V1 = "v1"
    """v1 (str): Second policy value."""

    V2 = "v2"
    """v2 (str): Third policy value."""

    V3 = "v3"
    """v3 (str): Fourth policy value."""

    V4 = "v4"
    """v4 (str): Fifth policy value."""

    V5 = "v5"
    """v5 (str): Sixth policy value."""


def validate_candidates(instance, attribute, value):  # pylint: disable=unused-argument
    """
    Check that a filter column holds a list or tuple of strings, or None.

    Raises:
        InvalidFilterType: If the column holds a bare string or anything else.
    """
    if value is None:
        return
    if not isinstance(value, (list, tuple)) or not all(isinstance(item, str) for item in value):
        raise InvalidFilterType(
            f"Invalid filter value for {attribute.name}: expected a list of strings, got {value!r}"
        )


@attr.define
class Filter:
    """
    Filter class for selective Casbin policy loading.

    Each attribute corresponds to a column in the policy rule table and accepts
    a list of values to filter by.

    Note:
        - Empty lists (or None) for any attribute means no filtering on that attribute
        - A single value creates an equality filter for that attribute
        - Several values create an "IN" filter for that attribute
        - All non-empty filters are combined with AND logic
    """

    ptype: Optional[list[str]] = attr.field(factory=list, validator=validate_candidates)
    """ptype (Optional[list[str]]): Policy type filter, e.g. ``p`` or ``g``."""

    v0: Optional[list[str]] = attr.field(factory=list, validator=validate_candidates)
    """v0 (Optional[list[str]]): First policy value filter (subject for ``p``, user for ``g``)."""

    v1: Optional[list[str]] = attr.field(factory=list, validator=validate_candidates)
    """v1 (Optional[list[str]]): Second policy value filter (object for ``p``, role for ``g``)."""

    v2: Optional[list[str]] = attr.field(factory=list, validator=validate_candidates)
    """v2 (Optional[list[str]]): Third policy value filter (action for ``p``, domain for ``g``)."""

    v3: Optional[list[str]] = attr.field(factory=list, validator=validate_candidates)
    """v3 (Optional[list[str]]): Fourth policy value filter."""

    v4: Optional[list[str]] = attr.field(factory=list, validator=validate_candidates)
    """v4 (Optional[list[str]]): Fifth policy value filter."""

    v5: Optional[list[str]] = attr.field(factory=list, validator=validate_candidates)
    """v5 (Optional[list[str]]): Sixth policy value filter."""


def filter_lookups(filter: Filter) -> dict:  # pylint: disable=redefined-builtin
    """
    Build the lookups selecting the rules that match a filter.

    Args:
        filter (Filter): Filter object with a list of candidate values per column.

    Returns:
        dict: Equality lookups for single candidates and ``__in`` lookups for
            several candidates. Columns without candidates are left out.

    Raises:
        InvalidFilterType: If ``filter`` is not a ``Filter`` instance, or a column
            holds something other than a list of strings.
    """
    if not isinstance(filter, Filter):
        raise InvalidFilterType(f"Invalid filter type: expected Filter, got {type(filter).__name__}")

    lookups = {}
    for attribute in PolicyAttribute:
        filter_values = getattr(filter, attribute.value)
        validate_candidates(filter, attr.fields_dict(Filter)[attribute.value], filter_values)
        if not filter_values:
            continue
        if len(filter_values) == 1:
            lookups[attribute.value] = filter_values[0]
        else:
            lookups[f"{attribute.value}__in"] = list(filter_values)
    return lookups


def filter_query(queryset: QuerySet, filter: Filter) -> QuerySet:  # pylint: disable=redefined-builtin
    """
    Apply filter criteria to the policy queryset.

    Args:
        queryset (QuerySet): Queryset of policy rules to filter.
        filter (Filter): Filter object with the criteria to apply.

    Returns:
        QuerySet: Filtered queryset ordered by id.
    """
    return queryset.filter(**filter_lookups(filter)).order_by("id")


def offset_filter_lookups(ptype: str, field_index: int, field_values: Sequence[str]) -> dict:
    """
    Build the lookups for a removal constrained by field position.

    ``field_values[0]`` applies to column ``v{field_index}``, the next value to
    the next column and so on. Empty values leave their column unconstrained, as
    do the columns outside of the supplied window.

    Args:
        ptype (str): Policy type, always constrained.
        field_index (int): Column offset of the first value.
        field_values (Sequence[str]): Values to match from that column onwards.

    Returns:
        dict: Equality lookups for ``ptype`` and the constrained columns.
    """
    lookups = {"ptype": ptype}
    window_end = field_index + len(field_values)
    for column, field in enumerate(VALUE_FIELDS):
        if field_index <= column < window_end:
            value = field_values[column - field_index]
            if value:
                lookups[field] = value
    return lookups


def exact_match_lookups(ptype: str, rule: Sequence[str]) -> dict:
    """
    Build the lookups matching one policy rule exactly.

    Every column is constrained, absent trailing values included, so the rule
    and nothing else is matched (duplicated rows of it included).
    """
    return encode_rule(ptype, rule)
