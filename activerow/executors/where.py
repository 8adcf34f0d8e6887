##############################################################################
# Copyright (c) ActiveRow Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to ActiveRow.
##############################################################################

"""
Normalization of lookup filters into SQL conditions.

A filter is a mapping of column names to values, combined with AND:

- a scalar value matches by equality,
- `None` matches `IS NULL`,
- a list, tuple or set matches with `IN`; an empty one matches nothing.

Executors either render the normalized terms into SQL text
(`build_where_clause`) or translate them into their own expression objects
(`iter_filter_terms`).
"""

from collections.abc import Mapping
from typing import Any, Iterator, List, Optional, Tuple

from activerow.exceptions import InvalidArgumentError


OP_EQUALS = "="
OP_IN = "IN"
OP_IS_NULL = "IS NULL"
OP_NEVER = "NEVER"

_SEQUENCE_TYPES = (list, tuple, set, frozenset)


def quote_identifier(name: str) -> str:
    """
    Quote a table or column name for use in SQL text.

    Args:
        name: The identifier to quote.

    Returns:
        The identifier wrapped in double quotes, with embedded quotes doubled.
    """
    return '"' + str(name).replace('"', '""') + '"'


def iter_filter_terms(filters: Optional[Mapping]) -> Iterator[Tuple[str, str, Any]]:
    """
    Normalize a filter mapping into `(column, operator, value)` terms.

    Args:
        filters: A mapping of column names to values, or None for no filter.

    Yields:
        One term per filter item. `value` is a list for `IN` terms and None for
        `IS NULL` and `NEVER` terms.

    Raises:
        InvalidArgumentError: If `filters` is not a mapping.
    """
    if not filters:
        return
    if not isinstance(filters, Mapping):
        raise InvalidArgumentError(f"Filters must be a mapping of columns to values, not {type(filters).__name__}")

    for column, value in filters.items():
        if value is None:
            yield column, OP_IS_NULL, None
        elif isinstance(value, _SEQUENCE_TYPES):
            values = list(value)
            if values:
                yield column, OP_IN, values
            else:
                # Avoid generating invalid SQL like `IN ()`
                yield column, OP_NEVER, None
        else:
            yield column, OP_EQUALS, value


def build_where_clause(filters: Optional[Mapping], placeholder: str = "?") -> Tuple[str, List[Any]]:
    """
    Build the SQL WHERE clause and associated parameter list from a filters mapping.

    Args:
        filters: A mapping of column names to values.
        placeholder: The parameter placeholder of the target driver.

    Returns:
        A tuple of (where_clause, params). The clause is empty when there is no filter.
    """
    conditions = []
    params = []

    for column, operator, value in iter_filter_terms(filters):
        quoted = quote_identifier(column)
        if operator == OP_IS_NULL:
            conditions.append(f"{quoted} IS NULL")
        elif operator == OP_NEVER:
            conditions.append("1 = 0")
        elif operator == OP_IN:
            placeholders = ", ".join(placeholder for _ in value)
            conditions.append(f"{quoted} IN ({placeholders})")
            params.extend(value)
        else:
            conditions.append(f"{quoted} = {placeholder}")
            params.append(value)

    if not conditions:
        return "", []
    return "WHERE " + " AND ".join(conditions), params
