"""
Typed predicate descriptors for list filters and free-text search.

Filters and searches are described as ``Predicate(field, operator,
value)`` tuples and compiled into a parameterized ``WHERE`` clause.
Column names come only from the per-table whitelist below and every
value is bound as a statement parameter, so user input never becomes
part of the SQL text.

Composition rules:

* ``all_of`` predicates are joined with ``AND`` (list filters);
* ``any_of`` predicates are joined with ``OR`` and the group is ANDed
  with the rest (search over several fields).  An explicitly empty
  ``any_of`` group is rejected rather than compiled into an empty
  ``()`` or silently dropped.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..core.exceptions import ValidationError


class Operator(str, Enum):
    EQUALS = "eq"
    # case-insensitive substring match on a text column
    CONTAINS = "contains"
    # array column shares at least one element with the given values
    ANY_OF = "any_of"
    # some element of an array column contains the substring
    ELEMENT_CONTAINS = "element_contains"


TEXT = "text"
ARRAY = "array"

_ALLOWED_OPERATORS = {
    TEXT: {Operator.EQUALS, Operator.CONTAINS},
    ARRAY: {Operator.ANY_OF, Operator.ELEMENT_CONTAINS},
}


@dataclass(frozen=True)
class Table:
    name: str
    columns: Dict[str, str] = field(default_factory=dict)


PROJECTS = Table(
    "projects",
    {
        "name": TEXT,
        "description": TEXT,
        "status": TEXT,
        "owner": TEXT,
        "tags": ARRAY,
    },
)

TASKS = Table(
    "tasks",
    {
        "project_id": TEXT,
        "title": TEXT,
        "description": TEXT,
        "status": TEXT,
        "priority": TEXT,
        "assignee": TEXT,
        "dependencies": ARRAY,
    },
)


@dataclass(frozen=True)
class Predicate:
    field: str
    operator: Operator
    value: Any


def compile_predicate(table: Table, predicate: Predicate) -> Tuple[str, List[Any]]:
    """Translate one predicate into an SQL fragment and its parameters."""
    kind = table.columns.get(predicate.field)
    if kind is None:
        raise ValidationError(
            f"Cannot filter {table.name} by '{predicate.field}'", field=predicate.field
        )
    if predicate.operator not in _ALLOWED_OPERATORS[kind]:
        raise ValidationError(
            f"Operator '{predicate.operator.value}' does not apply to {table.name}.{predicate.field}",
            field=predicate.field,
        )

    column = f"{table.name}.{predicate.field}"
    if predicate.operator is Operator.EQUALS:
        return f"{column} = ?", [predicate.value]
    if predicate.operator is Operator.CONTAINS:
        return f"instr(casefold({column}), ?) > 0", [str(predicate.value).casefold()]
    if predicate.operator is Operator.ANY_OF:
        values = list(predicate.value)
        if not values:
            raise ValidationError(
                f"No values given for {table.name}.{predicate.field}", field=predicate.field
            )
        placeholders = ", ".join("?" for _ in values)
        return (
            f"EXISTS (SELECT 1 FROM json_each({column}) WHERE json_each.value IN ({placeholders}))",
            values,
        )
    # Operator.ELEMENT_CONTAINS
    return (
        f"EXISTS (SELECT 1 FROM json_each({column}) "
        f"WHERE instr(casefold(json_each.value), ?) > 0)",
        [str(predicate.value).casefold()],
    )


def build_where(
    table: Table,
    all_of: Sequence[Predicate] = (),
    any_of: Optional[Sequence[Predicate]] = None,
) -> Tuple[str, List[Any]]:
    """Compile predicates into a ``WHERE`` clause (or ``""``) and parameters.

    ``any_of=None`` means no disjunctive group; an empty ``any_of``
    sequence raises ``ValidationError``.
    """
    clauses: List[str] = []
    params: List[Any] = []
    for predicate in all_of:
        sql, values = compile_predicate(table, predicate)
        clauses.append(sql)
        params.extend(values)

    if any_of is not None:
        if not any_of:
            raise ValidationError("At least one search field must be selected", field="fields")
        alternatives: List[str] = []
        for predicate in any_of:
            sql, values = compile_predicate(table, predicate)
            alternatives.append(sql)
            params.extend(values)
        clauses.append("(" + " OR ".join(alternatives) + ")")

    if not clauses:
        return "", params
    return " WHERE " + " AND ".join(clauses), params
