"""
Helpers shared by the project, task and statistics services.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, List, Optional, Sequence, Type, TypeVar

from ..core.db import Database
from ..core.exceptions import ValidationError

E = TypeVar("E", bound=Enum)


class BaseService:
    """Holds the storage handle every service operation works against.

    Services keep no other state: each operation opens its own
    connection (or transaction) and releases it before returning.
    """

    def __init__(self, database: Database):
        self.database = database


def coerce_enum(enum_cls: Type[E], value, field: str) -> E:
    """Return ``value`` as a member of ``enum_cls`` or raise ``ValidationError``."""
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(
            f"Invalid {field} '{value}'; expected one of: {allowed}", field=field, value=value
        ) from None


def search_fields(
    enum_cls: Type[E],
    fields: Optional[Iterable],
    defaults: Sequence[E],
) -> List[E]:
    """Resolve the requested search fields.

    ``None`` selects ``defaults``; an empty selection or an unknown field
    name is a ``ValidationError``.  Duplicates are dropped, order kept.
    """
    if fields is None:
        return list(defaults)
    selected: List[E] = []
    for name in fields:
        member = coerce_enum(enum_cls, name, "search field")
        if member not in selected:
            selected.append(member)
    if not selected:
        raise ValidationError("At least one search field must be selected", field="fields")
    return selected


def search_text(query: Optional[str]) -> str:
    if query is None or not query.strip():
        raise ValidationError("Search query must not be empty", field="query", value=query)
    return query


def present(value) -> bool:
    """Whether an optional filter value was actually given."""
    if value is None:
        return False
    if isinstance(value, str) and not value:
        return False
    return True
