"""
Shared pydantic configuration for API payloads.

Field names are snake_case in Python and camelCase on the wire
(``start_date`` is exchanged as ``startDate``).  Both spellings are
accepted on input.
"""

from datetime import datetime, timezone
from typing import Annotated, Any, Iterable, List, Optional

from pydantic import AfterValidator, BaseModel, BeforeValidator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model exchanging camelCase keys."""

    model_config = {
        "from_attributes": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


def blank_to_none(value: Any) -> Any:
    """Treat an empty or whitespace-only string as "no value"."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Return ``value`` as an aware UTC datetime; naive values are taken as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def none_to_empty_list(value: Any) -> Any:
    if value is None:
        return []
    return value


# Optional text and dates: an empty string means "absent".  Dates are
# held in UTC so they compare equal to what storage returns.
OptionalText = Annotated[Optional[str], BeforeValidator(blank_to_none)]
OptionalDateTime = Annotated[
    Optional[datetime], BeforeValidator(blank_to_none), AfterValidator(as_utc)
]
# Array columns never hold null.
StringList = Annotated[List[str], BeforeValidator(none_to_empty_list)]


def reject_explicit_nulls(model: BaseModel, fields: Iterable[str]) -> None:
    """Raise if any of ``fields`` was supplied explicitly as ``None``.

    Used by update schemas: leaving a required field out keeps the
    stored value, but sending ``null`` for it is an error.
    """
    for name in fields:
        if name in model.model_fields_set and getattr(model, name) is None:
            raise ValueError(f"{to_camel(name)} cannot be null")
