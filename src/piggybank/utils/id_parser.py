"""Identifier and enumeration coercion utilities."""

from enum import Enum
from typing import TypeVar
from uuid import UUID

from piggybank.domain.errors import BadRequestError

E = TypeVar("E", bound=Enum)


def parse_uuid(value: UUID | str, label: str = "id") -> UUID:
    """Coerce a UUID or its string form.

    Raises:
        BadRequestError: If the value is not a well-formed UUID
    """
    if isinstance(value, UUID):
        return value
    if isinstance(value, str):
        try:
            return UUID(value.strip())
        except ValueError:
            pass
    raise BadRequestError(f"Invalid {label}: {value}")


def parse_enum(enum_type: type[E], value: E | str, label: str) -> E:
    """Coerce an enum member or its (case-insensitive) name.

    Raises:
        BadRequestError: If the value names no member of ``enum_type``
    """
    if isinstance(value, enum_type):
        return value
    if isinstance(value, str):
        member = enum_type.__members__.get(value.strip().upper())
        if member is not None:
            return member
    choices = ", ".join(enum_type.__members__)
    raise BadRequestError(f"Invalid {label}: {value}. Must be one of: {choices}")
