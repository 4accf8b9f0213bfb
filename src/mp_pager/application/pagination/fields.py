"""Application pagination – Field, ComputedSort, SortDirection."""
from __future__ import annotations

import dataclasses
from enum import Enum
from typing import Union

from mp_pager.kernel.errors import ValidationError


@dataclasses.dataclass(frozen=True, slots=True)
class Field:
    """A column reference, qualified as ``<table>.<column>`` once stored."""

    name: str

    @property
    def is_qualified(self) -> bool:
        return "." in self.name

    def qualified(self, table: str) -> "Field":
        if self.is_qualified:
            return self
        return Field(f"{table}.{self.name}")

    def __str__(self) -> str:
        return self.name


@dataclasses.dataclass(frozen=True, slots=True)
class ComputedSort:
    """Opaque sort key interpreted by the data source (never qualified)."""

    token: str

    def __str__(self) -> str:
        return self.token


SortKey = Union[Field, ComputedSort]


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    @property
    def toggled(self) -> "SortDirection":
        return SortDirection.DESC if self is SortDirection.ASC else SortDirection.ASC

    @classmethod
    def parse(cls, value: "str | SortDirection") -> "SortDirection":
        if isinstance(value, SortDirection):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValidationError(
                f"Invalid sort direction {value!r}",
                errors=[{"field": "direction", "value": value}],
            ) from None


def qualify(name: str, table: str) -> str:
    """Prefix *name* with *table* unless it already carries a qualifier."""
    if "." in name:
        return name
    return f"{table}.{name}"


__all__ = ["ComputedSort", "Field", "SortDirection", "SortKey", "qualify"]
