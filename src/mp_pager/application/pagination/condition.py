"""Application pagination – Condition, SearchCondition, Join."""
from __future__ import annotations

import dataclasses
from collections import Counter
from typing import Any, Iterable, Union

from mp_pager.config.validation import PagerConfigurationError

Scalar = Union[str, int, float, bool, None]

_SCALAR_TYPES = (str, int, float, bool, type(None))


@dataclasses.dataclass(frozen=True, eq=False)
class Condition:
    """A single filter predicate on one field.

    ``value`` is a scalar, or a tuple for multi-value operators such as
    ``IN``.  Multi-value conditions compare equal regardless of value order.
    """

    field: str
    operator: str
    value: Scalar | tuple[Scalar, ...]

    def __post_init__(self) -> None:
        if isinstance(self.value, list):
            object.__setattr__(self, "value", tuple(self.value))
        if not self.field:
            raise PagerConfigurationError("Condition requires a field name")
        if not self.operator:
            raise PagerConfigurationError(f"Condition on {self.field!r} requires an operator")
        for item in self.values:
            if not isinstance(item, _SCALAR_TYPES):
                raise PagerConfigurationError(
                    f"Unsupported value {item!r} for condition on {self.field!r}",
                    detail={"field": self.field, "type": type(item).__name__},
                )

    @classmethod
    def of(cls, field: str, *args: Any) -> "Condition":
        """Build from a variadic argument list.

        ``of("age", 18)`` is ``age = 18``; ``of("id", "IN", 1, 2, 3)`` keeps
        everything after the operator as the value list.
        """
        if not args:
            raise PagerConfigurationError(f"Condition on {field!r} needs at least one value")
        if len(args) == 1:
            return cls(field, "=", args[0])
        return cls(field, str(args[0]), tuple(args[1:]))

    @property
    def is_multi(self) -> bool:
        return isinstance(self.value, tuple)

    @property
    def values(self) -> tuple[Scalar, ...]:
        if isinstance(self.value, tuple):
            return self.value
        return (self.value,)

    def with_field(self, field: str) -> "Condition":
        return dataclasses.replace(self, field=field)

    def equals(self, other: object) -> bool:
        if not isinstance(other, Condition):
            return False
        if self.field != other.field or self.operator != other.operator:
            return False
        if self.is_multi != other.is_multi:
            return False
        if self.is_multi:
            return Counter(self.values) == Counter(other.values)
        return self.value == other.value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Condition):
            return NotImplemented
        return self.equals(other)

    def __hash__(self) -> int:
        return hash((self.field, self.operator, frozenset(self.values)))


@dataclasses.dataclass(frozen=True)
class SearchCondition:
    """Free-text search over a list of (qualified) fields."""

    query: str
    fields: tuple[str, ...] = ()


@dataclasses.dataclass
class Join:
    """Relation to an auxiliary table used for filtering or sorting."""

    remote_table: str
    remote_key: str
    local_field: str
    conditions: list[Condition] = dataclasses.field(default_factory=list)

    def add_condition(self, condition: Condition) -> None:
        self.conditions.append(condition)

    def add_conditions(self, conditions: Condition | Iterable[Condition] | None) -> None:
        if conditions is None:
            return
        if isinstance(conditions, Condition):
            self.add_condition(conditions)
            return
        for condition in conditions:
            self.add_condition(condition)


__all__ = ["Condition", "Join", "Scalar", "SearchCondition"]
