"""Application pagination – PagerState aggregate and its wire snapshot."""
from __future__ import annotations

import copy
import dataclasses
from typing import Any, Callable, Iterable, Union

from mp_pager.application.pagination.condition import Condition, Join, SearchCondition
from mp_pager.application.pagination.fields import (
    ComputedSort,
    Field,
    SortDirection,
    SortKey,
    qualify,
)
from mp_pager.config.validation import PagerConfigurationError
from mp_pager.kernel.errors import SortNotAllowedError, ValidationError

SEARCH_KEY = "%search%"

ConditionEntry = Union[list[Condition], SearchCondition]


@dataclasses.dataclass
class StateSnapshot:
    """The part of a :class:`PagerState` that travels inside a state token.

    ``sort_permissions`` and ``jump_to`` are deliberately absent: they are
    configured by the caller on every request and never read from a client.
    """

    classname: str
    conditions: dict[str, ConditionEntry] = dataclasses.field(default_factory=dict)
    page: int = 1
    sort: SortKey | None = None
    direction: SortDirection = SortDirection.ASC
    joins: list[Join] = dataclasses.field(default_factory=list)


class PagerState:
    """Filter, sort and page state of one logical pager for one request.

    Field names without a table qualifier are expanded to ``<table>.<field>``
    when they enter the state, so everything stored here is already
    normalised.
    """

    def __init__(
        self,
        identity: str,
        table: str,
        *,
        jump_to: bool = True,
        on_clear: Callable[[], None] | None = None,
    ) -> None:
        if not isinstance(identity, str) or not identity:
            raise PagerConfigurationError("You must provide a pager identity")
        if not isinstance(table, str) or not table:
            raise PagerConfigurationError(f"Pager {identity!r} has no table name")
        self.identity = identity
        self.table = table
        self.conditions: dict[str, ConditionEntry] = {}
        self.joins: list[Join] = []
        self.sort: SortKey | None = None
        self.direction = SortDirection.ASC
        self.page = 1
        self.all = False
        self.jump_to = jump_to
        self.sort_permissions: list[SortKey] = []
        self._on_clear = on_clear

    # ------------------------------------------------------------------
    # Normalisation
    # ------------------------------------------------------------------

    def expand_field_name(self, name: str) -> str:
        return qualify(name, self.table)

    def normalize_sort(self, value: str | SortKey) -> SortKey:
        if isinstance(value, ComputedSort):
            return value
        if isinstance(value, Field):
            return value.qualified(self.table)
        if isinstance(value, str) and value:
            return Field(self.expand_field_name(value))
        raise ValidationError(f"Invalid sort key {value!r}")

    def _build_condition(self, args: tuple[Any, ...]) -> Condition:
        if not args:
            raise PagerConfigurationError("A condition needs a field")
        first = args[0]
        if isinstance(first, Condition):
            if len(args) > 1:
                raise PagerConfigurationError("A Condition instance takes no extra arguments")
            return first.with_field(self.expand_field_name(first.field))
        return Condition.of(self.expand_field_name(first), *args[1:])

    # ------------------------------------------------------------------
    # Conditions
    # ------------------------------------------------------------------

    def add_condition(self, *args: Any) -> Condition:
        """Append a condition: ``(field, value)`` or ``(field, operator, *values)``.

        Duplicates are kept; they AND together for the same field.
        """
        condition = self._build_condition(args)
        entry = self.conditions.get(condition.field)
        if not isinstance(entry, list):
            entry = []
            self.conditions[condition.field] = entry
        entry.append(condition)
        return condition

    def has_condition(self, *args: Any) -> bool:
        condition = self._build_condition(args)
        entry = self.conditions.get(condition.field)
        if not isinstance(entry, list):
            return False
        return any(condition.equals(stored) for stored in entry)

    def clear_conditions(self) -> None:
        """Drop every condition, search included, and signal the sticky store."""
        self.conditions = {}
        if self._on_clear is not None:
            self._on_clear()

    def clear_condition(self, key: str) -> None:
        if key != SEARCH_KEY:
            key = self.expand_field_name(key)
        self.conditions.pop(key, None)

    def set_search(self, text: str, fields: Iterable[str] = ()) -> None:
        self.conditions[SEARCH_KEY] = SearchCondition(
            str(text), tuple(self.expand_field_name(f) for f in fields)
        )

    def get_search(self) -> str:
        entry = self.conditions.get(SEARCH_KEY)
        if isinstance(entry, SearchCondition):
            return entry.query
        return ""

    # ------------------------------------------------------------------
    # Joins
    # ------------------------------------------------------------------

    def add_join(
        self,
        remote_table: str,
        remote_key: str,
        local_field: str,
        extra_conditions: Condition | Iterable[Condition] | None = None,
    ) -> Join:
        join = Join(remote_table, remote_key, self.expand_field_name(local_field))
        join.add_conditions(extra_conditions)
        self.joins.append(join)
        return join

    # ------------------------------------------------------------------
    # Sorting & paging
    # ------------------------------------------------------------------

    def set_sort(self, value: str | SortKey) -> None:
        self.sort = self.normalize_sort(value)

    def add_sort_permission(self, value: str | SortKey) -> None:
        self.sort_permissions.append(self.normalize_sort(value))

    def is_sort_permitted(self, sort: SortKey) -> bool:
        return isinstance(sort, ComputedSort) or sort in self.sort_permissions

    def apply_default_sort(self) -> None:
        if self.sort is None and self.sort_permissions:
            self.sort = self.sort_permissions[0]

    def ensure_sort_permitted(self) -> None:
        if self.sort is not None and not self.is_sort_permitted(self.sort):
            raise SortNotAllowedError(str(self.sort))

    def set_direction(self, direction: str | SortDirection) -> None:
        self.direction = SortDirection.parse(direction)

    def set_page(self, page: int) -> None:
        if isinstance(page, bool) or not isinstance(page, int):
            raise ValidationError(
                f"Page must be an integer, got {type(page).__name__}",
                errors=[{"field": "page", "value": page}],
            )
        if page < 1:
            raise ValidationError("page must be >= 1", errors=[{"field": "page", "value": page}])
        self.page = page

    def set_jump_to(self, jump_to: bool) -> None:
        if not isinstance(jump_to, bool):
            raise ValidationError("jump_to must be a boolean")
        self.jump_to = jump_to

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def snapshot(self) -> StateSnapshot:
        return StateSnapshot(
            classname=self.identity,
            conditions=copy.deepcopy(self.conditions),
            page=self.page,
            sort=self.sort,
            direction=self.direction,
            joins=copy.deepcopy(self.joins),
        )

    def merge(self, snapshot: StateSnapshot, *, replace_conditions: bool = False) -> None:
        """Overlay a decoded snapshot on the caller-configured state.

        With *replace_conditions* the configured conditions are discarded
        first; otherwise the snapshot replaces them field by field.  Joins are
        replaced position by position, keeping any configured extras.
        """
        if replace_conditions:
            self.conditions = {}
        self.conditions.update(copy.deepcopy(snapshot.conditions))
        joins = copy.deepcopy(snapshot.joins)
        self.joins[: len(joins)] = joins
        self.page = snapshot.page
        self.sort = snapshot.sort
        self.direction = snapshot.direction

    @classmethod
    def from_snapshot(
        cls,
        snapshot: StateSnapshot,
        table: str,
        *,
        jump_to: bool = True,
        on_clear: Callable[[], None] | None = None,
    ) -> "PagerState":
        state = cls(snapshot.classname, table, jump_to=jump_to, on_clear=on_clear)
        state.merge(snapshot, replace_conditions=True)
        return state

    def __repr__(self) -> str:
        return (
            f"PagerState(identity={self.identity!r}, page={self.page}, "
            f"sort={self.sort!r}, direction={self.direction.value!r}, "
            f"conditions={len(self.conditions)}, joins={len(self.joins)})"
        )


__all__ = ["SEARCH_KEY", "ConditionEntry", "PagerState", "StateSnapshot"]
