"""Application pagination – DataSource port."""
from __future__ import annotations

from typing import Any, Mapping, Protocol, Sequence, runtime_checkable

from mp_pager.application.pagination.condition import Join
from mp_pager.application.pagination.fields import SortDirection, SortKey
from mp_pager.application.pagination.state import ConditionEntry


@runtime_checkable
class DataSource(Protocol):
    """Port: executes the queries a pager describes.

    ``identity`` names the pager (and keys its tokens and session slots);
    ``table`` qualifies bare field names.  Conditions and joins are handed
    over as-is; translating them into a query is the source's business.
    ``get_paged`` returns a single page, or every row when ``all`` is true.
    """

    identity: str
    table: str

    def get_paged(
        self,
        sort: SortKey | None,
        direction: SortDirection,
        page: int,
        conditions: Mapping[str, ConditionEntry],
        all: bool,  # noqa: A002
        joins: Sequence[Join],
    ) -> Sequence[Any]: ...

    def count(self, conditions: Mapping[str, ConditionEntry], joins: Sequence[Join]) -> int: ...

    def sum(
        self,
        field: str,
        conditions: Mapping[str, ConditionEntry],
        joins: Sequence[Join],
    ) -> Any: ...


__all__ = ["DataSource"]
