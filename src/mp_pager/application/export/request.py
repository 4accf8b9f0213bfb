"""Application export – ExportRequest and ColumnDef."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Literal, Mapping

__all__ = ["ColumnDef", "ExportFormat", "ExportRequest"]

ExportFormat = Literal["csv", "xlsx", "json"]


@dataclass(frozen=True)
class ColumnDef:
    """Defines a single column in an export."""

    key: str          # attribute path read from each row, e.g. "customer.name"
    header: str       # column header text
    format: str = ""  # optional format hint, e.g. "date", "currency"

    @classmethod
    def of(cls, column: "str | ColumnDef") -> "ColumnDef":
        if isinstance(column, ColumnDef):
            return column
        return cls(key=column, header=column)


@dataclass
class ExportRequest:
    """Describes a data export to be performed."""

    columns: list[ColumnDef]
    rows: Iterable[Mapping[str, Any]]
    format: ExportFormat = "csv"
    filename: str = "export"
