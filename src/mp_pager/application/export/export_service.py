"""Application export – ExportService dispatches to correct exporter."""
from __future__ import annotations

import json
import time

from mp_pager.application.export.csv_export import CsvExporter
from mp_pager.application.export.request import ExportRequest
from mp_pager.observability.logging import get_logger

__all__ = ["ExportService"]

_log = get_logger(__name__)


class ExportService:
    """Dispatches an ExportRequest to the appropriate exporter."""

    def __init__(self, *, delimiter: str = ";", bom: bool = False) -> None:
        self._csv_exporter = CsvExporter(delimiter=delimiter, bom=bom)

    def export(self, request: ExportRequest) -> bytes:
        start = time.monotonic()
        result: bytes

        if request.format == "csv":
            result = self._csv_exporter.export(request)

        elif request.format == "xlsx":
            # Import lazily so missing openpyxl only fails at call time
            from mp_pager.application.export.excel_export import ExcelExporter  # noqa: PLC0415
            result = ExcelExporter().export(request)

        elif request.format == "json":
            result = self._export_json(request)

        else:
            raise ValueError(f"Unsupported export format: {request.format!r}")

        _log.debug(
            "export.completed",
            filename=request.filename,
            format=request.format,
            size=len(result),
            duration_ms=round((time.monotonic() - start) * 1000, 3),
        )
        return result

    @staticmethod
    def _export_json(request: ExportRequest) -> bytes:
        rows = [{col.key: row.get(col.key) for col in request.columns} for row in request.rows]
        return json.dumps(rows, default=str, ensure_ascii=False).encode("utf-8")
