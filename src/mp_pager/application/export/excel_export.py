"""Application export – ExcelExporter (requires the ``xlsx`` extra)."""
from __future__ import annotations

import io
from typing import Any

from mp_pager.application.export.request import ExportRequest

__all__ = ["ExcelExporter"]


def _require_openpyxl() -> Any:
    try:
        import openpyxl  # noqa: PLC0415
        return openpyxl
    except ImportError as exc:
        raise ImportError(
            "openpyxl is required for Excel export. "
            "Install it with: pip install 'mp-pager[xlsx]'"
        ) from exc


class ExcelExporter:
    """Exports rows to an .xlsx workbook using ``openpyxl``."""

    def export(self, request: ExportRequest) -> bytes:
        openpyxl = _require_openpyxl()
        from openpyxl.styles import Font  # noqa: PLC0415

        wb = openpyxl.Workbook()
        ws = wb.active
        ws.title = request.filename[:31]  # sheet name limit

        for col_idx, col_def in enumerate(request.columns, start=1):
            cell = ws.cell(row=1, column=col_idx, value=col_def.header)
            cell.font = Font(bold=True)

        for row_idx, row in enumerate(request.rows, start=2):
            for col_idx, col_def in enumerate(request.columns, start=1):
                ws.cell(row=row_idx, column=col_idx, value=row.get(col_def.key))

        for col_cells in ws.columns:
            max_len = max(len(str(cell.value or "")) for cell in col_cells)
            ws.column_dimensions[col_cells[0].column_letter].width = min(max_len + 2, 50)

        buf = io.BytesIO()
        wb.save(buf)
        return buf.getvalue()
