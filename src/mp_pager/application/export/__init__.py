"""Application export – turn pager rows into downloadable files."""
from mp_pager.application.export.request import ColumnDef, ExportFormat, ExportRequest
from mp_pager.application.export.csv_export import CsvExporter
from mp_pager.application.export.export_service import ExportService

__all__ = [
    "ColumnDef",
    "CsvExporter",
    "ExportFormat",
    "ExportRequest",
    "ExportService",
]
