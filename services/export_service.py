"""
Delimited and spreadsheet export service
Serializes flat rows to CSV (UTF-8 with BOM) or XLSX payloads
"""

import csv
import io
from io import BytesIO

import openpyxl
from openpyxl.styles import Font, PatternFill, Alignment
from openpyxl.utils import get_column_letter

from services.report_types import (
    CSV_CONTENT_TYPE,
    XLSX_CONTENT_TYPE,
    ExportPayload,
    ReportGenerationError,
    as_aggregate_row,
    display_value,
)
from utils.logger import get_logger

logger = get_logger(__name__)

BOM = '\ufeff'
INVALID_SHEET_CHARS = '[]:*?/\\'

class ExportService:
    """Service for exporting flat rows to downloadable files"""

    @staticmethod
    def collect_fieldnames(rows):
        """Union of row keys, in the order they are first encountered"""
        fieldnames = []
        seen = set()
        for row in rows:
            for key in row:
                if key not in seen:
                    seen.add(key)
                    fieldnames.append(key)
        return fieldnames

    # ------------------------------ CSV ------------------------------
    @staticmethod
    def to_csv_text(rows):
        """Serialize rows to CSV text with a header line; '' for no rows."""
        rows = list(rows)
        if not rows:
            return ''
        output = io.StringIO()
        writer = csv.DictWriter(
            output,
            fieldnames=ExportService.collect_fieldnames(rows),
            restval='',
            lineterminator='\r\n',
        )
        writer.writeheader()
        writer.writerows(rows)
        return output.getvalue()

    @staticmethod
    def build_csv_payload(rows, filename):
        """Build the BOM-prefixed CSV payload for ``<filename>.csv``"""
        try:
            text = ExportService.to_csv_text(rows)
        except csv.Error as e:
            logger.error("CSV export %s failed: %s", filename, e, exc_info=True)
            raise ReportGenerationError(f"Could not write CSV file: {e}") from e
        return ExportPayload(
            content=(BOM + text).encode('utf-8'),
            filename=f'{filename}.csv',
            content_type=CSV_CONTENT_TYPE,
        )

    @staticmethod
    def download_csv(rows, filename, sink):
        """Serialize rows and hand the CSV file to the sink"""
        payload = ExportService.build_csv_payload(rows, filename)
        sink.accept(payload)
        logger.info("CSV export %s: %d bytes", payload.filename, payload.size)
        return payload

    # ------------------------------ XLSX ------------------------------
    @staticmethod
    def create_workbook():
        """Create a new workbook with default styling"""
        return openpyxl.Workbook()

    @staticmethod
    def style_header_row(ws, row_num, columns):
        """Apply styling to header row"""
        header_font = Font(bold=True, color="FFFFFF")
        header_fill = PatternFill(start_color="000000", end_color="000000", fill_type="solid")
        header_alignment = Alignment(horizontal="center", vertical="center")

        for col_num, header in enumerate(columns, 1):
            cell = ws.cell(row=row_num, column=col_num, value=header)
            cell.font = header_font
            cell.fill = header_fill
            cell.alignment = header_alignment

    @staticmethod
    def auto_adjust_columns(ws):
        """Auto-adjust column widths"""
        for column in ws.columns:
            column_letter = get_column_letter(column[0].column)
            max_length = max((len(str(cell.value)) for cell in column if cell.value is not None), default=0)
            ws.column_dimensions[column_letter].width = min(max_length + 2, 50)

    @staticmethod
    def workbook_to_bytes(workbook):
        """Convert workbook to bytes for download"""
        output = BytesIO()
        workbook.save(output)
        return output.getvalue()

    @staticmethod
    def _sheet_title(title):
        cleaned = ''.join('_' if ch in INVALID_SHEET_CHARS else ch for ch in (title or 'Report'))
        return cleaned[:31] or 'Report'

    @staticmethod
    def build_xlsx_payload(rows, filename, sheet_title='Report'):
        """Build a single-sheet workbook for ``<filename>.xlsx``"""
        rows = list(rows)
        try:
            wb = ExportService.create_workbook()
            ws = wb.active
            ws.title = ExportService._sheet_title(sheet_title)

            fieldnames = ExportService.collect_fieldnames(rows)
            if fieldnames:
                ExportService.style_header_row(ws, 1, fieldnames)
            for row_num, row in enumerate(rows, 2):
                for col_num, key in enumerate(fieldnames, 1):
                    ws.cell(row=row_num, column=col_num, value=row.get(key, ''))

            ExportService.auto_adjust_columns(ws)
            content = ExportService.workbook_to_bytes(wb)
        except Exception as e:
            logger.error("XLSX export %s failed: %s", filename, e, exc_info=True)
            raise ReportGenerationError(f"Could not write Excel file: {e}") from e

        return ExportPayload(
            content=content,
            filename=f'{filename}.xlsx',
            content_type=XLSX_CONTENT_TYPE,
        )

    @staticmethod
    def download_xlsx(rows, filename, sink, sheet_title='Report'):
        payload = ExportService.build_xlsx_payload(rows, filename, sheet_title)
        sink.accept(payload)
        logger.info("XLSX export %s: %d bytes", payload.filename, payload.size)
        return payload

    # --------------------------- Row builders ---------------------------
    @staticmethod
    def student_rows(records):
        """Flat export rows for a list of Records, '-' for missing contacts"""
        return [{
            'student_id': record.student_id,
            'first_name': record.first_name,
            'last_name': record.last_name,
            'class': record.class_name,
            'phone': display_value(record.phone),
            'email': display_value(record.email),
        } for record in records]

    @staticmethod
    def class_stats_rows(aggregate_rows):
        """Flat export rows for per-class counts"""
        return [{
            'ชั้นเรียน': row.label,
            'จำนวนนักเรียน': row.count,
        } for row in map(as_aggregate_row, aggregate_rows)]
