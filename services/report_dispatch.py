"""
Report requests and their dispatch to the export generators
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from services.document_setup import DocumentSetup
from services.export_service import ExportService
from services.report_types import as_record
from services.reporting_service import ReportingService, make_clock
from services.student_service import StudentService
from utils.logger import get_logger

logger = get_logger(__name__)

ALL_STUDENTS_TITLE = "รายงานข้อมูลนักเรียนทั้งหมด"
ALL_STUDENTS_FILENAME = "all-students-report"
CLASS_STATISTICS_FILENAME = "class-statistics-report"

_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|\s]+')

def safe_filename_stem(text):
    """Replace path separators, reserved characters and whitespace with '-'"""
    return _UNSAFE_FILENAME_CHARS.sub('-', str(text)).strip('-.') or 'report'

class ReportKind(str, Enum):
    ALL_STUDENTS = 'all_students'
    CLASS_STATISTICS = 'class_statistics'
    CLASS_STUDENTS = 'class_students'

class ReportFormat(str, Enum):
    PDF = 'pdf'
    CSV = 'csv'
    XLSX = 'xlsx'

@dataclass(frozen=True)
class ReportRequest:
    """What the user asked for: a report kind, a file format and its parameters"""
    kind: ReportKind
    format: ReportFormat
    class_name: Optional[str] = None

    def __post_init__(self):
        if self.kind == ReportKind.CLASS_STUDENTS and not (self.class_name or '').strip():
            raise ValueError("A class must be selected for a class report")

    @classmethod
    def from_args(cls, args):
        """Parse ``kind``, ``format`` and ``class_name`` from request arguments"""
        raw_kind = (args.get('kind') or '').strip()
        raw_format = (args.get('format') or '').strip().lower()
        try:
            kind = ReportKind(raw_kind)
        except ValueError:
            raise ValueError(f"Unknown report type: {raw_kind or '(none)'}") from None
        try:
            file_format = ReportFormat(raw_format)
        except ValueError:
            raise ValueError(f"Unknown export format: {raw_format or '(none)'}") from None
        class_name = (args.get('class_name') or '').strip() or None
        return cls(kind=kind, format=file_format, class_name=class_name)

class ReportDispatcher:
    """Single entry point from the UI to the report generators"""

    def __init__(self, reporting_service=None):
        self.reporting_service = reporting_service or ReportingService()

    @classmethod
    def from_config(cls, config):
        return cls(ReportingService(
            document_setup=DocumentSetup.from_config(config),
            clock=make_clock(config.get('REPORT_TIMEZONE', 'Asia/Bangkok')),
        ))

    def dispatch(self, request, students, sink):
        """Generate the requested report from ``students`` and deliver it to ``sink``"""
        records = [as_record(s) for s in students]
        logger.info("Report requested: %s as %s (%d students)", request.kind.value, request.format.value, len(records))

        if request.kind == ReportKind.ALL_STUDENTS:
            return self._student_list(request.format, records, ALL_STUDENTS_TITLE, ALL_STUDENTS_FILENAME, sink)

        if request.kind == ReportKind.CLASS_STUDENTS:
            class_records = [r for r in records if r.class_name == request.class_name]
            title = f"รายงานข้อมูลนักเรียนชั้น {request.class_name}"
            filename = f"class-{safe_filename_stem(request.class_name)}-report"
            return self._student_list(request.format, class_records, title, filename, sink)

        if request.kind == ReportKind.CLASS_STATISTICS:
            stats = StudentService.build_class_stats(records)
            return self._class_statistics(request.format, stats, CLASS_STATISTICS_FILENAME, sink)

        raise ValueError(f"Unsupported report type: {request.kind}")

    def _student_list(self, file_format, records, title, filename, sink):
        if file_format == ReportFormat.PDF:
            return self.reporting_service.generate_student_list_pdf(records, title, filename, sink)
        rows = ExportService.student_rows(records)
        if file_format == ReportFormat.XLSX:
            return ExportService.download_xlsx(rows, filename, sink, sheet_title='Students')
        return ExportService.download_csv(rows, filename, sink)

    def _class_statistics(self, file_format, stats, filename, sink):
        if file_format == ReportFormat.PDF:
            return self.reporting_service.generate_class_stats_pdf(stats, filename, sink)
        rows = ExportService.class_stats_rows(stats)
        if file_format == ReportFormat.XLSX:
            return ExportService.download_xlsx(rows, filename, sink, sheet_title='Class statistics')
        return ExportService.download_csv(rows, filename, sink)
