"""
Reporting service for the Student Records admin dashboard
Builds the student list and class statistics PDF reports
"""

from datetime import datetime
from xml.sax.saxutils import escape as xml_escape
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from reportlab.lib import colors
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, Spacer, Table, TableStyle

from services.document_setup import DocumentSetup, LOGO_WIDTH
from services.report_types import (
    PDF_CONTENT_TYPE,
    ExportPayload,
    ReportGenerationError,
    as_aggregate_row,
    as_record,
    display_value,
)
from utils.logger import get_logger

logger = get_logger(__name__)

STUDENT_LIST_COLUMNS = ["รหัสนักเรียน", "ชื่อ", "นามสกุล", "ชั้นเรียน", "เบอร์โทร", "อีเมล"]
STUDENT_LIST_COL_FRACS = [0.14, 0.16, 0.18, 0.12, 0.16, 0.24]
CLASS_STATS_COLUMNS = ["ชื่อชั้นเรียน", "จำนวนนักเรียน (คน)"]
CLASS_STATS_COL_FRACS = [0.6, 0.4]
CLASS_STATS_TITLE = "รายงานสถิติจำนวนนักเรียน"

HEADER_FILL = colors.HexColor('#22C55E')
STRIPE_FILL = colors.HexColor('#F5F5F5')

DEFAULT_TIMEZONE = 'Asia/Bangkok'
# Thai locale dates count years in the Buddhist era
BUDDHIST_ERA_OFFSET = 543

def format_thai_datetime(value):
    """Format like a th-TH locale string, e.g. 19/10/2569 11:37:00"""
    return f"{value.day}/{value.month}/{value.year + BUDDHIST_ERA_OFFSET} {value:%H:%M:%S}"

def make_clock(timezone_name=DEFAULT_TIMEZONE):
    """Return a callable giving the current time in the report timezone"""
    try:
        tz = ZoneInfo(timezone_name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown report timezone %r, using server local time", timezone_name)
        return lambda: datetime.now().astimezone()
    return lambda: datetime.now(tz)

class ReportingService:
    """Generates PDF reports and delivers them to a FileSink"""

    def __init__(self, document_setup=None, clock=None):
        self.document_setup = document_setup or DocumentSetup()
        self.clock = clock or make_clock()

    # ------------------------- PDF Helper Utilities -------------------------
    @staticmethod
    def _get_text_styles(font_name):
        """Title, timestamp and summary line styles, kept clear of the logo."""
        styles = getSampleStyleSheet()
        title = ParagraphStyle(
            'ReportTitle',
            parent=styles['Normal'],
            fontName=font_name,
            fontSize=18,
            leading=22,
            rightIndent=LOGO_WIDTH + 6 * mm,
        )
        meta = ParagraphStyle(
            'ReportMeta',
            parent=styles['Normal'],
            fontName=font_name,
            fontSize=11,
            leading=14,
            rightIndent=LOGO_WIDTH + 6 * mm,
        )
        return title, meta

    @staticmethod
    def _get_paragraph_style(font_name):
        """Return a compact cell Paragraph style to enable auto word-wrap in table cells."""
        styles = getSampleStyleSheet()
        return ParagraphStyle(
            'Cell',
            parent=styles['Normal'],
            fontName=font_name,
            fontSize=9,
            leading=11,
            spaceAfter=0,
            spaceBefore=0,
        )

    @staticmethod
    def _get_header_paragraph_style(font_name):
        styles = getSampleStyleSheet()
        return ParagraphStyle(
            'HeaderCell',
            parent=styles['Normal'],
            fontName=font_name,
            fontSize=9,
            leading=11,
            textColor=colors.white,
            spaceAfter=0,
            spaceBefore=0,
        )

    @staticmethod
    def _to_paragraph(value, style):
        """Convert a cell value to a Paragraph so ReportLab wraps text within cell width."""
        text = xml_escape(str(value)).replace('\n', '<br/>')
        return Paragraph(text, style)

    @staticmethod
    def _wrap_table_data(rows, cell_style, header_style):
        """Map every cell to a Paragraph; the first row uses the header style"""
        if not rows:
            return rows
        wrapped = [[ReportingService._to_paragraph(c, header_style) for c in rows[0]]]
        for row in rows[1:]:
            wrapped.append([ReportingService._to_paragraph(c, cell_style) for c in row])
        return wrapped

    @staticmethod
    def _calc_colwidths_from_fracs(total_width, fracs):
        safe_fracs = fracs or []
        s = float(sum(safe_fracs)) or 1.0
        return [total_width * (f / s) for f in safe_fracs]

    @staticmethod
    def _build_table(rows, page_width, col_fracs, document, center_cols=None):
        """Build the standard report table.
        - rows: 2D list of strings with the header at index 0
        - the header repeats on every page the table spills onto
        """
        wrapped = ReportingService._wrap_table_data(
            rows,
            ReportingService._get_paragraph_style(document.font_name),
            ReportingService._get_header_paragraph_style(document.bold_font_name),
        )
        colwidths = ReportingService._calc_colwidths_from_fracs(page_width, col_fracs)
        tbl = Table(wrapped, repeatRows=1, colWidths=colwidths)
        base_style = [
            ('BOX', (0, 0), (-1, -1), 0.5, colors.grey),
            ('INNERGRID', (0, 0), (-1, -1), 0.25, colors.lightgrey),
            ('BACKGROUND', (0, 0), (-1, 0), HEADER_FILL),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
            ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, STRIPE_FILL]),
            ('LEFTPADDING', (0, 0), (-1, -1), 4),
            ('RIGHTPADDING', (0, 0), (-1, -1), 4),
            ('TOPPADDING', (0, 0), (-1, -1), 3),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 3),
        ]
        for col in sorted(center_cols or ()):
            base_style.append(('ALIGN', (col, 1), (col, -1), 'CENTER'))
        tbl.setStyle(TableStyle(base_style))
        return tbl

    def _header_block(self, document, title, extra_lines=()):
        title_style, meta_style = self._get_text_styles(document.font_name)
        generated_at = format_thai_datetime(self.clock())
        elements = [
            Paragraph(xml_escape(title), title_style),
            Spacer(1, 2),
            Paragraph(xml_escape(f"สร้างเมื่อ: {generated_at}"), meta_style),
        ]
        for line in extra_lines:
            elements.append(Paragraph(xml_escape(line), meta_style))
        elements.append(Spacer(1, 10 * mm))
        return elements

    def _render(self, document, story, filename, sink):
        """Serialize the document; the sink only sees a complete file."""
        try:
            pdf_bytes = document.build(story)
        except Exception as e:
            logger.error("PDF generation failed for %s: %s", filename, e, exc_info=True)
            raise ReportGenerationError(f"Could not generate PDF report: {e}") from e

        payload = ExportPayload(
            content=pdf_bytes,
            filename=f'{filename}.pdf',
            content_type=PDF_CONTENT_TYPE,
            page_count=document.page_count,
        )
        sink.accept(payload)
        logger.info("PDF report %s: %d pages, %d bytes", payload.filename, payload.page_count, payload.size)
        return payload

    # ------------------------- Student list report -------------------------
    @staticmethod
    def student_table_rows(records):
        """Header plus one row per record, in input order"""
        rows = [list(STUDENT_LIST_COLUMNS)]
        for item in records:
            record = as_record(item)
            rows.append([
                display_value(record.student_id),
                display_value(record.first_name),
                display_value(record.last_name),
                display_value(record.class_name),
                display_value(record.phone),
                display_value(record.email),
            ])
        return rows

    def generate_student_list_pdf(self, records, title, filename, sink):
        """Generate the student list PDF and hand ``<filename>.pdf`` to the sink."""
        document = self.document_setup.create(title=title)
        rows = self.student_table_rows(records)

        story = self._header_block(document, title)
        story.append(self._build_table(
            rows,
            document.available_width,
            STUDENT_LIST_COL_FRACS,
            document,
            center_cols={0, 3},
        ))
        logger.debug("Student list %s: %d rows", filename, len(rows) - 1)
        return self._render(document, story, filename, sink)

    # ------------------------ Class statistics report ------------------------
    @staticmethod
    def class_stats_summary(aggregate_rows):
        """Return (table rows with header, total); the total is always recomputed"""
        rows = [list(CLASS_STATS_COLUMNS)]
        total = 0
        for item in aggregate_rows:
            row = as_aggregate_row(item)
            rows.append([display_value(row.label), str(row.count)])
            total += row.count
        return rows, total

    @staticmethod
    def total_line(total):
        return f"จำนวนนักเรียนทั้งหมด: {total} คน"

    def generate_class_stats_pdf(self, aggregate_rows, filename, sink, declared_total=None):
        """Generate the per-class count PDF with its grand total.

        ``declared_total`` is accepted for callers that already summed the
        counts, but it is never displayed.
        """
        rows, total = self.class_stats_summary(aggregate_rows)
        if declared_total is not None and declared_total != total:
            logger.warning("Ignoring declared total %s for %s, counted %d", declared_total, filename, total)

        document = self.document_setup.create(title=CLASS_STATS_TITLE)
        story = self._header_block(document, CLASS_STATS_TITLE, extra_lines=[self.total_line(total)])
        story.append(self._build_table(
            rows,
            document.available_width,
            CLASS_STATS_COL_FRACS,
            document,
            center_cols={1},
        ))
        return self._render(document, story, filename, sink)
