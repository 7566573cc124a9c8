"""
Unit tests for CSV and Excel exports
"""

import csv
import io
import unittest

import openpyxl

from services.export_service import BOM, ExportService
from services.file_sink import MemoryFileSink
from services.report_types import AggregateRow, Record, ReportGenerationError

class TestCsvExport(unittest.TestCase):

    def setUp(self):
        self.sink = MemoryFileSink()

    def _decode(self, payload):
        text = payload.content.decode('utf-8')
        self.assertTrue(text.startswith(BOM))
        return text[len(BOM):]

    def test_csv_payload_has_bom_and_header(self):
        rows = [
            {'student_id': 'S001', 'first_name': 'สมชาย', 'class': 'ม.1/1'},
            {'student_id': 'S002', 'first_name': 'มาลี', 'class': 'ม.1/2'},
        ]
        payload = ExportService.download_csv(rows, 'students', self.sink)

        self.assertIs(self.sink.last, payload)
        self.assertEqual(payload.filename, 'students.csv')
        self.assertEqual(payload.content_type, 'text/csv; charset=utf-8')
        self.assertTrue(payload.content.startswith(b'\xef\xbb\xbf'))

        parsed = list(csv.DictReader(io.StringIO(self._decode(payload))))
        self.assertEqual(parsed, rows)

    def test_csv_quotes_delimiters_and_newlines(self):
        rows = [{'name': 'Smith, John', 'note': 'says "hi"\nbye'}]
        payload = ExportService.download_csv(rows, 'quoted', self.sink)

        text = self._decode(payload)
        self.assertIn('"Smith, John"', text)
        self.assertIn('"says ""hi""\nbye"', text)
        self.assertEqual(list(csv.DictReader(io.StringIO(text))), rows)

    def test_csv_header_is_union_of_keys(self):
        rows = [{'a': '1'}, {'b': '2', 'a': '3'}]
        text = self._decode(ExportService.download_csv(rows, 'union', self.sink))
        lines = text.split('\r\n')
        self.assertEqual(lines[0], 'a,b')
        self.assertEqual(lines[1], '1,')
        self.assertEqual(lines[2], '3,2')

    def test_csv_empty_rows(self):
        payload = ExportService.download_csv([], 'empty', self.sink)
        self.assertEqual(payload.content, BOM.encode('utf-8'))
        self.assertEqual(payload.filename, 'empty.csv')
        self.assertEqual(len(self.sink.payloads), 1)

    def test_csv_keeps_thai_text(self):
        rows = ExportService.class_stats_rows([AggregateRow('ชั้น ม.1/1', 3)])
        text = self._decode(ExportService.download_csv(rows, 'stats', self.sink))
        self.assertEqual(text, 'ชั้นเรียน,จำนวนนักเรียน\r\nชั้น ม.1/1,3\r\n')

class TestRowBuilders(unittest.TestCase):

    def test_student_rows_use_placeholder(self):
        rows = ExportService.student_rows([
            Record('S001', 'สมชาย', 'ใจดี', 'ม.1/1', phone=None, email='a@b.co'),
            Record('S002', 'มาลี', 'บุญมา', 'ม.1/2', phone='  ', email=None),
        ])
        self.assertEqual(list(rows[0]), ['student_id', 'first_name', 'last_name', 'class', 'phone', 'email'])
        self.assertEqual(rows[0]['phone'], '-')
        self.assertEqual(rows[0]['email'], 'a@b.co')
        self.assertEqual(rows[1]['phone'], '-')
        self.assertEqual(rows[1]['email'], '-')

    def test_class_stats_rows_accept_mappings(self):
        rows = ExportService.class_stats_rows([
            {'name': 'ม.1/1', 'studentCount': 4},
            {'label': 'ม.1/2', 'count': 2},
        ])
        self.assertEqual(rows, [
            {'ชั้นเรียน': 'ม.1/1', 'จำนวนนักเรียน': 4},
            {'ชั้นเรียน': 'ม.1/2', 'จำนวนนักเรียน': 2},
        ])

class TestXlsxExport(unittest.TestCase):

    def test_xlsx_payload(self):
        sink = MemoryFileSink()
        rows = [
            {'student_id': 'S001', 'class': 'ม.1/1'},
            {'student_id': 'S002', 'class': 'ม.1/2'},
        ]
        payload = ExportService.download_xlsx(rows, 'students', sink, sheet_title='Students')

        self.assertEqual(payload.filename, 'students.xlsx')
        self.assertEqual(payload.content_type,
                         'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet')

        wb = openpyxl.load_workbook(io.BytesIO(payload.content))
        ws = wb.active
        self.assertEqual(ws.title, 'Students')
        values = [list(r) for r in ws.iter_rows(values_only=True)]
        self.assertEqual(values, [['student_id', 'class'], ['S001', 'ม.1/1'], ['S002', 'ม.1/2']])
        self.assertTrue(ws['A1'].font.bold)

    def test_xlsx_sheet_title_sanitized(self):
        payload = ExportService.build_xlsx_payload([{'a': 1}], 'x', sheet_title='ม.1/1: [all]')
        ws = openpyxl.load_workbook(io.BytesIO(payload.content)).active
        self.assertEqual(ws.title, 'ม.1_1_ _all_')

    def test_xlsx_empty_rows(self):
        payload = ExportService.build_xlsx_payload([], 'empty')
        ws = openpyxl.load_workbook(io.BytesIO(payload.content)).active
        self.assertEqual(ws.max_row, 1)
        self.assertIsNone(ws['A1'].value)

class TestCsvFailure(unittest.TestCase):

    def test_unwritable_row_raises_and_delivers_nothing(self):
        class Exploding:
            def __str__(self):
                raise csv.Error('cannot render')

        sink = MemoryFileSink()
        with self.assertRaises(ReportGenerationError):
            ExportService.download_csv([{'a': Exploding()}], 'broken', sink)
        self.assertEqual(sink.payloads, [])

if __name__ == '__main__':
    unittest.main()
