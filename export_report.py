#!/usr/bin/env python3
"""
Command line report export for the Student Records admin dashboard
Writes the same files the Reports page offers for download
"""

import argparse
import sys

from app import create_app
from services.file_sink import FileSystemSink
from services.report_dispatch import ReportFormat, ReportKind, ReportRequest
from services.report_types import ReportGenerationError
from services.student_service import StudentService

def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Export a student report to a file")
    parser.add_argument('--kind', required=True, choices=[k.value for k in ReportKind])
    parser.add_argument('--format', default=ReportFormat.PDF.value, choices=[f.value for f in ReportFormat])
    parser.add_argument('--class-name', dest='class_name', help="class for the class_students report")
    parser.add_argument('--out', default='.', help="output directory (default: current directory)")
    return parser.parse_args(argv)

def main(argv=None):
    args = parse_args(argv)
    app = create_app()

    try:
        request = ReportRequest.from_args(vars(args))
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    with app.app_context():
        dispatcher = app.extensions['report_dispatcher']
        sink = FileSystemSink(args.out)
        try:
            dispatcher.dispatch(request, StudentService.get_students(), sink)
        except ReportGenerationError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    for path in sink.written:
        print(f"✓ Wrote {path}")
    return 0

if __name__ == '__main__':
    sys.exit(main())
