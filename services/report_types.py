"""
Value types shared by the report and export generators
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional

PLACEHOLDER = '-'

PDF_CONTENT_TYPE = 'application/pdf'
CSV_CONTENT_TYPE = 'text/csv; charset=utf-8'
XLSX_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'

class ReportGenerationError(Exception):
    """Raised when a report could not be serialized; no file was delivered."""
    pass

def display_value(value: Any) -> str:
    """Render an optional field for tabular output, using '-' when absent."""
    if value is None:
        return PLACEHOLDER
    text = str(value)
    if not text.strip():
        return PLACEHOLDER
    return text

@dataclass(frozen=True)
class Record:
    """One student's flat row as seen by the reporting code."""
    student_id: str
    first_name: str
    last_name: str
    class_name: str
    phone: Optional[str] = None
    email: Optional[str] = None

    @classmethod
    def from_student(cls, student) -> 'Record':
        return cls(
            student_id=student.student_id,
            first_name=student.first_name,
            last_name=student.last_name,
            class_name=student.class_name,
            phone=student.phone,
            email=student.email,
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> 'Record':
        """Build from a dict using either the 'class' or 'class_name' key."""
        class_name = data.get('class_name', data.get('class'))
        return cls(
            student_id=str(data.get('student_id', '')),
            first_name=str(data.get('first_name', '')),
            last_name=str(data.get('last_name', '')),
            class_name='' if class_name is None else str(class_name),
            phone=data.get('phone'),
            email=data.get('email'),
        )

def as_record(item) -> Record:
    """Accept a Record, a Student model or a plain mapping."""
    if isinstance(item, Record):
        return item
    if isinstance(item, Mapping):
        return Record.from_mapping(item)
    return Record.from_student(item)

@dataclass(frozen=True)
class AggregateRow:
    """A category label with its record count."""
    label: str
    count: int

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> 'AggregateRow':
        """Build from {'label', 'count'} or the dashboard's {'name', 'studentCount'}."""
        label = data.get('label', data.get('name'))
        count = data.get('count', data.get('studentCount', 0))
        return cls(label='' if label is None else str(label), count=int(count or 0))

def as_aggregate_row(item) -> AggregateRow:
    """Accept an AggregateRow or a plain mapping."""
    if isinstance(item, AggregateRow):
        return item
    if isinstance(item, Mapping):
        return AggregateRow.from_mapping(item)
    return AggregateRow(label=str(item.label), count=int(item.count))

@dataclass(frozen=True)
class ExportPayload:
    """Finished file content, handed over to a FileSink."""
    content: bytes
    filename: str
    content_type: str
    page_count: Optional[int] = None

    @property
    def size(self) -> int:
        return len(self.content)
