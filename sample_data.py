#!/usr/bin/env python3
"""
Sample data generator for the Student Records admin dashboard
Creates a few classes of Thai students for demonstration
"""

from app import create_app
from models.student import Student
from services.student_service import StudentService

FIRST_NAMES = ['สมชาย', 'สมหญิง', 'วิชัย', 'มาลี', 'ประเสริฐ', 'กมลวรรณ', 'ธนากร', 'ศิริพร', 'อนุชา', 'พิมพ์ชนก']
LAST_NAMES = ['ใจดี', 'รักเรียน', 'ศรีสุข', 'บุญมา', 'ทองคำ', 'แสงทอง', 'วงศ์ไทย', 'มั่นคง', 'สุขสวัสดิ์', 'ปัญญาดี']
CLASSES = ['ม.1/1', 'ม.1/2', 'ม.2/1', 'ม.3/1']
STUDENTS_PER_CLASS = 8

def sample_students():
    """Yield form-shaped student data, some without contact details"""
    number = 1
    for class_index, class_name in enumerate(CLASSES):
        for i in range(STUDENTS_PER_CLASS):
            first = FIRST_NAMES[(i + class_index) % len(FIRST_NAMES)]
            last = LAST_NAMES[(i * 3 + class_index) % len(LAST_NAMES)]
            has_contact = i % 3 != 0
            yield {
                'student_id': f'S{66000 + number}',
                'first_name': first,
                'last_name': last,
                'class': class_name,
                'phone': f'08{number:08d}' if has_contact else '',
                'email': f'student{number}@school.ac.th' if has_contact else '',
            }
            number += 1

def create_sample_data():
    """Create sample data for the system"""
    app = create_app()

    with app.app_context():
        print("Creating sample students...")
        created = 0
        for data in sample_students():
            if Student.query.filter_by(student_id=data['student_id']).first():
                continue
            success, message, errors = StudentService.create_student(data)
            if success:
                created += 1
            else:
                print(f"✗ {data['student_id']}: {message} {errors}")

        print(f"✓ Created {created} students in {len(CLASSES)} classes")
        print(f"✓ Login with {app.config['DEFAULT_ADMIN_USERNAME']}/{app.config['DEFAULT_ADMIN_PASSWORD']}")

if __name__ == '__main__':
    create_sample_data()
