"""
Student service for the Student Records admin dashboard
Listing, search, CRUD and class aggregation for student records
"""

from collections import Counter

from database import db, DatabaseError
from models.student import Student
from services.report_types import AggregateRow
from utils.db_helpers import safe_add_and_commit, safe_delete_and_commit, safe_update_and_commit, paginate_query
from utils.logger import get_logger
from utils.validators import normalize_student_data, validate_student_data

logger = get_logger(__name__)

ALL_CLASSES = 'all'

class StudentService:
    """Student service class"""

    @staticmethod
    def _filtered_query(search_query='', selected_class=None):
        query = Student.query

        if selected_class and selected_class != ALL_CLASSES:
            query = query.filter(Student.class_name == selected_class)

        search_query = (search_query or '').strip()
        if search_query:
            query = query.filter(
                db.or_(
                    Student.student_id.icontains(search_query, autoescape=True),
                    Student.first_name.icontains(search_query, autoescape=True),
                    Student.last_name.icontains(search_query, autoescape=True)
                )
            )

        return query.order_by(Student.created_at.desc(), Student.student_id.asc())

    @staticmethod
    def get_students(search_query='', selected_class=None):
        """All students matching the search text and class filter, newest first"""
        return StudentService._filtered_query(search_query, selected_class).all()

    @staticmethod
    def get_students_paginated(page=1, search_query='', selected_class=None, per_page=20):
        """One page of the filtered student list"""
        try:
            query = StudentService._filtered_query(search_query, selected_class)
            pagination = paginate_query(query, page=page, per_page=per_page)
            return {'students': pagination.items, 'pagination': pagination}
        except Exception as e:
            logger.error("Error loading students page %s: %s", page, e)
            return {'students': [], 'pagination': None}

    @staticmethod
    def get_available_classes():
        """Distinct class names, sorted"""
        rows = db.session.query(Student.class_name).distinct().all()
        return sorted(row[0] for row in rows if row[0])

    @staticmethod
    def get_student_by_id(student_pk):
        return db.session.get(Student, student_pk)

    @staticmethod
    def create_student(student_data):
        """Add a single student. Returns (success, message, field_errors)"""
        data = normalize_student_data(student_data)
        is_valid, errors = validate_student_data(data)
        if not is_valid:
            return False, "Please correct the highlighted fields", errors

        if Student.query.filter_by(student_id=data['student_id']).first():
            return False, "Student ID already exists", {'student_id': "Student ID already exists"}

        student = Student(
            student_id=data['student_id'],
            first_name=data['first_name'],
            last_name=data['last_name'],
            class_name=data['class'],
            phone=data['phone'],
            email=data['email']
        )

        try:
            success, message = safe_add_and_commit(student)
        except DatabaseError as e:
            logger.error("Error adding student %s: %s", data['student_id'], e)
            return False, f"Error adding student: {str(e)}", {}

        if success:
            logger.info("Student %s created", student.student_id)
            return True, "Student added successfully", {}
        return False, message, {}

    @staticmethod
    def update_student(student_pk, student_data):
        """Update an existing student. Returns (success, message, field_errors)"""
        student = db.session.get(Student, student_pk)
        if not student:
            return False, "Student not found", {}

        data = normalize_student_data(student_data)
        is_valid, errors = validate_student_data(data)
        if not is_valid:
            return False, "Please correct the highlighted fields", errors

        duplicate = Student.query.filter(
            Student.student_id == data['student_id'],
            Student.id != student.id
        ).first()
        if duplicate:
            return False, "Student ID already exists", {'student_id': "Student ID already exists"}

        student.student_id = data['student_id']
        student.first_name = data['first_name']
        student.last_name = data['last_name']
        student.class_name = data['class']
        student.phone = data['phone']
        student.email = data['email']

        try:
            success, message = safe_update_and_commit()
        except DatabaseError as e:
            logger.error("Error updating student %s: %s", student_pk, e)
            return False, f"Error updating student: {str(e)}", {}

        if success:
            logger.info("Student %s updated", student.student_id)
            return True, "Student updated successfully", {}
        return False, message, {}

    @staticmethod
    def delete_student(student_pk):
        """Hard-delete a student. Returns (success, message)"""
        student = db.session.get(Student, student_pk)
        if not student:
            return False, "Student not found"

        try:
            safe_delete_and_commit(student)
        except DatabaseError as e:
            logger.error("Error deleting student %s: %s", student_pk, e)
            return False, f"Error deleting student: {str(e)}"

        logger.info("Student %s deleted", student.student_id)
        return True, "Student deleted successfully"

    @staticmethod
    def build_class_stats(students):
        """Count students per class; labels read 'ชั้น <class>', sorted by label"""
        counts = Counter(student.class_name for student in students)
        stats = [AggregateRow(label=f"ชั้น {class_name}", count=count) for class_name, count in counts.items()]
        return sorted(stats, key=lambda row: row.label)

    @staticmethod
    def get_class_overview():
        """Class names with their student counts, for the classes page"""
        rows = (
            db.session.query(Student.class_name, db.func.count(Student.id))
            .group_by(Student.class_name)
            .order_by(Student.class_name)
            .all()
        )
        return [{'name': name, 'student_count': count} for name, count in rows]

    @staticmethod
    def get_dashboard_stats():
        """Overview numbers for the dashboard landing page"""
        try:
            classes = StudentService.get_class_overview()
            recent_students = (
                Student.query
                .order_by(Student.created_at.desc(), Student.student_id.asc())
                .limit(5)
                .all()
            )
            return {
                'total_students': Student.query.count(),
                'total_classes': len(classes),
                'classes': classes,
                'recent_students': recent_students
            }
        except Exception as e:
            logger.error("Error loading dashboard stats: %s", e)
            return {}
