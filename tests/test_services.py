"""
Unit tests for service classes
"""

import unittest
from datetime import datetime, timedelta
from app import create_app
from config import TestConfig
from database import db
from services.auth_service import AuthService, SessionManager
from services.report_types import AggregateRow, Record
from services.student_service import StudentService
from models.user import AdminUser
from models.student import Student

def student_form(student_id='S001', first_name='สมชาย', last_name='ใจดี', class_name='ม.1/1',
                 phone='0812345678', email='somchai@school.ac.th'):
    return {
        'student_id': student_id,
        'first_name': first_name,
        'last_name': last_name,
        'class': class_name,
        'phone': phone,
        'email': email,
    }

class TestServices(unittest.TestCase):

    def setUp(self):
        """Set up test fixtures"""
        self.app = create_app(TestConfig)
        self.app_context = self.app.app_context()
        self.app_context.push()

    def tearDown(self):
        """Clean up after tests"""
        db.session.remove()
        db.drop_all()
        self.app_context.pop()

    def _add_students(self):
        """Three students with distinct creation times, oldest first"""
        base = datetime(2024, 5, 1, 8, 0, 0)
        rows = [
            ('S001', 'Somchai', 'Jaidee', 'ม.1/1', base),
            ('S002', 'Malee', 'Boonma', 'ม.1/2', base + timedelta(minutes=1)),
            ('S003', 'Wichai', 'Srisuk', 'ม.1/1', base + timedelta(minutes=2)),
        ]
        for student_id, first, last, class_name, created in rows:
            db.session.add(Student(student_id=student_id, first_name=first, last_name=last,
                                   class_name=class_name, created_at=created))
        db.session.commit()

    # ------------------------------ Auth ------------------------------
    def test_auth_service_admin_auth(self):
        """Test admin authentication"""
        user = AdminUser(username='registrar')
        user.set_password('password123')
        db.session.add(user)
        db.session.commit()

        # Test successful authentication
        success, user, message = AuthService.authenticate_admin('registrar', 'password123')
        self.assertTrue(success)
        self.assertEqual(user.username, 'registrar')
        self.assertIsNotNone(user.last_login)

        # Usernames are matched case-insensitively
        success, user, message = AuthService.authenticate_admin('Registrar', 'password123')
        self.assertTrue(success)

        # Test failed authentication
        success, user, message = AuthService.authenticate_admin('registrar', 'wrongpassword')
        self.assertFalse(success)
        self.assertIsNone(user)
        self.assertEqual(message, 'Invalid username or password')

    def test_auth_rejects_inactive_admin(self):
        user = AdminUser(username='retired', is_active=False)
        user.set_password('password123')
        db.session.add(user)
        db.session.commit()

        success, user, message = AuthService.authenticate_admin('retired', 'password123')
        self.assertFalse(success)

    def test_change_password(self):
        user = AdminUser(username='registrar')
        user.set_password('password123')
        db.session.add(user)
        db.session.commit()

        success, message = AuthService.change_password(user.id, 'wrongpassword', 'newpass456')
        self.assertFalse(success)
        self.assertEqual(message, 'Current password is incorrect')

        success, message = AuthService.change_password(user.id, 'password123', 'newpass456')
        self.assertTrue(success)
        self.assertEqual(message, 'Password changed successfully')
        self.assertFalse(AuthService.authenticate_admin('registrar', 'password123')[0])
        self.assertTrue(AuthService.authenticate_admin('registrar', 'newpass456')[0])

    def test_change_password_missing_user(self):
        success, message = AuthService.change_password(9999, 'password123', 'newpass456')
        self.assertFalse(success)
        self.assertEqual(message, 'User not found')

    def test_session_manager(self):
        session = {}
        self.assertFalse(SessionManager.is_authenticated(session))
        self.assertIsNone(SessionManager.get_session_info(session))

        # A plain dict has no permanent flag, use a dict subclass
        class FakeSession(dict):
            permanent = False

        session = FakeSession()
        SessionManager.create_session(session, 1, 'admin')
        self.assertTrue(SessionManager.is_authenticated(session))
        self.assertTrue(session.permanent)
        self.assertEqual(SessionManager.get_session_info(session)['username'], 'admin')

        SessionManager.clear_session(session)
        self.assertFalse(SessionManager.is_authenticated(session))

    # ----------------------------- Students -----------------------------
    def test_create_student(self):
        success, message, errors = StudentService.create_student(student_form())
        self.assertTrue(success)
        self.assertEqual(message, 'Student added successfully')
        self.assertEqual(errors, {})

        student = Student.query.filter_by(student_id='S001').first()
        self.assertEqual(student.class_name, 'ม.1/1')
        self.assertEqual(student.phone, '0812345678')

    def test_create_student_blank_contacts_stored_as_null(self):
        success, _, _ = StudentService.create_student(student_form(phone='  ', email=''))
        self.assertTrue(success)
        student = Student.query.filter_by(student_id='S001').first()
        self.assertIsNone(student.phone)
        self.assertIsNone(student.email)

    def test_create_student_duplicate_id(self):
        StudentService.create_student(student_form())
        success, message, errors = StudentService.create_student(student_form(first_name='มาลี'))
        self.assertFalse(success)
        self.assertEqual(message, 'Student ID already exists')
        self.assertIn('student_id', errors)
        self.assertEqual(Student.query.count(), 1)

    def test_create_student_validation_errors(self):
        success, message, errors = StudentService.create_student(
            student_form(student_id='', phone='12345', email='not-an-email', class_name=''))
        self.assertFalse(success)
        self.assertEqual(set(errors), {'student_id', 'class', 'phone', 'email'})
        self.assertEqual(Student.query.count(), 0)

    def test_update_student(self):
        StudentService.create_student(student_form())
        student = Student.query.filter_by(student_id='S001').first()

        success, message, errors = StudentService.update_student(
            student.id, student_form(class_name='ม.2/1', email=''))
        self.assertTrue(success)
        self.assertEqual(message, 'Student updated successfully')

        db.session.refresh(student)
        self.assertEqual(student.class_name, 'ม.2/1')
        self.assertIsNone(student.email)

    def test_update_student_duplicate_id(self):
        StudentService.create_student(student_form())
        StudentService.create_student(student_form(student_id='S002'))
        second = Student.query.filter_by(student_id='S002').first()

        success, message, errors = StudentService.update_student(second.id, student_form(student_id='S001'))
        self.assertFalse(success)
        self.assertEqual(message, 'Student ID already exists')

    def test_update_missing_student(self):
        success, message, errors = StudentService.update_student(9999, student_form())
        self.assertFalse(success)
        self.assertEqual(message, 'Student not found')

    def test_delete_student(self):
        StudentService.create_student(student_form())
        student = Student.query.filter_by(student_id='S001').first()

        success, message = StudentService.delete_student(student.id)
        self.assertTrue(success)
        self.assertEqual(Student.query.count(), 0)

        success, message = StudentService.delete_student(student.id)
        self.assertFalse(success)
        self.assertEqual(message, 'Student not found')

    def test_students_ordered_newest_first(self):
        self._add_students()
        ids = [s.student_id for s in StudentService.get_students()]
        self.assertEqual(ids, ['S003', 'S002', 'S001'])

    def test_students_same_timestamp_ordered_by_id(self):
        created = datetime(2024, 5, 1, 8, 0, 0)
        for student_id in ('B2', 'A1', 'C3'):
            db.session.add(Student(student_id=student_id, first_name='X', last_name='Y',
                                   class_name='1', created_at=created))
        db.session.commit()
        ids = [s.student_id for s in StudentService.get_students()]
        self.assertEqual(ids, ['A1', 'B2', 'C3'])

    def test_search_students(self):
        self._add_students()
        self.assertEqual([s.student_id for s in StudentService.get_students('malee')], ['S002'])
        self.assertEqual([s.student_id for s in StudentService.get_students('SRISUK')], ['S003'])
        self.assertEqual([s.student_id for s in StudentService.get_students('s00')], ['S003', 'S002', 'S001'])
        self.assertEqual(StudentService.get_students('%'), [])

    def test_filter_students_by_class(self):
        self._add_students()
        ids = [s.student_id for s in StudentService.get_students(selected_class='ม.1/1')]
        self.assertEqual(ids, ['S003', 'S001'])
        self.assertEqual(len(StudentService.get_students(selected_class='all')), 3)

    def test_paginated_students(self):
        self._add_students()
        data = StudentService.get_students_paginated(page=1, per_page=2)
        self.assertEqual(len(data['students']), 2)
        self.assertEqual(data['pagination'].total, 3)

        data = StudentService.get_students_paginated(page=5, per_page=2)
        self.assertEqual(data['students'], [])

    def test_available_classes(self):
        self._add_students()
        self.assertEqual(StudentService.get_available_classes(), ['ม.1/1', 'ม.1/2'])

    def test_build_class_stats(self):
        records = [
            Record('S1', 'A', 'B', 'ม.2/1'),
            Record('S2', 'A', 'B', 'ม.1/1'),
            Record('S3', 'A', 'B', 'ม.2/1'),
        ]
        stats = StudentService.build_class_stats(records)
        self.assertEqual(stats, [AggregateRow('ชั้น ม.1/1', 1), AggregateRow('ชั้น ม.2/1', 2)])
        self.assertEqual(StudentService.build_class_stats([]), [])

    def test_class_overview_and_dashboard_stats(self):
        self._add_students()
        overview = StudentService.get_class_overview()
        self.assertEqual(overview, [
            {'name': 'ม.1/1', 'student_count': 2},
            {'name': 'ม.1/2', 'student_count': 1},
        ])

        stats = StudentService.get_dashboard_stats()
        self.assertEqual(stats['total_students'], 3)
        self.assertEqual(stats['total_classes'], 2)
        self.assertEqual(stats['recent_students'][0].student_id, 'S003')

if __name__ == '__main__':
    unittest.main()
