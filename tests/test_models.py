"""
Unit tests for database models
"""

import unittest
from app import create_app
from config import TestConfig
from database import db
from models.user import AdminUser
from models.student import Student
from services.report_types import Record
from sqlalchemy.exc import IntegrityError

class TestModels(unittest.TestCase):

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

    def test_default_admin_created(self):
        """The factory seeds the configured admin account"""
        admin = AdminUser.query.filter_by(username='admin').first()
        self.assertIsNotNone(admin)
        self.assertTrue(admin.check_password('admin123'))
        self.assertTrue(admin.is_active)

    def test_admin_user_model(self):
        """Test AdminUser model"""
        user = AdminUser(username='registrar')
        user.set_password('password123')

        db.session.add(user)
        db.session.commit()

        # Test password verification
        self.assertTrue(user.check_password('password123'))
        self.assertFalse(user.check_password('wrongpassword'))
        self.assertNotEqual(user.password_hash, 'password123')

        user.update_last_login()
        self.assertIsNotNone(user.last_login)

        # Test string representation
        self.assertEqual(str(user), '<AdminUser registrar>')

    def test_student_model(self):
        """Test Student model"""
        student = Student(
            student_id='S001',
            first_name='สมชาย',
            last_name='ใจดี',
            class_name='ม.1/1',
            phone='0812345678',
            email='somchai@school.ac.th'
        )
        db.session.add(student)
        db.session.commit()

        self.assertIsNotNone(student.created_at)
        self.assertIsNotNone(student.updated_at)
        self.assertEqual(student.full_name, 'สมชาย ใจดี')
        self.assertEqual(str(student), '<Student S001: สมชาย ใจดี>')

    def test_student_class_column_name(self):
        """The class name is stored in a column called 'class'"""
        self.assertEqual(Student.__table__.c['class'].name, 'class')

    def test_student_to_dict(self):
        student = Student(student_id='S002', first_name='มาลี', last_name='บุญมา', class_name='ม.2/1')
        db.session.add(student)
        db.session.commit()

        data = student.to_dict()
        self.assertEqual(data['class'], 'ม.2/1')
        self.assertIsNone(data['phone'])
        self.assertIsNone(data['email'])
        self.assertEqual(data['student_id'], 'S002')

    def test_student_to_record(self):
        student = Student(student_id='S003', first_name='วิชัย', last_name='ศรีสุข', class_name='ม.3/1',
                          email='wichai@school.ac.th')
        record = student.to_record()
        self.assertIsInstance(record, Record)
        self.assertEqual(record.class_name, 'ม.3/1')
        self.assertEqual(record.email, 'wichai@school.ac.th')
        self.assertIsNone(record.phone)

    def test_student_id_unique(self):
        """Two students cannot share a student ID"""
        db.session.add(Student(student_id='S004', first_name='A', last_name='B', class_name='1'))
        db.session.commit()
        db.session.add(Student(student_id='S004', first_name='C', last_name='D', class_name='1'))
        with self.assertRaises(IntegrityError):
            db.session.commit()
        db.session.rollback()

if __name__ == '__main__':
    unittest.main()
