"""
Database models package for the Student Records admin dashboard
"""

from .user import AdminUser
from .student import Student

__all__ = ['AdminUser', 'Student']
