"""
Configuration settings for the Student Records admin dashboard
"""

import os
from datetime import timedelta

BASE_DIR = os.path.abspath(os.path.dirname(__file__))

class Config:
    """Base configuration class"""

    # Flask settings
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'student-records-dev-secret-key'

    # Database settings
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///student_records.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Session settings
    PERMANENT_SESSION_LIFETIME = timedelta(hours=8)
    SESSION_COOKIE_SECURE = False  # Set to True in production with HTTPS
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'

    # Application settings
    ITEMS_PER_PAGE = 20
    DEFAULT_ADMIN_USERNAME = os.environ.get('DEFAULT_ADMIN_USERNAME') or 'admin'
    DEFAULT_ADMIN_PASSWORD = os.environ.get('DEFAULT_ADMIN_PASSWORD') or 'admin123'

    # Report assets (read once at start-up, see load_report_assets)
    REPORT_FONT_PATH = os.environ.get('REPORT_FONT_PATH') or os.path.join(BASE_DIR, 'static', 'fonts', 'Sarabun-Regular.ttf')
    REPORT_LOGO_PATH = os.environ.get('REPORT_LOGO_PATH') or os.path.join(BASE_DIR, 'static', 'img', 'logo.png')
    # Installed fonts tried when REPORT_FONT_PATH is missing; None uses the built-in list
    REPORT_FONT_FALLBACK_PATHS = None
    REPORT_FONT_BASE64 = None
    REPORT_LOGO_DATA_URI = None
    REPORT_TIMEZONE = os.environ.get('REPORT_TIMEZONE') or 'Asia/Bangkok'

    # Logging settings
    LOG_LEVEL = os.environ.get('LOG_LEVEL') or 'INFO'
    LOG_TO_CONSOLE = True
    LOG_FILE = os.environ.get('LOG_FILE')
    LOG_MAX_BYTES = 10 * 1024 * 1024
    LOG_BACKUP_COUNT = 5

    # Security settings
    WTF_CSRF_ENABLED = True
    WTF_CSRF_TIME_LIMIT = None

class TestConfig(Config):
    """Configuration used by the test suite"""

    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    WTF_CSRF_ENABLED = False
    REPORT_FONT_PATH = None
    REPORT_LOGO_PATH = None
    REPORT_FONT_FALLBACK_PATHS = ()
    LOG_TO_CONSOLE = False
    LOG_FILE = None
