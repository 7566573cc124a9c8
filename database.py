"""
Database configuration and initialization for the Student Records admin dashboard
"""

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event
from sqlalchemy.engine import Engine
import sqlite3

from utils.logger import get_logger

# Initialize SQLAlchemy instance
db = SQLAlchemy()

logger = get_logger(__name__)

@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    """Enable foreign key constraints for SQLite"""
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

def init_db(app):
    """Initialize database with application context"""
    with app.app_context():
        # Import all models to ensure they are registered
        from models import AdminUser, Student

        db.create_all()
        create_default_admin_user(app)

        logger.info("Database initialized")

def create_default_admin_user(app):
    """Create the default admin account for initial access"""
    from models.user import AdminUser

    username = app.config.get('DEFAULT_ADMIN_USERNAME', 'admin')
    existing_user = AdminUser.query.filter_by(username=username).first()

    if not existing_user:
        default_user = AdminUser(username=username)
        default_user.set_password(app.config.get('DEFAULT_ADMIN_PASSWORD', 'admin123'))

        try:
            db.session.add(default_user)
            db.session.commit()
            logger.info("Default admin user created: %s", username)
        except Exception as e:
            db.session.rollback()
            logger.error("Error creating default admin user: %s", e)

def reset_database(app):
    """Reset database - WARNING: This will delete all data"""
    with app.app_context():
        db.drop_all()
        db.create_all()
        create_default_admin_user(app)
        logger.warning("Database reset completed")

class DatabaseError(Exception):
    """Custom exception for database operations"""
    pass

def handle_db_error(func):
    """Decorator to handle database errors gracefully"""
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except Exception as e:
            db.session.rollback()
            raise DatabaseError(f"Database operation failed: {str(e)}") from e
    wrapper.__name__ = func.__name__
    wrapper.__doc__ = func.__doc__
    return wrapper
