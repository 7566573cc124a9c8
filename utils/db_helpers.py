"""
Database helper utilities for the Student Records admin dashboard
"""

from database import db, handle_db_error
from sqlalchemy.exc import IntegrityError

from utils.logger import get_logger

logger = get_logger(__name__)

@handle_db_error
def safe_add_and_commit(obj):
    """Safely add object to database with error handling"""
    try:
        db.session.add(obj)
        db.session.commit()
        return True, "Record added successfully"
    except IntegrityError as e:
        db.session.rollback()
        logger.warning("Insert rejected: %s", e.orig)
        if 'UNIQUE constraint failed' in str(e) or 'duplicate key' in str(e):
            return False, "Record with this identifier already exists"
        return False, "Database constraint violation"

@handle_db_error
def safe_delete_and_commit(obj):
    """Safely delete object from database with error handling"""
    db.session.delete(obj)
    db.session.commit()
    return True, "Record deleted successfully"

@handle_db_error
def safe_update_and_commit():
    """Safely commit database changes with error handling"""
    try:
        db.session.commit()
        return True, "Record updated successfully"
    except IntegrityError as e:
        db.session.rollback()
        logger.warning("Update rejected: %s", e.orig)
        if 'UNIQUE constraint failed' in str(e) or 'duplicate key' in str(e):
            return False, "Duplicate entry found"
        return False, "Database constraint violation"

def paginate_query(query, page=1, per_page=20):
    """Paginate query results, clamping out-of-range pages to empty ones"""
    return query.paginate(
        page=page,
        per_page=per_page,
        error_out=False
    )
