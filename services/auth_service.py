"""
Authentication service for the Student Records admin dashboard
Handles login and session utilities
"""

from datetime import datetime

from sqlalchemy import func

from database import db
from models.user import AdminUser
from utils.logger import get_logger

logger = get_logger(__name__)

ADMIN_USER_TYPE = 'admin'

class AuthService:
    """Authentication service class"""

    @staticmethod
    def authenticate_admin(username, password):
        """Authenticate an admin user. Returns (success, user, message)"""
        try:
            # Case-insensitive username match
            normalized = (username or '').strip()
            user = (
                AdminUser.query
                .filter(func.lower(AdminUser.username) == func.lower(normalized))
                .filter_by(is_active=True)
                .first()
            )

            if user and user.check_password(password):
                user.update_last_login()
                logger.info("Admin %s logged in", user.username)
                return True, user, "Login successful"

            logger.warning("Failed login for %r", normalized)
            return False, None, "Invalid username or password"

        except Exception as e:
            logger.error("Authentication error: %s", e, exc_info=True)
            return False, None, f"Authentication error: {str(e)}"

    @staticmethod
    def change_password(user_id, old_password, new_password):
        """Change an admin's password. Returns (success, message)"""
        try:
            user = db.session.get(AdminUser, user_id)
            if not user:
                return False, "User not found"

            if not user.check_password(old_password):
                return False, "Current password is incorrect"

            user.set_password(new_password)
            db.session.commit()
            logger.info("Admin %s changed password", user.username)
            return True, "Password changed successfully"

        except Exception as e:
            db.session.rollback()
            logger.error("Error changing password for admin %s: %s", user_id, e)
            return False, f"Error changing password: {str(e)}"

class SessionManager:
    """Session management utilities"""

    @staticmethod
    def create_session(session, user_id, username):
        """Create user session"""
        session['user_type'] = ADMIN_USER_TYPE
        session['user_id'] = user_id
        session['username'] = username
        session['login_time'] = datetime.utcnow().isoformat()
        session.permanent = True

    @staticmethod
    def clear_session(session):
        """Clear user session"""
        session.clear()

    @staticmethod
    def is_authenticated(session):
        """Check if an admin is logged in"""
        return session.get('user_type') == ADMIN_USER_TYPE and 'user_id' in session

    @staticmethod
    def get_session_info(session):
        """Get complete session information"""
        if not SessionManager.is_authenticated(session):
            return None

        return {
            'user_type': session.get('user_type'),
            'user_id': session.get('user_id'),
            'username': session.get('username'),
            'login_time': session.get('login_time')
        }
