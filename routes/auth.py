"""
Authentication routes for the Student Records admin dashboard
Handles login, logout, and authentication redirects
"""

from functools import wraps

from flask import Blueprint, render_template, request, redirect, url_for, flash, session
from services.auth_service import AuthService, SessionManager
from utils.validators import validate_username, validate_password

auth_bp = Blueprint('auth', __name__)

@auth_bp.route('/')
def index():
    """Send visitors to the dashboard or the login page"""
    if SessionManager.is_authenticated(session):
        return redirect(url_for('dashboard.index'))
    return redirect(url_for('auth.login'))

@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    """Admin login page and handler"""
    if SessionManager.is_authenticated(session):
        return redirect(url_for('dashboard.index'))

    if request.method == 'POST':
        username = request.form.get('username', '').strip()
        password = request.form.get('password', '')

        if not username or not password:
            flash('Username and password are required', 'error')
            return render_template('auth/login.html'), 400

        is_valid, message = validate_username(username)
        if not is_valid:
            flash(message, 'error')
            return render_template('auth/login.html'), 400

        success, user, message = AuthService.authenticate_admin(username, password)

        if success:
            SessionManager.create_session(session, user.id, user.username)
            flash('Login successful', 'success')
            return redirect(url_for('dashboard.index'))

        flash(message, 'error')
        return render_template('auth/login.html'), 401

    return render_template('auth/login.html')

@auth_bp.route('/logout', methods=['POST'])
def logout():
    """Logout handler"""
    SessionManager.clear_session(session)
    flash('You have been logged out successfully', 'success')
    return redirect(url_for('auth.login'))

@auth_bp.route('/change-password', methods=['GET', 'POST'])
def change_password():
    """Change the logged-in admin's password"""
    if not SessionManager.is_authenticated(session):
        flash('Please log in to change your password', 'error')
        return redirect(url_for('auth.login'))

    if request.method == 'POST':
        current_password = request.form.get('current_password', '')
        new_password = request.form.get('new_password', '')
        confirm_password = request.form.get('confirm_password', '')

        if not all([current_password, new_password, confirm_password]):
            flash('All password fields are required', 'error')
            return render_template('auth/change_password.html'), 400

        if new_password != confirm_password:
            flash('New passwords do not match', 'error')
            return render_template('auth/change_password.html'), 400

        is_valid, message = validate_password(new_password)
        if not is_valid:
            flash(message, 'error')
            return render_template('auth/change_password.html'), 400

        success, message = AuthService.change_password(
            session.get('user_id'), current_password, new_password
        )
        if success:
            flash(message, 'success')
            return redirect(url_for('dashboard.index'))
        flash(message, 'error')
        return render_template('auth/change_password.html'), 400

    return render_template('auth/change_password.html')

# Authentication decorator
def login_required(f):
    """Redirect anonymous visitors to the login page"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not SessionManager.is_authenticated(session):
            flash('Please log in to access this page', 'error')
            return redirect(url_for('auth.login'))
        return f(*args, **kwargs)
    return decorated_function

# Context processor to make session info available in templates
@auth_bp.app_context_processor
def inject_user():
    """Inject user information into template context"""
    return {
        'current_user': SessionManager.get_session_info(session),
        'is_authenticated': SessionManager.is_authenticated(session)
    }
