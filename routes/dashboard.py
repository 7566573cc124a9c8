"""
Dashboard routes for the Student Records admin dashboard
Student management pages, class overview and report downloads
"""

from flask import Blueprint, current_app, render_template, request, redirect, url_for, flash, jsonify

from routes.auth import login_required
from services.file_sink import FlaskDownloadSink
from services.report_dispatch import ReportFormat, ReportKind, ReportRequest
from services.report_types import ReportGenerationError
from services.student_service import StudentService
from utils.logger import get_logger

logger = get_logger(__name__)

dashboard_bp = Blueprint('dashboard', __name__)

STUDENT_FORM_FIELDS = ('student_id', 'first_name', 'last_name', 'class', 'phone', 'email')

def is_ajax_request():
    """Check if the current request is an AJAX request"""
    return (request.headers.get('X-Requested-With') == 'XMLHttpRequest' or
            request.is_json)

def _student_form_data():
    return {field: request.form.get(field, '') for field in STUDENT_FORM_FIELDS}

@dashboard_bp.route('/')
@login_required
def index():
    """Dashboard with overview statistics"""
    stats = StudentService.get_dashboard_stats()
    if not stats:
        flash('Error loading dashboard statistics', 'error')
    return render_template('dashboard/index.html', stats=stats)

# ============================================================================
# STUDENTS
# ============================================================================

@dashboard_bp.route('/students')
@login_required
def students():
    """List, search and filter students"""
    page = request.args.get('page', 1, type=int)
    search = request.args.get('search', '', type=str).strip()
    selected_class = request.args.get('class', 'all', type=str)

    students_data = StudentService.get_students_paginated(
        page, search, selected_class, per_page=current_app.config.get('ITEMS_PER_PAGE', 20)
    )
    if students_data['pagination'] is None:
        flash('Error loading students', 'error')

    return render_template('dashboard/students.html',
                           students=students_data['students'],
                           pagination=students_data['pagination'],
                           classes=StudentService.get_available_classes(),
                           search=search,
                           selected_class=selected_class)

@dashboard_bp.route('/students/new', methods=['GET', 'POST'])
@login_required
def add_student():
    """Create a student"""
    form = dict.fromkeys(STUDENT_FORM_FIELDS, '')
    errors = {}

    if request.method == 'POST':
        form = _student_form_data()
        success, message, errors = StudentService.create_student(form)
        if success:
            flash(message, 'success')
            return redirect(url_for('dashboard.students'))
        flash(message, 'error')
        return render_template('dashboard/student_form.html', form=form, errors=errors, student=None), 400

    return render_template('dashboard/student_form.html', form=form, errors=errors, student=None)

@dashboard_bp.route('/students/<int:student_pk>')
@login_required
def student_detail(student_pk):
    """Single student page"""
    student = StudentService.get_student_by_id(student_pk)
    if not student:
        flash('Student not found', 'error')
        return redirect(url_for('dashboard.students'))
    return render_template('dashboard/student_detail.html', student=student)

@dashboard_bp.route('/students/<int:student_pk>/edit', methods=['GET', 'POST'])
@login_required
def edit_student(student_pk):
    """Edit a student"""
    student = StudentService.get_student_by_id(student_pk)
    if not student:
        flash('Student not found', 'error')
        return redirect(url_for('dashboard.students'))

    if request.method == 'POST':
        form = _student_form_data()
        success, message, errors = StudentService.update_student(student_pk, form)
        if success:
            flash(message, 'success')
            return redirect(url_for('dashboard.student_detail', student_pk=student_pk))
        flash(message, 'error')
        return render_template('dashboard/student_form.html', form=form, errors=errors, student=student), 400

    form = student.to_dict()
    for field in ('phone', 'email'):
        form[field] = form[field] or ''
    return render_template('dashboard/student_form.html', form=form, errors={}, student=student)

@dashboard_bp.route('/students/<int:student_pk>/delete', methods=['POST'])
@login_required
def delete_student(student_pk):
    """Permanently delete a student"""
    success, message = StudentService.delete_student(student_pk)

    if is_ajax_request():
        return jsonify({'success': success, 'message': message}), (200 if success else 404)

    flash(message, 'success' if success else 'error')
    return redirect(url_for('dashboard.students'))

# ============================================================================
# CLASSES
# ============================================================================

@dashboard_bp.route('/classes')
@login_required
def classes():
    """Classes with their student counts"""
    return render_template('dashboard/classes.html', classes=StudentService.get_class_overview())

# ============================================================================
# REPORTS
# ============================================================================

@dashboard_bp.route('/reports')
@login_required
def reports():
    """Reports dashboard"""
    students = StudentService.get_students()
    return render_template('dashboard/reports.html',
                           class_stats=StudentService.build_class_stats(students),
                           classes=StudentService.get_available_classes(),
                           total_students=len(students),
                           report_kinds=ReportKind,
                           report_formats=ReportFormat)

@dashboard_bp.route('/reports/export')
@login_required
def export_report():
    """Generate a report and send it as a download"""
    try:
        report_request = ReportRequest.from_args(request.args)
    except ValueError as e:
        flash(str(e), 'error')
        return redirect(url_for('dashboard.reports'))

    students = StudentService.get_students()
    sink = FlaskDownloadSink()
    dispatcher = current_app.extensions['report_dispatcher']

    try:
        dispatcher.dispatch(report_request, students, sink)
    except ReportGenerationError as e:
        logger.error("Report %s failed: %s", report_request, e)
        flash(f'Error generating report: {str(e)}', 'error')
        return redirect(url_for('dashboard.reports'))

    return sink.response
