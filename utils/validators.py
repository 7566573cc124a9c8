"""
Validation utilities for the Student Records admin dashboard
"""

import re

EMAIL_PATTERN = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')
MIN_PHONE_DIGITS = 10

def validate_student_id(student_id):
    """Validate student ID format"""
    if not student_id or len(student_id.strip()) == 0:
        return False, "Student ID is required"

    if len(student_id) > 20:
        return False, "Student ID must be 20 characters or less"

    if not re.match(r'^[A-Za-z0-9_-]+$', student_id):
        return False, "Student ID can only contain letters, numbers, hyphens, and underscores"

    return True, "Valid student ID"

def validate_name(name, field_name="Name"):
    """Validate person name (any script, Thai included)"""
    if not name or len(name.strip()) == 0:
        return False, f"{field_name} is required"

    if len(name) > 100:
        return False, f"{field_name} must be 100 characters or less"

    if re.search(r'[0-9<>{}\[\]@#$%^*=+|\\/]', name):
        return False, f"{field_name} cannot contain digits or symbols"

    return True, f"Valid {field_name.lower()}"

def validate_class_name(class_name):
    """Validate class name, e.g. 'ม.1/2'"""
    if not class_name or len(class_name.strip()) == 0:
        return False, "Class is required"

    if len(class_name) > 50:
        return False, "Class must be 50 characters or less"

    return True, "Valid class"

def validate_phone(phone):
    """Validate phone number: optional, but at least 10 digits when given"""
    if not phone:
        return True, "No phone number"

    digits = re.sub(r'\D', '', phone)
    if len(digits) < MIN_PHONE_DIGITS:
        return False, f"Phone number must be at least {MIN_PHONE_DIGITS} digits"

    if not re.match(r'^[0-9+\-\s()]+$', phone):
        return False, "Phone number can only contain digits, spaces, +, - and parentheses"

    return True, "Valid phone number"

def validate_email(email):
    """Validate email address: optional, but well formed when given"""
    if not email:
        return True, "No email address"

    if len(email) > 120 or not EMAIL_PATTERN.match(email):
        return False, "Invalid email address"

    return True, "Valid email address"

def normalize_student_data(data):
    """Strip form values; blank phone/email become None"""
    def _clean(key):
        value = data.get(key)
        if value is None:
            return ''
        return str(value).strip()

    class_name = data.get('class', data.get('class_name'))
    return {
        'student_id': _clean('student_id'),
        'first_name': _clean('first_name'),
        'last_name': _clean('last_name'),
        'class': '' if class_name is None else str(class_name).strip(),
        'phone': _clean('phone') or None,
        'email': _clean('email') or None,
    }

def validate_student_data(data):
    """Validate normalized student form data. Returns (is_valid, {field: message})"""
    checks = {
        'student_id': validate_student_id(data.get('student_id')),
        'first_name': validate_name(data.get('first_name'), "First name"),
        'last_name': validate_name(data.get('last_name'), "Last name"),
        'class': validate_class_name(data.get('class')),
        'phone': validate_phone(data.get('phone')),
        'email': validate_email(data.get('email')),
    }
    errors = {field: message for field, (ok, message) in checks.items() if not ok}
    return not errors, errors

def validate_username(username):
    """Validate username format"""
    if not username or len(username.strip()) == 0:
        return False, "Username is required"

    if len(username) < 3:
        return False, "Username must be at least 3 characters long"

    if len(username) > 80:
        return False, "Username must be 80 characters or less"

    if not re.match(r'^[A-Za-z0-9_]+$', username):
        return False, "Username can only contain letters, numbers, and underscores"

    return True, "Valid username"

def validate_password(password):
    """Validate password strength"""
    if not password:
        return False, "Password is required"

    if len(password) < 6:
        return False, "Password must be at least 6 characters long"

    if len(password) > 128:
        return False, "Password must be 128 characters or less"

    return True, "Valid password"
