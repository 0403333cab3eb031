"""
Core — Constants

Platform-wide constants shared across apps: audit action names and
pagination limits.

@file core/constants.py
"""

# Audit actions (mirror AuditLog.ActionChoices values)
AUDIT_ACTION_CREATE = 'CREATE'
AUDIT_ACTION_UPDATE = 'UPDATE'
AUDIT_ACTION_DELETE = 'DELETE'
AUDIT_ACTION_ARCHIVE = 'ARCHIVE'
AUDIT_ACTION_RECONCILE = 'RECONCILE'
AUDIT_ACTION_LOGIN = 'LOGIN'
AUDIT_ACTION_LOGOUT = 'LOGOUT'
AUDIT_ACTION_LOGIN_FAILED = 'LOGIN_FAILED'

# Pagination
DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 200
