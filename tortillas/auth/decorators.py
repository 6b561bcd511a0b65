"""
Guard Decorators

Bind the Auth Gate guards to view functions. A rejected request never
reaches the view body.
"""

from functools import wraps

from tortillas.auth.gate import get_auth_context, require_admin, require_authenticated


def login_required(f):
    """Decorator to ensure the request carries an authenticated identity."""
    @wraps(f)
    def wrapper(*args, **kwargs):
        require_authenticated(get_auth_context())
        return f(*args, **kwargs)
    return wrapper


def admin_required(f):
    """Decorator to ensure the request is from an authenticated admin.

    Anonymous callers get 401, logged-in non-admins get 403.
    """
    @wraps(f)
    def wrapper(*args, **kwargs):
        require_admin(get_auth_context())
        return f(*args, **kwargs)
    return wrapper
