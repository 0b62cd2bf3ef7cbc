"""Decorators for the auth blueprint."""

from functools import wraps

from flask import session

from xfive.errors import AuthError


def admin_required(f):
    """Reject the request unless the session belongs to the admin."""

    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not session.get("is_admin"):
            raise AuthError()
        return f(*args, **kwargs)

    return decorated_function
