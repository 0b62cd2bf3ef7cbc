import hmac

from flask import current_app, jsonify, session
from flask_wtf.csrf import generate_csrf

from xfive.errors import AuthError, ValidationError

from . import bp
from .forms import LoginForm


def _credentials_match(username, password):
    """Compare against the configured admin pair in constant time."""
    expected_user = current_app.config.get("ADMIN_USER")
    expected_pass = current_app.config.get("ADMIN_PASS")
    if not expected_user or not expected_pass:
        return False
    user_ok = hmac.compare_digest(username.encode(), expected_user.encode())
    pass_ok = hmac.compare_digest(password.encode(), expected_pass.encode())
    return user_ok and pass_ok


@bp.route("/csrf-token")
def csrf_token():
    """Hand out a CSRF token for clients that post JSON."""
    return jsonify({"csrfToken": generate_csrf()})


@bp.route("/login", methods=["POST"])
def login():
    """Check the fixed admin credentials and open an admin session."""
    form = LoginForm()
    if not form.validate_on_submit():
        raise ValidationError("Username and password are required.")

    if not _credentials_match(form.username.data, form.password.data):
        current_app.logger.warning("Rejected admin login attempt")
        raise AuthError("ACCESS DENIED: INVALID CREDENTIALS")

    session.clear()
    session["is_admin"] = True
    current_app.logger.info("Admin logged in")
    return jsonify({"success": True, "message": "Logged in.", "data": None})


@bp.route("/logout", methods=["POST"])
def logout():
    session.clear()
    return jsonify({"success": True, "message": "Logged out.", "data": None})


@bp.route("/status")
def status():
    return jsonify({"isAdmin": bool(session.get("is_admin"))})
