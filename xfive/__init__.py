"""xfive: live bracket tournament server.

The app exposes an admin API for running the event (players, scores, the
modifier wheel, stage progression) and a public viewer API with a live
Server-Sent Events feed for the big screen.
"""

import json
import os

import firebase_admin
from firebase_admin import credentials
from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix

from .core.constants import DEFAULT_APP_ID
from .extensions import csrf

CREDENTIALS_FILE = os.path.join(
    os.path.dirname(os.path.dirname(__file__)), "firebase_credentials.json"
)


def _load_credentials(app):
    """Find service account credentials.

    Looks at ``FIREBASE_CREDENTIALS_JSON`` first (deployments), then a
    ``firebase_credentials.json`` next to the package (local runs), then
    Application Default Credentials. Returns ``(credential, project_id)``.
    """
    raw = os.environ.get("FIREBASE_CREDENTIALS_JSON")
    if raw:
        try:
            info = json.loads(raw)
            return credentials.Certificate(info), info.get("project_id")
        except (json.JSONDecodeError, ValueError) as e:
            app.logger.error(f"FIREBASE_CREDENTIALS_JSON is not usable: {e}")

    if os.path.exists(CREDENTIALS_FILE):
        try:
            with open(CREDENTIALS_FILE) as f:
                project_id = json.load(f).get("project_id")
            return credentials.Certificate(CREDENTIALS_FILE), project_id
        except (json.JSONDecodeError, ValueError) as e:
            app.logger.error(f"{CREDENTIALS_FILE} is not usable: {e}")

    try:
        return credentials.ApplicationDefault(), os.environ.get("FIREBASE_PROJECT_ID")
    except Exception as e:
        app.logger.error(f"No Firebase credentials found: {e}")
        return None, None


def _init_firebase(app):
    """Initialize the Firebase Admin SDK once per process."""
    if firebase_admin._apps:
        return
    cred, project_id = _load_credentials(app)
    if cred is None:
        return
    options = {"projectId": project_id} if project_id else None
    try:
        firebase_admin.initialize_app(cred, options)
    except ValueError:
        # Another app instance in this process got there first
        app.logger.info("Firebase app already initialized.")


def create_app(test_config=None):
    """Create and configure an instance of the Flask application."""
    app = Flask(__name__)

    app.config.from_mapping(
        SECRET_KEY=os.environ.get("SECRET_KEY") or "dev",
        ADMIN_USER=os.environ.get("ADMIN_USER"),
        ADMIN_PASS=os.environ.get("ADMIN_PASS"),
        APP_ID=os.environ.get("APP_ID") or DEFAULT_APP_ID,
        SSE_HEARTBEAT_SECONDS=float(os.environ.get("SSE_HEARTBEAT_SECONDS") or 15),
    )
    if test_config:
        app.config.update(test_config)

    # Tests swap in an in-memory Firestore instead
    if not app.config.get("TESTING"):
        _init_firebase(app)
        if not app.config["ADMIN_USER"] or not app.config["ADMIN_PASS"]:
            app.logger.warning(
                "ADMIN_USER or ADMIN_PASS is not set. Admin login is disabled."
            )

    csrf.init_app(app)

    from . import admin, auth, error_handlers, viewer

    app.register_blueprint(auth.bp)
    app.register_blueprint(admin.bp)
    app.register_blueprint(viewer.bp)
    app.register_blueprint(error_handlers.error_handlers_bp)

    @app.route("/health")
    def health_check():
        return "OK", 200

    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)

    return app
