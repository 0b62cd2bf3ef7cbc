"""Flask extensions for the application."""
from firebase_admin import firestore
from flask import current_app, g
from flask_wtf.csrf import CSRFProtect

from xfive.tournament.store import TournamentStore

csrf = CSRFProtect()


def get_store():
    """Return the tournament store for the current request."""
    if "store" not in g:
        g.store = TournamentStore(firestore.client(), current_app.config["APP_ID"])
    return g.store
