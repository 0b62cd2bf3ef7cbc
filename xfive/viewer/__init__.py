"""The viewer blueprint: read-only live leaderboard."""

from flask import Blueprint

bp = Blueprint("viewer", __name__, url_prefix="/api")

from . import routes  # noqa: E402

__all__ = ["routes"]
