"""
Admin Blueprint

Back-office JSON API. Every route is guarded by ``admin_required``.
"""

from flask import Blueprint

admin_bp = Blueprint('admin', __name__)

from tortillas.admin import routes  # noqa: E402, F401
