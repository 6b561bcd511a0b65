"""
Public Site Blueprint
"""

from flask import Blueprint

site_bp = Blueprint('site', __name__)

from tortillas.site import routes  # noqa: E402, F401
