"""
Flask Extensions

User identity is loaded by Flask-Login from a server-side session; the
session itself lives in the same database as everything else.
"""

from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager

# Database instance
db = SQLAlchemy()

# Loads the user attached to the current session
login_manager = LoginManager()
