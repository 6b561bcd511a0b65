"""
Configuration settings for the Las Tortillas restaurant back-end
"""
import os
from datetime import timedelta


def _env_flag(name, default='false'):
    return os.environ.get(name, default).strip().lower() in {'1', 'true', 'yes', 'y'}


class Config:
    """Flask application configuration"""

    # Signs the session cookie (CHANGE THIS IN PRODUCTION!)
    SECRET_KEY = os.environ.get('SESSION_SECRET') or os.environ.get('SECRET_KEY') or \
        'las-tortillas-dev-secret-change-me'

    # Production deployments only send the session cookie over HTTPS
    PRODUCTION = _env_flag('PRODUCTION')

    # Database configuration
    basedir = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        'sqlite:///' + os.path.join(basedir, 'instance', 'tortillas.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Server-side sessions: absolute lifetime, never extended by activity
    PERMANENT_SESSION_LIFETIME = timedelta(days=30)
    SESSION_COOKIE_NAME = 'tortillas_session'
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    SESSION_COOKIE_SECURE = PRODUCTION

    # Registration rules
    USERNAME_MIN_LENGTH = 3
    USERNAME_MAX_LENGTH = 80
    PASSWORD_MIN_LENGTH = 6

    # Defaults for `flask create-admin`
    ADMIN_USERNAME = os.environ.get('ADMIN_USERNAME') or 'admin'
    ADMIN_PASSWORD = os.environ.get('ADMIN_PASSWORD')


class TestConfig(Config):
    """Testing configuration"""
    TESTING = True
    SECRET_KEY = 'test-secret-key'
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SESSION_COOKIE_SECURE = False
