"""
Las Tortillas - Application Factory

This module provides the Flask application factory pattern for creating
and configuring the application instance.
"""

import os

from flask import Flask, g, session
from flask_login import current_user

from tortillas.config import Config
from tortillas.extensions import db, login_manager


def create_app(config_class=Config):
    """Create and configure the Flask application.

    Args:
        config_class: Configuration class to use (default: Config)

    Returns:
        Configured Flask application instance
    """
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Initialize extensions
    db.init_app(app)
    login_manager.init_app(app)

    from tortillas.services.sessions import DatabaseSessionInterface
    app.session_interface = DatabaseSessionInterface()

    from tortillas.errors import register_error_handlers
    register_error_handlers(app)

    # Register blueprints
    from tortillas.auth import auth_bp
    from tortillas.site import site_bp
    from tortillas.admin import admin_bp

    app.register_blueprint(auth_bp, url_prefix='/api')
    app.register_blueprint(site_bp, url_prefix='/api')
    app.register_blueprint(admin_bp, url_prefix='/api/admin')

    from tortillas.cli import register_commands
    register_commands(app)

    # User loader for Flask-Login; runs at most once per request
    @login_manager.user_loader
    def load_user(user_id):
        from tortillas.services.credential_store import find_by_id
        try:
            return find_by_id(int(user_id))
        except (TypeError, ValueError):
            return None

    # Resolve the request identity once, before any view or guard runs
    @app.before_request
    def attach_auth_context():
        from tortillas.auth.gate import build_auth_context
        g.auth = build_auth_context(not session.new, current_user._get_current_object())

    # Create database tables
    with app.app_context():
        if app.config['SQLALCHEMY_DATABASE_URI'].startswith('sqlite:///') \
                and ':memory:' not in app.config['SQLALCHEMY_DATABASE_URI']:
            os.makedirs(os.path.join(config_class.basedir, 'instance'), exist_ok=True)
        db.create_all()
        _ensure_schema(app)

    return app


def _ensure_schema(app):
    """Bring databases created before roles existed up to date."""
    from sqlalchemy import inspect, text

    columns = {c['name'] for c in inspect(db.engine).get_columns('users')}
    if 'role' not in columns:
        with db.engine.begin() as conn:
            conn.execute(text("ALTER TABLE users ADD COLUMN role VARCHAR(16) NOT NULL DEFAULT 'user'"))
        app.logger.info('Added role column to users table')
