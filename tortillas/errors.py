"""
Error taxonomy and JSON error handlers.

Every error response carries a machine-checkable ``status`` field and a
human-readable ``message``.
"""

from flask import current_app, jsonify
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import InternalServerError

from tortillas.extensions import db


class AppError(Exception):
    """Base class for errors that terminate a request with a JSON body."""
    status_code = 500
    message = 'Internal server error'

    def __init__(self, message=None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class ValidationError(AppError):
    status_code = 400
    message = 'Invalid request'


class InvalidCredentials(AppError):
    # Same message for unknown login name and wrong password
    status_code = 401
    message = 'Invalid username or password'


class DuplicateLoginName(AppError):
    status_code = 400
    message = 'Username already taken'


class Unauthenticated(AppError):
    status_code = 401
    message = 'Not authenticated'


class Forbidden(AppError):
    status_code = 403
    message = 'Forbidden'


class NotFound(AppError):
    status_code = 404
    message = 'Not found'


class StorageError(AppError):
    status_code = 500
    message = 'Internal server error'


def error_response(status_code, message):
    return jsonify({'status': 'error', 'message': message}), status_code


def register_error_handlers(app):
    """Map the error taxonomy onto JSON responses."""

    @app.errorhandler(AppError)
    def handle_app_error(error):
        # Drop half-applied changes before the session is saved
        db.session.rollback()
        if isinstance(error, StorageError):
            current_app.logger.error('Storage failure: %s', error.__cause__ or error,
                                     exc_info=error)
            # Never leak driver details to the client
            return error_response(error.status_code, StorageError.message)
        return error_response(error.status_code, error.message)

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(error):
        db.session.rollback()
        current_app.logger.exception('Unhandled database error')
        return error_response(500, StorageError.message)

    @app.errorhandler(404)
    def handle_not_found(error):
        return error_response(404, NotFound.message)

    @app.errorhandler(405)
    def handle_method_not_allowed(error):
        return error_response(405, 'Method not allowed')

    @app.errorhandler(InternalServerError)
    def handle_internal_error(error):
        """Failures outside view dispatch, e.g. opening or saving the session."""
        original = getattr(error, 'original_exception', None) or error
        db.session.rollback()
        current_app.logger.error('Unhandled error: %s', original, exc_info=original)
        return error_response(500, StorageError.message)
