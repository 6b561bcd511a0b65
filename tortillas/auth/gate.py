"""
Auth Gate

Request-level authentication state and the authorization guards.

The identity for a request is resolved once, by ``build_auth_context`` in a
``before_request`` hook, and stored on ``flask.g.auth``. Guards take that
context explicitly so they can be exercised without a running server.
"""

import enum
from dataclasses import dataclass
from typing import Optional

from flask import current_app, g, session
from flask_login import login_user, logout_user

from tortillas.errors import (
    DuplicateLoginName,
    Forbidden,
    InvalidCredentials,
    Unauthenticated,
    ValidationError,
)
from tortillas.models import Role
from tortillas.services import credential_store


class AuthState(enum.Enum):
    NO_SESSION = 'no_session'
    SESSION_NO_IDENTITY = 'session_no_identity'
    AUTHENTICATED = 'authenticated'


@dataclass(frozen=True)
class PublicUser:
    """User view that is safe to send to a client (no credential)."""
    id: int
    username: str
    role: Role

    @classmethod
    def from_user(cls, user):
        return cls(id=user.id, username=user.username, role=user.role)

    @property
    def is_admin(self):
        return self.role is Role.ADMIN

    def to_dict(self):
        return {'id': self.id, 'username': self.username, 'role': self.role.value}


@dataclass(frozen=True)
class AuthContext:
    state: AuthState
    identity: Optional[PublicUser] = None


ANONYMOUS = AuthContext(AuthState.NO_SESSION)


def build_auth_context(has_session, user):
    """Derive the request's auth state from the session and loaded user.

    ``user`` is whatever Flask-Login loaded for the session; a session whose
    user id no longer resolves arrives here as an anonymous user and is
    treated as unauthenticated, not as an error.
    """
    if user is not None and getattr(user, 'is_authenticated', False):
        return AuthContext(AuthState.AUTHENTICATED, PublicUser.from_user(user))
    if has_session:
        return AuthContext(AuthState.SESSION_NO_IDENTITY)
    return ANONYMOUS


def get_auth_context():
    return g.get('auth', ANONYMOUS)


def current_identity(ctx=None):
    """Identity already resolved for this request; never touches storage."""
    ctx = ctx if ctx is not None else get_auth_context()
    if ctx.state is AuthState.AUTHENTICATED:
        return ctx.identity
    return None


def require_authenticated(ctx):
    identity = current_identity(ctx)
    if identity is None:
        raise Unauthenticated()
    return identity


def require_admin(ctx):
    identity = require_authenticated(ctx)
    if identity.role is not Role.ADMIN:
        raise Forbidden()
    return identity


def validate_credentials_input(login_name, password):
    """Validate a registration body; returns the normalized login name."""
    config = current_app.config
    if not isinstance(login_name, str) or not isinstance(password, str):
        raise ValidationError('Username and password are required.')

    name = credential_store.normalize_login_name(login_name)
    if len(name) < config['USERNAME_MIN_LENGTH']:
        raise ValidationError(
            f"Username must be at least {config['USERNAME_MIN_LENGTH']} characters long.")
    if len(name) > config['USERNAME_MAX_LENGTH']:
        raise ValidationError(
            f"Username must be at most {config['USERNAME_MAX_LENGTH']} characters long.")
    if len(password) < config['PASSWORD_MIN_LENGTH']:
        raise ValidationError(
            f"Password must be at least {config['PASSWORD_MIN_LENGTH']} characters long.")
    return name


def _attach(user):
    """Attach ``user`` to the session under a fresh session id."""
    session.regenerate()
    login_user(user)
    identity = PublicUser.from_user(user)
    g.auth = AuthContext(AuthState.AUTHENTICATED, identity)
    return identity


def login(login_name, password):
    """Authenticate and attach the user to the session.

    Raises InvalidCredentials for an unknown login name and for a wrong
    password alike.
    """
    if not isinstance(login_name, str) or not isinstance(password, str):
        raise InvalidCredentials()

    user = credential_store.find_by_login_name(login_name)
    credential = user.password_hash if user is not None else credential_store.dummy_credential()
    # Verify even for unknown names so response time does not reveal them
    if not credential_store.verify_password(password, credential) or user is None:
        current_app.logger.info('Failed login attempt')
        raise InvalidCredentials()

    identity = _attach(user)
    current_app.logger.info('User %s logged in', identity.id)
    return identity


def register(login_name, password):
    """Create a ``user`` account and log it in."""
    name = validate_credentials_input(login_name, password)
    try:
        user = credential_store.create_user(name, password)
    except DuplicateLoginName:
        current_app.logger.info('Registration rejected: login name taken')
        raise

    identity = _attach(user)
    current_app.logger.info('User %s registered', identity.id)
    return identity


def logout():
    """Clear the identity from the session. Safe to call when logged out."""
    logout_user()
    g.auth = AuthContext(AuthState.SESSION_NO_IDENTITY) if not session.new else ANONYMOUS
