"""
Server-side sessions.

The browser only ever holds an opaque, signed session id. The session
payload (Flask-Login's ``_user_id`` among it) lives in the ``sessions``
table and expires a fixed time after creation no matter how active the
session is.
"""

import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from flask.sessions import SessionInterface, SessionMixin
from itsdangerous import BadSignature, Signer
from sqlalchemy import delete as sql_delete
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.datastructures import CallbackDict

from tortillas.errors import StorageError
from tortillas.extensions import db
from tortillas.models import SessionRecord
from tortillas.models.user import utcnow

SIGNER_SALT = 'tortillas.session.v1'


@dataclass(frozen=True)
class StoredSession:
    sid: str
    data: dict
    created_at: datetime
    expires_at: datetime


class SessionStore:
    """load/save/destroy over the ``sessions`` table."""

    def load(self, sid) -> Optional[StoredSession]:
        try:
            record = db.session.get(SessionRecord, sid)
            if record is None:
                return None
            if record.expires_at <= utcnow():
                db.session.delete(record)
                db.session.commit()
                return None
            return StoredSession(sid=record.sid, data=dict(record.data or {}),
                                 created_at=record.created_at,
                                 expires_at=record.expires_at)
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StorageError() from e

    def save(self, sid, data, expires_at):
        try:
            record = db.session.get(SessionRecord, sid)
            if record is None:
                record = SessionRecord(sid=sid, expires_at=expires_at)
                db.session.add(record)
            # Reassign so the JSON column is flagged dirty
            record.data = dict(data)
            record.expires_at = expires_at
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StorageError() from e

    def destroy(self, sid):
        try:
            db.session.execute(sql_delete(SessionRecord).where(SessionRecord.sid == sid))
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StorageError() from e

    def purge_expired(self):
        try:
            result = db.session.execute(
                sql_delete(SessionRecord).where(SessionRecord.expires_at <= utcnow()))
            db.session.commit()
            return result.rowcount
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StorageError() from e


class ServerSideSession(CallbackDict, SessionMixin):
    """Dict-like session bound to a server-side record."""

    def __init__(self, initial=None, sid=None, expires_at=None, new=False):
        def on_update(self):
            self.modified = True

        CallbackDict.__init__(self, initial, on_update)
        self.sid = sid
        self.expires_at = expires_at
        self.new = new
        self.modified = False
        self.previous_sid = None

    def regenerate(self):
        """Move the session to a fresh id, dropping the old one on save.

        Called on login so an id handed out before authentication never
        becomes an authenticated one.
        """
        if self.previous_sid is None and not self.new:
            self.previous_sid = self.sid
        self.sid = new_session_id()
        self.expires_at = None
        self.modified = True


def new_session_id():
    return secrets.token_urlsafe(32)


class DatabaseSessionInterface(SessionInterface):
    """Flask session interface backed by ``SessionStore``."""

    session_class = ServerSideSession

    def __init__(self, store=None):
        self.store = store or SessionStore()

    def _signer(self, app):
        return Signer(app.secret_key, salt=SIGNER_SALT)

    def _lifetime(self, app) -> timedelta:
        return app.permanent_session_lifetime

    def open_session(self, app, request):
        if not app.secret_key:
            raise RuntimeError('SECRET_KEY must be set to use sessions')

        cookie = request.cookies.get(self.get_cookie_name(app))
        if cookie:
            try:
                sid = self._signer(app).unsign(cookie).decode('utf-8')
            except BadSignature:
                sid = None
            if sid:
                stored = self.store.load(sid)
                if stored is not None:
                    return self.session_class(stored.data, sid=stored.sid,
                                              expires_at=stored.expires_at)
        return self.session_class(sid=new_session_id(), new=True)

    def save_session(self, app, session, response):
        if session is None:
            # open_session failed; the error response carries no session
            return
        name = self.get_cookie_name(app)
        domain = self.get_cookie_domain(app)
        path = self.get_cookie_path(app)

        if session.previous_sid:
            self.store.destroy(session.previous_sid)

        if not session:
            # Anonymous and never persisted: nothing to do (lazy creation)
            if session.new:
                return
            if session.modified or session.previous_sid:
                self.store.destroy(session.sid)
                response.delete_cookie(name, domain=domain, path=path,
                                       secure=self.get_cookie_secure(app),
                                       samesite=self.get_cookie_samesite(app),
                                       httponly=self.get_cookie_httponly(app))
            return

        if not (session.modified or session.new or session.previous_sid):
            return

        rotated = session.expires_at is None
        if rotated:
            session.expires_at = utcnow() + self._lifetime(app)
        self.store.save(session.sid, dict(session), session.expires_at)

        if session.new or session.previous_sid or rotated:
            response.set_cookie(
                name,
                self._signer(app).sign(session.sid.encode('utf-8')).decode('utf-8'),
                expires=session.expires_at,
                httponly=self.get_cookie_httponly(app),
                domain=domain,
                path=path,
                secure=self.get_cookie_secure(app),
                samesite=self.get_cookie_samesite(app),
            )
